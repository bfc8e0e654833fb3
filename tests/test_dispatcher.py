"""
Tests for services.dispatcher.
"""

import pytest

from errors import InvalidArgumentError
from models import Resource, ResourceKey, ResourceKind
from services.dispatcher import dispatch_rescue_teams, find_nearest_source


class TestDispatchRescueTeams:
    """Nearest-base selection and one-unit transfers to critical zones."""

    def test_nearest_base_supplies_critical_zone(self, seeded_state):
        zone = seeded_state.require_location("Zone")

        outcomes = seeded_state.dispatch_rescue_teams()

        assert len(outcomes) == 1
        outcome = outcomes[0]
        assert outcome.success is True
        assert outcome.location == "Zone"
        assert outcome.source == "Base South"
        assert outcome.distance == 4
        assert outcome.path == ["Base South", "Zone"]

        south = seeded_state.require_location("Base South")
        assert seeded_state.inventory.rescue_equipment_at(south).available == 1
        received = seeded_state.inventory.allocations_for(zone)
        assert [(record.kind, record.available) for record in received] == [
            (ResourceKind.RESCUE_EQUIPMENT, 1)
        ]

    def test_dispatch_is_recorded_in_the_ledger(self, seeded_state):
        south = seeded_state.require_location("Base South")
        kit = ResourceKey("Rescue Kit", ResourceKind.RESCUE_EQUIPMENT)

        seeded_state.dispatch_rescue_teams()

        summary = seeded_state.inventory.ledger.summary_by_location()
        assert summary["Zone"][kit] == 1
        # the ledger keeps what was first delivered to the base
        assert summary["Base South"][kit] == 2
        assert summary["Base North"][kit] == 3
        assert seeded_state.inventory.allocations_for(south)[0].available == 1

    def test_base_at_zero_distance_is_skipped(self, seeded_state, make_location):
        base_zero = seeded_state.register_location(make_location("Base Zero", urgency=2))
        zone = seeded_state.require_location("Zone")
        seeded_state.graph.add_route(base_zero, zone, 0)
        kit = seeded_state.inventory.get_resource("Rescue Kit", ResourceKind.RESCUE_EQUIPMENT)
        seeded_state.inventory.allocate_resource(base_zero, kit, 1)

        outcomes = seeded_state.dispatch_rescue_teams()

        assert outcomes[0].source == "Base South"
        assert outcomes[0].distance == 4
        assert seeded_state.inventory.rescue_equipment_at(base_zero).available == 1

    def test_non_critical_locations_are_skipped(self, seeded_state):
        outcomes = seeded_state.dispatch_rescue_teams(["Village", "Base North"])

        assert outcomes == []

    def test_falls_back_to_next_nearest_when_stock_runs_out(self, seeded_state):
        seeded_state.dispatch_rescue_teams(["Zone", "Base North", "Base South"])
        seeded_state.dispatch_rescue_teams(["Zone", "Base North", "Base South"])

        outcomes = seeded_state.dispatch_rescue_teams(["Zone", "Base North", "Base South"])

        assert outcomes[0].source == "Base North"
        south = seeded_state.require_location("Base South")
        assert seeded_state.inventory.rescue_equipment_at(south) is None

    def test_unreachable_zone_reports_failure_and_continues(self, seeded_state, make_location):
        stranded = seeded_state.register_location(make_location("Stranded", urgency=10))
        zone = seeded_state.require_location("Zone")
        bases = [seeded_state.require_location(name) for name in ("Base North", "Base South")]

        outcomes = dispatch_rescue_teams(
            seeded_state.inventory, [stranded, zone] + bases, seeded_state.graph
        )

        assert [(o.location, o.success) for o in outcomes] == [("Stranded", False), ("Zone", True)]
        assert outcomes[0].source is None
        assert seeded_state.inventory.allocations_for(stranded) == []

    def test_blocked_road_changes_chosen_base(self, seeded_state):
        seeded_state.graph.set_route_available("Base South", "Zone", False)

        outcomes = seeded_state.dispatch_rescue_teams()

        assert outcomes[0].source == "Base North"
        assert outcomes[0].distance == 10

    def test_equal_distance_keeps_first_candidate(self, state, make_location):
        zone = state.register_location(make_location("Zone", urgency=8))
        first = state.register_location(make_location("First"))
        second = state.register_location(make_location("Second"))
        state.graph.add_route(first, zone, 5)
        state.graph.add_route(second, zone, 5)
        kit = Resource(name="Kit", kind=ResourceKind.RESCUE_EQUIPMENT, available=2)
        state.inventory.register_global_resource(kit)
        state.inventory.allocate_resource(second, kit, 1)
        state.inventory.allocate_resource(first, kit, 1)

        found = find_nearest_source(state.inventory, zone, [second, first, zone], state.graph)

        assert found[0].name == "Second"

    def test_critical_zone_never_sources_itself(self, seeded_state):
        zone = seeded_state.require_location("Zone")
        # give the zone its own equipment; it must still be supplied by a base
        seeded_state.dispatch_rescue_teams()

        found = find_nearest_source(
            seeded_state.inventory, zone, seeded_state.graph.locations(), seeded_state.graph
        )

        assert found[0].name == "Base South"

    def test_rejects_missing_inputs(self, seeded_state):
        with pytest.raises(InvalidArgumentError):
            dispatch_rescue_teams(seeded_state.inventory, None, seeded_state.graph)
        with pytest.raises(InvalidArgumentError):
            dispatch_rescue_teams(seeded_state.inventory, [], None)

    def test_empty_location_list(self, seeded_state):
        assert dispatch_rescue_teams(seeded_state.inventory, [], seeded_state.graph) == []
