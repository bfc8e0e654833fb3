"""
Tests for services.inventory.
"""

import threading
from unittest.mock import patch

import pytest

from errors import DuplicateResourceError, InvalidArgumentError
from models import AllocationFailure, Resource, ResourceKey, ResourceKind
from services.inventory import InventoryManager


class TestCatalog:

    def setup_method(self):
        self.inventory = InventoryManager()

    def test_register_and_lookup(self):
        water = Resource(name="Water", kind=ResourceKind.WATER, available=100)

        self.inventory.register_global_resource(water)

        assert self.inventory.get_resource("Water", ResourceKind.WATER) is water
        assert self.inventory.get_resource("Water", ResourceKind.FOOD) is None
        assert self.inventory.global_inventory() == [water]

    def test_none_rejected(self):
        with pytest.raises(InvalidArgumentError):
            self.inventory.register_global_resource(None)

    def test_duplicate_name_and_kind_rejected(self):
        self.inventory.register_global_resource(Resource(name="Water", kind=ResourceKind.WATER, available=1))

        with pytest.raises(DuplicateResourceError):
            self.inventory.register_global_resource(
                Resource(name="Water", kind=ResourceKind.WATER, available=50)
            )
        assert len(self.inventory.global_inventory()) == 1


class TestAllocation:
    """allocate_resource success and failure paths."""

    def setup_method(self):
        self.inventory = InventoryManager()
        self.water = Resource(name="Water", kind=ResourceKind.WATER, available=100)
        self.inventory.register_global_resource(self.water)

    def test_successful_allocation_updates_everything(self, make_location):
        x = make_location("X")

        result = self.inventory.allocate_resource(x, self.water, 30)

        assert result.success is True
        assert result.reason is None
        assert self.water.available == 70
        records = self.inventory.allocations_for(x)
        assert len(records) == 1
        assert records[0].key == self.water.key
        assert records[0].available == 30
        assert self.inventory.ledger.summary_by_location() == {
            "X": {ResourceKey("Water", ResourceKind.WATER): 30}
        }

    def test_over_allocation_fails_without_mutation(self, make_location):
        x = make_location("X")
        self.inventory.allocate_resource(x, self.water, 30)

        result = self.inventory.allocate_resource(x, self.water, 80)

        assert result.success is False
        assert result.reason == AllocationFailure.INSUFFICIENT_STOCK
        assert self.water.available == 70
        assert [record.available for record in self.inventory.allocations_for(x)] == [30]
        assert len(self.inventory.ledger) == 1

    def test_refused_decrement_fails_without_recording(self, make_location):
        x = make_location("X")

        with patch.object(Resource, "decrement", return_value=False) as decrement:
            result = self.inventory.allocate_resource(x, self.water, 10)

        decrement.assert_called_once_with(10)
        assert result.success is False
        assert result.reason == AllocationFailure.INSUFFICIENT_STOCK
        assert self.inventory.allocations_for(x) == []
        assert self.inventory.ledger.is_empty

    def test_exact_remaining_quantity(self, make_location):
        result = self.inventory.allocate_resource(make_location("X"), self.water, 100)

        assert result.success
        assert self.water.available == 0

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_quantity_fails(self, make_location, quantity):
        result = self.inventory.allocate_resource(make_location("X"), self.water, quantity)

        assert result.success is False
        assert result.reason == AllocationFailure.INVALID_ARGUMENT
        assert self.water.available == 100
        assert self.inventory.ledger.is_empty

    def test_missing_destination_or_resource_fails(self, make_location):
        assert self.inventory.allocate_resource(None, self.water, 1).reason == AllocationFailure.INVALID_ARGUMENT
        assert (
            self.inventory.allocate_resource(make_location("X"), None, 1).reason
            == AllocationFailure.INVALID_ARGUMENT
        )

    def test_allocation_record_is_a_copy(self, make_location):
        x = make_location("X")
        self.inventory.allocate_resource(x, self.water, 10)
        self.inventory.allocate_resource(make_location("Y"), self.water, 5)

        assert self.inventory.allocations_for(x)[0].available == 10

    def test_allocations_for_unknown_location(self, make_location):
        assert self.inventory.allocations_for(make_location("Nobody")) == []

    def test_repeated_allocations_accumulate_in_summary(self, make_location):
        x = make_location("X")
        self.inventory.allocate_resource(x, self.water, 10)
        self.inventory.allocate_resource(x, self.water, 15)

        summary = self.inventory.ledger.summary_by_location()

        assert summary["X"][self.water.key] == 25
        assert len(self.inventory.allocations_for(x)) == 2

    def test_concurrent_allocations_never_overdraw(self, make_location):
        x = make_location("X")
        results = []

        def worker():
            for _ in range(20):
                results.append(self.inventory.allocate_resource(x, self.water, 1))

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for result in results if result.success) == 100
        assert self.water.available == 0
        assert len(self.inventory.ledger) == 100
