import logging
from typing import List

from errors import InvalidArgumentError, UnknownRouteError
from models import Event, EventResult, Route
from services.state import AppState

logger = logging.getLogger(__name__)


def apply_event(state: AppState, event: Event) -> EventResult:
    """
    - road_block / road_clear toggle route availability (both directions
      when ``bidirectional`` is set)
    - urgency_spike updates the target's urgency and affected people; a zone
      that turns critical is queued for evacuation
    """
    if event.type in ("road_block", "road_clear"):
        if not event.origin or not event.destination:
            raise InvalidArgumentError(f"{event.type} needs an origin and a destination")
        available = event.type == "road_clear"
        pairs = [(event.origin, event.destination)]
        if event.bidirectional:
            pairs.append((event.destination, event.origin))

        for name in (event.origin, event.destination):
            state.require_location(name)
        for origin, destination in pairs:
            if state.graph.get_route(origin, destination) is None:
                raise UnknownRouteError(origin, destination)
        routes: List[Route] = [
            state.graph.set_route_available(origin, destination, available)
            for origin, destination in pairs
        ]
        verb = "cleared" if available else "blocked"
        return EventResult(
            event_type=event.type,
            message=f"Road {event.origin} -> {event.destination} {verb}",
            routes=routes,
        )

    # urgency_spike
    if not event.target_location:
        raise InvalidArgumentError("urgency_spike needs a target location")
    location = state.require_location(event.target_location)
    if event.urgency is not None:
        location.urgency = event.urgency
    if event.affected_people is not None:
        if event.affected_people < 0:
            raise InvalidArgumentError("Affected people must not be negative")
        location.affected_people = event.affected_people

    queued = False
    if location.is_critical:
        queued = state.evacuation.add_zone(location)
    logger.info(
        "Urgency at %s now %d (critical=%s, newly queued=%s)",
        location.name,
        location.urgency,
        location.is_critical,
        queued,
    )
    return EventResult(
        event_type=event.type,
        message=f"Urgency at {location.name} set to {location.urgency}",
        location=location,
        queued_for_evacuation=queued,
    )
