import logging
import threading
from typing import Dict, List, Optional

from errors import InvalidArgumentError
from models import Location

logger = logging.getLogger(__name__)


class EvacuationQueue:
    """
    Urgency-ordered evacuation queue.

    Priority is read from each location's live urgency when the head is
    requested, so urgency changes made while a zone is queued are honoured.
    Equal urgencies leave in the order they were queued.
    """

    def __init__(self) -> None:
        self._zones: Dict[str, Location] = {}
        self._lock = threading.Lock()

    def add_zone(self, location: Location) -> bool:
        if location is None:
            raise InvalidArgumentError("Evacuation zone must not be None")
        with self._lock:
            if location.name in self._zones:
                logger.info("Zone %s is already queued for evacuation", location.name)
                return False
            self._zones[location.name] = location
            return True

    def peek_priority(self) -> Optional[Location]:
        with self._lock:
            return self._head()

    def evacuate_next(self) -> Optional[Location]:
        with self._lock:
            zone = self._head()
            if zone is None:
                logger.info("No zones pending evacuation")
                return None
            del self._zones[zone.name]
        logger.info("Evacuating priority zone %s (urgency %d)", zone.name, zone.urgency)
        return zone

    def pending_count(self) -> int:
        with self._lock:
            return len(self._zones)

    def pending(self) -> List[Location]:
        """Queued zones in the order they would be evacuated."""
        with self._lock:
            # sorted() is stable, keeping insertion order among equal urgencies
            return sorted(self._zones.values(), key=lambda zone: -zone.urgency)

    def _head(self) -> Optional[Location]:
        if not self._zones:
            return None
        return max(self._zones.values(), key=lambda zone: zone.urgency)

    def __len__(self) -> int:
        return self.pending_count()

    def __contains__(self, location: Location) -> bool:
        with self._lock:
            return location is not None and location.name in self._zones

    def __repr__(self) -> str:
        head = self.peek_priority()
        return f"EvacuationQueue(pending={self.pending_count()}, next={head.name if head else None})"
