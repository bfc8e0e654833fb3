import logging
import threading
from typing import Dict, List, Optional

from errors import DuplicateResourceError, InvalidArgumentError
from models import (
    AllocationFailure,
    AllocationResult,
    Location,
    Resource,
    ResourceKey,
    ResourceKind,
)
from services.ledger import DistributionLedger

logger = logging.getLogger(__name__)


class InventoryManager:
    """
    Global resource catalog, per-location allocation records and the
    distribution ledger.

    An allocation copies the transferred quantity into a new record for the
    destination, so records never track the shrinking catalog line. The
    availability check, debit, record append and ledger insert all happen
    under one lock.
    """

    def __init__(self) -> None:
        self._catalog: Dict[ResourceKey, Resource] = {}
        self._allocations: Dict[str, List[Resource]] = {}
        self.ledger = DistributionLedger()
        self.lock = threading.RLock()

    def register_global_resource(self, resource: Resource) -> Resource:
        if resource is None:
            logger.warning("Refused to register a missing resource")
            raise InvalidArgumentError("Resource must not be None")
        with self.lock:
            if resource.key in self._catalog:
                raise DuplicateResourceError(
                    f"Resource {resource.name} ({resource.kind.value}) is already in the catalog"
                )
            self._catalog[resource.key] = resource
        logger.info("Registered global resource %s (%s)", resource.name, resource.kind.value)
        return resource

    def get_resource(self, name: str, kind: ResourceKind) -> Optional[Resource]:
        with self.lock:
            return self._catalog.get(ResourceKey(name, kind))

    def global_inventory(self) -> List[Resource]:
        with self.lock:
            return list(self._catalog.values())

    def allocate_resource(
        self, destination: Location, resource: Resource, quantity: int
    ) -> AllocationResult:
        """
        Move ``quantity`` units out of ``resource`` (a catalog line or an
        allocation record held by another location) to ``destination``.
        Nothing is mutated when the call fails.
        """
        if destination is None or resource is None:
            return self._failed(AllocationFailure.INVALID_ARGUMENT, "Destination and resource are required")
        if quantity is None or quantity <= 0:
            return self._failed(
                AllocationFailure.INVALID_ARGUMENT,
                "Quantity to allocate must be greater than zero",
                destination,
            )

        with self.lock:
            if not resource.decrement(quantity):
                return self._failed(
                    AllocationFailure.INSUFFICIENT_STOCK,
                    f"Not enough {resource.name} available: requested {quantity}, have {resource.available}",
                    destination,
                )
            allocated = resource.copy_with(quantity)
            self._allocations.setdefault(destination.name, []).append(allocated)
            self.ledger.insert(allocated.copy_with(quantity), destination.name)

        logger.info("Allocated %d units of %s to %s", quantity, resource.name, destination.name)
        return AllocationResult(
            success=True,
            message=f"Allocated {quantity} units of {resource.name} to {destination.name}",
            destination=destination.name,
            allocated=allocated,
        )

    def allocations_for(self, location: Location) -> List[Resource]:
        if location is None:
            return []
        with self.lock:
            return list(self._allocations.get(location.name, []))

    def rescue_equipment_at(self, location: Location) -> Optional[Resource]:
        """First rescue-equipment record at ``location`` with units left."""
        with self.lock:
            for record in self._allocations.get(location.name, []):
                if record.kind == ResourceKind.RESCUE_EQUIPMENT and record.available > 0:
                    return record
        return None

    @staticmethod
    def _failed(
        reason: AllocationFailure, message: str, destination: Optional[Location] = None
    ) -> AllocationResult:
        logger.info("Allocation refused: %s", message)
        return AllocationResult(
            success=False,
            reason=reason,
            message=message,
            destination=destination.name if destination is not None else None,
        )

    def __repr__(self) -> str:
        return (
            f"InventoryManager(catalog={len(self._catalog)}, "
            f"locations_served={len(self._allocations)}, ledger_entries={len(self.ledger)})"
        )
