from enum import Enum
from typing import Dict, List, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from errors import InvalidArgumentError


URGENCY_MIN = 1
URGENCY_MAX = 10
CRITICAL_URGENCY = 7


def clamp_urgency(level: int) -> int:
    return max(URGENCY_MIN, min(level, URGENCY_MAX))


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class ResourceKind(str, Enum):
    FOOD = "food"
    MEDICINE = "medicine"
    RESCUE_EQUIPMENT = "rescue_equipment"
    WATER = "water"
    SHELTER_MATERIALS = "shelter_materials"
    OTHER = "other"

    @property
    def description(self) -> str:
        return _KIND_DESCRIPTIONS[self]


_KIND_DESCRIPTIONS = {
    ResourceKind.FOOD: "Food and provisions",
    ResourceKind.MEDICINE: "Medicine and medical supplies",
    ResourceKind.RESCUE_EQUIPMENT: "Rescue and protective equipment",
    ResourceKind.WATER: "Drinking water and liquids",
    ResourceKind.SHELTER_MATERIALS: "Shelter and blanket materials",
    ResourceKind.OTHER: "Other resources",
}


class ResourceKey(NamedTuple):
    name: str
    kind: ResourceKind


class Location(BaseModel):
    """
    A node of the route graph. Identity is the name; urgency is clamped to
    [1, 10] on construction and on every assignment.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(frozen=True, min_length=1)
    category: str = Field(min_length=1)  # "city", "shelter", "aid_center", ...
    affected_people: int = Field(default=0, ge=0)
    urgency: int = URGENCY_MIN
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    supplies: Dict[ResourceKind, int] = Field(default_factory=dict)

    @field_validator("name", "category")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("urgency")
    @classmethod
    def clamp_to_range(cls, value: int) -> int:
        return clamp_urgency(value)

    @property
    def is_critical(self) -> bool:
        return self.urgency >= CRITICAL_URGENCY

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def add_supply(self, kind: ResourceKind, quantity: int) -> None:
        if kind is None:
            raise InvalidArgumentError("Supply kind must not be None")
        if quantity <= 0:
            raise InvalidArgumentError("Supply quantity must be greater than zero")
        self.supplies[kind] = self.supplies.get(kind, 0) + quantity

    def consume_supply(self, kind: ResourceKind, quantity: int) -> None:
        """Draw down a local supply; the kind is dropped once it runs out."""
        if kind is None or quantity <= 0 or kind not in self.supplies:
            return
        remaining = self.supplies[kind] - quantity
        if remaining <= 0:
            del self.supplies[kind]
        else:
            self.supplies[kind] = remaining

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


class Resource(BaseModel):
    """Catalog line or allocation record. Identity is (name, kind)."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(frozen=True, min_length=1)
    kind: ResourceKind = Field(frozen=True)
    available: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _require_text(value)

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(self.name, self.kind)

    @property
    def is_depleted(self) -> bool:
        return self.available <= 0

    def increment(self, quantity: int) -> None:
        if quantity <= 0:
            raise InvalidArgumentError("Increment must be greater than zero")
        self.available += quantity

    def decrement(self, quantity: int) -> bool:
        if quantity <= 0:
            raise InvalidArgumentError("Decrement must be greater than zero")
        if quantity > self.available:
            return False
        self.available -= quantity
        return True

    def copy_with(self, quantity: int) -> "Resource":
        return Resource(name=self.name, kind=self.kind, available=quantity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class Route(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    origin: str
    destination: str
    distance: float = Field(ge=0)  # km
    available: bool = True


class RescueTeam(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(frozen=True, min_length=1)
    members: List[str] = Field(default_factory=list)
    assigned_zone: Optional[str] = None  # location name

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _require_text(value)


class AllocationFailure(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    INSUFFICIENT_STOCK = "insufficient_stock"


class AllocationResult(BaseModel):
    success: bool
    message: str
    reason: Optional[AllocationFailure] = None
    destination: Optional[str] = None
    allocated: Optional[Resource] = None


class DispatchOutcome(BaseModel):
    location: str
    success: bool
    message: str
    source: Optional[str] = None
    distance: Optional[float] = None
    path: List[str] = Field(default_factory=list)


class Event(BaseModel):
    type: Literal["road_block", "road_clear", "urgency_spike"]
    origin: Optional[str] = None
    destination: Optional[str] = None
    bidirectional: bool = False
    target_location: Optional[str] = None
    urgency: Optional[int] = None
    affected_people: Optional[int] = None


class EventResult(BaseModel):
    event_type: str
    message: str
    routes: List[Route] = Field(default_factory=list)
    location: Optional[Location] = None
    queued_for_evacuation: bool = False


# Request/response bodies for the HTTP layer


class RouteCreate(BaseModel):
    origin: str
    destination: str
    distance: float
    bidirectional: bool = False


class AllocationRequest(BaseModel):
    destination: str
    resource_name: str
    kind: ResourceKind
    quantity: int


class DispatchRequest(BaseModel):
    locations: Optional[List[str]] = None


class EvacuationRequest(BaseModel):
    location: str


class TeamAssignment(BaseModel):
    zone: Optional[str] = None  # None releases the team


class PathResponse(BaseModel):
    origin: str
    destination: str
    path: List[str]
    distance: Optional[float] = None
    reachable: bool


class EvacuationStatus(BaseModel):
    pending_count: int
    pending: List[Location]


class LedgerSummaryRow(BaseModel):
    location: str
    resource: str
    kind: ResourceKind
    quantity: int
