"""
Typed errors raised by the routing and allocation engine.

Insufficient stock and unreachable destinations are not errors: they come
back as failure results and empty paths respectively.
"""


class ReliefError(Exception):
    """Base class for every engine error."""


class InvalidArgumentError(ReliefError, ValueError):
    """A missing endpoint, non-positive quantity, negative distance and similar."""


class UnknownLocationError(ReliefError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Location '{self.name}' is not registered"


class UnknownRouteError(ReliefError, KeyError):
    def __init__(self, origin: str, destination: str):
        super().__init__((origin, destination))
        self.origin = origin
        self.destination = destination

    def __str__(self) -> str:
        return f"No route from '{self.origin}' to '{self.destination}'"


class UnknownTeamError(ReliefError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Rescue team '{self.name}' is not registered"


class DuplicateResourceError(ReliefError):
    """A catalog entry with the same (name, kind) is already registered."""
