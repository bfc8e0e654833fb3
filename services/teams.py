import logging
import threading
from typing import Dict, List, Optional

from errors import InvalidArgumentError, UnknownTeamError
from models import Location, RescueTeam

logger = logging.getLogger(__name__)


class TeamRoster:
    """Registered rescue teams keyed by name, with their assigned zone."""

    def __init__(self) -> None:
        self._teams: Dict[str, RescueTeam] = {}
        self._lock = threading.Lock()

    def register(self, team: RescueTeam) -> bool:
        if team is None:
            raise InvalidArgumentError("Team must not be None")
        with self._lock:
            if team.name in self._teams:
                logger.info("Team %s already registered", team.name)
                return False
            self._teams[team.name] = team
            return True

    def get(self, name: str) -> Optional[RescueTeam]:
        with self._lock:
            return self._teams.get(name)

    def teams(self) -> List[RescueTeam]:
        with self._lock:
            return list(self._teams.values())

    def assign(self, name: str, zone: Optional[Location]) -> RescueTeam:
        """Assign a team to ``zone``; ``None`` releases it."""
        with self._lock:
            team = self._teams.get(name)
            if team is None:
                raise UnknownTeamError(name)
            team.assigned_zone = zone.name if zone is not None else None
        logger.info("Team %s assigned to %s", name, team.assigned_zone)
        return team

    def teams_in(self, zone: Location) -> List[RescueTeam]:
        with self._lock:
            return [team for team in self._teams.values() if team.assigned_zone == zone.name]

    def __len__(self) -> int:
        with self._lock:
            return len(self._teams)
