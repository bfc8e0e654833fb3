from typing import List, Optional

from errors import UnknownLocationError
from models import DispatchOutcome, Location
from services.dispatcher import dispatch_rescue_teams
from services.evacuation import EvacuationQueue
from services.inventory import InventoryManager
from services.route_graph import RouteGraph
from services.teams import TeamRoster


class AppState:
    """
    Engine state built once at startup and handed to whatever needs it.
    Tests construct a fresh instance each time.
    """

    def __init__(
        self,
        graph: Optional[RouteGraph] = None,
        evacuation: Optional[EvacuationQueue] = None,
        inventory: Optional[InventoryManager] = None,
        teams: Optional[TeamRoster] = None,
    ) -> None:
        self.graph = graph if graph is not None else RouteGraph()
        self.evacuation = evacuation if evacuation is not None else EvacuationQueue()
        self.inventory = inventory if inventory is not None else InventoryManager()
        self.teams = teams if teams is not None else TeamRoster()

    def register_location(self, location: Location) -> Location:
        """Register ``location`` and return the instance the graph holds."""
        self.graph.add_location(location)
        return self.graph.get_location(location.name)

    def require_location(self, name: str) -> Location:
        location = self.graph.get_location(name)
        if location is None:
            raise UnknownLocationError(name)
        return location

    def dispatch_rescue_teams(self, names: Optional[List[str]] = None) -> List[DispatchOutcome]:
        if names is None:
            locations = self.graph.locations()
        else:
            locations = [self.require_location(name) for name in names]
        return dispatch_rescue_teams(self.inventory, locations, self.graph)
