import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from errors import (
    DuplicateResourceError,
    InvalidArgumentError,
    ReliefError,
    UnknownLocationError,
    UnknownRouteError,
    UnknownTeamError,
)
from models import (
    AllocationRequest,
    AllocationResult,
    DispatchOutcome,
    DispatchRequest,
    EvacuationRequest,
    EvacuationStatus,
    Event,
    EventResult,
    LedgerSummaryRow,
    Location,
    PathResponse,
    RescueTeam,
    Resource,
    Route,
    RouteCreate,
    TeamAssignment,
)
from services.event_handler import apply_event
from services.state import AppState
from utils.data_loader import load_scenario
from utils.distance_matrix import compute_distance_matrix

logger = logging.getLogger(__name__)

router = APIRouter()


def get_state(request: Request) -> AppState:
    return request.app.state.engine


@router.get("/locations")
def list_locations(state: AppState = Depends(get_state)) -> List[Location]:
    return state.graph.locations()


@router.post("/locations", status_code=201)
def register_location(
    location: Location, response: Response, state: AppState = Depends(get_state)
) -> Location:
    # an already registered name keeps its stored record
    if not state.graph.add_location(location):
        response.status_code = 200
    return state.graph.get_location(location.name)


@router.get("/routes")
def list_routes(state: AppState = Depends(get_state)) -> List[Route]:
    return state.graph.routes()


@router.post("/routes", status_code=201)
def register_route(body: RouteCreate, state: AppState = Depends(get_state)) -> List[Route]:
    origin = state.require_location(body.origin)
    destination = state.require_location(body.destination)
    if body.bidirectional:
        return list(state.graph.add_bidirectional_route(origin, destination, body.distance))
    return [state.graph.add_route(origin, destination, body.distance)]


@router.get("/paths")
def shortest_path(origin: str, destination: str, state: AppState = Depends(get_state)) -> PathResponse:
    path = state.graph.shortest_path(origin, destination)
    return PathResponse(
        origin=origin,
        destination=destination,
        path=[stop.name for stop in path],
        distance=state.graph.path_distance(path) if path else None,
        reachable=bool(path),
    )


@router.get("/distances")
def distance_matrix(state: AppState = Depends(get_state)) -> Dict[str, Dict[str, float]]:
    return compute_distance_matrix(state.graph.locations())


@router.get("/inventory")
def list_inventory(state: AppState = Depends(get_state)) -> List[Resource]:
    return state.inventory.global_inventory()


@router.post("/resources", status_code=201)
def register_resource(resource: Resource, state: AppState = Depends(get_state)) -> Resource:
    return state.inventory.register_global_resource(resource)


@router.post("/allocations")
def allocate(body: AllocationRequest, state: AppState = Depends(get_state)) -> AllocationResult:
    destination = state.require_location(body.destination)
    resource = state.inventory.get_resource(body.resource_name, body.kind)
    if resource is None:
        raise HTTPException(
            status_code=404,
            detail=f"Resource {body.resource_name} ({body.kind.value}) not found",
        )
    return state.inventory.allocate_resource(destination, resource, body.quantity)


@router.get("/allocations/{location}")
def list_allocations(location: str, state: AppState = Depends(get_state)) -> List[Resource]:
    return state.inventory.allocations_for(state.require_location(location))


@router.get("/ledger/summary")
def ledger_summary(state: AppState = Depends(get_state)) -> List[LedgerSummaryRow]:
    summary = state.inventory.ledger.summary_by_location()
    return [
        LedgerSummaryRow(location=location, resource=key.name, kind=key.kind, quantity=quantity)
        for location, per_resource in summary.items()
        for key, quantity in per_resource.items()
    ]


@router.post("/dispatch")
def dispatch(
    body: Optional[DispatchRequest] = None, state: AppState = Depends(get_state)
) -> List[DispatchOutcome]:
    names = body.locations if body is not None else None
    return state.dispatch_rescue_teams(names)


@router.get("/evacuation")
def evacuation_status(state: AppState = Depends(get_state)) -> EvacuationStatus:
    pending = state.evacuation.pending()
    return EvacuationStatus(pending_count=len(pending), pending=pending)


@router.post("/evacuation")
def queue_zone(body: EvacuationRequest, state: AppState = Depends(get_state)) -> Dict[str, bool]:
    return {"queued": state.evacuation.add_zone(state.require_location(body.location))}


@router.get("/evacuation/next")
def peek_evacuation(state: AppState = Depends(get_state)) -> Optional[Location]:
    return state.evacuation.peek_priority()


@router.post("/evacuation/next")
def evacuate_next(state: AppState = Depends(get_state)) -> Optional[Location]:
    return state.evacuation.evacuate_next()


@router.get("/teams")
def list_teams(state: AppState = Depends(get_state)) -> List[RescueTeam]:
    return state.teams.teams()


@router.post("/teams", status_code=201)
def register_team(team: RescueTeam, response: Response, state: AppState = Depends(get_state)) -> RescueTeam:
    if team.assigned_zone is not None:
        state.require_location(team.assigned_zone)
    if not state.teams.register(team):
        response.status_code = 200
    return state.teams.get(team.name)


@router.put("/teams/{name}/assignment")
def assign_team(name: str, body: TeamAssignment, state: AppState = Depends(get_state)) -> RescueTeam:
    zone = state.require_location(body.zone) if body.zone is not None else None
    return state.teams.assign(name, zone)


@router.post("/events")
def post_event(event: Event, state: AppState = Depends(get_state)) -> EventResult:
    return apply_event(state, event)


_ERROR_STATUS = {
    InvalidArgumentError: 400,
    UnknownLocationError: 404,
    UnknownRouteError: 404,
    UnknownTeamError: 404,
    DuplicateResourceError: 409,
}


async def relief_error_handler(request: Request, exc: ReliefError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)), 400
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(state: Optional[AppState] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    if state is None:
        if settings.seed_on_startup and settings.scenario_path.exists():
            state = load_scenario(settings.scenario_path)
        else:
            logger.info("Starting with an empty engine state")
            state = AppState()

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)
    app.state.engine = state
    app.add_exception_handler(ReliefError, relief_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
