from fastapi import APIRouter, Depends, Request

from .schemas import MatchmakingResult, MatchRequest
from .services import MatchmakingOrchestrator

router = APIRouter()


def get_orchestrator(request: Request) -> MatchmakingOrchestrator:
    return request.app.state.orchestrator


@router.post("/gigs/{gig_id}/matches", response_model=MatchmakingResult, response_model_exclude_none=True)
async def match_gig(gig_id: str, orchestrator: MatchmakingOrchestrator = Depends(get_orchestrator)):
    return await orchestrator.find_matching_workers(gig_id)


@router.post("/match", response_model=MatchmakingResult, response_model_exclude_none=True)
async def match(data: MatchRequest, orchestrator: MatchmakingOrchestrator = Depends(get_orchestrator)):
    """
    Same pipeline for callers that already hold the gig, workers and availability.
    """
    return await orchestrator.match(data.gig, data.workers, data.availability)
