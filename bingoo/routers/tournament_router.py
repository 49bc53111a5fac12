"""
Tournament API

- GET /tournaments, GET /tournaments/{id}, GET /tournaments/{id}/leaderboard: public
- POST /tournaments/{id}/join: authenticated user
- POST /tournaments/admin, /tournaments/admin/advance,
  /tournaments/admin/{id}/score: admin
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query

from bingoo.core.auth_middleware import get_current_user, require_admin
from bingoo.core.security import Identity
from bingoo.database.session import SessionFactory, get_session_factory
from bingoo.deps import get_tournament_service
from bingoo.models.tournament import TournamentStatus
from bingoo.schemas.common import BaseResponse
from bingoo.schemas.tournaments import (
    LeaderboardEntry,
    LeaderboardResponse,
    ScoreUpdateRequest,
    TournamentAdvanceResponse,
    TournamentCreateRequest,
    TournamentItem,
    TournamentListResponse,
)
from bingoo.schemas.user import User as UserSchema
from bingoo.services.fraud_service import run_fraud_check
from bingoo.services.tournament_service import TournamentService

router = APIRouter(prefix="/tournaments", tags=["tournaments"])
logger = logging.getLogger(__name__)


@router.get("", response_model=TournamentListResponse)
def list_tournaments(
    status: Optional[TournamentStatus] = Query(None),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> TournamentListResponse:
    return tournament_service.list_tournaments(status)


@router.post("/admin", response_model=TournamentItem, status_code=201)
def create_tournament(
    request: TournamentCreateRequest,
    current_admin: Identity = Depends(require_admin),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> TournamentItem:
    return tournament_service.create_tournament(request)


@router.post("/admin/advance", response_model=TournamentAdvanceResponse)
def advance_tournaments(
    current_admin: Identity = Depends(require_admin),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> TournamentAdvanceResponse:
    """Start, finish and pay out tournaments whose time has come."""
    return tournament_service.advance_lifecycle()


@router.post("/admin/{tournament_id}/score", response_model=LeaderboardEntry)
def update_score(
    request: ScoreUpdateRequest,
    tournament_id: int = Path(..., gt=0),
    current_admin: Identity = Depends(require_admin),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> LeaderboardEntry:
    return tournament_service.update_score(tournament_id, request)


@router.get("/{tournament_id}", response_model=TournamentItem)
def get_tournament(
    tournament_id: int = Path(..., gt=0),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> TournamentItem:
    return tournament_service.get_tournament(tournament_id)


@router.get("/{tournament_id}/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    tournament_id: int = Path(..., gt=0),
    limit: Optional[int] = Query(None, ge=1, le=100),
    tournament_service: TournamentService = Depends(get_tournament_service),
) -> LeaderboardResponse:
    return tournament_service.get_leaderboard(tournament_id, limit)


@router.post("/{tournament_id}/join", response_model=BaseResponse)
def join_tournament(
    background_tasks: BackgroundTasks,
    tournament_id: int = Path(..., gt=0),
    current_user: UserSchema = Depends(get_current_user),
    tournament_service: TournamentService = Depends(get_tournament_service),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Any:
    """
    Join a tournament and pay its entry fee.

    Errors:
        404 TOURNAMENT_404, 409 TOURNAMENT_002 (registration closed),
        409 TOURNAMENT_001 (full), 400 POINTS_001, 409 TOURNAMENT_003 (already joined)
    """
    result = tournament_service.join(tournament_id, current_user.id)
    background_tasks.add_task(run_fraud_check, session_factory, current_user.id)
    return BaseResponse(success=True, data=result.model_dump())
