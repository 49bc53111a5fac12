from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from bingoo.core.auth_middleware import get_current_user
from bingoo.database.session import SessionFactory, get_session_factory
from bingoo.deps import get_game_service
from bingoo.schemas.common import BaseResponse
from bingoo.schemas.games import GamePlayRequest
from bingoo.schemas.pagination import PaginationLimits
from bingoo.schemas.user import User as UserSchema
from bingoo.services.fraud_service import run_fraud_check
from bingoo.services.game_service import GameService

router = APIRouter(prefix="/games", tags=["games"])


@router.post("/play", response_model=BaseResponse)
def play_game(
    request: GamePlayRequest,
    background_tasks: BackgroundTasks,
    current_user: UserSchema = Depends(get_current_user),
    game_service: GameService = Depends(get_game_service),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Any:
    """Pay the regional play cost for a chance to win the prize."""
    result = game_service.play(current_user.id, request.prize_id)
    background_tasks.add_task(run_fraud_check, session_factory, current_user.id)
    return BaseResponse(success=True, data=result.model_dump())


@router.get("/history", response_model=BaseResponse)
def get_game_history(
    limit: int = Query(
        PaginationLimits.GAME_HISTORY["default"],
        ge=PaginationLimits.GAME_HISTORY["min"],
        le=PaginationLimits.GAME_HISTORY["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_user),
    game_service: GameService = Depends(get_game_service),
) -> Any:
    history = game_service.get_history(current_user.id, limit=limit, offset=offset)
    return BaseResponse(
        success=True,
        data={"history": [entry.model_dump() for entry in history.entries]},
        meta={
            "limit": limit,
            "offset": offset,
            "total_count": history.total_count,
            "has_next": history.has_next,
        },
    )
