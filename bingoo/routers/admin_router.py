"""
Admin Router

Dashboard endpoints: statistics, transaction log, users and fraud alerts.
"""

import csv
import io
from datetime import date
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from bingoo.core.auth_middleware import require_admin
from bingoo.core.security import Identity
from bingoo.deps import get_fraud_service, get_transaction_service, get_user_service
from bingoo.models.transaction import TransactionStatus, TransactionType
from bingoo.schemas.fraud import FraudAlertListResponse
from bingoo.schemas.pagination import PaginationLimits
from bingoo.schemas.statistics import (
    DailyStatsResponse,
    OverviewStats,
    TransactionTypeStats,
    UserReportResponse,
    UserStats,
)
from bingoo.schemas.transactions import TransactionListResponse
from bingoo.schemas.user import UserListResponse
from bingoo.services.fraud_service import FraudService
from bingoo.services.transaction_service import TransactionService
from bingoo.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])

REPORT_COLUMNS = [
    "user_id",
    "name",
    "email",
    "country",
    "region",
    "games_played",
    "games_won",
    "games_lost",
    "win_rate",
    "prizes_won",
    "points",
    "registered_on",
]


@router.get("/statistics/daily", response_model=DailyStatsResponse)
def get_daily_statistics(
    period: Optional[str] = Query(None, pattern="^(7d|30d|90d)$"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> DailyStatsResponse:
    """Daily transactions, revenue and signups; every day of the range is present."""
    return transaction_service.daily_statistics(
        period=period, start_date=start_date, end_date=end_date
    )


@router.get("/statistics/transactions", response_model=List[TransactionTypeStats])
def get_transaction_statistics(
    period: Optional[str] = Query(None, pattern="^(7d|30d|90d)$"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> List[TransactionTypeStats]:
    return transaction_service.transaction_type_statistics(
        period=period, start_date=start_date, end_date=end_date
    )


@router.get("/statistics/overview", response_model=OverviewStats)
def get_overview(
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> OverviewStats:
    return transaction_service.overview()


@router.get("/statistics/users", response_model=UserStats)
def get_user_statistics(
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> UserStats:
    """Total users, signups of the last 30 days and outstanding points."""
    return transaction_service.user_statistics()


@router.get("/statistics/users/report", response_model=None)
def get_user_report(
    format: str = Query("json", pattern="^(json|csv)$"),
    limit: int = Query(
        PaginationLimits.USER_REPORT["default"],
        ge=PaginationLimits.USER_REPORT["min"],
        le=PaginationLimits.USER_REPORT["max"],
    ),
    offset: int = Query(0, ge=0),
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> Union[UserReportResponse, StreamingResponse]:
    """Per-user games, wins, prizes and points.

    ``format=csv`` exports every user as an attachment and ignores paging.
    """
    if format == "json":
        return transaction_service.user_report(limit=limit, offset=offset)

    report = transaction_service.user_report(limit=None)
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(REPORT_COLUMNS)
    for entry in report.users:
        row = entry.model_dump()
        writer.writerow(["" if row[col] is None else row[col] for col in REPORT_COLUMNS])

    return StreamingResponse(
        io.BytesIO(output.getvalue().encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=user_statistics.csv"},
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    user_id: Optional[int] = Query(None, gt=0),
    type: Optional[TransactionType] = Query(None),
    status: Optional[TransactionStatus] = Query(None),
    limit: int = Query(
        PaginationLimits.TRANSACTIONS["default"],
        ge=PaginationLimits.TRANSACTIONS["min"],
        le=PaginationLimits.TRANSACTIONS["max"],
    ),
    offset: int = Query(0, ge=0),
    current_admin: Identity = Depends(require_admin),
    transaction_service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    return transaction_service.list_transactions(
        user_id=user_id, type=type, status=status, limit=limit, offset=offset
    )


@router.get("/users", response_model=UserListResponse)
def list_users(
    q: Optional[str] = Query(None, max_length=100, description="Email or name fragment"),
    limit: int = Query(
        PaginationLimits.USER_LIST["default"],
        ge=PaginationLimits.USER_LIST["min"],
        le=PaginationLimits.USER_LIST["max"],
    ),
    offset: int = Query(0, ge=0),
    current_admin: Identity = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    return user_service.list_users(query=q, limit=limit, offset=offset)


@router.get("/fraud-alerts", response_model=FraudAlertListResponse)
def list_fraud_alerts(
    user_id: Optional[int] = Query(None, gt=0),
    reviewed: Optional[bool] = Query(None),
    limit: int = Query(
        PaginationLimits.FRAUD_ALERTS["default"],
        ge=PaginationLimits.FRAUD_ALERTS["min"],
        le=PaginationLimits.FRAUD_ALERTS["max"],
    ),
    offset: int = Query(0, ge=0),
    current_admin: Identity = Depends(require_admin),
    fraud_service: FraudService = Depends(get_fraud_service),
) -> FraudAlertListResponse:
    return fraud_service.list_alerts(
        user_id=user_id, reviewed=reviewed, limit=limit, offset=offset
    )
