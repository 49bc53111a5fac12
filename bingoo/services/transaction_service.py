import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from bingoo.config import settings
from bingoo.core.exceptions import ValidationError
from bingoo.core.regions import REGION_CONFIG, region_for
from bingoo.models.transaction import TransactionStatus, TransactionType
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.prize_repository import PrizeRepository
from bingoo.repositories.transaction_repository import TransactionRepository
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.statistics import (
    DailyStatsEntry,
    DailyStatsResponse,
    OverviewStats,
    RegionStats,
    TransactionTypeStats,
    UserReportEntry,
    UserReportResponse,
    UserStats,
)
from bingoo.schemas.transactions import TransactionListResponse
from bingoo.utils.date_utils import date_range, period_start, utcnow

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 366
NEW_USER_WINDOW_DAYS = 30


class TransactionService:
    """Transaction log queries and the statistics derived from it."""

    def __init__(self, db: Session):
        self.db = db
        self.tx_repo = TransactionRepository(db)
        self.user_repo = UserRepository(db)
        self.prize_repo = PrizeRepository(db)
        self.game_repo = GameRepository(db)

    def list_user_transactions(
        self,
        user_id: int,
        type: Optional[TransactionType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> TransactionListResponse:
        return self.list_transactions(user_id=user_id, type=type, limit=limit, offset=offset)

    def list_transactions(
        self,
        user_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> TransactionListResponse:
        transactions, total = self.tx_repo.list_transactions(
            user_id=user_id, type=type, status=status, limit=limit, offset=offset
        )
        return TransactionListResponse(
            transactions=transactions,
            total_count=total,
            has_next=offset + len(transactions) < total,
        )

    def _resolve_range(
        self,
        period: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        today: Optional[date] = None,
    ):
        today = today or utcnow().date()
        if start_date or end_date:
            start = start_date or end_date
            end = end_date or today
        else:
            try:
                start = period_start(period or settings.STATS_DEFAULT_PERIOD, today)
            except ValueError as e:
                raise ValidationError(str(e), {"period": period})
            end = today

        if start > end:
            raise ValidationError(
                "start_date must not be after end_date",
                {"start_date": str(start), "end_date": str(end)},
            )
        if (end - start).days >= MAX_RANGE_DAYS:
            raise ValidationError(
                f"Date range cannot exceed {MAX_RANGE_DAYS} days",
                {"start_date": str(start), "end_date": str(end)},
            )
        return start, end

    def daily_statistics(
        self,
        period: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> DailyStatsResponse:
        """Contiguous per-day series; days without activity are zeros."""
        start, end = self._resolve_range(period, start_date, end_date, today)

        activity = self.tx_repo.daily_aggregates(start, end)
        lower = datetime.combine(start, time.min, tzinfo=timezone.utc)
        upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
        signups = self.user_repo.daily_signups(lower, upper)

        days = []
        for day in date_range(start, end):
            count, revenue = activity.get(day, (0, Decimal("0")))
            days.append(
                DailyStatsEntry(
                    date=day,
                    transactions=count,
                    revenue=revenue,
                    new_users=signups.get(day, 0),
                )
            )

        logger.info(f"Daily statistics {start}..{end}: {len(days)} days")
        return DailyStatsResponse(start_date=start, end_date=end, days=days)

    def transaction_type_statistics(
        self,
        period: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TransactionTypeStats]:
        """Completed totals per type; every type is listed, idle ones as zero."""
        if period or start_date or end_date:
            start, end = self._resolve_range(period, start_date, end_date)
            rows = self.tx_repo.type_totals(start, end)
        else:
            rows = self.tx_repo.type_totals()

        totals = {tx_type: (count, points, amount) for tx_type, count, points, amount in rows}
        stats = []
        for tx_type in TransactionType:
            count, points, amount = totals.get(tx_type, (0, 0, Decimal("0")))
            stats.append(
                TransactionTypeStats(
                    type=tx_type.value, count=count, points=points, amount=amount
                )
            )
        return stats

    def overview(self) -> OverviewStats:
        users_by_region: Dict[str, int] = defaultdict(int)
        for region_id, country, count in self.user_repo.count_by_location():
            region = region_for(region_id, country, settings.DEFAULT_REGION)
            users_by_region[region.region_id] += count

        revenue_by_region: Dict[str, Decimal] = defaultdict(Decimal)
        for region_id, country, amount in self.tx_repo.revenue_by_location():
            region = region_for(region_id, country, settings.DEFAULT_REGION)
            revenue_by_region[region.region_id] += amount

        regions = [
            RegionStats(
                region=config.region_id,
                currency=config.currency,
                users=users_by_region.get(config.region_id, 0),
                revenue=revenue_by_region.get(config.region_id, Decimal("0")),
            )
            for config in REGION_CONFIG.values()
        ]
        return OverviewStats(
            total_users=self.user_repo.count(),
            total_prizes=self.prize_repo.count(),
            total_transactions=self.tx_repo.count(),
            total_points=int(self.user_repo.total_points()),
            regions=regions,
        )

    def user_statistics(self, today: Optional[date] = None) -> UserStats:
        today = today or utcnow().date()
        since = datetime.combine(
            today - timedelta(days=NEW_USER_WINDOW_DAYS), time.min, tzinfo=timezone.utc
        )
        total_users = self.user_repo.count()
        total_points = int(self.user_repo.total_points())
        average = round(total_points / total_users) if total_users else 0
        return UserStats(
            total_users=total_users,
            new_users=self.user_repo.count_created_since(since),
            total_points=total_points,
            average_points_per_user=average,
        )

    def user_report(
        self, limit: Optional[int] = 20, offset: int = 0
    ) -> UserReportResponse:
        """Per-user game and prize totals, newest users first.

        ``limit=None`` returns every user (CSV export).
        """
        users, total = self.user_repo.search(limit=limit, offset=offset)
        totals = self.game_repo.totals_by_user(user.id for user in users)

        entries = []
        for user in users:
            played, won, claimed = totals.get(user.id, (0, 0, 0))
            region = region_for(user.region_id, user.country, settings.DEFAULT_REGION)
            entries.append(
                UserReportEntry(
                    user_id=user.id,
                    name=user.name,
                    email=user.email,
                    country=user.country,
                    region=region.region_id,
                    games_played=played,
                    games_won=won,
                    games_lost=played - won,
                    win_rate=round(won / played * 100, 2) if played else 0.0,
                    prizes_won=claimed,
                    points=user.points,
                    registered_on=user.created_at.date() if user.created_at else None,
                )
            )
        return UserReportResponse(
            users=entries,
            total_count=total,
            has_next=offset + len(entries) < total,
        )
