"""
Fraud heuristic

Advisory only: evaluation writes FraudAlert rows and never blocks or fails
the operation that triggered it.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from bingoo.database.session import SessionFactory, atomic, get_db_context
from bingoo.repositories.fraud_repository import FraudAlertRepository
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.transaction_repository import TransactionRepository
from bingoo.schemas.fraud import FraudAlertListResponse, FraudEvaluation
from bingoo.utils.date_utils import utcnow

logger = logging.getLogger(__name__)

TRANSACTION_WINDOW = timedelta(minutes=5)
MAX_TRANSACTIONS_PER_WINDOW = 10
WINNINGS_WINDOW = timedelta(minutes=60)
MAX_WINNINGS_PER_WINDOW = 1000

TOO_MANY_TRANSACTIONS = "too_many_transactions"
SUSPICIOUS_WINNINGS = "suspicious_winnings"


class FraudService:
    def __init__(self, db: Session):
        self.db = db
        self.tx_repo = TransactionRepository(db)
        self.game_repo = GameRepository(db)
        self.alert_repo = FraudAlertRepository(db)

    def evaluate(self, user_id: int, now: Optional[datetime] = None) -> FraudEvaluation:
        now = now or utcnow()
        recent_transactions = self.tx_repo.count_since(user_id, now - TRANSACTION_WINDOW)
        recent_winnings = int(
            self.game_repo.sum_won_points_since(user_id, now - WINNINGS_WINDOW)
        )

        alerts = []
        with atomic(self.db):
            if recent_transactions > MAX_TRANSACTIONS_PER_WINDOW:
                self.alert_repo.create(
                    user_id=user_id,
                    type=TOO_MANY_TRANSACTIONS,
                    description=(
                        f"{recent_transactions} transactions in the last "
                        f"{int(TRANSACTION_WINDOW.total_seconds() // 60)} minutes"
                    ),
                )
                alerts.append(TOO_MANY_TRANSACTIONS)
            if recent_winnings > MAX_WINNINGS_PER_WINDOW:
                self.alert_repo.create(
                    user_id=user_id,
                    type=SUSPICIOUS_WINNINGS,
                    description=(
                        f"{recent_winnings} points won in the last "
                        f"{int(WINNINGS_WINDOW.total_seconds() // 60)} minutes"
                    ),
                )
                alerts.append(SUSPICIOUS_WINNINGS)

        for alert in alerts:
            logger.warning(f"Fraud alert {alert} raised for user {user_id}")
        return FraudEvaluation(
            user_id=user_id,
            recent_transactions=recent_transactions,
            recent_winnings=recent_winnings,
            alerts=alerts,
        )

    def list_alerts(
        self,
        user_id: Optional[int] = None,
        reviewed: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> FraudAlertListResponse:
        alerts, total = self.alert_repo.list_alerts(
            user_id=user_id, reviewed=reviewed, limit=limit, offset=offset
        )
        return FraudAlertListResponse(
            alerts=alerts, total_count=total, has_next=offset + len(alerts) < total
        )


def run_fraud_check(session_factory: SessionFactory, user_id: int) -> None:
    """Background task entry point; runs in its own session and never raises."""
    try:
        with get_db_context(session_factory) as db:
            FraudService(db).evaluate(user_id)
    except Exception:
        logger.exception(f"Fraud check failed for user {user_id}")
