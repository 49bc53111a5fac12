import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from bingoo.core.exceptions import (
    InsufficientPointsError,
    UserNotFoundError,
    ValidationError,
)
from bingoo.database.session import atomic
from bingoo.models.transaction import TransactionStatus, TransactionType
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.transaction_repository import TransactionRepository
from bingoo.repositories.user_repository import UserRepository
from bingoo.schemas.points import (
    AdminPointsAdjustmentRequest,
    LedgerResult,
    PointsAdjustmentResponse,
    PointsBalanceResponse,
    PointsIntegrityCheckResponse,
)

logger = logging.getLogger(__name__)


class PointService:
    """Points ledger: ``users.points`` is the single source of truth.

    ``credit`` / ``debit`` change the balance and append the matching
    Transaction row but never commit; they run inside the caller's
    ``atomic`` block so balance and audit land together or not at all.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tx_repo = TransactionRepository(db)
        self.game_repo = GameRepository(db)

    def get_balance(self, user_id: int) -> PointsBalanceResponse:
        points = self.user_repo.get_points(user_id)
        if points is None:
            raise UserNotFoundError(user_id)
        return PointsBalanceResponse(user_id=user_id, points=points)

    def ensure_affordable(self, user_id: int, points: int) -> int:
        """Raise InsufficientPointsError unless the balance covers ``points``."""
        available = self.user_repo.get_points(user_id)
        if available is None:
            raise UserNotFoundError(user_id)
        if available < points:
            raise InsufficientPointsError(required=points, available=available)
        return available

    def debit_balance(self, user_id: int, points: int) -> int:
        """Conditional decrement without an audit row; the caller writes one."""
        if points <= 0:
            raise ValidationError("Debit amount must be positive", {"points": points})
        balance = self.user_repo.decrement_points_if_sufficient(user_id, points)
        if balance is None:
            available = self.user_repo.get_points(user_id)
            if available is None:
                raise UserNotFoundError(user_id)
            raise InsufficientPointsError(required=points, available=available)
        return balance

    def credit_balance(self, user_id: int, points: int) -> int:
        if points <= 0:
            raise ValidationError("Credit amount must be positive", {"points": points})
        balance = self.user_repo.increment_points(user_id, points)
        if balance is None:
            raise UserNotFoundError(user_id)
        return balance

    def credit(
        self,
        user_id: int,
        points: int,
        tx_type: TransactionType,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        amount: Decimal = Decimal("0"),
        currency: Optional[str] = None,
    ) -> LedgerResult:
        balance = self.credit_balance(user_id, points)
        tx = self.tx_repo.append(
            user_id=user_id,
            type=tx_type,
            points=points,
            amount=amount,
            currency=currency,
            status=TransactionStatus.COMPLETED,
            description=description,
            reference=reference,
        )
        logger.info(f"Credited {points} points to user {user_id} ({tx_type.value})")
        return LedgerResult(
            user_id=user_id,
            delta_points=points,
            balance_after=balance,
            transaction_id=tx.id,
        )

    def debit(
        self,
        user_id: int,
        points: int,
        tx_type: TransactionType,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> LedgerResult:
        balance = self.debit_balance(user_id, points)
        tx = self.tx_repo.append(
            user_id=user_id,
            type=tx_type,
            points=-points,
            status=TransactionStatus.COMPLETED,
            description=description,
            reference=reference,
        )
        logger.info(f"Debited {points} points from user {user_id} ({tx_type.value})")
        return LedgerResult(
            user_id=user_id,
            delta_points=-points,
            balance_after=balance,
            transaction_id=tx.id,
        )

    def admin_adjust(
        self, request: AdminPointsAdjustmentRequest, admin_id: Optional[int] = None
    ) -> PointsAdjustmentResponse:
        """Set an absolute balance; the delta is audited as ADJUSTMENT."""
        with atomic(self.db):
            result = self.user_repo.set_points(request.user_id, request.points)
            if result is None:
                raise UserNotFoundError(request.user_id)
            previous, current = result
            delta = current - previous

            transaction_id = None
            if delta != 0:
                tx = self.tx_repo.append(
                    user_id=request.user_id,
                    type=TransactionType.ADJUSTMENT,
                    points=delta,
                    description=request.reason,
                    reference=f"admin_{admin_id}" if admin_id else None,
                )
                transaction_id = tx.id

        logger.info(
            f"Admin {admin_id} set points of user {request.user_id}: {previous} -> {current}"
        )
        return PointsAdjustmentResponse(
            user_id=request.user_id,
            previous_points=previous,
            points=current,
            delta=delta,
            transaction_id=transaction_id,
        )

    def verify_integrity(self, user_id: int) -> PointsIntegrityCheckResponse:
        """Compare the stored balance with the one rebuilt from the audit trail."""
        recorded = self.user_repo.get_points(user_id)
        if recorded is None:
            raise UserNotFoundError(user_id)

        tx_delta = int(self.tx_repo.sum_completed_points(user_id))
        claimed = int(self.game_repo.sum_claimed_points(user_id))
        calculated = tx_delta - claimed
        status = "OK" if calculated == recorded else "MISMATCH"

        if status != "OK":
            logger.warning(
                f"Points mismatch for user {user_id}: recorded={recorded} calculated={calculated}"
            )
        return PointsIntegrityCheckResponse(
            status=status,
            user_id=user_id,
            recorded_balance=recorded,
            calculated_balance=calculated,
            transaction_delta=tx_delta,
            claimed_points=claimed,
        )
