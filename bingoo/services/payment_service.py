import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from bingoo.core.exceptions import NotFoundError, TransactionStateError, ValidationError
from bingoo.core.regions import quote_price
from bingoo.database.session import atomic
from bingoo.models.transaction import PaymentProvider, TransactionStatus, TransactionType
from bingoo.repositories.transaction_repository import TransactionRepository
from bingoo.schemas.payments import CheckoutResponse, SettleResponse
from bingoo.services.point_service import PointService
from bingoo.services.region_service import RegionService

logger = logging.getLogger(__name__)


class PaymentService:
    """Points purchases.

    The provider integration lives outside this service: checkout records a
    PENDING deposit priced in the buyer's region, and settle records the
    outcome the provider reported.
    """

    def __init__(self, db: Session):
        self.db = db
        self.tx_repo = TransactionRepository(db)
        self.point_service = PointService(db)
        self.region_service = RegionService(db)

    def checkout(
        self, user_id: int, points: int, provider: PaymentProvider
    ) -> CheckoutResponse:
        region = self.region_service.region_for_user(user_id)
        amount = quote_price(region, points)

        with atomic(self.db):
            tx = self.tx_repo.append(
                user_id=user_id,
                type=TransactionType.DEPOSIT,
                status=TransactionStatus.PENDING,
                points=points,
                amount=amount,
                currency=region.currency,
                provider=provider,
                reference=f"checkout_{uuid.uuid4().hex}",
                description=f"Purchase of {points} points",
            )

        logger.info(
            f"Checkout {tx.id}: user {user_id} buys {points} points for {amount} {region.currency} via {provider.value}"
        )
        return CheckoutResponse(
            transaction_id=tx.id,
            region=region.region_id,
            currency=region.currency,
            points=points,
            amount=amount,
            status=tx.status,
        )

    def settle(
        self,
        transaction_id: int,
        success: bool,
        provider_reference: Optional[str] = None,
    ) -> SettleResponse:
        """PENDING -> COMPLETED|FAILED, exactly once; COMPLETED credits the points."""
        tx = self.tx_repo.get_by_id(transaction_id)
        if not tx:
            raise NotFoundError(
                f"Transaction not found: {transaction_id}",
                {"transaction_id": transaction_id},
                error_code="TRANSACTION_404",
            )
        if tx.type != TransactionType.DEPOSIT:
            raise ValidationError(
                "Only deposits can be settled",
                {"transaction_id": transaction_id, "type": tx.type.value},
            )

        new_status = TransactionStatus.COMPLETED if success else TransactionStatus.FAILED
        balance_after = None
        with atomic(self.db):
            if not self.tx_repo.transition_status(
                transaction_id, new_status, provider_reference
            ):
                current = self.tx_repo.get_by_id(transaction_id)
                raise TransactionStateError(transaction_id, current.status.value)
            if new_status == TransactionStatus.COMPLETED:
                balance_after = self.point_service.credit_balance(tx.user_id, tx.points)

        logger.info(f"Settled transaction {transaction_id} as {new_status.value}")
        return SettleResponse(
            transaction_id=transaction_id,
            user_id=tx.user_id,
            status=new_status,
            points_credited=tx.points if success else 0,
            balance_after=balance_after,
        )
