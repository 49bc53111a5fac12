import enum
from decimal import Decimal
from typing import Optional

from sqlalchemy import Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bingoo.models.base import BaseModel, IdType


class TransactionType(enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    GAME_COST = "GAME_COST"
    CLAIM = "CLAIM"
    ENTRY_FEE = "ENTRY_FEE"
    ADJUSTMENT = "ADJUSTMENT"
    TOURNAMENT_PRIZE = "TOURNAMENT_PRIZE"


class TransactionStatus(enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PaymentProvider(enum.Enum):
    PAYPAL = "PAYPAL"
    CARD = "CARD"
    MOBILE_MONEY = "MOBILE_MONEY"


class Transaction(BaseModel):
    """Append-only log of monetary and point events.

    ``points`` is the signed delta applied to the user's balance; only the
    ``status`` column (and provider fields) change after insert, and only
    once, from PENDING.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_user_created", "user_id", "created_at"),
        Index("idx_transactions_type_status", "type", "status"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, ForeignKey("users.id"), nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, name="transaction_type"), nullable=False
    )
    status: Mapped[TransactionStatus] = mapped_column(
        Enum(TransactionStatus, name="transaction_status"),
        default=TransactionStatus.COMPLETED,
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    provider: Mapped[Optional[PaymentProvider]] = mapped_column(
        Enum(PaymentProvider, name="payment_provider"), nullable=True
    )
    provider_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
