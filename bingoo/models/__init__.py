# Models Package
from .base import Base
from .region import Region
from .user import User, UserRole
from .prize import Prize, PrizeCategory
from .transaction import Transaction, TransactionType, TransactionStatus, PaymentProvider
from .game import Game, GameHistory, GameKind
from .tournament import Tournament, TournamentParticipant, TournamentStatus
from .fraud import FraudAlert

__all__ = [
    "Base",
    "Region",
    "User",
    "UserRole",
    "Prize",
    "PrizeCategory",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "PaymentProvider",
    "Game",
    "GameHistory",
    "GameKind",
    "Tournament",
    "TournamentParticipant",
    "TournamentStatus",
    "FraudAlert",
]
