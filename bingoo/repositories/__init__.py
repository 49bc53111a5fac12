from .base import BaseRepository
from .user_repository import UserRepository
from .region_repository import RegionRepository
from .prize_repository import PrizeRepository
from .transaction_repository import TransactionRepository
from .game_repository import GameRepository
from .tournament_repository import TournamentRepository
from .fraud_repository import FraudAlertRepository
