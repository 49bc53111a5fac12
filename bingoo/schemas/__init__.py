from .common import BaseResponse
from .user import User
from .region import RegionResponse
from .points import PointsBalanceResponse
from .prizes import PrizeItem, GameHistoryEntry
from .transactions import TransactionEntry
from .tournaments import TournamentItem
