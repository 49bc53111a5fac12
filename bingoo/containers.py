from dependency_injector import containers, providers

from bingoo.config import Settings
from bingoo.services.fraud_service import FraudService
from bingoo.services.game_service import GameService
from bingoo.services.payment_service import PaymentService
from bingoo.services.point_service import PointService
from bingoo.services.prize_service import PrizeService
from bingoo.services.region_service import RegionService
from bingoo.services.tournament_service import TournamentService
from bingoo.services.transaction_service import TransactionService
from bingoo.services.user_service import UserService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer factories; the request-scoped session is passed at call time."""

    config = providers.DependenciesContainer()

    user_service = providers.Factory(UserService)
    region_service = providers.Factory(RegionService)
    point_service = providers.Factory(PointService)
    prize_service = providers.Factory(PrizeService)
    game_service = providers.Factory(
        GameService, win_rate=config.config.provided.GAME_WIN_RATE
    )
    payment_service = providers.Factory(PaymentService)
    transaction_service = providers.Factory(TransactionService)
    tournament_service = providers.Factory(TournamentService)
    fraud_service = providers.Factory(FraudService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    services = providers.Container(ServiceModule, config=config)
