from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bingoo.database.session import get_db

# Services
from bingoo.services.fraud_service import FraudService
from bingoo.services.game_service import GameService
from bingoo.services.payment_service import PaymentService
from bingoo.services.point_service import PointService
from bingoo.services.prize_service import PrizeService
from bingoo.services.region_service import RegionService
from bingoo.services.tournament_service import TournamentService
from bingoo.services.transaction_service import TransactionService
from bingoo.services.user_service import UserService


def _services(request: Request):
    return request.app.container.services


def get_user_service(request: Request, db: Session = Depends(get_db)) -> UserService:
    return _services(request).user_service(db=db)


def get_region_service(request: Request, db: Session = Depends(get_db)) -> RegionService:
    return _services(request).region_service(db=db)


def get_point_service(request: Request, db: Session = Depends(get_db)) -> PointService:
    return _services(request).point_service(db=db)


def get_prize_service(request: Request, db: Session = Depends(get_db)) -> PrizeService:
    return _services(request).prize_service(db=db)


def get_game_service(request: Request, db: Session = Depends(get_db)) -> GameService:
    return _services(request).game_service(db=db)


def get_payment_service(request: Request, db: Session = Depends(get_db)) -> PaymentService:
    return _services(request).payment_service(db=db)


def get_transaction_service(
    request: Request, db: Session = Depends(get_db)
) -> TransactionService:
    return _services(request).transaction_service(db=db)


def get_tournament_service(
    request: Request, db: Session = Depends(get_db)
) -> TournamentService:
    return _services(request).tournament_service(db=db)


def get_fraud_service(request: Request, db: Session = Depends(get_db)) -> FraudService:
    return _services(request).fraud_service(db=db)
