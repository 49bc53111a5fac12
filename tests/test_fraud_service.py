from datetime import timedelta
from unittest.mock import Mock, patch

import pytest

from bingoo.models import GameKind, TransactionType
from bingoo.repositories.game_repository import GameRepository
from bingoo.repositories.transaction_repository import TransactionRepository
from bingoo.services.fraud_service import (
    SUSPICIOUS_WINNINGS,
    TOO_MANY_TRANSACTIONS,
    FraudService,
    run_fraud_check,
)
from bingoo.utils.date_utils import utcnow


@pytest.fixture
def fraud_service(db_session):
    return FraudService(db_session)


def _add_transactions(db_session, user_id, count, created_at=None):
    repo = TransactionRepository(db_session)
    for _ in range(count):
        extra = {"created_at": created_at} if created_at else {}
        repo.append(user_id=user_id, type=TransactionType.GAME_COST, points=-2, **extra)
    db_session.commit()


def _add_win(db_session, user_id, points, created_at=None):
    entry = GameRepository(db_session).record(
        user_id=user_id, prize_id=None, won=True, points=points, cost=2, kind=GameKind.PLAY
    )
    if created_at:
        GameRepository(db_session).update(entry.id, created_at=created_at)
    db_session.commit()


class TestTransactionVelocity:
    """Transaction velocity rule tests"""

    def test_eleven_recent_transactions_raise_alert(self, db_session, fraud_service, make_user):
        """More than ten transactions in the window raise an alert"""
        # Given
        user = make_user()
        _add_transactions(db_session, user.id, 11)

        # When
        result = fraud_service.evaluate(user.id)

        # Then
        assert result.alerts == [TOO_MANY_TRANSACTIONS]
        assert result.suspicious
        alerts = fraud_service.list_alerts(user_id=user.id)
        assert alerts.total_count == 1
        assert alerts.alerts[0].reviewed is False

    def test_ten_transactions_are_fine(self, db_session, fraud_service, make_user):
        """Ten transactions in the window raise nothing"""
        user = make_user()
        _add_transactions(db_session, user.id, 10)

        result = fraud_service.evaluate(user.id)

        assert result.alerts == []
        assert fraud_service.list_alerts().total_count == 0

    def test_old_transactions_are_ignored(self, db_session, fraud_service, make_user):
        """Transactions outside the window are not counted"""
        user = make_user()
        _add_transactions(db_session, user.id, 20, created_at=utcnow() - timedelta(minutes=30))

        assert fraud_service.evaluate(user.id).recent_transactions == 0


class TestWinnings:
    """Winnings rule tests"""

    def test_large_recent_winnings_raise_alert(self, db_session, fraud_service, make_user):
        """Recent winnings above the threshold raise an alert"""
        user = make_user()
        _add_win(db_session, user.id, 600)
        _add_win(db_session, user.id, 500)

        result = fraud_service.evaluate(user.id)

        assert result.recent_winnings == 1100
        assert SUSPICIOUS_WINNINGS in result.alerts

    def test_winnings_outside_window_are_ignored(self, db_session, fraud_service, make_user):
        """Winnings outside the window are not counted"""
        user = make_user()
        _add_win(db_session, user.id, 2000, created_at=utcnow() - timedelta(hours=2))

        result = fraud_service.evaluate(user.id)

        assert result.alerts == []


class TestBackgroundCheck:
    """Background fraud check tests"""

    def test_runs_in_its_own_session(self, db_session, session_factory, make_user):
        """The background check opens and closes its own session"""
        user = make_user()
        _add_transactions(db_session, user.id, 11)

        run_fraud_check(session_factory, user.id)

        assert FraudService(db_session).list_alerts(user_id=user.id).total_count == 1

    def test_failure_is_logged_not_raised(self):
        """A failing check is logged instead of raised"""
        factory = Mock(side_effect=RuntimeError("database is gone"))

        with patch("bingoo.services.fraud_service.logger") as logger:
            run_fraud_check(factory, 1)

        logger.exception.assert_called_once()
