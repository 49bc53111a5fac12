from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from bingoo.core.exceptions import ValidationError
from bingoo.models import GameKind, Transaction, TransactionStatus, TransactionType
from bingoo.repositories.game_repository import GameRepository
from bingoo.services.transaction_service import TransactionService


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


@pytest.fixture
def transaction_service(db_session):
    return TransactionService(db_session)


@pytest.fixture
def add_tx(db_session):
    def _add_tx(user, when, type=TransactionType.DEPOSIT, status=TransactionStatus.COMPLETED,
                points=10, amount=Decimal("10")):
        tx = Transaction(
            user_id=user.id,
            type=type,
            status=status,
            points=points,
            amount=amount,
            created_at=when,
        )
        db_session.add(tx)
        db_session.commit()
        return tx

    return _add_tx


class TestDailyStatistics:
    """Daily statistics tests"""

    def test_empty_range_is_zero_filled(self, transaction_service):
        """A range without activity is zero-filled"""
        # When
        result = transaction_service.daily_statistics(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 7)
        )

        # Then
        assert [d.date for d in result.days] == [date(2024, 1, day) for day in range(1, 8)]
        assert all(d.transactions == 0 for d in result.days)
        assert all(d.revenue == 0 for d in result.days)

    def test_gaps_between_active_days_are_reported(
        self, transaction_service, make_user, add_tx
    ):
        """Idle days between active days are present as zeros"""
        # Given
        user = make_user()
        add_tx(user, _at(date(2024, 3, 1)), amount=Decimal("15"))
        add_tx(user, _at(date(2024, 3, 1), hour=20), type=TransactionType.GAME_COST,
               points=-2, amount=Decimal("0"))
        add_tx(user, _at(date(2024, 3, 4)), status=TransactionStatus.PENDING)

        # When
        result = transaction_service.daily_statistics(
            start_date=date(2024, 3, 1), end_date=date(2024, 3, 5)
        )

        # Then
        by_day = {d.date: d for d in result.days}
        assert len(result.days) == 5
        assert by_day[date(2024, 3, 1)].transactions == 2
        assert by_day[date(2024, 3, 1)].revenue == Decimal("15")
        assert by_day[date(2024, 3, 2)].transactions == 0
        assert by_day[date(2024, 3, 4)].transactions == 1
        assert by_day[date(2024, 3, 4)].revenue == 0

    def test_period_ends_today(self, transaction_service):
        """A period runs up to today"""
        result = transaction_service.daily_statistics(period="7d", today=date(2024, 5, 10))

        assert result.start_date == date(2024, 5, 3)
        assert result.end_date == date(2024, 5, 10)
        assert len(result.days) == 8

    def test_inverted_range_rejected(self, transaction_service):
        """A start date after the end date is rejected"""
        with pytest.raises(ValidationError):
            transaction_service.daily_statistics(
                start_date=date(2024, 2, 1), end_date=date(2024, 1, 1)
            )

    def test_unknown_period_rejected(self, transaction_service):
        """An unsupported period is rejected"""
        with pytest.raises(ValidationError):
            transaction_service.daily_statistics(period="1y")


class TestTypeStatistics:
    """Per-type statistics tests"""

    def test_every_type_listed(self, transaction_service, make_user, add_tx):
        """Every transaction type is listed, idle ones as zero"""
        user = make_user()
        add_tx(user, _at(date(2024, 3, 1)), points=10)
        add_tx(user, _at(date(2024, 3, 2)), points=5)
        add_tx(user, _at(date(2024, 3, 2)), status=TransactionStatus.FAILED)

        stats = {s.type: s for s in transaction_service.transaction_type_statistics()}

        assert set(stats) == {t.value for t in TransactionType}
        assert stats["DEPOSIT"].count == 2
        assert stats["DEPOSIT"].points == 15
        assert stats["CLAIM"].count == 0


class TestOverview:
    """Overview statistics tests"""

    def test_users_and_revenue_grouped_by_effective_region(
        self, transaction_service, make_user, add_tx
    ):
        """Users and revenue are grouped by effective region"""
        senegal = make_user(country="SN", points=4)
        make_user(country="ZZ", points=6)
        add_tx(senegal, _at(date(2024, 3, 1)), amount=Decimal("300"))

        overview = transaction_service.overview()

        regions = {r.region: r for r in overview.regions}
        assert overview.total_users == 2
        assert overview.total_points == 10
        assert regions["AFRIQUE_NOIRE"].users == 1
        assert regions["AFRIQUE_NOIRE"].revenue == Decimal("300")
        assert regions["EUROPE"].users == 1


class TestListing:
    """Transaction listing tests"""

    def test_user_listing_is_scoped(self, transaction_service, make_user, add_tx):
        """A user listing only returns that user's transactions"""
        me, other = make_user(), make_user()
        add_tx(me, _at(date(2024, 3, 1)))
        add_tx(other, _at(date(2024, 3, 1)))

        result = transaction_service.list_user_transactions(me.id)

        assert result.total_count == 1
        assert result.transactions[0].user_id == me.id


class TestUserStatistics:
    """Users statistics tests"""

    def test_totals_and_recent_signups(self, transaction_service, make_user):
        """Users created in the last 30 days count as new"""
        # Given
        make_user(points=10, created_at=_at(date(2024, 6, 1)))
        make_user(points=5, created_at=_at(date(2024, 5, 10)))
        make_user(points=0, created_at=_at(date(2024, 1, 1)))

        # When
        stats = transaction_service.user_statistics(today=date(2024, 6, 5))

        # Then
        assert stats.total_users == 3
        assert stats.new_users == 2
        assert stats.total_points == 15
        assert stats.average_points_per_user == 5

    def test_no_users(self, transaction_service):
        """An empty user table averages to zero"""
        stats = transaction_service.user_statistics(today=date(2024, 6, 5))

        assert stats.total_users == 0
        assert stats.average_points_per_user == 0


class TestUserReport:
    """Per-user report tests"""

    def test_games_prizes_and_win_rate(self, transaction_service, make_user, db_session):
        """Plays and claims are tallied separately per user"""
        # Given
        player = make_user(points=7, country="SN", created_at=_at(date(2024, 2, 1)))
        idle = make_user(points=3, created_at=_at(date(2024, 1, 1)))
        games = GameRepository(db_session)
        games.record(player.id, None, won=True, points=2, cost=1, kind=GameKind.PLAY)
        games.record(player.id, None, won=False, points=0, cost=1, kind=GameKind.PLAY)
        games.record(player.id, None, won=False, points=0, cost=1, kind=GameKind.PLAY)
        games.record(player.id, None, won=True, points=2, cost=0, kind=GameKind.CLAIM)
        db_session.commit()

        # When
        report = transaction_service.user_report()

        # Then
        assert [entry.user_id for entry in report.users] == [player.id, idle.id]
        first = report.users[0]
        assert first.region == "AFRIQUE_NOIRE"
        assert (first.games_played, first.games_won, first.games_lost) == (3, 1, 2)
        assert first.win_rate == 33.33
        assert first.prizes_won == 1
        assert first.points == 7
        assert first.registered_on == date(2024, 2, 1)

        second = report.users[1]
        assert (second.games_played, second.win_rate, second.prizes_won) == (0, 0.0, 0)

    def test_pagination(self, transaction_service, make_user):
        """has_next reflects remaining users"""
        for _ in range(3):
            make_user()

        report = transaction_service.user_report(limit=2, offset=0)

        assert len(report.users) == 2
        assert report.total_count == 3
        assert report.has_next is True
