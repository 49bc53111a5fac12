import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bingoo.core.security import create_access_token
from bingoo.database.session import get_db, get_session_factory
from bingoo.main import create_app
from bingoo.models import (
    Base,
    Prize,
    PrizeCategory,
    Tournament,
    TournamentStatus,
    User,
    UserRole,
)
from bingoo.utils.date_utils import utcnow

_emails = itertools.count(1)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    def _make_user(points=0, country="FR", role=UserRole.USER, region_id=None, **kwargs):
        user = User(
            email=kwargs.pop("email", f"user{next(_emails)}@example.com"),
            name=kwargs.pop("name", "Player"),
            country=country,
            region_id=region_id,
            points=points,
            role=role.value,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_prize(db_session):
    def _make_prize(point_value=2, stock=1, is_active=True, region_id=None, **kwargs):
        prize = Prize(
            name=kwargs.pop("name", "Gift card"),
            category=kwargs.pop("category", PrizeCategory.FOOD),
            point_value=point_value,
            stock=stock,
            is_active=is_active,
            region_id=region_id,
            **kwargs,
        )
        db_session.add(prize)
        db_session.commit()
        return prize

    return _make_prize


@pytest.fixture
def make_tournament(db_session):
    def _make_tournament(
        entry_fee=5,
        max_players=10,
        status=TournamentStatus.REGISTERING,
        starts_in=timedelta(hours=1),
        duration=timedelta(hours=24),
        prizes=None,
        **kwargs,
    ):
        start = utcnow() + starts_in
        tournament = Tournament(
            name=kwargs.pop("name", "Weekly cup"),
            entry_fee=entry_fee,
            min_players=kwargs.pop("min_players", 1),
            max_players=max_players,
            start_time=start,
            end_time=start + duration,
            status=status,
            prizes=prizes or [],
            **kwargs,
        )
        db_session.add(tournament)
        db_session.commit()
        return tournament

    return _make_tournament


@pytest.fixture
def app(db_session, session_factory):
    app = create_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def bearer(user) -> dict:
    token = create_access_token(
        {"sub": user.id, "email": user.email, "role": user.role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer
