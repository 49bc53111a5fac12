from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bingoo.config import settings


def build_engine(database_url: str, echo: bool = False):
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # validate connections before use
        pool_recycle=3600,
        echo=echo,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# expire_on_commit=False keeps attributes readable after a service commits
# inside the same request scope.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
