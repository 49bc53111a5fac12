from sqlalchemy import BigInteger, Column, DateTime, Integer, func
from sqlalchemy.orm import declarative_base, declared_attr

from bingoo.utils.date_utils import utcnow

Base = declarative_base()


class TimestampMixin:
    """created_at / updated_at columns."""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            default=utcnow,
            server_default=func.now(),
            nullable=False,
            index=True,
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            default=utcnow,
            server_default=func.now(),
            onupdate=utcnow,
        )


class BaseModel(Base, TimestampMixin):
    """Base class for every table."""

    __abstract__ = True

    def dict(self):
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }


# SQLite only auto-increments INTEGER primary keys.
IdType = BigInteger().with_variant(Integer, "sqlite")
