from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_date(value: Any) -> Optional[date]:
    """Normalize a value returned by a DATE(...) aggregate into a date.

    PostgreSQL hands back ``date`` objects while SQLite returns ISO strings.

    Examples:
        >>> to_date(datetime(2024, 3, 1, 10, 30))
        datetime.date(2024, 3, 1)

        >>> to_date("2024-03-01")
        datetime.date(2024, 3, 1)
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def date_range(start: date, end: date) -> List[date]:
    """Every calendar day from start to end, both inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90}


def period_start(period: str, today: Optional[date] = None) -> date:
    """First day of a rolling period such as ``"7d"`` ending today."""
    today = today or utcnow().date()
    if period not in PERIOD_DAYS:
        raise ValueError(f"Unsupported period: {period}")
    return today - timedelta(days=PERIOD_DAYS[period])
