from datetime import datetime, date, time, timedelta, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every created_at column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def start_of_month(moment: datetime) -> datetime:
    return datetime.combine(moment.date().replace(day=1), time.min)


def days_ago(moment: datetime, days: int) -> datetime:
    return moment - timedelta(days=days)


def get_now() -> datetime:
    """Request-time clock, overridable as a FastAPI dependency."""
    return utcnow()
