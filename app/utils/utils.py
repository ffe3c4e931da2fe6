from datetime import datetime, timezone
from typing import Optional
from dateutil.relativedelta import relativedelta


def epoch_to_datetime(epoch_seconds: Optional[int]) -> Optional[datetime]:
    """Convert a Unix timestamp (seconds) to a naive UTC datetime, as stored in the database"""
    if epoch_seconds is None:
        return None
    return datetime.fromtimestamp(int(epoch_seconds), tz=timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Naive UTC now, comparable with the datetimes stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the last day of the target month"""
    return value + relativedelta(months=months)
