from datetime import date, datetime, time, timedelta
from typing import Optional

# Rental dates are calendar dates at the branch; all business times are naive
# local datetimes so that "end of the return day" means the branch's midnight.
END_OF_DAY = time(23, 59, 59)


def local_now() -> datetime:
    """Current branch-local time without tzinfo."""
    return datetime.now().replace(microsecond=0)


def local_today() -> date:
    return local_now().date()


def start_of_day(day: date) -> datetime:
    """00:00:00 on the given calendar day."""
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """23:59:59 on the given calendar day (the return deadline)."""
    return datetime.combine(day, END_OF_DAY)


def hours_before(moment: datetime, hours: int) -> datetime:
    return moment - timedelta(hours=hours)


def to_local_naive(moment: Optional[datetime]) -> Optional[datetime]:
    """Branch-local naive form of ``moment``; naive input is taken as local already."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
