from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

NO_SURGE = Decimal("1.00")
WEEKDAY_PEAK_SURGE = Decimal("1.20")
WEEKEND_EVENING_SURGE = Decimal("1.15")

# Half-open hour windows [start, end)
WEEKDAY_PEAK_HOURS = ((7, 9), (17, 19))
WEEKEND_EVENING_HOURS = (18, 22)


def _in_window(hour: int, window) -> bool:
    start, end = window
    return start <= hour < end


def surge_multiplier(hour_of_day: int, day_of_week: int) -> Decimal:
    """Time-of-day surge. `day_of_week` counts from Sunday = 0 to Saturday = 6.

    Weekday rush hours (07-09, 17-19) are 1.20, weekend evenings (18-22) are
    1.15, everything else 1.00.
    """
    is_weekday = 1 <= day_of_week <= 5

    if is_weekday and any(_in_window(hour_of_day, w) for w in WEEKDAY_PEAK_HOURS):
        return WEEKDAY_PEAK_SURGE
    if not is_weekday and _in_window(hour_of_day, WEEKEND_EVENING_HOURS):
        return WEEKEND_EVENING_SURGE
    return NO_SURGE


def day_of_week(at: datetime) -> int:
    return at.isoweekday() % 7


def local_pricing_time(at: Optional[datetime] = None) -> datetime:
    """Wall-clock time used for surge. Aware values are converted to the
    configured TIME_ZONE; naive values are already local."""
    if at is None:
        return timezone.localtime()
    if timezone.is_aware(at):
        return timezone.localtime(at)
    return at


def surge_multiplier_at(at: Optional[datetime] = None) -> Decimal:
    local = local_pricing_time(at)
    return surge_multiplier(local.hour, day_of_week(local))
