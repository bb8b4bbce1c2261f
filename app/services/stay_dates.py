"""
Date helpers shared by rate resolution and pricing.

Weekday masks are Monday-based: bit 0 = Monday ... bit 6 = Sunday.
Python's date.weekday() already uses that numbering.
"""

from datetime import date, timedelta
from typing import List

from ..schemas.rate_band import RateBand


def is_weekday_allowed(check_date: date, weekday_mask: int) -> bool:
    """True if the weekday bit of check_date is set in weekday_mask"""
    return (weekday_mask & (1 << check_date.weekday())) != 0


def is_date_in_rate_band(check_date: date, band: RateBand) -> bool:
    """Inclusive on both band_start and band_end"""
    return band.band_start <= check_date <= band.band_end


def band_span_days(band: RateBand) -> int:
    return (band.band_end - band.band_start).days


def nightly_dates(check_in: date, check_out: date) -> List[date]:
    """
    Nights of a stay. The checkout date is not a night.

    nightly_dates(2025-06-01, 2025-06-03) -> [2025-06-01, 2025-06-02]
    """
    nights = []
    current = check_in
    while current < check_out:
        nights.append(current)
        current += timedelta(days=1)
    return nights
