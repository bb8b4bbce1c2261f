# Services package
from .stay_dates import is_weekday_allowed, is_date_in_rate_band, nightly_dates
from .price_calculator import (
    price_stay, PricingResult, PricingBreakdown, NightlyRate, FeeLine,
    PricingError, NoPricingAvailable, OccupancyExceeded
)
from .rate_resolver import find_applicable_rate_band, resolve_stay_band, calculate_stay_pricing
from .pricing_service import PricingService, StayQuote

__all__ = [
    "is_weekday_allowed", "is_date_in_rate_band", "nightly_dates",
    "price_stay", "PricingResult", "PricingBreakdown", "NightlyRate", "FeeLine",
    "PricingError", "NoPricingAvailable", "OccupancyExceeded",
    "find_applicable_rate_band", "resolve_stay_band", "calculate_stay_pricing",
    "PricingService", "StayQuote"
]
