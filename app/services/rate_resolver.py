"""
Rate Resolver

Selects the rate band that applies to a product under a contract on a given
night, and aggregates those selections into a priced stay.

A band applies to a night when it is active, belongs to the product and
contract, covers the night (inclusive range) and has the night's weekday bit
set. When several bands apply, the one with the shortest validity span wins;
on equal spans the first candidate wins.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from ..schemas.contract import Contract
from ..schemas.pricing import Pax, SalesChannel
from ..schemas.rate_band import RateBand
from .price_calculator import PricingResult, price_stay
from .stay_dates import band_span_days, is_date_in_rate_band, is_weekday_allowed


def find_applicable_rate_band(
    check_date: date,
    rate_bands: Iterable[RateBand],
    product_id: str,
    contract_id: str
) -> Optional[RateBand]:
    """
    Find the most specific rate band for a night.

    Returns:
        The matching band with the shortest span, or None when no band
        covers the night.
    """
    best = None
    for band in rate_bands:
        if band.product_id != product_id or band.contract_id != contract_id:
            continue
        if not band.active:
            continue
        if not is_date_in_rate_band(check_date, band):
            continue
        if not is_weekday_allowed(check_date, band.weekday_mask):
            continue

        if best is None or band_span_days(band) < band_span_days(best):
            best = band

    return best


def resolve_nightly_bands(
    dates: Sequence[date],
    rate_bands: Sequence[RateBand],
    product_id: str,
    contract_id: str
) -> List[Optional[RateBand]]:
    """One entry per night, None where nothing applies"""
    return [
        find_applicable_rate_band(night, rate_bands, product_id, contract_id)
        for night in dates
    ]


def resolve_stay_band(
    dates: Sequence[date],
    rate_bands: Sequence[RateBand],
    product_id: str,
    contract_id: str
) -> Optional[RateBand]:
    """
    The band that prices a whole stay: the first night's band, provided
    every night resolves to some band. None otherwise.
    """
    nightly_bands = resolve_nightly_bands(dates, rate_bands, product_id, contract_id)

    if not nightly_bands or any(band is None for band in nightly_bands):
        return None

    # TODO: price each night against its own band once mixed-band stays are supported
    return nightly_bands[0]


def calculate_stay_pricing(
    rate_bands: Sequence[RateBand],
    contract: Contract,
    channel: SalesChannel,
    dates: Sequence[date],
    pax: Pax,
    product_id: str,
    markup_pct_override: Optional[Decimal] = None,
) -> Optional[PricingResult]:
    """
    Price a multi-night stay from a pool of candidate bands.

    A stay is all-or-nothing: if any night has no applicable band the result
    is None and no partial price is produced. The band resolved for the first
    night prices the whole stay.

    Raises the same PricingError subclasses as price_stay.
    """
    primary_band = resolve_stay_band(dates, rate_bands, product_id, contract.id)
    if primary_band is None:
        return None

    return price_stay(
        band=primary_band,
        contract=contract,
        channel=channel,
        dates=dates,
        pax=pax,
        markup_pct_override=markup_pct_override,
    )
