"""
Price Calculator

Computes the full price of a stay for one rate band, one contract, one
sales channel and one occupancy.

Pricing Formula:
1. nightly_net = base_rate + board_cost + additional_person_charge
   - date_rates[night] wins when present (single_double + extra adults)
   - otherwise the legacy occupancy table with an ordered fallback chain
2. room_subtotal_net = sum(nightly_net)
3. commission = room_subtotal_net * commission_pct / 100
4. room_tax / resort_fee / resort_fee_tax from band tax_config, else contract plugin_defaults
5. supplier_vat = after_commission * supplier_vat_pct / 100
6. taxes and resort fees go to fees_included only when the company pays incidentals
7. contract fees split by who collects them
8. cost_total = after_commission + supplier_vat + fees_included
9. markup_amount = cost_total * band markup for the channel / 100
10. total_due_now = cost_total + markup_amount

All amounts are exact Decimals. Rounding is left to the presentation layer.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from ..schemas.contract import Contract, ContractFee, FeeMode, IncidentalsHandling
from ..schemas.pricing import Pax, SalesChannel
from ..schemas.rate_band import DateRate, RateBand

ZERO = Decimal("0")
HUNDRED = Decimal("100")

DATE_SPECIFIC = "date_specific"
LEGACY = "legacy"

# Always starts at the natural key and expands outward
OCCUPANCY_FALLBACK = {
    "quad": ("quad", "triple", "double", "single"),
    "triple": ("triple", "quad", "double", "single"),
    "double": ("double", "triple", "quad", "single"),
    "single": ("single", "double", "triple", "quad"),
}


class PricingError(Exception):
    """Base class for configuration problems that make a stay unpriceable"""
    kind = "pricing_error"


class NoPricingAvailable(PricingError):
    kind = "no_pricing_available"

    def __init__(self, night: date, adults: int):
        self.date = night
        self.adults = adults
        super().__init__(
            f"No pricing available for {adults} adults on {night.isoformat()}. "
            f"Configure at least one occupancy price for this rate band."
        )


class OccupancyExceeded(PricingError):
    kind = "occupancy_exceeded"

    def __init__(self, night: date, adults: int, max_occupancy: int):
        self.date = night
        self.adults = adults
        self.max_occupancy = max_occupancy
        super().__init__(
            f"Maximum occupancy exceeded on {night.isoformat()}. "
            f"Max: {max_occupancy}, Requested: {adults}"
        )


@dataclass
class NightlyRate:
    """Net cost of a single night"""
    date: date
    occupancy_key: str  # "date_specific" or the legacy key actually priced
    base_rate: Decimal
    board_cost: Decimal
    additional_person_charge: Decimal
    net_rate: Decimal


@dataclass
class FeeLine:
    name: str
    amount: Decimal
    included: bool  # False when payable at the property


@dataclass
class PricingBreakdown:
    dates: List[date]
    occupancy_key: str
    nightly_breakdown: List[NightlyRate]
    room_tax: Decimal = ZERO
    resort_fee: Decimal = ZERO
    resort_fee_tax: Decimal = ZERO
    resort_fee_inclusions: Optional[str] = None
    additional_person_charges: Decimal = ZERO
    fees: List[FeeLine] = field(default_factory=list)


@dataclass
class PricingResult:
    nightly: List[Decimal]
    room_subtotal_net: Decimal
    supplier_commission: Decimal
    after_commission: Decimal
    supplier_vat: Decimal
    fees_included: Decimal
    fees_pay_at_property: Decimal
    cost_total: Decimal
    markup_pct: Decimal
    markup_amount: Decimal
    total_due_now: Decimal
    currency: Optional[str]
    breakdown: PricingBreakdown


def requested_occupancy_key(adults: int) -> str:
    if adults >= 4:
        return "quad"
    if adults == 3:
        return "triple"
    if adults == 2:
        return "double"
    return "single"


def _extra_adults(adults: int) -> int:
    return adults - 2 if adults > 2 else 0


def _price_date_specific_night(night: date, date_rate: DateRate, adults: int) -> NightlyRate:
    base_rate = date_rate.single_double
    additional = ZERO
    if _extra_adults(adults) and date_rate.additional_person:
        additional = _extra_adults(adults) * date_rate.additional_person

    if date_rate.max_occupancy and adults > date_rate.max_occupancy:
        raise OccupancyExceeded(night, adults, date_rate.max_occupancy)

    return NightlyRate(
        date=night,
        occupancy_key=DATE_SPECIFIC,
        base_rate=base_rate,
        board_cost=ZERO,
        additional_person_charge=additional,
        net_rate=base_rate + additional,
    )


def _price_legacy_night(night: date, band: RateBand, contract: Contract, adults: int) -> NightlyRate:
    prices = band.pricing_meta.prices

    occupancy_key = None
    base_rate = None
    for key in OCCUPANCY_FALLBACK[requested_occupancy_key(adults)]:
        price = getattr(prices, key)
        if price:
            occupancy_key, base_rate = key, price
            break

    if base_rate is None:
        raise NoPricingAvailable(night, adults)

    # Board is a flat addition per night, not multiplied by pax
    board = band.pricing_meta.board
    board_cost = board.included_cost_pppn if board else ZERO

    additional = ZERO
    defaults = contract.plugin_defaults
    if _extra_adults(adults) and defaults and defaults.additional_person_charge:
        additional = _extra_adults(adults) * defaults.additional_person_charge

    return NightlyRate(
        date=night,
        occupancy_key=occupancy_key,
        base_rate=base_rate,
        board_cost=board_cost,
        additional_person_charge=additional,
        net_rate=base_rate + board_cost + additional,
    )


def _tax_setting(band: RateBand, contract: Contract, name: str, default=None):
    """Band tax_config wins, then contract plugin_defaults, then the default"""
    if band.tax_config is not None:
        value = getattr(band.tax_config, name)
        if value is not None:
            return value
    if contract.plugin_defaults is not None:
        value = getattr(contract.plugin_defaults, name)
        if value is not None:
            return value
    return default


def _fee_amount(fee: ContractFee, adults: int, nights: int, room_subtotal_net: Decimal) -> Decimal:
    amount = fee.amount or ZERO
    if fee.mode == FeeMode.PER_PERSON_PER_NIGHT:
        return adults * nights * amount
    if fee.mode == FeeMode.PER_ROOM_PER_NIGHT:
        return nights * amount
    if fee.mode == FeeMode.PERCENT_OF_RATE:
        rate_pct = fee.rate_pct if fee.rate_pct is not None else amount
        return room_subtotal_net * rate_pct / HUNDRED
    return ZERO


def price_stay(
    band: RateBand,
    contract: Contract,
    channel: SalesChannel,
    dates: Sequence[date],
    pax: Pax,
    markup_pct_override: Optional[Decimal] = None,
) -> PricingResult:
    """
    Price a stay against a single rate band.

    Args:
        band: Rate band supplying nightly prices, tax config and markup
        contract: Contract supplying commission, VAT, fees and hotel defaults
        channel: b2c or b2b, selects the band markup
        dates: Nightly stay dates, checkout excluded
        pax: Occupancy; only the adult count drives the price
        markup_pct_override: Per-booking markup set by the caller

    Raises:
        NoPricingAvailable: no non-zero occupancy price for some night
        OccupancyExceeded: a date override caps occupancy below the adult count
    """
    if not dates:
        raise ValueError("A stay needs at least one night")

    adults = pax.adults
    nights_count = len(dates)

    # Step 1: Nightly net rates
    nightly_breakdown = []
    for night in dates:
        date_rate = band.date_rates.get(night)
        if date_rate is not None:
            nightly_breakdown.append(_price_date_specific_night(night, date_rate, adults))
        else:
            nightly_breakdown.append(_price_legacy_night(night, band, contract, adults))

    nightly = [n.net_rate for n in nightly_breakdown]

    # Step 2-3: Subtotal and commission
    room_subtotal_net = sum(nightly, ZERO)
    commission = room_subtotal_net * contract.economics.commission_pct / HUNDRED
    after_commission = room_subtotal_net - commission

    # Step 4: Room tax and resort fee
    room_tax_rate = _tax_setting(band, contract, "room_tax_rate", ZERO)
    resort_fee_daily = _tax_setting(band, contract, "resort_fee_daily", ZERO)

    room_tax = ZERO
    if room_tax_rate > 0:
        room_tax = room_subtotal_net * room_tax_rate / HUNDRED

    resort_fee = ZERO
    resort_fee_tax = ZERO
    if resort_fee_daily > 0:
        resort_fee = resort_fee_daily * nights_count
        if _tax_setting(band, contract, "resort_fee_taxable", False) and room_tax_rate > 0:
            resort_fee_tax = resort_fee * room_tax_rate / HUNDRED

    # Step 5: Supplier VAT, independent of room tax
    supplier_vat = after_commission * contract.economics.supplier_vat_pct / HUNDRED

    # Step 6: Taxes and resort fees
    fees_included = ZERO
    fees_pay_at_property = ZERO
    incidentals = room_tax + resort_fee + resort_fee_tax
    defaults = contract.plugin_defaults
    if defaults and defaults.incidentals_handling == IncidentalsHandling.COMPANY_PAYS:
        fees_included += incidentals
    else:
        fees_pay_at_property += incidentals

    # Step 7: Contract fees
    fee_lines = []
    for fee in contract.economics.fees:
        amount = _fee_amount(fee, adults, nights_count, room_subtotal_net)
        if fee.collected_by_us:
            fees_included += amount
        else:
            fees_pay_at_property += amount
        fee_lines.append(FeeLine(name=fee.name, amount=amount, included=fee.collected_by_us))

    # Step 8-10: Cost, markup, total
    cost_total = after_commission + supplier_vat + fees_included

    if markup_pct_override is not None:
        markup_pct = Decimal(markup_pct_override)
    elif channel == SalesChannel.B2C:
        markup_pct = band.markup.b2c_pct
    else:
        markup_pct = band.markup.b2b_pct
    markup_amount = cost_total * markup_pct / HUNDRED

    total_due_now = cost_total + markup_amount

    breakdown = PricingBreakdown(
        dates=list(dates),
        occupancy_key=DATE_SPECIFIC if band.date_rates else LEGACY,
        nightly_breakdown=nightly_breakdown,
        room_tax=room_tax,
        resort_fee=resort_fee,
        resort_fee_tax=resort_fee_tax,
        resort_fee_inclusions=_tax_setting(band, contract, "resort_fee_inclusions"),
        additional_person_charges=sum((n.additional_person_charge for n in nightly_breakdown), ZERO),
        fees=fee_lines,
    )

    return PricingResult(
        nightly=nightly,
        room_subtotal_net=room_subtotal_net,
        supplier_commission=commission,
        after_commission=after_commission,
        supplier_vat=supplier_vat,
        fees_included=fees_included,
        fees_pay_at_property=fees_pay_at_property,
        cost_total=cost_total,
        markup_pct=markup_pct,
        markup_amount=markup_amount,
        total_due_now=total_due_now,
        currency=band.currency or contract.currency,
        breakdown=breakdown,
    )
