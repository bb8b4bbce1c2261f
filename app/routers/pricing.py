"""
Pricing API Router

Endpoints for resolving rate bands and pricing stays:
- /resolve   which stored band applies to a product on a date
- /stay      price a stay from the stored bands of a product
- /simulate  price a stay against an unsaved band and contract
"""

import time
from decimal import Decimal, ROUND_HALF_UP
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..schemas.pricing import (
    RateBandResolveRequest,
    StayPricingRequest,
    StayPricingResponse,
    SimulationRequest,
    PricingResultResponse,
    PricingBreakdownResponse,
    NightlyRateResponse,
    FeeLineResponse
)
from ..schemas.rate_band import RateBandResponse
from ..services.price_calculator import PricingError, PricingResult, price_stay
from ..services.pricing_service import PricingService
from ..utils.logging_config import get_logger
from ..utils.rate_limiter import limiter

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])
logger = get_logger(__name__)


# ==================
# Rate Resolution
# ==================

@router.post("/resolve", response_model=RateBandResponse)
async def resolve_rate_band(
    resolve_request: RateBandResolveRequest,
    db: Session = Depends(get_db)
):
    """Return the rate band that prices the product on the given date"""
    service = PricingService(db)

    band = service.resolve_band(
        product_id=resolve_request.product_id,
        contract_id=resolve_request.contract_id,
        check_date=resolve_request.date
    )

    if not band:
        raise HTTPException(status_code=404, detail="No applicable rate band for this date")

    return band


# ==================
# Price Calculations
# ==================

@router.post("/stay", response_model=StayPricingResponse)
@limiter.limit(settings.pricing_rate_limit)
async def price_stay_from_stored_bands(
    request: Request,
    quote: StayPricingRequest,
    db: Session = Depends(get_db)
):
    """
    Price a stay from stored rate bands.

    Returns bookable=false (no pricing) when any night lacks an applicable band.
    """
    service = PricingService(db)

    contract = service.get_contract(quote.contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    nights = quote.nights()
    start = time.perf_counter()

    try:
        stay_quote = service.price_stored_stay(
            contract=contract,
            product_id=quote.product_id,
            channel=quote.channel,
            nights=nights,
            pax=quote.pax,
            markup_pct_override=quote.markup_pct_override
        )
    except PricingError as e:
        logger.quote_rejected(quote.product_id, quote.contract_id, e.kind, str(e))
        raise

    if stay_quote is None:
        logger.quote_not_bookable(quote.product_id, quote.contract_id, len(nights))
        return StayPricingResponse(
            bookable=False,
            product_id=quote.product_id,
            contract_id=quote.contract_id,
            channel=quote.channel,
            num_nights=len(nights)
        )

    result = stay_quote.result

    logger.quote_priced(
        quote.product_id,
        quote.contract_id,
        quote.channel.value,
        len(nights),
        result.total_due_now,
        duration_ms=round((time.perf_counter() - start) * 1000, 2)
    )

    return StayPricingResponse(
        bookable=True,
        product_id=quote.product_id,
        contract_id=quote.contract_id,
        channel=quote.channel,
        num_nights=len(nights),
        rate_band_id=stay_quote.band.id,
        pricing=_to_response(result)
    )


@router.post("/simulate", response_model=PricingResultResponse)
@limiter.limit(settings.pricing_rate_limit)
async def simulate_pricing(
    request: Request,
    simulation: SimulationRequest,
):
    """
    Pricing simulator.

    Prices the given band and contract directly, without date or weekday
    matching, so operators can try a configuration before saving it.
    """
    try:
        result = price_stay(
            band=simulation.band,
            contract=simulation.contract,
            channel=simulation.channel,
            dates=simulation.nights(),
            pax=simulation.pax,
            markup_pct_override=simulation.markup_pct_override
        )
    except PricingError as e:
        logger.quote_rejected(simulation.band.product_id, simulation.contract.id, e.kind, str(e))
        raise

    return _to_response(result)


# ==================
# Helpers
# ==================

def _money(value: Decimal) -> Decimal:
    """Round an amount for display"""
    exponent = Decimal(1).scaleb(-settings.price_decimal_places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def _to_response(result: PricingResult) -> PricingResultResponse:
    breakdown = result.breakdown
    return PricingResultResponse(
        nightly=[_money(n) for n in result.nightly],
        room_subtotal_net=_money(result.room_subtotal_net),
        supplier_commission=_money(result.supplier_commission),
        after_commission=_money(result.after_commission),
        supplier_vat=_money(result.supplier_vat),
        fees_included=_money(result.fees_included),
        fees_pay_at_property=_money(result.fees_pay_at_property),
        cost_total=_money(result.cost_total),
        markup_pct=result.markup_pct,
        markup_amount=_money(result.markup_amount),
        total_due_now=_money(result.total_due_now),
        currency=result.currency,
        breakdown=PricingBreakdownResponse(
            dates=breakdown.dates,
            occupancy_key=breakdown.occupancy_key,
            nightly_breakdown=[
                NightlyRateResponse(
                    date=n.date,
                    occupancy_key=n.occupancy_key,
                    base_rate=_money(n.base_rate),
                    board_cost=_money(n.board_cost),
                    additional_person_charge=_money(n.additional_person_charge),
                    net_rate=_money(n.net_rate)
                )
                for n in breakdown.nightly_breakdown
            ],
            room_tax=_money(breakdown.room_tax),
            resort_fee=_money(breakdown.resort_fee),
            resort_fee_tax=_money(breakdown.resort_fee_tax),
            resort_fee_inclusions=breakdown.resort_fee_inclusions,
            additional_person_charges=_money(breakdown.additional_person_charges),
            fees=[
                FeeLineResponse(name=f.name, amount=_money(f.amount), included=f.included)
                for f in breakdown.fees
            ]
        )
    )
