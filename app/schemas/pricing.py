"""
Pricing Schemas

Pydantic models for pricing API requests and responses.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .contract import Contract
from .rate_band import RateBand


class SalesChannel(str, Enum):
    B2C = "b2c"
    B2B = "b2b"


class Pax(BaseModel):
    """Occupancy of one room"""
    adults: int = Field(..., ge=1, le=20)
    children: List[int] = Field(default_factory=list, description="Child ages")

    @field_validator('children')
    @classmethod
    def validate_children(cls, v):
        for age in v:
            if age < 0 or age > 17:
                raise ValueError("child ages must be between 0 and 17")
        return v


class StayDatesRequest(BaseModel):
    """
    A stay is given either as explicit nightly dates or as check_in/check_out.
    The checkout date is never a night.
    """
    dates: Optional[List[date]] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None

    @model_validator(mode='after')
    def validate_stay(self):
        if self.dates:
            for previous, current in zip(self.dates, self.dates[1:]):
                if current <= previous:
                    raise ValueError('dates must be in ascending order without repeats')
            return self
        if self.check_in is None or self.check_out is None:
            raise ValueError('provide either dates or check_in and check_out')
        if self.check_out <= self.check_in:
            raise ValueError('check_out must be after check_in')
        return self

    def nights(self) -> List[date]:
        from ..services.stay_dates import nightly_dates

        if self.dates:
            return list(self.dates)
        return nightly_dates(self.check_in, self.check_out)


class RateBandResolveRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    contract_id: str = Field(..., min_length=1)
    date: date


class StayPricingRequest(StayDatesRequest):
    """Price a stay from the stored rate bands of a product"""
    product_id: str = Field(..., min_length=1)
    contract_id: str = Field(..., min_length=1)
    channel: SalesChannel = SalesChannel.B2C
    pax: Pax
    markup_pct_override: Optional[Decimal] = Field(None, ge=0, description="Per-booking markup")


class SimulationRateBand(RateBand):
    id: str = "simulation"


class SimulationContract(Contract):
    id: str = "simulation"


class SimulationRequest(StayDatesRequest):
    """Price a stay against an unsaved band and contract"""
    band: SimulationRateBand
    contract: SimulationContract
    channel: SalesChannel = SalesChannel.B2C
    pax: Pax
    markup_pct_override: Optional[Decimal] = Field(None, ge=0)


class NightlyRateResponse(BaseModel):
    date: date
    occupancy_key: str
    base_rate: Decimal
    board_cost: Decimal
    additional_person_charge: Decimal
    net_rate: Decimal


class FeeLineResponse(BaseModel):
    name: str
    amount: Decimal
    included: bool


class PricingBreakdownResponse(BaseModel):
    dates: List[date]
    occupancy_key: str
    nightly_breakdown: List[NightlyRateResponse]
    room_tax: Decimal
    resort_fee: Decimal
    resort_fee_tax: Decimal
    resort_fee_inclusions: Optional[str] = None
    additional_person_charges: Decimal
    fees: List[FeeLineResponse]


class PricingResultResponse(BaseModel):
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
    currency: Optional[str] = None
    breakdown: PricingBreakdownResponse


class StayPricingResponse(BaseModel):
    """bookable is False when some night has no applicable rate band"""
    bookable: bool
    product_id: str
    contract_id: str
    channel: SalesChannel
    num_nights: int
    rate_band_id: Optional[str] = None
    pricing: Optional[PricingResultResponse] = None
