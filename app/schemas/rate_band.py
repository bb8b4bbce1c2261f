"""
Rate Band Schemas

A rate band is a priced offer for a product under a contract, valid over an
inclusive date range and a subset of weekdays. Prices come either from the
legacy occupancy table (pricing_meta.prices) or from per-date overrides
(date_rates), which win for any date they list.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional
from pydantic import BaseModel, Field, model_validator

# Bit 0 = Monday ... bit 6 = Sunday
ALL_WEEKDAYS_MASK = 127
WEEKDAYS_ONLY_MASK = 31


class OccupancyPrices(BaseModel):
    """Nightly room price keyed by occupancy"""
    single: Optional[Decimal] = Field(None, ge=0)
    double: Optional[Decimal] = Field(None, ge=0)
    triple: Optional[Decimal] = Field(None, ge=0)
    quad: Optional[Decimal] = Field(None, ge=0)


class BoardConfig(BaseModel):
    included: Optional[str] = Field(None, max_length=10, description="Board basis, e.g. RO, BB, HB")
    included_cost_pppn: Decimal = Field(default=Decimal("0"), ge=0)


class PricingMeta(BaseModel):
    strategy: str = "per_occupancy"
    prices: OccupancyPrices = Field(default_factory=OccupancyPrices)
    board: Optional[BoardConfig] = None
    min_stay: Optional[int] = Field(None, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    pool_id: Optional[str] = None


class DateRate(BaseModel):
    """Override for a single night"""
    single_double: Decimal = Field(..., ge=0)
    additional_person: Optional[Decimal] = Field(None, ge=0)
    max_occupancy: Optional[int] = Field(None, ge=1)
    rate_includes: Optional[str] = Field(None, max_length=500)


class Markup(BaseModel):
    b2c_pct: Decimal = Field(default=Decimal("0"), ge=0)
    b2b_pct: Decimal = Field(default=Decimal("0"), ge=0)


class TaxConfig(BaseModel):
    room_tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    resort_fee_daily: Optional[Decimal] = Field(None, ge=0)
    resort_fee_taxable: Optional[bool] = None
    resort_fee_inclusions: Optional[str] = Field(None, max_length=500)


class RateBandBase(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=100)
    contract_id: str = Field(..., min_length=1, max_length=100)
    band_start: date
    band_end: date
    weekday_mask: int = Field(default=ALL_WEEKDAYS_MASK, ge=0, le=ALL_WEEKDAYS_MASK)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    active: bool = True
    pricing_meta: PricingMeta = Field(default_factory=PricingMeta)
    date_rates: Dict[date, DateRate] = Field(default_factory=dict)
    markup: Markup = Field(default_factory=Markup)
    tax_config: Optional[TaxConfig] = None

    @model_validator(mode='after')
    def validate_band_dates(self):
        """band_end must come after band_start"""
        if self.band_end <= self.band_start:
            raise ValueError('band_end must be after band_start')
        return self


class RateBandCreate(RateBandBase):
    """Schema for creating a rate band"""
    pass


class RateBandUpdate(BaseModel):
    """Schema for updating a rate band"""
    band_start: Optional[date] = None
    band_end: Optional[date] = None
    weekday_mask: Optional[int] = Field(None, ge=0, le=ALL_WEEKDAYS_MASK)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    active: Optional[bool] = None
    pricing_meta: Optional[PricingMeta] = None
    date_rates: Optional[Dict[date, DateRate]] = None
    markup: Optional[Markup] = None
    tax_config: Optional[TaxConfig] = None


class RateBand(RateBandBase):
    """Rate band record as consumed by the pricing engine"""
    id: str

    class Config:
        from_attributes = True


class RateBandResponse(RateBand):
    """Schema for rate band response"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
