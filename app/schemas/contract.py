"""
Contract Schemas

Commercial terms between the operator and a supplier for a resource:
- Economics: commission, supplier VAT and the contract fee list
- Plugin defaults: hotel fallbacks for room tax, resort fee and extra persons
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from ..config import settings


class FeeMode(str, Enum):
    PER_PERSON_PER_NIGHT = "per_person_per_night"
    PER_ROOM_PER_NIGHT = "per_room_per_night"
    PERCENT_OF_RATE = "percent_of_rate"


class FeePayable(str, Enum):
    """Who collects the fee"""
    US = "us"
    PROPERTY = "property"
    GUEST = "guest"  # older contracts; paid by the guest at the property


class IncidentalsHandling(str, Enum):
    COMPANY_PAYS = "company_pays"
    GUEST_PAYS = "guest_pays"


class ContractFee(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(None, ge=0)
    rate_pct: Optional[Decimal] = Field(None, ge=0, description="Percentage used by percent_of_rate fees")
    mode: FeeMode
    payable: FeePayable = FeePayable.US

    @property
    def collected_by_us(self) -> bool:
        return self.payable == FeePayable.US


class ContractEconomics(BaseModel):
    commission_pct: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    supplier_vat_pct: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    fees: List[ContractFee] = Field(default_factory=list)


class PluginDefaults(BaseModel):
    """Hotel defaults used when a rate band does not configure its own values"""
    room_tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    resort_fee_daily: Optional[Decimal] = Field(None, ge=0)
    resort_fee_taxable: Optional[bool] = None
    resort_fee_inclusions: Optional[str] = Field(None, max_length=500)
    additional_person_charge: Optional[Decimal] = Field(None, ge=0)
    incidentals_handling: Optional[IncidentalsHandling] = None

    # Informational hotel terms
    board_types: Optional[List[str]] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    min_stay: Optional[int] = Field(None, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    max_occupancy: Optional[int] = Field(None, ge=1)


class ContractBase(BaseModel):
    supplier_id: str = Field(..., min_length=1, max_length=100)
    resource_id: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=200)
    currency: str = Field(default_factory=lambda: settings.default_currency, min_length=3, max_length=3)
    tz: Optional[str] = Field(None, max_length=50)
    valid_from: date
    valid_to: date
    active: bool = True
    economics: ContractEconomics = Field(default_factory=ContractEconomics)
    plugin_defaults: Optional[PluginDefaults] = None

    @model_validator(mode='after')
    def validate_validity(self):
        """valid_to must come after valid_from"""
        if self.valid_to <= self.valid_from:
            raise ValueError('valid_to must be after valid_from')
        return self


class ContractCreate(ContractBase):
    """Schema for creating a contract"""
    pass


class ContractUpdate(BaseModel):
    """Schema for updating a contract"""
    name: Optional[str] = Field(None, max_length=200)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tz: Optional[str] = Field(None, max_length=50)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    active: Optional[bool] = None
    economics: Optional[ContractEconomics] = None
    plugin_defaults: Optional[PluginDefaults] = None


class Contract(ContractBase):
    """Contract record as consumed by the pricing engine"""
    id: str

    class Config:
        from_attributes = True


class ContractResponse(Contract):
    """Schema for contract response"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
