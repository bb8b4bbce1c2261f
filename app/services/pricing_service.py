"""
Pricing Service

Loads contracts and rate bands from the database and hands them to the pure
pricing core (rate_resolver / price_calculator). The core never touches the
session; everything it needs is passed in as plain records.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..models.contract import Contract
from ..models.rate_band import RateBand
from ..schemas.contract import Contract as ContractRecord
from ..schemas.pricing import Pax, SalesChannel
from ..schemas.rate_band import RateBand as RateBandRecord
from .price_calculator import PricingResult, price_stay
from .rate_resolver import find_applicable_rate_band, resolve_stay_band


@dataclass
class StayQuote:
    """A priced stay and the rate band that priced it"""
    band: RateBandRecord
    result: PricingResult


class PricingService:
    """
    Database-facing entry point for pricing.

    Usage:
        service = PricingService(db)
        contract = service.get_contract(contract_id)
        quote = service.price_stored_stay(contract, product_id, "b2c", nights, pax)
    """

    def __init__(self, db: Session):
        self.db = db

    def get_contract(self, contract_id: str) -> Optional[ContractRecord]:
        """Get a contract as a pricing record"""
        contract = self.db.query(Contract).filter(Contract.id == contract_id).first()
        if not contract:
            return None
        return ContractRecord.model_validate(contract)

    def get_rate_bands(self, product_id: str, contract_id: str) -> List[RateBandRecord]:
        """
        Candidate bands for a product under a contract, in creation order.

        Inactive bands are included; the resolver filters them so that the
        first-match tie-break sees the same order the operator created.
        """
        bands = self.db.query(RateBand).filter(
            RateBand.product_id == product_id,
            RateBand.contract_id == contract_id
        ).order_by(RateBand.created_at, RateBand.id).all()
        return [RateBandRecord.model_validate(band) for band in bands]

    def resolve_band(self, product_id: str, contract_id: str, check_date: date) -> Optional[RateBandRecord]:
        bands = self.get_rate_bands(product_id, contract_id)
        return find_applicable_rate_band(check_date, bands, product_id, contract_id)

    def price_stored_stay(
        self,
        contract: ContractRecord,
        product_id: str,
        channel: SalesChannel,
        nights: Sequence[date],
        pax: Pax,
        markup_pct_override: Optional[Decimal] = None
    ) -> Optional[StayQuote]:
        """
        Price a stay from stored bands.

        Returns None when some night has no applicable band, otherwise the
        band that priced the stay together with the result.
        Raises PricingError subclasses on misconfigured bands.
        """
        bands = self.get_rate_bands(product_id, contract.id)
        band = resolve_stay_band(nights, bands, product_id, contract.id)
        if band is None:
            return None

        result = price_stay(
            band=band,
            contract=contract,
            channel=channel,
            dates=nights,
            pax=pax,
            markup_pct_override=markup_pct_override
        )
        return StayQuote(band=band, result=result)
