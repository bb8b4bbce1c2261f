"""
Rate Band Model

A priced offer for a product under a contract over an inclusive date range.
Pricing blocks (legacy occupancy prices, per-date overrides, markup and tax
config) are kept in JSON columns with ISO date strings as date_rates keys.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, Boolean, JSON, ForeignKey, Index
from ..database import Base


class RateBand(Base):
    __tablename__ = "rate_bands"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String(100), nullable=False)
    contract_id = Column(String(36), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False)

    band_start = Column(Date, nullable=False)
    band_end = Column(Date, nullable=False)
    weekday_mask = Column(Integer, nullable=False, default=127)  # bit 0 = Monday ... bit 6 = Sunday

    currency = Column(String(3), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    pricing_meta = Column(JSON, nullable=False, default=dict)
    date_rates = Column(JSON, nullable=False, default=dict)
    markup = Column(JSON, nullable=False, default=dict)
    tax_config = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_rate_bands_product_contract", "product_id", "contract_id"),
    )

    def __repr__(self):
        return f"<RateBand id={self.id} product={self.product_id} {self.band_start}..{self.band_end}>"
