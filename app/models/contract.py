"""
Contract Model

Stores commercial terms between the operator and a supplier for a resource.
Economics and plugin defaults are nested documents kept in JSON columns.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Boolean, JSON, Index
from ..database import Base


class Contract(Base):
    """
    Supplier contract.

    economics:        {"commission_pct", "supplier_vat_pct", "fees": [...]}
    plugin_defaults:  hotel fallbacks (room_tax_rate, resort_fee_daily,
                      resort_fee_taxable, additional_person_charge,
                      incidentals_handling, ...)
    """
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    supplier_id = Column(String(100), nullable=False)
    resource_id = Column(String(100), nullable=False)
    name = Column(String(200), nullable=True)

    currency = Column(String(3), default="EUR", nullable=False)
    tz = Column(String(50), nullable=True)
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    economics = Column(JSON, nullable=False, default=dict)
    plugin_defaults = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_contracts_supplier_resource", "supplier_id", "resource_id"),
    )

    def __repr__(self):
        return f"<Contract id={self.id} supplier={self.supplier_id} resource={self.resource_id}>"
