"""
Rate Bands API Router

CRUD for the rate bands of a product under a contract.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.contract import Contract
from ..models.rate_band import RateBand
from ..schemas.rate_band import RateBandCreate, RateBandUpdate, RateBandResponse, RateBandBase
from ..utils.db_helpers import to_column_values
from ..utils.logging_config import get_logger

router = APIRouter(prefix="/api/rate-bands", tags=["Rate Bands"])
logger = get_logger(__name__)

JSON_FIELDS = ("pricing_meta", "date_rates", "markup", "tax_config")


def _get_band_or_404(db: Session, band_id: str) -> RateBand:
    band = db.query(RateBand).filter(RateBand.id == band_id).first()
    if not band:
        raise HTTPException(status_code=404, detail="Rate band not found")
    return band


@router.get("", response_model=List[RateBandResponse])
async def list_rate_bands(
    product_id: Optional[str] = Query(None),
    contract_id: Optional[str] = Query(None),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """List rate bands, optionally filtered by product, contract or status"""
    query = db.query(RateBand)
    if product_id:
        query = query.filter(RateBand.product_id == product_id)
    if contract_id:
        query = query.filter(RateBand.contract_id == contract_id)
    if active is not None:
        query = query.filter(RateBand.active == active)
    return query.order_by(RateBand.band_start, RateBand.created_at).all()


@router.post("", response_model=RateBandResponse, status_code=201)
async def create_rate_band(
    band_data: RateBandCreate,
    db: Session = Depends(get_db)
):
    """Create a rate band under an existing contract"""
    contract = db.query(Contract).filter(Contract.id == band_data.contract_id).first()
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    band = RateBand(**to_column_values(band_data, JSON_FIELDS))
    db.add(band)
    db.commit()
    db.refresh(band)

    logger.log_with_context(
        logging.INFO,
        "Rate band created",
        entity_type="rate_band",
        entity_id=band.id,
        product_id=band.product_id,
        contract_id=band.contract_id
    )
    return band


@router.get("/{band_id}", response_model=RateBandResponse)
async def get_rate_band(
    band_id: str,
    db: Session = Depends(get_db)
):
    return _get_band_or_404(db, band_id)


@router.put("/{band_id}", response_model=RateBandResponse)
async def update_rate_band(
    band_id: str,
    band_data: RateBandUpdate,
    db: Session = Depends(get_db)
):
    """Update a rate band; the merged record must still be valid"""
    band = _get_band_or_404(db, band_id)

    update_data = to_column_values(band_data, JSON_FIELDS, exclude_unset=True)

    merged = RateBandResponse.model_validate(band).model_dump()
    merged.update(update_data)
    try:
        RateBandBase.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])

    for key, value in update_data.items():
        setattr(band, key, value)

    db.commit()
    db.refresh(band)
    return band


@router.delete("/{band_id}")
async def delete_rate_band(
    band_id: str,
    db: Session = Depends(get_db)
):
    band = _get_band_or_404(db, band_id)
    db.delete(band)
    db.commit()
    return {"message": "Rate band deleted"}
