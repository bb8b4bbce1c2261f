"""
Contracts API Router

CRUD for supplier contracts consumed by the pricing engine.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.contract import Contract
from ..schemas.contract import ContractCreate, ContractUpdate, ContractResponse, ContractBase
from ..utils.db_helpers import to_column_values
from ..utils.logging_config import get_logger

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])
logger = get_logger(__name__)

JSON_FIELDS = ("economics", "plugin_defaults")


def _get_contract_or_404(db: Session, contract_id: str) -> Contract:
    contract = db.query(Contract).filter(Contract.id == contract_id).first()
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")
    return contract


@router.get("", response_model=List[ContractResponse])
async def list_contracts(
    supplier_id: Optional[str] = Query(None),
    resource_id: Optional[str] = Query(None),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """List contracts, optionally filtered by supplier, resource or status"""
    query = db.query(Contract)
    if supplier_id:
        query = query.filter(Contract.supplier_id == supplier_id)
    if resource_id:
        query = query.filter(Contract.resource_id == resource_id)
    if active is not None:
        query = query.filter(Contract.active == active)
    return query.order_by(Contract.created_at).all()


@router.post("", response_model=ContractResponse, status_code=201)
async def create_contract(
    contract_data: ContractCreate,
    db: Session = Depends(get_db)
):
    """Create a contract"""
    contract = Contract(**to_column_values(contract_data, JSON_FIELDS))
    db.add(contract)
    db.commit()
    db.refresh(contract)

    logger.log_with_context(logging.INFO, "Contract created", entity_type="contract", entity_id=contract.id)
    return contract


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: str,
    db: Session = Depends(get_db)
):
    return _get_contract_or_404(db, contract_id)


@router.put("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: str,
    contract_data: ContractUpdate,
    db: Session = Depends(get_db)
):
    """Update a contract; the merged record must still be valid"""
    contract = _get_contract_or_404(db, contract_id)

    update_data = to_column_values(contract_data, JSON_FIELDS, exclude_unset=True)

    merged = ContractResponse.model_validate(contract).model_dump()
    merged.update(update_data)
    try:
        ContractBase.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])

    for key, value in update_data.items():
        setattr(contract, key, value)

    db.commit()
    db.refresh(contract)
    return contract


@router.delete("/{contract_id}")
async def delete_contract(
    contract_id: str,
    db: Session = Depends(get_db)
):
    """Delete a contract and its rate bands"""
    contract = _get_contract_or_404(db, contract_id)

    from ..models.rate_band import RateBand
    db.query(RateBand).filter(RateBand.contract_id == contract_id).delete()
    db.delete(contract)
    db.commit()

    return {"message": "Contract deleted"}
