"""Create pricing tables

Revision ID: 001_pricing_schema
Revises:
Create Date: 2026-10-19

This migration adds:
- contracts: supplier contracts with economics and hotel plugin defaults
- rate_bands: priced offers per product/contract with JSON pricing blocks
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_pricing_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==================
    # contracts table
    # ==================
    op.create_table(
        'contracts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('supplier_id', sa.String(100), nullable=False),
        sa.Column('resource_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(200), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('tz', sa.String(50), nullable=True),
        sa.Column('valid_from', sa.Date, nullable=False),
        sa.Column('valid_to', sa.Date, nullable=False),
        sa.Column('active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('economics', sa.JSON, nullable=False),
        sa.Column('plugin_defaults', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_contracts_supplier_resource', 'contracts', ['supplier_id', 'resource_id'])

    # ==================
    # rate_bands table
    # ==================
    op.create_table(
        'rate_bands',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('product_id', sa.String(100), nullable=False),
        sa.Column('contract_id', sa.String(36), sa.ForeignKey('contracts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('band_start', sa.Date, nullable=False),
        sa.Column('band_end', sa.Date, nullable=False),
        sa.Column('weekday_mask', sa.Integer, nullable=False, server_default='127'),
        sa.Column('currency', sa.String(3), nullable=True),
        sa.Column('active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('pricing_meta', sa.JSON, nullable=False),
        sa.Column('date_rates', sa.JSON, nullable=False),
        sa.Column('markup', sa.JSON, nullable=False),
        sa.Column('tax_config', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_rate_bands_product_contract', 'rate_bands', ['product_id', 'contract_id'])


def downgrade() -> None:
    op.drop_index('ix_rate_bands_product_contract', 'rate_bands')
    op.drop_table('rate_bands')
    op.drop_index('ix_contracts_supplier_resource', 'contracts')
    op.drop_table('contracts')
