"""Initial schema - products, reasons, entries and import history

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Products; the code is not unique because deleted rows keep their code
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('product_code', sa.String(length=13), nullable=False),
        sa.Column('product_name', sa.String(length=120), nullable=False),
        sa.Column('regular_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('club_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('unit_type', sa.String(length=2), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('restored_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_products')
    )
    op.create_index('ix_products_product_code', 'products', ['product_code'])
    op.create_index('ix_products_product_name', 'products', ['product_name'])
    op.create_index('ix_products_status', 'products', ['status'])

    # Loss reasons
    op.create_table(
        'reasons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=2), nullable=False),
        sa.Column('description', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_reasons'),
        sa.UniqueConstraint('code', name='uq_reasons_code')
    )

    # Loss entries
    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('product_code_value', sa.String(length=13), nullable=False),
        sa.Column('product_name', sa.String(length=120), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column('linked_reason_id', sa.Integer(), nullable=False),
        sa.Column('entry_date', sa.DateTime(), nullable=False),
        sa.Column('is_synchronized', sa.Boolean(), nullable=False),
        sa.Column('chosen_unit_type', sa.String(length=2), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_entries')
    )
    op.create_index('ix_entries_product_code_value', 'entries', ['product_code_value'])
    op.create_index('ix_entries_linked_reason_id', 'entries', ['linked_reason_id'])
    op.create_index('ix_entries_entry_date', 'entries', ['entry_date'])

    # Import history
    op.create_table(
        'imports',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('import_date', sa.DateTime(), nullable=False),
        sa.Column('items_inserted', sa.Integer(), nullable=False),
        sa.Column('items_updated', sa.Integer(), nullable=False),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_imports')
    )


def downgrade() -> None:
    op.drop_table('imports')
    op.drop_index('ix_entries_entry_date', table_name='entries')
    op.drop_index('ix_entries_linked_reason_id', table_name='entries')
    op.drop_index('ix_entries_product_code_value', table_name='entries')
    op.drop_table('entries')
    op.drop_table('reasons')
    op.drop_index('ix_products_status', table_name='products')
    op.drop_index('ix_products_product_name', table_name='products')
    op.drop_index('ix_products_product_code', table_name='products')
    op.drop_table('products')
