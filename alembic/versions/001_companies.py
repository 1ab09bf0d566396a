"""Create companies table

Revision ID: 001_companies
Revises: (none)
Create Date: 2026-03-02
"""
from alembic import op
import sqlalchemy as sa

revision = '001_companies'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    from sqlalchemy import inspect
    bind = op.get_bind()
    inspector = inspect(bind)
    existing = inspector.get_table_names()

    if 'companies' not in existing:
        op.create_table(
            'companies',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('legal_name', sa.String(300), nullable=False),
            sa.Column('trade_name', sa.String(300), nullable=True),
            sa.Column('tax_id', sa.String(20), nullable=False, unique=True, index=True),
            sa.Column('address', sa.Text(), nullable=True),
            sa.Column('city', sa.String(120), nullable=True),
            sa.Column('province', sa.String(120), nullable=True),
            sa.Column('country_code', sa.String(2), nullable=True),
            sa.Column('phone', sa.String(40), nullable=False),
            sa.Column('email', sa.String(255), nullable=False, unique=True),
            sa.Column('website', sa.String(255), nullable=True),
            sa.Column('sector', sa.String(120), nullable=True),
            sa.Column('registered_on', sa.Date(), nullable=False, server_default=sa.func.current_date()),
            sa.Column('billing_frequency', sa.String(20), nullable=False, server_default='monthly'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_companies_sector', 'companies', ['sector'])
        op.create_index('ix_companies_city', 'companies', ['city'])
        op.create_index('ix_companies_is_active', 'companies', ['is_active'])


def downgrade() -> None:
    op.drop_table('companies')
