"""Create payments table

Revision ID: 002_payments
Revises: 001_companies
Create Date: 2026-03-02
"""
from alembic import op
import sqlalchemy as sa

revision = '002_payments'
down_revision = '001_companies'
branch_labels = None
depends_on = None


def upgrade() -> None:
    from sqlalchemy import inspect
    bind = op.get_bind()
    inspector = inspect(bind)
    existing = inspector.get_table_names()

    if 'payments' not in existing:
        op.create_table(
            'payments',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
            sa.Column('payment_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
            sa.Column('amount', sa.Numeric(12, 2), nullable=False),
            sa.Column('method', sa.String(30), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_payments_company_id', 'payments', ['company_id'])
        op.create_index('ix_payments_payment_date', 'payments', ['payment_date'])


def downgrade() -> None:
    op.drop_table('payments')
