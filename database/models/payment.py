"""
Payment model: ledger of payments made by each company.
"""

from sqlalchemy import (
    Column, String, Integer, Text, Numeric,
    Date, ForeignKey, Index
)
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func

from ..base import BaseModel


class Payment(BaseModel):
    """
    Individual payment made by a company.
    
    payment_date is fixed once recorded; only amount, method and notes
    can be corrected. The latest payment_date drives billing status.
    """

    __tablename__ = 'payments'

    company_id = Column(Integer, ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)

    payment_date = Column(Date, nullable=False, server_default=func.current_date())
    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(String(30), nullable=True)  # transferencia, tarjeta, efectivo
    notes = Column(Text, nullable=True)

    company = relationship(
        "Company",
        backref=backref("payments", passive_deletes=True),
    )

    __table_args__ = (
        Index('ix_payments_company_id', 'company_id'),
        Index('ix_payments_payment_date', 'payment_date'),
    )
