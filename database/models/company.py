"""
Company model: each company is a tenant of the warehouse ERP.

Billing-relevant columns: billing_frequency, country_code (timezone for
day boundaries) and is_active. Billing status itself is never stored;
it is computed on every read from the latest payment.
"""

from sqlalchemy import (
    Column, String, Boolean, Text, Date, Index
)
from sqlalchemy.sql import func

from ..base import BaseModel


class Company(BaseModel):
    """
    Company (tenant) record.
    
    The base company (id = 1) owns the system: it is always billed
    'permanent' and can never be deactivated.
    """
    
    __tablename__ = 'companies'
    
    # Identity
    legal_name = Column(String(300), nullable=False)  # Razón social
    trade_name = Column(String(300), nullable=True)  # Nombre de fantasía
    tax_id = Column(String(20), unique=True, nullable=False, index=True)  # CUIT
    
    # Location
    address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)
    province = Column(String(120), nullable=True)
    country_code = Column(String(2), nullable=True)  # ISO 3166-1 alpha-2, drives billing timezone
    
    # Contact
    phone = Column(String(40), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    website = Column(String(255), nullable=True)
    sector = Column(String(120), nullable=True)
    
    registered_on = Column(Date, nullable=False, server_default=func.current_date())
    
    # Billing: monthly, yearly, permanent
    billing_frequency = Column(String(20), default='monthly', nullable=False)
    
    # Status
    is_active = Column(Boolean, default=True, nullable=False)
    
    __table_args__ = (
        Index('ix_companies_sector', 'sector'),
        Index('ix_companies_city', 'city'),
        Index('ix_companies_is_active', 'is_active'),
    )
    
    def __repr__(self):
        return f"<Company(id={self.id}, legal_name='{self.legal_name}', tax_id='{self.tax_id}')>"
