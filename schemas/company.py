"""
Company schemas for the companies API.
"""

import re
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from core.billing import BillingFrequency


_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_COUNTRY_RE = re.compile(r'^[A-Z]{2}$')


def _normalize_country(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().upper()
    if not v:
        return None
    if not _COUNTRY_RE.match(v):
        raise ValueError("El país debe ser un código ISO de 2 letras (ej: AR)")
    return v


def _normalize_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().lower()
    if not _EMAIL_RE.match(v):
        raise ValueError("Email inválido")
    return v


class CompanyCreate(BaseModel):
    """Create new company."""
    
    legal_name: str = Field(..., min_length=1)
    trade_name: Optional[str] = None
    tax_id: str = Field(..., min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country_code: Optional[str] = None
    phone: str = Field(..., min_length=1)
    email: str
    website: Optional[str] = None
    sector: Optional[str] = None
    billing_frequency: BillingFrequency = BillingFrequency.monthly
    is_active: bool = True
    
    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_country(v)
    
    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)
    
    @field_validator("tax_id")
    @classmethod
    def validate_tax_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("CUIT es obligatorio")
        return v


class CompanyUpdate(BaseModel):
    """Partial company update. Only provided fields are written."""
    
    legal_name: Optional[str] = Field(None, min_length=1)
    trade_name: Optional[str] = None
    tax_id: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country_code: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    website: Optional[str] = None
    sector: Optional[str] = None
    billing_frequency: Optional[BillingFrequency] = None
    is_active: Optional[bool] = None
    
    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_country(v)
    
    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_email(v)
    
    @field_validator("tax_id")
    @classmethod
    def validate_tax_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("CUIT es obligatorio")
        return v


class CompanyResponse(BaseModel):
    """Company with its computed billing status."""
    
    id: int
    legal_name: str
    trade_name: Optional[str] = None
    tax_id: str
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country_code: Optional[str] = None
    phone: str
    email: str
    website: Optional[str] = None
    sector: Optional[str] = None
    registered_on: Optional[date] = None
    billing_frequency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    
    # Billing status (computed on read, never stored)
    last_payment_date: Optional[date] = None
    next_payment_date: Optional[date] = None
    is_blocked: bool = True
    
    model_config = {"from_attributes": True}


class CompanyListResponse(BaseModel):
    """List of companies response."""
    
    data: List[CompanyResponse]
    total: int


class ExpiringCompany(BaseModel):
    """Company whose payment is overdue or due soon."""
    
    company_id: int
    legal_name: str
    trade_name: Optional[str] = None
    billing_frequency: str
    last_payment_date: Optional[date] = None
    next_payment_date: Optional[date] = None
    days_left: Optional[int] = None
    is_blocked: bool
    is_urgent: bool


class ExpiringCompanyListResponse(BaseModel):
    data: List[ExpiringCompany]
    count: int


class CompanyPublicInfo(BaseModel):
    """
    Minimal company info for login page.
    Only shows names and payment state - no sensitive data.
    """
    
    id: int
    legal_name: str
    trade_name: Optional[str] = None
    payment_required: bool = False
    payment_message: Optional[str] = None
