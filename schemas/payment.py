"""
Payment schemas for the payments API.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PaymentCreate(BaseModel):
    """Record a payment. payment_date defaults to today in the company's timezone."""
    
    company_id: int = Field(..., ge=1)
    payment_date: Optional[date] = None
    amount: float = Field(..., gt=0)
    method: Optional[str] = None  # transferencia, tarjeta, efectivo
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    """
    Correct a payment. The payment date cannot be changed here;
    unknown fields (including payment_date) are rejected.
    """
    
    amount: Optional[float] = Field(None, gt=0)
    method: Optional[str] = None
    notes: Optional[str] = None
    
    model_config = {"extra": "forbid"}


class PaymentResponse(BaseModel):
    id: int
    company_id: int
    payment_date: date
    amount: float
    method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    
    model_config = {"from_attributes": True}


class PaymentListResponse(BaseModel):
    data: List[PaymentResponse]
    total: int
