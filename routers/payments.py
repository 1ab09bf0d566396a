"""
Payment ledger router.
Endpoint: /api/v1/payments/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.payment import (
    PaymentCreate, PaymentUpdate, PaymentResponse, PaymentListResponse,
)
from services.payment import PaymentService

router = APIRouter()


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    search: Optional[str] = None,
    company_id: Optional[int] = Query(None, ge=1),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Payment history, newest first."""
    service = PaymentService(db)
    payments, total = service.list_payments(search, company_id, limit, offset)
    return PaymentListResponse(
        data=[PaymentResponse.model_validate(p) for p in payments],
        total=total,
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
):
    service = PaymentService(db)
    payment = service.get_payment(payment_id)
    if not payment:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Pago no encontrado.")
    return PaymentResponse.model_validate(payment)


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_payment(
    body: PaymentCreate,
    db: Session = Depends(get_db),
):
    """Record a new payment for a company."""
    service = PaymentService(db)
    ok, msg, payment = service.add_payment(
        company_id=body.company_id,
        amount=body.amount,
        payment_date=body.payment_date,
        method=body.method,
        notes=body.notes,
    )
    if not ok:
        raise HTTPException(status.HTTP_404_NOT_FOUND, msg)
    return {"success": True, "message": msg, "payment": PaymentResponse.model_validate(payment)}


@router.put("/{payment_id}")
async def update_payment(
    payment_id: int,
    body: PaymentUpdate,
    db: Session = Depends(get_db),
):
    """Correct amount, method or notes of a payment."""
    service = PaymentService(db)
    if not service.get_payment(payment_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Pago no encontrado.")

    ok, msg, payment = service.update_payment(payment_id, **body.model_dump(exclude_unset=True))
    if not ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, msg)
    return {"success": True, "message": msg, "payment": PaymentResponse.model_validate(payment)}


@router.delete("/{payment_id}")
async def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
):
    """Delete a payment record."""
    service = PaymentService(db)
    ok, msg, payment = service.delete_payment(payment_id)
    if not ok:
        raise HTTPException(status.HTTP_404_NOT_FOUND, msg)
    return {"success": True, "message": msg, "payment": PaymentResponse.model_validate(payment)}
