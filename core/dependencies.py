"""
FastAPI dependencies for company resolution and billing-based access control.
"""

from fastapi import Depends, HTTPException, status, Path
from sqlalchemy.orm import Session

from database import get_db
from database.models import Company
from services.company import CompanyService


PAYMENT_REQUIRED_MESSAGE = "Realice el pago para continuar usando el sistema."


# ==================== COMPANY RESOLUTION ====================

async def resolve_company(
    company_id: int = Path(..., ge=1, description="ID de empresa"),
    db: Session = Depends(get_db)
) -> Company:
    """Resolve an active company from the URL path parameter."""
    company = db.query(Company).filter(
        Company.id == company_id,
        Company.is_active == True
    ).first()
    
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada"
        )
    
    return company


# ==================== BILLING GATE ====================

async def require_billing_current(
    company: Company = Depends(resolve_company),
    db: Session = Depends(get_db)
) -> Company:
    """
    Block tenant-scoped operations for companies whose billing status is blocked.
    Status is recomputed on every request.
    """
    billing = CompanyService(db).billing_status(company)
    
    if billing.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=PAYMENT_REQUIRED_MESSAGE
        )
    
    return company
