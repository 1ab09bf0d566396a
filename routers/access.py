"""
Company-scoped endpoints.
Endpoint: /api/v1/{company_id}/...

Everything mounted here goes through the billing gate: a blocked
company gets 402 until a new payment is recorded.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.dependencies import require_billing_current
from database import get_db
from database.models import Company
from services.company import CompanyService

router = APIRouter()


@router.get("/access")
async def check_access(
    company: Company = Depends(require_billing_current),
    db: Session = Depends(get_db),
):
    """Session check used by the client after login."""
    billing = CompanyService(db).billing_status(company)
    return {
        "company_id": company.id,
        "allowed": True,
        **billing.to_dict(),
    }
