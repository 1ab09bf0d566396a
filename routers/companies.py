"""
Company management router.
Endpoint: /api/v1/companies/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas.company import (
    CompanyCreate, CompanyUpdate, CompanyResponse,
    CompanyListResponse, ExpiringCompany, ExpiringCompanyListResponse,
)
from services.company import CompanyService


router = APIRouter()


@router.get("", response_model=CompanyListResponse)
async def list_companies(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """List companies with billing status, search and pagination."""
    service = CompanyService(db)
    companies, total = service.list_companies(
        search=search,
        is_active=is_active,
        limit=limit,
        offset=offset,
    )
    
    return CompanyListResponse(
        data=service.to_responses(companies),
        total=total
    )


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    data: CompanyCreate,
    db: Session = Depends(get_db)
):
    """
    Create new company.
    
    A new company has no payments, so it starts blocked until
    its first payment is recorded.
    """
    service = CompanyService(db)
    
    if service.tax_id_exists(data.tax_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe una empresa con el CUIT {data.tax_id}."
        )
    if service.email_exists(data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe una empresa con el email {data.email}."
        )
    
    company = service.create_company(data)
    return service.to_response(company)


# ==================== EXPIRING (must be before /{company_id}) ====================

@router.get("/expiring", response_model=ExpiringCompanyListResponse)
async def get_expiring_companies(
    days: Optional[int] = Query(None, ge=0, description="Days ahead to check"),
    db: Session = Depends(get_db)
):
    """Companies that are blocked or must pay within N days."""
    service = CompanyService(db)
    data = service.get_expiring_companies(days)
    return ExpiringCompanyListResponse(
        data=[ExpiringCompany(**row) for row in data],
        count=len(data)
    )


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: int,
    db: Session = Depends(get_db)
):
    """Get company details with billing status."""
    service = CompanyService(db)
    company = service.get_company(company_id)
    
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada."
        )
    
    return service.to_response(company)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: int,
    data: CompanyUpdate,
    db: Session = Depends(get_db)
):
    """Update company info. The base company must stay permanent and active."""
    service = CompanyService(db)
    
    if not service.get_company(company_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada."
        )
    
    if data.tax_id and service.tax_id_exists(data.tax_id, exclude_id=company_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe otra empresa con el CUIT {data.tax_id}."
        )
    if data.email and service.email_exists(data.email, exclude_id=company_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe otra empresa con el email {data.email}."
        )
    
    ok, msg, company = service.update_company(company_id, data)
    if not ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, msg)
    
    return service.to_response(company)


@router.post("/{company_id}/activate")
async def activate_company(
    company_id: int,
    db: Session = Depends(get_db)
):
    """Activate a deactivated company."""
    service = CompanyService(db)
    company = service.activate_company(company_id)
    
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada."
        )
    
    return {"success": True, "message": f"'{company.legal_name}' activada"}


@router.delete("/{company_id}")
async def deactivate_company(
    company_id: int,
    db: Session = Depends(get_db)
):
    """Soft delete a company (deactivate)."""
    service = CompanyService(db)
    
    if not service.get_company(company_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada."
        )
    
    ok, msg, company = service.deactivate_company(company_id)
    if not ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, msg)
    
    return {"success": True, "message": msg, "company": service.to_response(company)}
