"""
Company service - handles company (tenant) management.

Every company read is enriched with its billing status, computed on the
spot from the latest payment date. Nothing billing-related is stored on
the company row except its billing frequency.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from core.billing import (
    BillingFrequency, BillingStatus,
    compute_billing_status, days_until_due, utc_now,
)
from core.config import settings
from database.models import Company
from schemas.company import CompanyCreate, CompanyUpdate, CompanyResponse
from services.payment import PaymentService


# Columns that can never be written as NULL
_NOT_NULL_FIELDS = ('legal_name', 'tax_id', 'phone', 'email', 'billing_frequency', 'is_active')

_UNSET = object()


def check_base_company_rules(company_id: int, changes: dict) -> Tuple[bool, Optional[str]]:
    """
    Base company must stay permanent and active.

    Returns:
        (True, None) if changes are allowed
        (False, "error message") otherwise
    """
    if company_id != settings.base_company_id:
        return True, None

    frequency = changes.get('billing_frequency')
    if frequency is not None and BillingFrequency(frequency) is not BillingFrequency.permanent:
        return False, "La empresa base debe tener frecuencia de pago permanente."

    if changes.get('is_active') is False:
        return False, "La empresa base no puede ser desactivada."

    return True, None


class CompanyService:
    """Company management service."""

    def __init__(self, db: Session):
        self.db = db
        self.payments = PaymentService(db)

    # ==================== LOOKUPS ====================

    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        return self.db.query(Company).filter(Company.id == company_id).first()

    def tax_id_exists(self, tax_id: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Company).filter(Company.tax_id == tax_id.strip())
        if exclude_id is not None:
            query = query.filter(Company.id != exclude_id)
        return query.first() is not None

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Company).filter(Company.email == email.strip().lower())
        if exclude_id is not None:
            query = query.filter(Company.id != exclude_id)
        return query.first() is not None

    def list_companies(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Company], int]:
        """List companies with search and pagination, ordered by legal name."""
        query = self.db.query(Company)

        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                (Company.legal_name.ilike(pattern)) |
                (Company.trade_name.ilike(pattern)) |
                (Company.tax_id.ilike(pattern))
            )

        if is_active is not None:
            query = query.filter(Company.is_active == is_active)

        total = query.count()
        companies = query.order_by(Company.legal_name).offset(offset).limit(limit).all()

        return companies, total

    # ==================== WRITES ====================

    def create_company(self, data: CompanyCreate) -> Company:
        """Create a new company. Caller checks tax_id / email uniqueness first."""
        company = Company(
            legal_name=data.legal_name,
            trade_name=data.trade_name,
            tax_id=data.tax_id,
            address=data.address,
            city=data.city,
            province=data.province,
            country_code=data.country_code,
            phone=data.phone,
            email=data.email,
            website=data.website,
            sector=data.sector,
            billing_frequency=data.billing_frequency.value,
            is_active=data.is_active,
        )
        self.db.add(company)
        self.db.flush()  # Get company.id

        if company.id == settings.base_company_id:
            company.billing_frequency = BillingFrequency.permanent.value
            company.is_active = True

        self.db.commit()
        self.db.refresh(company)
        logger.info(f"Company {company.id} created: '{company.legal_name}' ({company.billing_frequency})")
        return company

    def update_company(
        self, company_id: int, data: CompanyUpdate
    ) -> Tuple[bool, str, Optional[Company]]:
        """Partial update. Only fields present in the payload are written."""
        company = self.get_company(company_id)
        if not company:
            return False, "Empresa no encontrada.", None

        update_data = data.model_dump(exclude_unset=True)
        for key in _NOT_NULL_FIELDS:
            if key in update_data and update_data[key] is None:
                del update_data[key]

        if not update_data:
            return False, "No hay datos para actualizar.", None

        ok, msg = check_base_company_rules(company_id, update_data)
        if not ok:
            return False, msg, None

        if 'billing_frequency' in update_data:
            update_data['billing_frequency'] = BillingFrequency(update_data['billing_frequency']).value

        for key, value in update_data.items():
            setattr(company, key, value)

        self.db.commit()
        self.db.refresh(company)
        logger.info(f"Company {company_id} updated: {', '.join(sorted(update_data))}")
        return True, "Empresa actualizada exitosamente", company

    def activate_company(self, company_id: int) -> Optional[Company]:
        """Activate a company."""
        company = self.get_company(company_id)
        if not company:
            return None

        company.is_active = True
        self.db.commit()
        return company

    def deactivate_company(self, company_id: int) -> Tuple[bool, str, Optional[Company]]:
        """Soft delete a company (deactivate). The base company is refused."""
        company = self.get_company(company_id)
        if not company:
            return False, "Empresa no encontrada.", None

        ok, msg = check_base_company_rules(company_id, {'is_active': False})
        if not ok:
            return False, msg, None

        company.is_active = False
        self.db.commit()
        logger.info(f"Company {company_id} deactivated")
        return True, "Empresa desactivada exitosamente", company

    # ==================== BILLING STATUS ====================

    def billing_status(
        self, company: Company, now: Optional[datetime] = None,
        last_payment_date=_UNSET,
    ) -> BillingStatus:
        """Billing status of a company at `now` (default: current instant)."""
        if last_payment_date is _UNSET:
            last_payment_date = self.payments.latest_payment_date(company.id)
        return compute_billing_status(
            company.billing_frequency,
            last_payment_date,
            company.country_code,
            now or utc_now(),
        )

    def to_response(
        self, company: Company, now: Optional[datetime] = None,
        last_payment_date=_UNSET,
    ) -> CompanyResponse:
        """Convert company model to response schema with billing status."""
        status = self.billing_status(company, now, last_payment_date)

        return CompanyResponse(
            id=company.id,
            legal_name=company.legal_name,
            trade_name=company.trade_name,
            tax_id=company.tax_id,
            address=company.address,
            city=company.city,
            province=company.province,
            country_code=company.country_code,
            phone=company.phone,
            email=company.email,
            website=company.website,
            sector=company.sector,
            registered_on=company.registered_on,
            billing_frequency=company.billing_frequency,
            is_active=company.is_active,
            created_at=company.created_at,
            updated_at=company.updated_at,
            last_payment_date=status.last_payment_date,
            next_payment_date=status.next_payment_date,
            is_blocked=status.is_blocked,
        )

    def to_responses(
        self, companies: List[Company], now: Optional[datetime] = None
    ) -> List[CompanyResponse]:
        """Batch version of to_response. One query for all latest payments."""
        now = now or utc_now()
        latest: Dict[int, date] = self.payments.latest_payment_dates(c.id for c in companies)
        return [
            self.to_response(c, now, latest.get(c.id))
            for c in companies
        ]

    # ==================== EXPIRING ALERTS ====================

    def get_expiring_companies(
        self, days_ahead: int = None, now: Optional[datetime] = None
    ) -> list:
        """
        Active, non-permanent companies that are blocked or due within N days
        (company-local days), most urgent first.
        """
        days_ahead = settings.expiring_days_default if days_ahead is None else days_ahead
        now = now or utc_now()

        companies = self.db.query(Company).filter(
            Company.is_active == True,
            Company.billing_frequency != BillingFrequency.permanent.value,
        ).all()
        latest = self.payments.latest_payment_dates(c.id for c in companies)

        result = []
        for c in companies:
            status = self.billing_status(c, now, latest.get(c.id))
            days_left = days_until_due(status, c.country_code, now)
            if not status.is_blocked and (days_left is None or days_left > days_ahead):
                continue
            result.append({
                "company_id": c.id,
                "legal_name": c.legal_name,
                "trade_name": c.trade_name,
                "billing_frequency": c.billing_frequency,
                "last_payment_date": status.last_payment_date,
                "next_payment_date": status.next_payment_date,
                "days_left": days_left,
                "is_blocked": status.is_blocked,
                "is_urgent": status.is_blocked or (days_left is not None and days_left <= 3),
            })

        # Never-paid companies first, then by due date
        result.sort(key=lambda r: (r["next_payment_date"] is not None, r["next_payment_date"] or date.min, r["company_id"]))
        return result
