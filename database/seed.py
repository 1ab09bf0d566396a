"""
Database seed: creates the base company on first run.
"""
from loguru import logger
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.billing import BillingFrequency
from core.config import settings
from .models import Company


def seed_base_company(session: Session) -> Company:
    """
    Create the base company (id = settings.base_company_id) if missing.
    Repairs it if someone flipped it to non-permanent or inactive.
    """
    base_id = settings.base_company_id
    existing = session.query(Company).filter(Company.id == base_id).first()
    if existing:
        changed = False
        if existing.billing_frequency != BillingFrequency.permanent.value:
            existing.billing_frequency = BillingFrequency.permanent.value
            changed = True
        if not existing.is_active:
            existing.is_active = True
            changed = True
        if changed:
            session.commit()
            logger.warning(f"Base company {base_id} repaired (permanent, active)")
        else:
            logger.info(f"Base company {base_id} already exists")
        return existing

    company = Company(
        id=base_id,
        legal_name=settings.base_company_legal_name,
        tax_id=settings.base_company_tax_id,
        email=settings.base_company_email,
        phone=settings.base_company_phone,
        country_code=settings.base_company_country_code,
        billing_frequency=BillingFrequency.permanent.value,
        is_active=True,
    )
    session.add(company)
    session.flush()

    # Explicit id bypasses the serial sequence on PostgreSQL
    if session.get_bind().dialect.name == "postgresql":
        session.execute(text(
            "SELECT setval(pg_get_serial_sequence('companies', 'id'), "
            "(SELECT MAX(id) FROM companies))"
        ))
    session.commit()
    logger.info(f"✅ Base company created (id={base_id}, '{company.legal_name}')")
    return company
