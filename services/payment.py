"""
Payment service: company payment ledger.

The billing calculator only needs the latest payment date per company;
everything else here is ledger CRUD for the admin screens.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from core.billing import local_today
from database.models import Company, Payment


# Fields that may be corrected after a payment is recorded
CORRECTABLE_FIELDS = ('amount', 'method', 'notes')


class PaymentService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== LATEST PAYMENT LOOKUP ====================

    def latest_payment_date(self, company_id: int) -> Optional[date]:
        """Maximum payment_date for a company, or None if it never paid."""
        return self.db.query(func.max(Payment.payment_date)).filter(
            Payment.company_id == company_id
        ).scalar()

    def latest_payment_dates(self, company_ids: Iterable[int]) -> Dict[int, date]:
        """Latest payment date per company in one query. Companies without payments are absent."""
        ids = list(company_ids)
        if not ids:
            return {}
        rows = self.db.query(
            Payment.company_id, func.max(Payment.payment_date)
        ).filter(
            Payment.company_id.in_(ids)
        ).group_by(Payment.company_id).all()
        return {company_id: last for company_id, last in rows}

    # ==================== PAYMENTS CRUD ====================

    def add_payment(
        self, company_id: int, amount: float,
        payment_date: date = None, method: str = None,
        notes: str = None, now: datetime = None,
    ) -> Tuple[bool, str, Optional[Payment]]:
        company = self.db.query(Company).filter(Company.id == company_id).first()
        if not company:
            return False, f"Empresa con ID {company_id} no encontrada.", None

        if payment_date is None:
            # Default: today in the company's own timezone
            payment_date = local_today(company.country_code, now)

        payment = Payment(
            company_id=company_id,
            payment_date=payment_date,
            amount=Decimal(str(amount)).quantize(Decimal("0.01")),
            method=method,
            notes=notes,
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)

        logger.info(
            f"Payment {payment.id} recorded: company={company_id} "
            f"date={payment.payment_date} amount={payment.amount}"
        )
        return True, "Pago registrado exitosamente", payment

    def update_payment(self, payment_id: int, **changes) -> Tuple[bool, str, Optional[Payment]]:
        """
        Correct amount / method / notes of a payment.
        The payment date is never changed in place.
        """
        payment = self.get_payment(payment_id)
        if not payment:
            return False, "Pago no encontrado.", None

        if 'payment_date' in changes:
            return False, "La fecha de pago no se puede modificar.", None

        unknown = set(changes) - set(CORRECTABLE_FIELDS)
        if unknown:
            return False, f"Campos no modificables: {', '.join(sorted(unknown))}", None

        if not changes:
            return False, "No hay datos para actualizar.", None

        if 'amount' in changes:
            if changes['amount'] is None:
                return False, "El monto es obligatorio.", None
            payment.amount = Decimal(str(changes['amount'])).quantize(Decimal("0.01"))
        if 'method' in changes:
            payment.method = changes['method']
        if 'notes' in changes:
            payment.notes = changes['notes']

        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"Payment {payment_id} corrected: {', '.join(sorted(changes))}")
        return True, "Pago actualizado exitosamente", payment

    def delete_payment(self, payment_id: int) -> Tuple[bool, str, Optional[Payment]]:
        payment = self.get_payment(payment_id)
        if not payment:
            return False, "Pago no encontrado.", None

        company_id = payment.company_id
        self.db.delete(payment)
        self.db.commit()
        logger.info(f"Payment {payment_id} deleted (company={company_id})")
        return True, "Pago eliminado exitosamente", payment

    # ==================== QUERIES ====================

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def list_payments(
        self,
        search: Optional[str] = None,
        company_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Payment], int]:
        """Newest payments first, optionally filtered by company and notes/method text."""
        query = self.db.query(Payment)

        if company_id:
            query = query.filter(Payment.company_id == company_id)

        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    Payment.notes.ilike(pattern),
                    Payment.method.ilike(pattern),
                )
            )

        total = query.count()
        payments = query.order_by(
            Payment.payment_date.desc(), Payment.id.desc()
        ).offset(offset).limit(limit).all()

        return payments, total
