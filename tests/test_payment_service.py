from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from services.payment import PaymentService


@pytest.fixture
def service(db_session):
    return PaymentService(db_session)


class TestLatestPaymentDate:
    def test_none_without_payments(self, service, make_company):
        company = make_company()
        assert service.latest_payment_date(company.id) is None

    def test_maximum_date_not_latest_insert(self, service, make_company, make_payment):
        company = make_company()
        make_payment(company, date(2024, 3, 1))
        make_payment(company, date(2024, 1, 1))  # back-dated entry recorded later

        assert service.latest_payment_date(company.id) == date(2024, 3, 1)

    def test_batch_lookup(self, service, make_company, make_payment):
        a = make_company()
        b = make_company()
        c = make_company()
        make_payment(a, date(2024, 1, 5))
        make_payment(a, date(2024, 2, 5))
        make_payment(b, date(2023, 7, 1))

        result = service.latest_payment_dates([a.id, b.id, c.id])

        assert result == {a.id: date(2024, 2, 5), b.id: date(2023, 7, 1)}
        assert service.latest_payment_dates([]) == {}


class TestAddPayment:
    def test_add_payment(self, service, make_company):
        company = make_company()

        ok, msg, payment = service.add_payment(
            company.id, 1500.5, payment_date=date(2024, 2, 1), method="transferencia"
        )

        assert ok is True
        assert payment.amount == Decimal("1500.50")
        assert payment.payment_date == date(2024, 2, 1)
        assert service.latest_payment_date(company.id) == date(2024, 2, 1)

    def test_default_date_is_company_local_today(self, service, make_company):
        company = make_company(country_code="AR")
        # 02:00 UTC on March 1st is still February 29th in Buenos Aires
        now = datetime(2024, 3, 1, 2, 0, tzinfo=timezone.utc)

        ok, _, payment = service.add_payment(company.id, 100, now=now)

        assert ok is True
        assert payment.payment_date == date(2024, 2, 29)

    def test_unknown_company(self, service, base_company):
        ok, msg, payment = service.add_payment(999, 100, payment_date=date(2024, 1, 1))
        assert ok is False
        assert payment is None
        assert "999" in msg


class TestUpdatePayment:
    def test_correct_amount_method_notes(self, service, make_company, make_payment):
        payment = make_payment(make_company(), date(2024, 1, 10))

        ok, _, updated = service.update_payment(
            payment.id, amount=2000, method="efectivo", notes="ajuste"
        )

        assert ok is True
        assert updated.amount == Decimal("2000.00")
        assert updated.method == "efectivo"
        assert updated.notes == "ajuste"
        assert updated.payment_date == date(2024, 1, 10)

    def test_payment_date_is_immutable(self, service, make_company, make_payment):
        payment = make_payment(make_company(), date(2024, 1, 10))

        ok, msg, _ = service.update_payment(payment.id, payment_date=date(2024, 5, 1))

        assert ok is False
        assert service.get_payment(payment.id).payment_date == date(2024, 1, 10)

    def test_unknown_fields_rejected(self, service, make_company, make_payment):
        payment = make_payment(make_company(), date(2024, 1, 10))
        ok, msg, _ = service.update_payment(payment.id, company_id=99)
        assert ok is False
        assert "company_id" in msg

    def test_empty_update_rejected(self, service, make_company, make_payment):
        payment = make_payment(make_company(), date(2024, 1, 10))
        ok, msg, _ = service.update_payment(payment.id)
        assert (ok, msg) == (False, "No hay datos para actualizar.")

    def test_null_amount_rejected(self, service, make_company, make_payment):
        payment = make_payment(make_company(), date(2024, 1, 10))
        ok, _, _ = service.update_payment(payment.id, amount=None)
        assert ok is False

    def test_missing_payment(self, service):
        assert service.update_payment(42, notes="x")[0] is False


class TestDeleteAndList:
    def test_delete_recomputes_latest(self, service, make_company, make_payment):
        company = make_company()
        make_payment(company, date(2024, 1, 1))
        latest = make_payment(company, date(2024, 2, 1))

        ok, _, deleted = service.delete_payment(latest.id)

        assert ok is True
        assert deleted.id == latest.id
        assert service.get_payment(latest.id) is None
        assert service.latest_payment_date(company.id) == date(2024, 1, 1)

    def test_delete_missing(self, service):
        assert service.delete_payment(42)[0] is False

    def test_list_order_filter_search(self, service, make_company, make_payment):
        a = make_company()
        b = make_company()
        p1 = make_payment(a, date(2024, 1, 1), method="tarjeta")
        p2 = make_payment(a, date(2024, 3, 1), notes="Pago anual")
        p3 = make_payment(b, date(2024, 2, 1), method="efectivo")

        payments, total = service.list_payments()
        assert total == 3
        assert [p.id for p in payments] == [p2.id, p3.id, p1.id]

        payments, total = service.list_payments(company_id=a.id)
        assert [p.id for p in payments] == [p2.id, p1.id]

        payments, total = service.list_payments(search="ANUAL")
        assert [p.id for p in payments] == [p2.id]

        payments, total = service.list_payments(limit=1, offset=1)
        assert total == 3
        assert [p.id for p in payments] == [p3.id]
