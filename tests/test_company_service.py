from datetime import date, datetime, timezone

import pytest

from core.billing import BillingFrequency
from schemas.company import CompanyCreate, CompanyUpdate
from services.company import CompanyService, check_base_company_rules


NOW = datetime(2024, 2, 10, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db_session):
    return CompanyService(db_session)


class TestBaseCompanyRules:
    def test_other_companies_unrestricted(self):
        assert check_base_company_rules(5, {"billing_frequency": "monthly", "is_active": False}) == (True, None)

    def test_base_company_must_stay_permanent(self):
        ok, msg = check_base_company_rules(1, {"billing_frequency": BillingFrequency.monthly})
        assert ok is False
        assert "permanente" in msg

    def test_base_company_cannot_be_deactivated(self):
        ok, msg = check_base_company_rules(1, {"is_active": False})
        assert ok is False
        assert "desactivada" in msg

    def test_base_company_harmless_changes(self):
        assert check_base_company_rules(1, {"billing_frequency": "permanent", "is_active": True}) == (True, None)
        assert check_base_company_rules(1, {"city": "Rosario"}) == (True, None)


class TestCreateAndLookup:
    def test_create_company_starts_blocked(self, service, base_company):
        company = service.create_company(CompanyCreate(
            legal_name="Depósito Norte S.A.",
            tax_id="30-71111111-1",
            phone="+54 11 4444-4444",
            email="Contacto@DepositoNorte.com",
            country_code="ar",
        ))

        assert company.id != base_company.id
        assert company.email == "contacto@depositonorte.com"
        assert company.country_code == "AR"
        assert company.billing_frequency == "monthly"
        assert company.registered_on is not None

        response = service.to_response(company, NOW)
        assert response.is_blocked is True
        assert response.last_payment_date is None
        assert response.next_payment_date is None

    def test_first_company_is_forced_permanent(self, service):
        # Empty database: the first row becomes the base company
        company = service.create_company(CompanyCreate(
            legal_name="Primera S.A.",
            tax_id="30-72222222-2",
            phone="1",
            email="primera@example.com",
            billing_frequency="monthly",
            is_active=False,
        ))

        assert company.id == 1
        assert company.billing_frequency == "permanent"
        assert company.is_active is True

    def test_uniqueness_checks(self, service, make_company):
        company = make_company(tax_id="30-73333333-3", email="dup@example.com")

        assert service.tax_id_exists("30-73333333-3")
        assert service.tax_id_exists(" 30-73333333-3 ")
        assert not service.tax_id_exists("30-73333333-3", exclude_id=company.id)
        assert service.email_exists("DUP@example.com")
        assert not service.email_exists("dup@example.com", exclude_id=company.id)

    def test_list_search_and_pagination(self, service, make_company):
        make_company(legal_name="Alfa Logística", trade_name="Alfa")
        make_company(legal_name="Beta Depósitos", trade_name="Pallets Beta")
        make_company(legal_name="Gamma SRL", tax_id="30-79999999-9")

        companies, total = service.list_companies(search="pallets")
        assert total == 1
        assert companies[0].legal_name == "Beta Depósitos"

        companies, total = service.list_companies(search="79999999")
        assert [c.legal_name for c in companies] == ["Gamma SRL"]

        companies, total = service.list_companies(limit=2, offset=0)
        assert total == 4  # base company included
        assert len(companies) == 2

    def test_list_filter_active(self, service, make_company):
        make_company(is_active=False)
        _, total = service.list_companies(is_active=False)
        assert total == 1


class TestUpdate:
    def test_partial_update(self, service, make_company):
        company = make_company(city="Córdoba")

        ok, msg, updated = service.update_company(company.id, CompanyUpdate(
            billing_frequency="yearly", sector="Logística"
        ))

        assert ok is True
        assert updated.billing_frequency == "yearly"
        assert updated.sector == "Logística"
        assert updated.city == "Córdoba"

    def test_empty_update_rejected(self, service, make_company):
        company = make_company()
        ok, msg, _ = service.update_company(company.id, CompanyUpdate())
        assert ok is False
        assert msg == "No hay datos para actualizar."

    def test_null_on_required_field_ignored(self, service, make_company):
        company = make_company()
        ok, msg, _ = service.update_company(company.id, CompanyUpdate(legal_name=None))
        assert ok is False
        assert company.legal_name

    def test_missing_company(self, service, base_company):
        ok, msg, company = service.update_company(999, CompanyUpdate(city="X"))
        assert (ok, company) == (False, None)

    def test_base_company_frequency_change_rejected(self, service, base_company):
        ok, msg, _ = service.update_company(base_company.id, CompanyUpdate(billing_frequency="monthly"))

        assert ok is False
        assert service.get_company(base_company.id).billing_frequency == "permanent"

    def test_base_company_deactivation_rejected(self, service, base_company):
        ok, msg, _ = service.update_company(base_company.id, CompanyUpdate(is_active=False))
        assert ok is False
        assert service.get_company(base_company.id).is_active is True


class TestActivation:
    def test_deactivate_and_activate(self, service, make_company):
        company = make_company()

        ok, _, deactivated = service.deactivate_company(company.id)
        assert ok is True
        assert deactivated.is_active is False

        activated = service.activate_company(company.id)
        assert activated.is_active is True

    def test_deactivate_base_company_refused(self, service, base_company):
        ok, msg, _ = service.deactivate_company(base_company.id)
        assert ok is False
        assert base_company.is_active is True

    def test_missing_company(self, service, base_company):
        assert service.activate_company(999) is None
        assert service.deactivate_company(999)[0] is False


class TestBillingEnrichment:
    def test_latest_payment_wins(self, service, make_company, make_payment):
        company = make_company()
        make_payment(company, date(2024, 1, 31))
        make_payment(company, date(2023, 12, 1))

        response = service.to_response(company, NOW)

        assert response.last_payment_date == date(2024, 1, 31)
        assert response.next_payment_date == date(2024, 2, 29)
        assert response.is_blocked is False

    def test_overdue_company_blocked(self, service, make_company, make_payment):
        company = make_company()
        make_payment(company, date(2023, 12, 1))

        assert service.billing_status(company, NOW).is_blocked is True

    def test_base_company_never_blocked_after_payment(self, service, base_company, make_payment):
        make_payment(base_company, date(2010, 1, 1))
        status = service.billing_status(base_company, NOW)
        assert status.is_blocked is False
        assert status.next_payment_date is None

    def test_batch_responses_match_single(self, service, make_company, make_payment):
        paid = make_company()
        unpaid = make_company()
        make_payment(paid, date(2024, 2, 1))

        responses = service.to_responses([paid, unpaid], NOW)

        assert responses[0] == service.to_response(paid, NOW)
        assert responses[1] == service.to_response(unpaid, NOW)
        assert responses[1].is_blocked is True


class TestExpiring:
    def test_expiring_report(self, service, base_company, make_company, make_payment):
        never_paid = make_company(legal_name="Nunca Pagó")
        overdue = make_company(legal_name="Vencida")
        make_payment(overdue, date(2023, 12, 20))   # due 2024-01-20
        due_soon = make_company(legal_name="Vence Pronto")
        make_payment(due_soon, date(2024, 1, 14))   # due 2024-02-14
        current = make_company(legal_name="Al Día")
        make_payment(current, date(2024, 2, 5))     # due 2024-03-05
        inactive = make_company(legal_name="Inactiva", is_active=False)
        make_company(legal_name="Permanente", billing_frequency="permanent")

        rows = service.get_expiring_companies(7, NOW)
        by_name = {r["legal_name"]: r for r in rows}

        assert set(by_name) == {"Nunca Pagó", "Vencida", "Vence Pronto"}
        assert rows[0]["company_id"] == never_paid.id
        assert by_name["Vencida"]["is_blocked"] is True
        assert by_name["Vencida"]["days_left"] == -21
        assert by_name["Vence Pronto"]["days_left"] == 4
        assert by_name["Vence Pronto"]["is_blocked"] is False
        assert by_name["Vence Pronto"]["is_urgent"] is False
        assert inactive.id not in {r["company_id"] for r in rows}

    def test_wider_window_includes_more(self, service, make_company, make_payment):
        current = make_company()
        make_payment(current, date(2024, 2, 5))

        assert service.get_expiring_companies(7, NOW) == []
        rows = service.get_expiring_companies(30, NOW)
        assert [r["company_id"] for r in rows] == [current.id]


class TestTaxIdNormalization:
    def test_update_strips_tax_id(self, service, make_company):
        company = make_company()

        ok, _, updated = service.update_company(company.id, CompanyUpdate(tax_id=" 30-71234567-8 "))

        assert ok is True
        assert updated.tax_id == "30-71234567-8"
        assert service.tax_id_exists("30-71234567-8")

    def test_update_blank_tax_id_rejected(self):
        with pytest.raises(ValueError):
            CompanyUpdate(tax_id="   ")
