"""Unit tests for payment status derivation"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from domus.domain.models import OVERDUE, UP_TO_DATE, Payment, Tenant
from domus.domain.payment_status import (
    PaymentStatusEngine,
    current_status,
    is_month_paid,
    recency_status,
)


def make_tenant(entry_date: date, tenant_id: int = 1, frequency: str = "monthly") -> Tenant:
    return Tenant(
        id=tenant_id,
        house_id=1,
        room_id=tenant_id,
        first_name="Moussa",
        last_name="Ndiaye",
        phone="770000000",
        entry_date=entry_date,
        payment_frequency=frequency,
        rent_amount=Decimal("45000"),
    )


def make_payment(month: str, paid_at: datetime, payment_id: int = 1, amount: str = "45000") -> Payment:
    return Payment(id=payment_id, tenant_id=1, month=month, amount=Decimal(amount), paid_at=paid_at)


def test_is_month_paid_ignores_amount():
    """A partial payment still marks the month as paid"""
    payments = [make_payment("2024-03", datetime(2024, 3, 2), amount="1")]
    assert is_month_paid(payments, "2024-03") is True
    assert is_month_paid(payments, "2024-02") is False
    assert is_month_paid([], "2024-03") is False


def test_scenario_a_no_payment_is_overdue(march_2024: datetime):
    """Entry in January, nothing paid, evaluated in March"""
    status = current_status(make_tenant(date(2024, 1, 15)), [], march_2024)

    assert status.status == OVERDUE
    assert status.reference_month == "2024-03"
    assert status.entry_month == "2024-01"
    assert status.is_overdue


def test_scenario_b_current_month_payment_is_up_to_date(march_2024: datetime):
    """Recording March clears the overdue flag"""
    payments = [make_payment("2024-03", datetime(2024, 3, 1, 8, 0))]
    status = current_status(make_tenant(date(2024, 1, 15)), payments, march_2024)
    assert status.status == UP_TO_DATE


def test_scenario_c_entry_this_month_is_up_to_date(march_2024: datetime):
    """Tenant joining later this month is not flagged even with no payments"""
    status = current_status(make_tenant(date(2024, 3, 10)), [], march_2024)
    assert status.status == UP_TO_DATE


@pytest.mark.parametrize("entry", [date(2024, 3, 1), date(2024, 4, 20), date(2025, 1, 1)])
def test_future_or_current_entry_ignores_history(entry: date, march_2024: datetime):
    """entry month >= current month forces up_to_date"""
    old_payment = [make_payment("2023-12", datetime(2023, 12, 5))]
    assert current_status(make_tenant(entry), [], march_2024).status == UP_TO_DATE
    assert current_status(make_tenant(entry), old_payment, march_2024).status == UP_TO_DATE


def test_only_current_month_matters(march_2024: datetime):
    """Earlier months paid but March missing is overdue; gaps before March are ignored"""
    tenant = make_tenant(date(2023, 10, 1))

    all_but_march = [
        make_payment(month, datetime(2024, 2, i), i)
        for i, month in enumerate(["2023-10", "2023-11", "2023-12", "2024-01", "2024-02"], start=1)
    ]
    assert current_status(tenant, all_but_march, march_2024).status == OVERDUE

    only_march = [make_payment("2024-03", datetime(2024, 3, 1), 10)]
    assert current_status(tenant, only_march, march_2024).status == UP_TO_DATE


def test_payment_for_other_month_recorded_now_does_not_count(march_2024: datetime):
    """Matching is on the month paid for, not on when it was recorded"""
    tenant = make_tenant(date(2024, 1, 15))
    payments = [make_payment("2024-02", datetime(2024, 3, 1, 8, 0))]
    assert current_status(tenant, payments, march_2024).status == OVERDUE


def test_non_monthly_tenant_uses_monthly_rule(march_2024: datetime):
    """Quarterly tenants are evaluated like monthly ones"""
    tenant = make_tenant(date(2024, 1, 15), frequency="quarterly")
    assert current_status(tenant, [], march_2024).status == OVERDUE


def test_recency_without_payment_is_overdue(march_2024: datetime):
    """No payment ever recorded, even for a brand new tenant"""
    result = recency_status(make_tenant(date(2024, 3, 1)), [], march_2024)

    assert result.status == OVERDUE
    assert result.last_payment is None
    assert result.months_since_last_payment is None


def test_recency_month_boundaries(march_2024: datetime):
    """One calendar month since last payment is fine, two is overdue"""
    tenant = make_tenant(date(2023, 1, 1))

    last_month = recency_status(tenant, [make_payment("2024-01", datetime(2024, 2, 28))], march_2024)
    assert last_month.status == UP_TO_DATE
    assert last_month.months_since_last_payment == 1

    two_months = recency_status(tenant, [make_payment("2024-01", datetime(2024, 1, 31))], march_2024)
    assert two_months.status == OVERDUE
    assert two_months.months_since_last_payment == 2


def test_recency_uses_latest_paid_at(march_2024: datetime):
    """The most recent recording wins regardless of list order"""
    tenant = make_tenant(date(2023, 1, 1))
    payments = [
        make_payment("2023-06", datetime(2023, 6, 1), 1),
        make_payment("2024-03", datetime(2024, 3, 1, 8, 0), 2),
        make_payment("2023-09", datetime(2023, 9, 1), 3),
    ]

    result = recency_status(tenant, payments, march_2024)
    assert result.status == UP_TO_DATE
    assert result.last_payment.id == 2


def test_two_rules_disagree(march_2024: datetime):
    """An old payment for March keeps current status clean but not the recency badge"""
    tenant = make_tenant(date(2023, 1, 1))
    payments = [make_payment("2024-03", datetime(2023, 12, 15))]

    assert current_status(tenant, payments, march_2024).status == UP_TO_DATE
    assert recency_status(tenant, payments, march_2024).status == OVERDUE


def test_engine_uses_store_lookup(store, march_2024: datetime):
    """Engine reads payments through the store contract"""
    house = store.add_house()
    tenant = store.add_tenant(house, date(2024, 1, 15))
    engine = PaymentStatusEngine(store)

    assert engine.current_status(tenant, march_2024).status == OVERDUE
    assert engine.is_month_paid(tenant.id, "2024-03") is False

    store.add_payment(tenant, "2024-03", datetime(2024, 3, 1, 8, 0))

    assert engine.is_month_paid(tenant.id, "2024-03") is True
    assert engine.current_status(tenant, march_2024).status == UP_TO_DATE


def test_engine_missing_tenant_is_absent(store, march_2024: datetime):
    """Unknown tenant ids yield no status instead of an error"""
    assert PaymentStatusEngine(store).status_for_tenant(999, march_2024) is None


def test_statuses_follow_input_order(store, march_2024: datetime):
    """Results are keyed by tenant and keep the caller's ordering"""
    house = store.add_house()
    first = store.add_tenant(house, date(2024, 3, 5))
    second = store.add_tenant(house, date(2023, 11, 2))
    engine = PaymentStatusEngine(store)

    statuses = engine.statuses_for_tenants([second, first], march_2024)

    assert list(statuses) == [second.id, first.id]
    assert statuses[second.id].status == OVERDUE
    assert statuses[first.id].status == UP_TO_DATE


def test_overdue_entries(store, march_2024: datetime):
    """Overdue list carries the current month and the tenant's rent"""
    house = store.add_house()
    late = store.add_tenant(house, date(2024, 1, 15), rent_amount="60000")
    paid = store.add_tenant(house, date(2024, 1, 15))
    store.add_tenant(house, date(2024, 3, 2))
    store.add_payment(paid, "2024-03", datetime(2024, 3, 1))

    entries = PaymentStatusEngine(store).overdue_entries(store.get_tenants(), march_2024)

    assert len(entries) == 1
    assert entries[0].tenant.id == late.id
    assert entries[0].month == "2024-03"
    assert entries[0].amount == Decimal("60000")
