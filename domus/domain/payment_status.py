"""Payment status engine - decides whether a tenant's rent is up to date or overdue"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from domus.domain.models import (
    MONTHLY,
    OVERDUE,
    UP_TO_DATE,
    OverdueEntry,
    Payment,
    RecencyStatus,
    Tenant,
    TenantStatus,
)
from domus.domain.store import EntityStore
from domus.utils.date_utils import month_key, months_between

logger = logging.getLogger(__name__)


def is_month_paid(payments: Iterable[Payment], month: str) -> bool:
    """
    True if any payment targets the given month.

    No amount check: a partial or duplicate payment still counts as paid.
    """
    return any(p.month == month for p in payments)


def _derive_status(tenant: Tenant, now: datetime, month_paid: Callable[[str], bool]) -> TenantStatus:
    current_month = month_key(now)
    entry_month = month_key(tenant.entry_date)

    if tenant.payment_frequency != MONTHLY:
        logger.debug(
            "Evaluating non-monthly tenant with monthly rule",
            extra={"tenant_id": tenant.id, "payment_frequency": tenant.payment_frequency},
        )

    # Tenancy starting this month or later is never overdue
    if entry_month >= current_month:
        status = UP_TO_DATE
    else:
        status = UP_TO_DATE if month_paid(current_month) else OVERDUE

    return TenantStatus(
        tenant_id=tenant.id,
        status=status,
        reference_month=current_month,
        entry_month=entry_month,
    )


def current_status(tenant: Tenant, payments: Iterable[Payment], now: datetime) -> TenantStatus:
    """
    Current-month payment status of a tenant.

    Rules:
    - entry month >= current month: up_to_date, whatever the history
    - otherwise: up_to_date iff a payment exists for the current month

    Months between entry and now are not inspected; only the current
    month's payment presence matters.
    """
    payments = list(payments)
    return _derive_status(tenant, now, lambda month: is_month_paid(payments, month))


def recency_status(
    tenant: Tenant,
    payments: Iterable[Payment],
    now: datetime,
    max_months: int = 1,
) -> RecencyStatus:
    """
    Status based on months elapsed since the most recent payment.

    Used for the tenant list badge. Differs from current_status: no entry
    month exemption, and the payment's recording time (paid_at) is used
    rather than the month it pays for.

    - no payment ever recorded: overdue
    - more than max_months calendar months since last paid_at: overdue
    """
    last_payment: Optional[Payment] = max(payments, key=lambda p: (p.paid_at, p.id), default=None)

    if last_payment is None:
        return RecencyStatus(
            tenant_id=tenant.id,
            status=OVERDUE,
            last_payment=None,
            months_since_last_payment=None,
        )

    elapsed = months_between(last_payment.paid_at, now)
    return RecencyStatus(
        tenant_id=tenant.id,
        status=OVERDUE if elapsed > max_months else UP_TO_DATE,
        last_payment=last_payment,
        months_since_last_payment=elapsed,
    )


class PaymentStatusEngine:
    """Evaluates payment status against an entity store snapshot"""

    def __init__(self, store: EntityStore, recency_max_months: int = 1):
        self.store = store
        self.recency_max_months = recency_max_months

    def is_month_paid(self, tenant_id: int, month: str) -> bool:
        return self.store.has_payment(tenant_id, month)

    def current_status(self, tenant: Tenant, now: datetime | None = None) -> TenantStatus:
        """Current-month status; the store is only queried when the entry month is in the past"""
        now = now or datetime.now()
        return _derive_status(tenant, now, lambda month: self.is_month_paid(tenant.id, month))

    def status_for_tenant(self, tenant_id: int, now: datetime | None = None) -> Optional[TenantStatus]:
        """Status of a tenant by id, None if the tenant no longer exists"""
        tenant = self.store.get_tenant(tenant_id)
        if tenant is None:
            return None
        return self.current_status(tenant, now)

    def recency_status(self, tenant: Tenant, now: datetime | None = None) -> RecencyStatus:
        now = now or datetime.now()
        return recency_status(tenant, self.store.get_payments(tenant.id), now, self.recency_max_months)

    def statuses_for_tenants(
        self, tenants: Iterable[Tenant], now: datetime | None = None
    ) -> Dict[int, TenantStatus]:
        """
        Current status for each tenant, keyed by tenant id.

        Each computation is independent; the returned mapping follows the
        order of the given tenants.
        """
        now = now or datetime.now()
        return {tenant.id: self.current_status(tenant, now) for tenant in tenants}

    def overdue_entries(self, tenants: Iterable[Tenant], now: datetime | None = None) -> List[OverdueEntry]:
        """Unpaid current-month rent, one entry per overdue tenant"""
        tenants = list(tenants)
        statuses = self.statuses_for_tenants(tenants, now)
        return [
            OverdueEntry(
                tenant=tenant,
                month=statuses[tenant.id].reference_month,
                amount=tenant.rent_amount,
            )
            for tenant in tenants
            if statuses[tenant.id].is_overdue
        ]
