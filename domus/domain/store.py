"""Read contract the status engine and aggregator depend on"""

from decimal import Decimal
from typing import List, Optional, Protocol, runtime_checkable

from domus.domain.models import House, Payment, Tenant


@runtime_checkable
class EntityStore(Protocol):
    """
    Point-in-time read access to houses, tenants and payments.

    Implementations never need to support writes for the engine; all
    methods return snapshots.
    """

    def get_payments(self, tenant_id: int) -> List[Payment]:
        """Payments of a tenant, newest first"""
        ...

    def has_payment(self, tenant_id: int, month: str) -> bool:
        ...

    def get_tenants(self, house_id: Optional[int] = None) -> List[Tenant]:
        ...

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        ...

    def get_houses(self) -> List[House]:
        ...

    def get_house(self, house_id: int) -> Optional[House]:
        ...

    def count_rooms(self) -> int:
        ...

    def count_payments(self) -> int:
        ...

    def sum_payments(self) -> Decimal:
        ...
