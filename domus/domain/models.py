"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Payment status values
UP_TO_DATE = "up_to_date"
OVERDUE = "overdue"

# Payment frequencies
MONTHLY = "monthly"
QUARTERLY = "quarterly"
SEMIANNUAL = "semiannual"
ANNUAL = "annual"
PAYMENT_FREQUENCIES = (MONTHLY, QUARTERLY, SEMIANNUAL, ANNUAL)


@dataclass
class House:
    """Rental property owning rooms and tenants"""

    id: int
    name: str
    address: str
    created_at: Optional[datetime] = None


@dataclass
class Room:
    """Rentable room within a house"""

    id: int
    house_id: int
    name: str
    type: Optional[str] = None


@dataclass
class Tenant:
    """Person renting exactly one room"""

    id: int
    house_id: int
    room_id: int
    first_name: str
    last_name: str
    phone: str
    entry_date: date
    payment_frequency: str  # monthly | quarterly | semiannual | annual
    rent_amount: Decimal
    email: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Payment:
    """Rent payment recorded for one calendar month"""

    id: int
    tenant_id: int
    month: str  # YYYY-MM
    amount: Decimal
    paid_at: datetime
    notes: Optional[str] = None


@dataclass
class TenantStatus:
    """Current-month payment status of a tenant"""

    tenant_id: int
    status: str  # up_to_date | overdue
    reference_month: str
    entry_month: str

    @property
    def is_overdue(self) -> bool:
        return self.status == OVERDUE


@dataclass
class RecencyStatus:
    """Status derived from time elapsed since the tenant's last payment"""

    tenant_id: int
    status: str
    last_payment: Optional[Payment]
    months_since_last_payment: Optional[int]

    @property
    def is_overdue(self) -> bool:
        return self.status == OVERDUE


@dataclass
class OverdueEntry:
    """Rent expected for the current month but not yet recorded"""

    tenant: Tenant
    month: str
    amount: Decimal


@dataclass
class HouseStats:
    """House with its tenant rollups"""

    house: House
    tenant_count: int
    total_rent: Decimal
    overdue_count: int


@dataclass
class PortfolioStats:
    """Totals across every house"""

    total_houses: int
    total_tenants: int
    total_rent: Decimal
    overdue_count: int
    total_payments: int
    total_collected: Decimal
    occupancy_rate: int  # percent, nominal rooms per house
    room_occupancy_rate: int  # percent, actual room count
