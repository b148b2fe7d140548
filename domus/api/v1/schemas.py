"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

PaymentFrequency = Literal["monthly", "quarterly", "semiannual", "annual"]
MONTH_REGEX = r"^\d{4}-(0[1-9]|1[0-2])$"


# Houses

class HouseCreate(BaseModel):
    """Request body for POST /v1/houses"""

    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class HouseUpdate(BaseModel):
    """Request body for PATCH /v1/houses/{house_id}; omitted fields are left unchanged"""

    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)


class HouseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    created_at: Optional[datetime] = None


class HouseStatsResponse(HouseResponse):
    """House with tenant rollups"""

    tenant_count: int
    total_rent: float
    overdue_count: int


# Rooms

class RoomCreate(BaseModel):
    """Request body for POST /v1/rooms"""

    house_id: int
    name: str = Field(..., min_length=1)
    type: Optional[str] = None


class RoomUpdate(BaseModel):
    house_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    house_id: int
    name: str
    type: Optional[str] = None


# Tenants

class TenantCreate(BaseModel):
    """Request body for POST /v1/tenants; the room is created together with the tenant"""

    house_id: int
    room_name: str = Field(..., min_length=1)
    room_type: Optional[str] = None
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    entry_date: date
    payment_frequency: PaymentFrequency = "monthly"
    rent_amount: float = Field(..., ge=0)


class TenantUpdate(BaseModel):
    """Request body for PATCH /v1/tenants/{tenant_id}; room_name/room_type rename the tenant's room"""

    house_id: Optional[int] = None
    room_id: Optional[int] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    entry_date: Optional[date] = None
    payment_frequency: Optional[PaymentFrequency] = None
    rent_amount: Optional[float] = Field(None, ge=0)
    room_name: Optional[str] = Field(None, min_length=1)
    room_type: Optional[str] = None


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    house_id: int
    room_id: int
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None
    entry_date: date
    payment_frequency: str
    rent_amount: float


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    month: str
    amount: float
    paid_at: datetime
    notes: Optional[str] = None


class HouseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    address: str


class RoomSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    type: Optional[str] = None


class TenantListItem(TenantResponse):
    """Tenant with house, room and the last-payment recency badge"""

    house: Optional[HouseSummary] = None
    room: Optional[RoomSummary] = None
    last_payment: Optional[PaymentResponse] = None
    payment_status: str
    months_since_last_payment: Optional[int] = None


class TenantStatusResponse(BaseModel):
    """Response for GET /v1/tenants/{tenant_id}/status"""

    tenant_id: int
    status: str
    reference_month: str
    entry_month: str
    month: Optional[str] = None
    month_paid: Optional[bool] = None


class HouseDetailResponse(HouseStatsResponse):
    """Response for GET /v1/houses/{house_id}"""

    rooms: List[RoomResponse]
    tenants: List[TenantResponse]


# Payments

class PaymentCreate(BaseModel):
    """Request body for POST /v1/payments"""

    tenant_id: int
    month: str = Field(..., pattern=MONTH_REGEX, description="Month paid for, YYYY-MM")
    amount: float = Field(..., ge=0)
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    tenant_id: Optional[int] = None
    month: Optional[str] = Field(None, pattern=MONTH_REGEX)
    amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class PaymentListItem(PaymentResponse):
    """Payment with the paying tenant's details"""

    tenant: Optional[TenantResponse] = None
    house: Optional[HouseSummary] = None
    room: Optional[RoomSummary] = None


class OverdueItem(BaseModel):
    """Current-month rent not yet recorded"""

    tenant: TenantResponse
    month: str
    amount: float


class OverdueResponse(BaseModel):
    reference_month: str
    total_amount: float
    items: List[OverdueItem]


# Stats

class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    houses: int
    tenants: int
    overdue_payments: int
    monthly_revenue: float
    reference_month: str
    house_stats: List[HouseStatsResponse]


class StatsResponse(BaseModel):
    """Response for GET /v1/stats"""

    total_houses: int
    total_tenants: int
    total_rent: float
    overdue_payments: int
    total_payments: int
    total_revenue: float
    occupancy_rate: int
    room_occupancy_rate: int
    house_stats: List[HouseStatsResponse]


class RefreshResponse(BaseModel):
    """Current data version; changes after every committed write"""

    version: int
