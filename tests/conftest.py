"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from domus.api.main import create_app
from domus.domain.models import House, Payment, Tenant, MONTHLY
from domus.infrastructure.database.models import Base
from domus.infrastructure.database.session import build_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


class InMemoryStore:
    """EntityStore over plain lists, for engine and aggregator tests"""

    def __init__(self) -> None:
        self.houses: Dict[int, House] = {}
        self.tenants: Dict[int, Tenant] = {}
        self.payments: List[Payment] = []
        self.room_count = 0
        self._next_id = 1

    def _id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def add_house(self, name: str = "Maison Bleue", address: str = "12 rue des Lilas") -> House:
        house = House(id=self._id(), name=name, address=address, created_at=datetime(2024, 1, 1))
        self.houses[house.id] = house
        return house

    def add_tenant(
        self,
        house: House,
        entry_date: date,
        rent_amount: str = "50000",
        first_name: str = "Awa",
        payment_frequency: str = MONTHLY,
    ) -> Tenant:
        self.room_count += 1
        tenant = Tenant(
            id=self._id(),
            house_id=house.id,
            room_id=self.room_count,
            first_name=first_name,
            last_name="Diallo",
            phone="+221 77 000 00 00",
            entry_date=entry_date,
            payment_frequency=payment_frequency,
            rent_amount=Decimal(rent_amount),
        )
        self.tenants[tenant.id] = tenant
        return tenant

    def add_payment(self, tenant: Tenant, month: str, paid_at: datetime, amount: str = "50000") -> Payment:
        payment = Payment(id=self._id(), tenant_id=tenant.id, month=month, amount=Decimal(amount), paid_at=paid_at)
        self.payments.append(payment)
        return payment

    # EntityStore

    def get_payments(self, tenant_id: int) -> List[Payment]:
        own = [p for p in self.payments if p.tenant_id == tenant_id]
        return sorted(own, key=lambda p: (p.paid_at, p.id), reverse=True)

    def has_payment(self, tenant_id: int, month: str) -> bool:
        return any(p.tenant_id == tenant_id and p.month == month for p in self.payments)

    def get_tenants(self, house_id: Optional[int] = None) -> List[Tenant]:
        return [t for t in self.tenants.values() if house_id is None or t.house_id == house_id]

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        return self.tenants.get(tenant_id)

    def get_houses(self) -> List[House]:
        return list(self.houses.values())

    def get_house(self, house_id: int) -> Optional[House]:
        return self.houses.get(house_id)

    def count_rooms(self) -> int:
        return self.room_count

    def count_payments(self) -> int:
        return len(self.payments)

    def sum_payments(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def march_2024() -> datetime:
    """Reference instant used by the dated scenarios"""
    return datetime(2024, 3, 1, 9, 0)
