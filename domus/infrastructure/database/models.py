"""SQLAlchemy ORM models for houses, rooms, tenants and payments"""

from datetime import datetime
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import declarative_base, relationship

from domus.domain import models as domain

Base = declarative_base()


class HouseRecord(Base):
    """Rental property"""

    __tablename__ = "houses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    rooms = relationship("RoomRecord", back_populates="house", cascade="all, delete", passive_deletes=True)
    tenants = relationship("TenantRecord", back_populates="house", cascade="all, delete", passive_deletes=True)

    def to_domain(self) -> domain.House:
        return domain.House(id=self.id, name=self.name, address=self.address, created_at=self.created_at)


class RoomRecord(Base):
    """Room within a house"""

    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    house_id = Column(Integer, ForeignKey("houses.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=True)

    house = relationship("HouseRecord", back_populates="rooms")
    tenant = relationship(
        "TenantRecord", back_populates="room", uselist=False, cascade="all, delete", passive_deletes=True
    )

    def to_domain(self) -> domain.Room:
        return domain.Room(id=self.id, house_id=self.house_id, name=self.name, type=self.type)


class TenantRecord(Base):
    """Tenant occupying exactly one room"""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    house_id = Column(Integer, ForeignKey("houses.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    entry_date = Column(Date, nullable=False)
    payment_frequency = Column(String(16), nullable=False, default=domain.MONTHLY)
    rent_amount = Column(Numeric(12, 2), nullable=False)

    house = relationship("HouseRecord", back_populates="tenants")
    room = relationship("RoomRecord", back_populates="tenant")
    payments = relationship(
        "PaymentRecord", back_populates="tenant", cascade="all, delete", passive_deletes=True
    )

    def to_domain(self) -> domain.Tenant:
        return domain.Tenant(
            id=self.id,
            house_id=self.house_id,
            room_id=self.room_id,
            first_name=self.first_name,
            last_name=self.last_name,
            phone=self.phone,
            email=self.email,
            entry_date=self.entry_date,
            payment_frequency=self.payment_frequency,
            rent_amount=self.rent_amount,
        )


class PaymentRecord(Base):
    """Rent payment for one month; several may exist for the same month"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    amount = Column(Numeric(12, 2), nullable=False)
    paid_at = Column(DateTime, nullable=False, default=datetime.now)
    notes = Column(Text, nullable=True)

    tenant = relationship("TenantRecord", back_populates="payments")

    def to_domain(self) -> domain.Payment:
        return domain.Payment(
            id=self.id,
            tenant_id=self.tenant_id,
            month=self.month,
            amount=self.amount,
            paid_at=self.paid_at,
            notes=self.notes,
        )
