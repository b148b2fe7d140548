"""Data access layer for houses, rooms, tenants and payments"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from domus.infrastructure.database.models import HouseRecord, RoomRecord, TenantRecord, PaymentRecord
from domus.domain import models as domain
from domus.domain.exceptions import NotFoundError, ValidationError
from domus.utils.date_utils import is_valid_month


def _apply_updates(record: Any, fields: Dict[str, Any], allowed: tuple) -> None:
    """Set only the supplied fields; unknown names are rejected"""
    unknown = set(fields) - set(allowed)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
    for name, value in fields.items():
        setattr(record, name, value)


def _reject_nulls(fields: Dict[str, Any], required: tuple) -> None:
    """Non-nullable columns cannot be cleared by an update"""
    cleared = sorted(name for name in required if name in fields and fields[name] is None)
    if cleared:
        raise ValidationError(f"Fields cannot be null: {', '.join(cleared)}")


def _flush(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        raise ValidationError(f"Write rejected by store constraints: {e.orig}") from e


def _require_text(value: Optional[str], field: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")


def _require_non_negative(value: Decimal | float | int, field: str) -> None:
    if value is None or Decimal(str(value)) < 0:
        raise ValidationError(f"{field} must be non-negative")


class HouseRepository:
    """Repository for houses"""

    UPDATABLE = ("name", "address")
    REQUIRED = ("name", "address")

    def __init__(self, db: Session):
        self.db = db

    def create_house(self, name: str, address: str) -> HouseRecord:
        _require_text(name, "name")
        _require_text(address, "address")
        db_house = HouseRecord(name=name, address=address)
        self.db.add(db_house)
        _flush(self.db)
        return db_house

    def get_house_by_id(self, house_id: int) -> Optional[HouseRecord]:
        return self.db.get(HouseRecord, house_id)

    def get_houses(self) -> List[HouseRecord]:
        """All houses, newest first"""
        return (
            self.db.query(HouseRecord)
            .order_by(HouseRecord.created_at.desc(), HouseRecord.id.desc())
            .all()
        )

    def update_house(self, house_id: int, fields: Dict[str, Any]) -> HouseRecord:
        db_house = self._require(house_id)
        _reject_nulls(fields, self.REQUIRED)
        for name in ("name", "address"):
            if name in fields:
                _require_text(fields[name], name)
        _apply_updates(db_house, fields, self.UPDATABLE)
        _flush(self.db)
        return db_house

    def delete_house(self, house_id: int) -> None:
        """Delete house with its rooms, tenants and their payments"""
        self.db.delete(self._require(house_id))
        _flush(self.db)

    def _require(self, house_id: int) -> HouseRecord:
        db_house = self.get_house_by_id(house_id)
        if db_house is None:
            raise NotFoundError("House", house_id)
        return db_house


class RoomRepository:
    """Repository for rooms"""

    UPDATABLE = ("house_id", "name", "type")
    REQUIRED = ("house_id", "name")

    def __init__(self, db: Session):
        self.db = db

    def create_room(self, house_id: int, name: str, type: Optional[str] = None) -> RoomRecord:
        if self.db.get(HouseRecord, house_id) is None:
            raise NotFoundError("House", house_id)
        _require_text(name, "name")
        db_room = RoomRecord(house_id=house_id, name=name, type=type or None)
        self.db.add(db_room)
        _flush(self.db)
        return db_room

    def get_room_by_id(self, room_id: int) -> Optional[RoomRecord]:
        return self.db.get(RoomRecord, room_id)

    def get_rooms(self, house_id: Optional[int] = None) -> List[RoomRecord]:
        """Rooms ordered by name, optionally scoped to a house"""
        query = self.db.query(RoomRecord)
        if house_id is not None:
            query = query.filter(RoomRecord.house_id == house_id)
        return query.order_by(RoomRecord.name, RoomRecord.id).all()

    def count_rooms(self) -> int:
        return self.db.query(func.count(RoomRecord.id)).scalar() or 0

    def update_room(self, room_id: int, fields: Dict[str, Any]) -> RoomRecord:
        db_room = self._require(room_id)
        _reject_nulls(fields, self.REQUIRED)
        if "name" in fields:
            _require_text(fields["name"], "name")
        if "house_id" in fields and fields["house_id"] != db_room.house_id:
            if db_room.tenant is not None:
                raise ValidationError("Cannot move an occupied room to another house")
            if self.db.get(HouseRecord, fields["house_id"]) is None:
                raise NotFoundError("House", fields["house_id"])
        _apply_updates(db_room, fields, self.UPDATABLE)
        _flush(self.db)
        return db_room

    def delete_room(self, room_id: int) -> None:
        """Delete room with its tenant and the tenant's payments"""
        self.db.delete(self._require(room_id))
        _flush(self.db)

    def _require(self, room_id: int) -> RoomRecord:
        db_room = self.get_room_by_id(room_id)
        if db_room is None:
            raise NotFoundError("Room", room_id)
        return db_room


class TenantRepository:
    """Repository for tenants"""

    UPDATABLE = (
        "house_id",
        "room_id",
        "first_name",
        "last_name",
        "phone",
        "email",
        "entry_date",
        "payment_frequency",
        "rent_amount",
    )
    REQUIRED = tuple(name for name in UPDATABLE if name != "email")

    def __init__(self, db: Session):
        self.db = db

    def create_tenant(
        self,
        house_id: int,
        room_id: int,
        first_name: str,
        last_name: str,
        phone: str,
        entry_date: date,
        rent_amount: Decimal,
        payment_frequency: str = domain.MONTHLY,
        email: Optional[str] = None,
    ) -> TenantRecord:
        """Persist tenant after checking house, room ownership and room availability"""
        self._check_placement(house_id, room_id)
        for field, value in (("first_name", first_name), ("last_name", last_name), ("phone", phone)):
            _require_text(value, field)
        self._check_frequency(payment_frequency)
        _require_non_negative(rent_amount, "rent_amount")

        db_tenant = TenantRecord(
            house_id=house_id,
            room_id=room_id,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email or None,
            entry_date=entry_date,
            payment_frequency=payment_frequency,
            rent_amount=rent_amount,
        )
        self.db.add(db_tenant)
        _flush(self.db)
        return db_tenant

    def create_tenant_with_room(
        self,
        house_id: int,
        room_name: str,
        room_type: Optional[str] = None,
        **tenant_fields: Any,
    ) -> TenantRecord:
        """
        Create a room and its tenant as one unit of work.

        Both rows are flushed in the caller's transaction; if the tenant
        fails validation the room is discarded with it on rollback.
        """
        db_room = RoomRepository(self.db).create_room(house_id, room_name, room_type)
        return self.create_tenant(house_id=house_id, room_id=db_room.id, **tenant_fields)

    def get_tenant_by_id(self, tenant_id: int) -> Optional[TenantRecord]:
        return self.db.get(TenantRecord, tenant_id)

    def get_tenants(self, house_id: Optional[int] = None) -> List[TenantRecord]:
        """Tenants by entry date, most recent first, optionally scoped to a house"""
        query = self.db.query(TenantRecord)
        if house_id is not None:
            query = query.filter(TenantRecord.house_id == house_id)
        return query.order_by(TenantRecord.entry_date.desc(), TenantRecord.id.desc()).all()

    def update_tenant(self, tenant_id: int, fields: Dict[str, Any]) -> TenantRecord:
        db_tenant = self._require(tenant_id)
        _reject_nulls(fields, self.REQUIRED)
        for name in ("first_name", "last_name", "phone"):
            if name in fields:
                _require_text(fields[name], name)
        if "payment_frequency" in fields:
            self._check_frequency(fields["payment_frequency"])
        if "rent_amount" in fields:
            _require_non_negative(fields["rent_amount"], "rent_amount")
        if "house_id" in fields or "room_id" in fields:
            self._check_placement(
                fields.get("house_id", db_tenant.house_id),
                fields.get("room_id", db_tenant.room_id),
                tenant_id=tenant_id,
            )
        _apply_updates(db_tenant, fields, self.UPDATABLE)
        _flush(self.db)
        return db_tenant

    def delete_tenant(self, tenant_id: int) -> None:
        """Delete tenant with its payments; the room is kept"""
        self.db.delete(self._require(tenant_id))
        _flush(self.db)

    def _require(self, tenant_id: int) -> TenantRecord:
        db_tenant = self.get_tenant_by_id(tenant_id)
        if db_tenant is None:
            raise NotFoundError("Tenant", tenant_id)
        return db_tenant

    def _check_placement(self, house_id: int, room_id: int, tenant_id: Optional[int] = None) -> None:
        if self.db.get(HouseRecord, house_id) is None:
            raise NotFoundError("House", house_id)
        db_room = self.db.get(RoomRecord, room_id)
        if db_room is None:
            raise NotFoundError("Room", room_id)
        if db_room.house_id != house_id:
            raise ValidationError(f"Room {room_id} does not belong to house {house_id}")
        occupant = (
            self.db.query(TenantRecord.id)
            .filter(TenantRecord.room_id == room_id)
            .scalar()
        )
        if occupant is not None and occupant != tenant_id:
            raise ValidationError(f"Room {room_id} is already occupied")

    @staticmethod
    def _check_frequency(payment_frequency: str) -> None:
        if payment_frequency not in domain.PAYMENT_FREQUENCIES:
            raise ValidationError(f"Unknown payment frequency: {payment_frequency}")


class PaymentRepository:
    """Repository for rent payments"""

    UPDATABLE = ("tenant_id", "month", "amount", "notes")
    REQUIRED = ("tenant_id", "month", "amount")

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        tenant_id: int,
        month: str,
        amount: Decimal,
        notes: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> PaymentRecord:
        """Record a payment; paid_at defaults to now"""
        if self.db.get(TenantRecord, tenant_id) is None:
            raise NotFoundError("Tenant", tenant_id)
        self._check_month(month)
        _require_non_negative(amount, "amount")

        db_payment = PaymentRecord(
            tenant_id=tenant_id,
            month=month,
            amount=amount,
            notes=notes or None,
            paid_at=paid_at or datetime.now(),
        )
        self.db.add(db_payment)
        _flush(self.db)
        return db_payment

    def get_payment_by_id(self, payment_id: int) -> Optional[PaymentRecord]:
        return self.db.get(PaymentRecord, payment_id)

    def get_payments(self, tenant_id: Optional[int] = None) -> List[PaymentRecord]:
        """Payments newest first, optionally for a single tenant"""
        query = self.db.query(PaymentRecord)
        if tenant_id is not None:
            query = query.filter(PaymentRecord.tenant_id == tenant_id)
        return query.order_by(PaymentRecord.paid_at.desc(), PaymentRecord.id.desc()).all()

    def get_payments_by_month(self, tenant_id: int, month: str) -> List[PaymentRecord]:
        return (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.tenant_id == tenant_id, PaymentRecord.month == month)
            .order_by(PaymentRecord.paid_at.desc(), PaymentRecord.id.desc())
            .all()
        )

    def get_last_payment(self, tenant_id: int) -> Optional[PaymentRecord]:
        return (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.tenant_id == tenant_id)
            .order_by(PaymentRecord.paid_at.desc(), PaymentRecord.id.desc())
            .first()
        )

    def has_payment(self, tenant_id: int, month: str) -> bool:
        return (
            self.db.query(PaymentRecord.id)
            .filter(PaymentRecord.tenant_id == tenant_id, PaymentRecord.month == month)
            .first()
            is not None
        )

    def count_payments(self) -> int:
        return self.db.query(func.count(PaymentRecord.id)).scalar() or 0

    def sum_payments(self) -> Decimal:
        total = self.db.query(func.sum(PaymentRecord.amount)).scalar()
        return Decimal(str(total)) if total is not None else Decimal("0")

    def update_payment(self, payment_id: int, fields: Dict[str, Any]) -> PaymentRecord:
        db_payment = self._require(payment_id)
        _reject_nulls(fields, self.REQUIRED)
        if "tenant_id" in fields and self.db.get(TenantRecord, fields["tenant_id"]) is None:
            raise NotFoundError("Tenant", fields["tenant_id"])
        if "month" in fields:
            self._check_month(fields["month"])
        if "amount" in fields:
            _require_non_negative(fields["amount"], "amount")
        _apply_updates(db_payment, fields, self.UPDATABLE)
        _flush(self.db)
        return db_payment

    def delete_payment(self, payment_id: int) -> None:
        self.db.delete(self._require(payment_id))
        _flush(self.db)

    def _require(self, payment_id: int) -> PaymentRecord:
        db_payment = self.get_payment_by_id(payment_id)
        if db_payment is None:
            raise NotFoundError("Payment", payment_id)
        return db_payment

    @staticmethod
    def _check_month(month: str) -> None:
        if not month or not is_valid_month(month):
            raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")


class SqlEntityStore:
    """EntityStore backed by the SQLAlchemy repositories, returning domain objects"""

    def __init__(self, db: Session):
        self.houses = HouseRepository(db)
        self.rooms = RoomRepository(db)
        self.tenants = TenantRepository(db)
        self.payments = PaymentRepository(db)

    def get_payments(self, tenant_id: int) -> List[domain.Payment]:
        return [p.to_domain() for p in self.payments.get_payments(tenant_id)]

    def has_payment(self, tenant_id: int, month: str) -> bool:
        return self.payments.has_payment(tenant_id, month)

    def get_tenants(self, house_id: Optional[int] = None) -> List[domain.Tenant]:
        return [t.to_domain() for t in self.tenants.get_tenants(house_id)]

    def get_tenant(self, tenant_id: int) -> Optional[domain.Tenant]:
        db_tenant = self.tenants.get_tenant_by_id(tenant_id)
        return db_tenant.to_domain() if db_tenant else None

    def get_houses(self) -> List[domain.House]:
        return [h.to_domain() for h in self.houses.get_houses()]

    def get_house(self, house_id: int) -> Optional[domain.House]:
        db_house = self.houses.get_house_by_id(house_id)
        return db_house.to_domain() if db_house else None

    def get_rooms(self, house_id: Optional[int] = None) -> List[domain.Room]:
        return [r.to_domain() for r in self.rooms.get_rooms(house_id)]

    def count_rooms(self) -> int:
        return self.rooms.count_rooms()

    def count_payments(self) -> int:
        return self.payments.count_payments()

    def sum_payments(self) -> Decimal:
        return self.payments.sum_payments()
