"""SQLAlchemy database models.

Maps domain models to PostgreSQL tables.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import DeclarativeBase, relationship

from src.models.booking import BookingStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class FieldTypeTable(Base):
    """Field type (pricing category) table."""

    __tablename__ = "field_types"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    # Relationships
    fields = relationship("FieldTable", back_populates="field_type")
    time_slots = relationship("TimeSlotTable", back_populates="field_type", cascade="all, delete-orphan")


class FieldTable(Base):
    """Field entity table."""

    __tablename__ = "fields"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(150), nullable=False)
    field_type_id = Column(PG_UUID(as_uuid=True), ForeignKey("field_types.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    # Relationships
    field_type = relationship("FieldTypeTable", back_populates="fields")
    bookings = relationship("BookingTable", back_populates="field", cascade="all, delete-orphan")


class TimeSlotTable(Base):
    """Price tier table (wall-clock band per field type)."""

    __tablename__ = "time_slots"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    field_type_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("field_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    is_peak_hour = Column(Boolean, nullable=False, default=False)

    # Relationships
    field_type = relationship("FieldTypeTable", back_populates="time_slots")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_slot_time_range"),
        CheckConstraint("price >= 0", name="check_nonnegative_slot_price"),
        Index("ix_time_slots_type_start", field_type_id, start_time),
    )


class VoucherTable(Base):
    """Voucher entity table."""

    __tablename__ = "vouchers"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    code = Column(String(50), nullable=False, unique=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_to = Column(DateTime(timezone=True), nullable=False)
    min_order_value = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    max_discount_amount = Column(Numeric(12, 2), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_nonnegative_voucher_quantity"),
        CheckConstraint("valid_from < valid_to", name="check_voucher_validity_range"),
    )


class BookingTable(Base):
    """Booking entity table.

    ``excl_bookings_field_overlap`` rejects a second non-cancelled booking whose
    [start_time, end_time) range intersects an existing one on the same field.
    Requires the btree_gist extension.
    """

    __tablename__ = "bookings"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    code = Column(String(11), nullable=False)
    field_id = Column(PG_UUID(as_uuid=True), ForeignKey("fields.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(PG_UUID(as_uuid=True), nullable=True)
    customer_name = Column(String(150), nullable=True)
    customer_phone = Column(String(20), nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    final_price = Column(Numeric(12, 2), nullable=False)
    voucher_id = Column(PG_UUID(as_uuid=True), ForeignKey("vouchers.id", ondelete="SET NULL"), nullable=True)
    status = Column(
        Enum(BookingStatus, native_enum=True),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    check_in_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    # Relationships
    field = relationship("FieldTable", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_time_range"),
        CheckConstraint("total_price >= 0", name="check_nonnegative_total_price"),
        CheckConstraint("final_price >= 0", name="check_nonnegative_final_price"),
        ExcludeConstraint(
            (field_id, "="),
            (func.tstzrange(start_time, end_time), "&&"),
            name="excl_bookings_field_overlap",
            using="gist",
            where="status <> 'CANCELLED'",
        ),
        Index("ix_bookings_field_window", field_id, start_time, end_time),
        Index("ix_bookings_account_created", account_id, created_at.desc()),
        Index("ix_bookings_status_created", status, created_at),
        Index("ix_bookings_code", code, unique=True),
    )
