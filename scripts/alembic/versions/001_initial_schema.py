"""Initial schema with field types, fields, time slots, vouchers, bookings

Revision ID: 001_initial_schema
Revises: 
Create Date: 2025-12-06

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BOOKING_STATUSES = ('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'CHECKED_IN', 'FINISHED')


def upgrade() -> None:
    """Create initial database schema."""
    # gist index over (uuid =, tstzrange &&)
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        "CREATE TYPE bookingstatus AS ENUM ("
        + ", ".join(f"'{s}'" for s in BOOKING_STATUSES)
        + ")"
    )

    op.create_table(
        'field_types',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'fields',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('field_type_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['field_type_id'], ['field_types.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_fields_field_type_id', 'fields', ['field_type_id'])

    op.create_table(
        'time_slots',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('field_type_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('is_peak_hour', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint('start_time < end_time', name='check_slot_time_range'),
        sa.CheckConstraint('price >= 0', name='check_nonnegative_slot_price'),
        sa.ForeignKeyConstraint(['field_type_id'], ['field_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_time_slots_field_type_id', 'time_slots', ['field_type_id'])
    op.create_index('ix_time_slots_type_start', 'time_slots', ['field_type_id', 'start_time'])

    op.create_table(
        'vouchers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('valid_from', sa.DateTime(timezone=True), nullable=False),
        sa.Column('valid_to', sa.DateTime(timezone=True), nullable=False),
        sa.Column('min_order_value', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('discount_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('discount_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('max_discount_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='check_nonnegative_voucher_quantity'),
        sa.CheckConstraint('valid_from < valid_to', name='check_voucher_validity_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_vouchers_code', 'vouchers', ['code'], unique=True)

    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('code', sa.String(length=11), nullable=False),
        sa.Column('field_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('customer_name', sa.String(length=150), nullable=True),
        sa.Column('customer_phone', sa.String(length=20), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('final_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('voucher_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('status', postgresql.ENUM(*BOOKING_STATUSES, name='bookingstatus', create_type=False), nullable=False),
        sa.Column('check_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='check_booking_time_range'),
        sa.CheckConstraint('total_price >= 0', name='check_nonnegative_total_price'),
        sa.CheckConstraint('final_price >= 0', name='check_nonnegative_final_price'),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['voucher_id'], ['vouchers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_bookings_code', 'bookings', ['code'], unique=True)
    op.create_index('ix_bookings_field_window', 'bookings', ['field_id', 'start_time', 'end_time'])
    op.create_index('ix_bookings_account_created', 'bookings', ['account_id', sa.text('created_at DESC')])
    op.create_index('ix_bookings_status_created', 'bookings', ['status', 'created_at'])

    # No two non-cancelled bookings of one field may share an instant
    op.execute(
        "ALTER TABLE bookings ADD CONSTRAINT excl_bookings_field_overlap "
        "EXCLUDE USING gist (field_id WITH =, tstzrange(start_time, end_time) WITH &&) "
        "WHERE (status <> 'CANCELLED')"
    )


def downgrade() -> None:
    """Drop all tables and types."""
    op.drop_table('bookings')
    op.drop_table('vouchers')
    op.drop_table('time_slots')
    op.drop_table('fields')
    op.drop_table('field_types')

    op.execute("DROP TYPE bookingstatus")
