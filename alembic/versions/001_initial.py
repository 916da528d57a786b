"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('slug', sa.String(100), unique=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), default=''),
        sa.Column('images', postgresql.JSON()),
        sa.Column('timezone', sa.String(50), default='America/New_York'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('min_booking_advance_hours', sa.Integer(), default=0),
        sa.Column('max_booking_advance_hours', sa.Integer(), default=720),
        sa.Column('cancellation_window_hours', sa.Integer(), default=24),
        sa.Column('deposit_required', sa.Boolean(), default=False),
        sa.Column('deposit_amount_cents', sa.Integer(), default=0),
        sa.Column('deposit_currency', sa.String(3), default='USD'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create reservation_settings table
    op.create_table(
        'reservation_settings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer()),
        sa.Column('specific_date', sa.Date()),
        sa.Column('is_default', sa.Boolean(), default=True),
        sa.Column('timeslot_length_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('time_ranges', postgresql.JSON()),
        sa.Column('table_inventory', postgresql.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('names', postgresql.JSON()),
        sa.Column('phones', postgresql.JSON()),
        sa.Column('joined_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id')),
        sa.Column('confirmation_code', sa.String(8), unique=True, nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(20), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('timeslot_start', sa.String(5), nullable=False),
        sa.Column('timeslot_end', sa.String(5), nullable=False),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('dietary_restrictions', sa.Text()),
        sa.Column('special_occasion', sa.Text()),
        sa.Column('special_requests', sa.Text()),
        sa.Column('status', sa.String(20), nullable=False, server_default='new'),
        sa.Column('deposit_payment_intent_id', sa.String(255)),
        sa.Column('reminder_1_week_at', sa.DateTime()),
        sa.Column('reminder_1_week_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reminder_1_day_at', sa.DateTime()),
        sa.Column('reminder_1_day_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_reservation_settings_restaurant_id', 'reservation_settings', ['restaurant_id'])
    op.create_index('ix_reservations_restaurant_date', 'reservations', ['restaurant_id', 'date'])
    op.create_index('ix_reservations_reminder_1_week_at', 'reservations', ['reminder_1_week_at'])
    op.create_index('ix_reservations_reminder_1_day_at', 'reservations', ['reminder_1_day_at'])


def downgrade() -> None:
    op.drop_table('reservations')
    op.drop_table('customers')
    op.drop_table('reservation_settings')
    op.drop_table('restaurants')
