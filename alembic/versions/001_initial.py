"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

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
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('phone', sa.String(20)),
        sa.Column('role', sa.Enum('ADMIN', 'RESTAURANT_OWNER', name='userrole'), default='RESTAURANT_OWNER'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), unique=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('description', sa.Text()),
        sa.Column('is_public', sa.Boolean(), default=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('table_layout', postgresql.JSON(), default=[]),
        sa.Column('has_visual_layout', sa.Boolean(), default=False),
        sa.Column('max_simultaneous_reservations', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('reservation_duration', sa.Integer(), nullable=False, server_default='120'),
        sa.Column('slot_granularity', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('min_advance_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('auto_confirm_reservations', sa.Boolean(), default=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create opening_hours table
    op.create_table(
        'opening_hours',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('is_open', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('open_time', sa.String(5)),
        sa.Column('close_time', sa.String(5)),
        sa.UniqueConstraint('restaurant_id', 'day_of_week'),
    )

    # Create exceptional_dates table
    op.create_table(
        'exceptional_dates',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('is_open', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('open_time', sa.String(5)),
        sa.Column('close_time', sa.String(5)),
        sa.Column('note', sa.String(255)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.UniqueConstraint('restaurant_id', 'date'),
    )

    # Create floor_plans table
    op.create_table(
        'floor_plans',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('order', sa.Integer(), default=0),
        sa.Column('width', sa.Integer(), default=800),
        sa.Column('height', sa.Integer(), default=600),
        sa.Column('elements', postgresql.JSON(), default=[]),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create reservation_invitations table
    op.create_table(
        'reservation_invitations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('token', sa.String(64), unique=True, nullable=False),
        sa.Column('guest_contact', sa.String(255)),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('invitation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('reservation_invitations.id'), unique=True),
        sa.Column('table_id', sa.String(50)),
        sa.Column('guest_name', sa.String(255), nullable=False),
        sa.Column('guest_contact', sa.String(255), nullable=False),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('time_from', sa.DateTime(), nullable=False),
        sa.Column('time_to', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('confirmation_code', sa.String(8)),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_floor_plans_restaurant_id', 'floor_plans', ['restaurant_id'])
    op.create_index('ix_reservations_restaurant_time', 'reservations', ['restaurant_id', 'time_from', 'time_to'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('ix_reservation_invitations_restaurant_id', 'reservation_invitations', ['restaurant_id'])


def downgrade() -> None:
    op.drop_table('reservations')
    op.drop_table('reservation_invitations')
    op.drop_table('floor_plans')
    op.drop_table('exceptional_dates')
    op.drop_table('opening_hours')
    op.drop_table('restaurants')
    op.drop_table('users')
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
