"""Initial schema: accounts, access requests, registry and transports

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-18 09:12:44.102311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e2c7d9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - create all initial tables."""
    op.create_table(
        'account',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='user'),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_account_username'), 'account', ['username'], unique=False)
    op.create_index(op.f('ix_account_email'), 'account', ['email'], unique=False)
    # usernames and emails are unique regardless of case
    op.create_index('ux_account_username_lower', 'account', [sa.text('lower(username)')], unique=True)
    op.create_index('ux_account_email_lower', 'account', [sa.text('lower(email)')], unique=True)
    op.create_index(op.f('ix_account_role'), 'account', ['role'], unique=False)
    op.create_index(op.f('ix_account_is_approved'), 'account', ['is_approved'], unique=False)

    # Access requests are kept after a decision as an audit trail
    op.create_table(
        'accessrequest',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_accessrequest_username'), 'accessrequest', ['username'], unique=False)
    op.create_index(op.f('ix_accessrequest_email'), 'accessrequest', ['email'], unique=False)
    op.create_index(op.f('ix_accessrequest_status'), 'accessrequest', ['status'], unique=False)

    op.create_table(
        'person',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('province', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_person_created_at'), 'person', ['created_at'], unique=False)

    op.create_table(
        'driver',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('license_number', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_driver_created_at'), 'driver', ['created_at'], unique=False)

    op.create_table(
        'destination',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_destination_created_at'), 'destination', ['created_at'], unique=False)

    op.create_table(
        'transport',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('start_time', sa.String(length=8), nullable=False),
        sa.Column('end_time', sa.String(length=8), nullable=True),
        sa.Column('user_id', sa.String(length=50), nullable=False),
        sa.Column('driver_id', sa.String(length=50), nullable=False),
        sa.Column('destination_id', sa.String(length=50), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recurring_type', sa.String(length=20), nullable=True),
        sa.Column('recurring_end_date', sa.String(length=10), nullable=True),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['person.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['driver_id'], ['driver.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['destination_id'], ['destination.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transport_user_id'), 'transport', ['user_id'], unique=False)
    op.create_index(op.f('ix_transport_driver_id'), 'transport', ['driver_id'], unique=False)
    op.create_index(op.f('ix_transport_destination_id'), 'transport', ['destination_id'], unique=False)
    op.create_index('ix_transport_date_start_time', 'transport', ['date', 'start_time'], unique=False)


def downgrade() -> None:
    """Downgrade schema - drop all tables."""
    op.drop_index('ix_transport_date_start_time', table_name='transport')
    op.drop_index(op.f('ix_transport_destination_id'), table_name='transport')
    op.drop_index(op.f('ix_transport_driver_id'), table_name='transport')
    op.drop_index(op.f('ix_transport_user_id'), table_name='transport')
    op.drop_table('transport')
    op.drop_index(op.f('ix_destination_created_at'), table_name='destination')
    op.drop_table('destination')
    op.drop_index(op.f('ix_driver_created_at'), table_name='driver')
    op.drop_table('driver')
    op.drop_index(op.f('ix_person_created_at'), table_name='person')
    op.drop_table('person')
    op.drop_index(op.f('ix_accessrequest_status'), table_name='accessrequest')
    op.drop_index(op.f('ix_accessrequest_email'), table_name='accessrequest')
    op.drop_index(op.f('ix_accessrequest_username'), table_name='accessrequest')
    op.drop_table('accessrequest')
    op.drop_index('ux_account_email_lower', table_name='account')
    op.drop_index('ux_account_username_lower', table_name='account')
    op.drop_index(op.f('ix_account_is_approved'), table_name='account')
    op.drop_index(op.f('ix_account_role'), table_name='account')
    op.drop_index(op.f('ix_account_email'), table_name='account')
    op.drop_index(op.f('ix_account_username'), table_name='account')
    op.drop_table('account')
