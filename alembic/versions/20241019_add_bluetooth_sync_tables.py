"""Add users, bluetooth devices, sync sessions and health data tables

Revision ID: 20241019_add_bluetooth_sync_tables
Revises:
Create Date: 2024-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20241019_add_bluetooth_sync_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('clerk_id', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_clerk_id', 'users', ['clerk_id'], unique=True)

    op.create_table(
        'bluetooth_devices',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),

        # Identity
        sa.Column('device_id', sa.String(length=128), nullable=False),
        sa.Column('device_name', sa.String(length=128), nullable=False),
        sa.Column('device_type', sa.String(length=24), nullable=False),
        sa.Column('brand', sa.String(length=80), nullable=False),
        sa.Column('model', sa.String(length=80), nullable=False),
        sa.Column('mac_address', sa.String(length=32), nullable=True),
        sa.Column('firmware_version', sa.String(length=80), nullable=True),

        # Connection state
        sa.Column('is_connected', sa.Boolean(), nullable=False),
        sa.Column('battery_level', sa.Integer(), nullable=False),
        sa.Column('signal_strength', sa.Integer(), nullable=False),
        sa.Column('last_sync', sa.DateTime(), nullable=True),
        sa.Column('last_connected', sa.DateTime(), nullable=True),
        sa.Column('last_disconnected', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),

        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),

        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'device_id', name='uq_bluetooth_device_user_device')
    )
    op.create_index('ix_bluetooth_devices_id', 'bluetooth_devices', ['id'])
    op.create_index('ix_bluetooth_devices_user_id', 'bluetooth_devices', ['user_id'])
    op.create_index('ix_bluetooth_device_user_last_sync', 'bluetooth_devices', ['user_id', 'last_sync'])

    op.create_table(
        'sync_sessions',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('session_id', sa.String(length=200), nullable=False),
        sa.Column('device_id', sa.String(length=128), nullable=False),
        sa.Column('device_name', sa.String(length=128), nullable=False),

        # Lifecycle
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('sync_type', sa.String(length=16), nullable=False),

        # Counters
        sa.Column('data_points', sa.Integer(), nullable=False),
        sa.Column('bytes_transferred', sa.Integer(), nullable=False),
        sa.Column('health_data_count', sa.Integer(), nullable=False),
        sa.Column('workout_data_count', sa.Integer(), nullable=False),
        sa.Column('sleep_data_count', sa.Integer(), nullable=False),

        sa.Column('sync_errors', sa.JSON(), nullable=False),

        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),

        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id')
    )
    op.create_index('ix_sync_sessions_id', 'sync_sessions', ['id'])
    op.create_index('ix_sync_sessions_user_id', 'sync_sessions', ['user_id'])
    op.create_index('ix_sync_session_user_start', 'sync_sessions', ['user_id', 'start_time'])
    op.create_index('ix_sync_session_device_start', 'sync_sessions', ['device_id', 'start_time'])
    op.create_index('ix_sync_session_status', 'sync_sessions', ['status'])

    op.create_table(
        'health_data',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('device_id', sa.String(length=128), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),

        # Metrics
        sa.Column('steps', sa.Integer(), nullable=False),
        sa.Column('heart_rate', sa.Float(), nullable=True),
        sa.Column('calories', sa.Float(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('sleep_hours', sa.Float(), nullable=True),
        sa.Column('active_minutes', sa.Integer(), nullable=False),
        sa.Column('blood_oxygen', sa.Float(), nullable=True),
        sa.Column('blood_pressure', sa.JSON(), nullable=True),
        sa.Column('temperature', sa.Float(), nullable=True),
        sa.Column('stress_level', sa.Float(), nullable=True),
        sa.Column('sleep_stages', sa.JSON(), nullable=False),
        sa.Column('workouts', sa.JSON(), nullable=False),

        sa.Column('sync_session_id', sa.String(length=25), nullable=True),
        sa.Column('data_source', sa.String(length=16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),

        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),

        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['sync_session_id'], ['sync_sessions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'device_id', 'date', name='uq_health_data_user_device_date')
    )
    op.create_index('ix_health_data_id', 'health_data', ['id'])
    op.create_index('ix_health_data_user_id', 'health_data', ['user_id'])
    op.create_index('ix_health_data_sync_session_id', 'health_data', ['sync_session_id'])
    op.create_index('ix_health_data_user_date', 'health_data', ['user_id', 'date'])
    op.create_index('ix_health_data_device_date', 'health_data', ['device_id', 'date'])


def downgrade() -> None:
    op.drop_table('health_data')
    op.drop_table('sync_sessions')
    op.drop_table('bluetooth_devices')
    op.drop_table('users')
