"""create workers, shifts, assignments, availability and recurring templates

Revision ID: create_scheduling
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'create_scheduling'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    'worker_role': ('ADMIN', 'MANAGER', 'EMPLOYEE'),
    'week_day': ('MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN'),
    'recurrence_rule': ('NONE', 'DAILY', 'EVERY_TWO_DAYS', 'WEEKLY', 'CUSTOM'),
    'shift_status': ('UNASSIGNED', 'PUBLISHED', 'CONFIRMED', 'NEED_REALLOCATION'),
    'assignment_status': ('PENDING', 'ACCEPTED', 'DECLINED'),
}


def _enum(name):
    # recurrence_rule is shared by two tables; postgres types are created once up front
    values = ENUMS[name]
    return sa.Enum(*values, name=name).with_variant(
        postgresql.ENUM(*values, name=name, create_type=False), 'postgresql'
    )


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'workers',
        sa.Column('worker_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', _enum('worker_role'), nullable=False),
        sa.Column('is_subcontractor', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('worker_id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'weekly_limits',
        sa.Column('weekly_limit_id', UUID(as_uuid=True), nullable=False),
        sa.Column('worker_id', UUID(as_uuid=True), nullable=False),
        sa.Column('weekly_cap_minutes', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['worker_id'], ['workers.worker_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('weekly_limit_id'),
        sa.UniqueConstraint('worker_id'),
    )

    op.create_table(
        'work_sites',
        sa.Column('site_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('site_id'),
    )

    op.create_table(
        'worker_availability',
        sa.Column('availability_id', UUID(as_uuid=True), nullable=False),
        sa.Column('worker_id', UUID(as_uuid=True), nullable=False),
        sa.Column('day', _enum('week_day'), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['worker_id'], ['workers.worker_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('availability_id'),
    )
    op.create_index(op.f('ix_worker_availability_worker_id'), 'worker_availability', ['worker_id'], unique=False)

    op.create_table(
        'recurring_templates',
        sa.Column('template_id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('rule', _enum('recurrence_rule'), nullable=False),
        sa.Column('interval', sa.Integer(), nullable=False),
        sa.Column('by_weekday', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('shift_duration', sa.Integer(), nullable=False),
        sa.Column('base_start_time', sa.Time(), nullable=False),
        sa.Column('timezone', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('template_id'),
    )

    op.create_table(
        'shifts',
        sa.Column('shift_id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('site_id', UUID(as_uuid=True), nullable=True),
        sa.Column('recurring_template_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurring_rule', _enum('recurrence_rule'), nullable=False),
        sa.Column('required_workers', sa.Integer(), nullable=False),
        sa.Column('status', _enum('shift_status'), nullable=False),
        sa.Column('created_by', UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['site_id'], ['work_sites.site_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['recurring_template_id'], ['recurring_templates.template_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('shift_id'),
    )
    op.create_index(op.f('ix_shifts_start_time'), 'shifts', ['start_time'], unique=False)

    op.create_table(
        'shift_assignments',
        sa.Column('assignment_id', UUID(as_uuid=True), nullable=False),
        sa.Column('shift_id', UUID(as_uuid=True), nullable=False),
        sa.Column('worker_id', UUID(as_uuid=True), nullable=False),
        sa.Column('status', _enum('assignment_status'), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['shift_id'], ['shifts.shift_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['worker_id'], ['workers.worker_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('assignment_id'),
        sa.UniqueConstraint('shift_id', 'worker_id', name='uq_shift_assignments_shift_worker'),
    )
    op.create_index(op.f('ix_shift_assignments_shift_id'), 'shift_assignments', ['shift_id'], unique=False)
    op.create_index(op.f('ix_shift_assignments_worker_id'), 'shift_assignments', ['worker_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_shift_assignments_worker_id'), table_name='shift_assignments')
    op.drop_index(op.f('ix_shift_assignments_shift_id'), table_name='shift_assignments')
    op.drop_table('shift_assignments')
    op.drop_index(op.f('ix_shifts_start_time'), table_name='shifts')
    op.drop_table('shifts')
    op.drop_table('recurring_templates')
    op.drop_index(op.f('ix_worker_availability_worker_id'), table_name='worker_availability')
    op.drop_table('worker_availability')
    op.drop_table('work_sites')
    op.drop_table('weekly_limits')
    op.drop_table('workers')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in reversed(list(ENUMS)):
            postgresql.ENUM(name=name).drop(bind, checkfirst=True)
