"""Users and tasks.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates the users table and the tasks table. Tasks reference their owner
with ON DELETE CASCADE, so removing a user removes that user's tasks.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TASK_STATUS = sa.Enum('todo', 'in-progress', 'done', name='taskstatus')
PRIORITY = sa.Enum('low', 'medium', 'high', name='priority')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.AutoString(length=255), nullable=False),
        sa.Column('avatar', sqlmodel.AutoString(length=255), nullable=False, server_default=''),
        sa.Column('hashed_password', sqlmodel.AutoString(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.AutoString(length=500), nullable=False, server_default=''),
        sa.Column('status', TASK_STATUS, nullable=False, server_default='todo'),
        sa.Column('priority', PRIORITY, nullable=False, server_default='medium'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_user_id', 'tasks', ['user_id'])
    op.create_index('ix_tasks_user_id_created_at', 'tasks', ['user_id', 'created_at'])
    op.create_index('ix_tasks_user_id_status', 'tasks', ['user_id', 'status'])


def downgrade() -> None:
    op.drop_index('ix_tasks_user_id_status', table_name='tasks')
    op.drop_index('ix_tasks_user_id_created_at', table_name='tasks')
    op.drop_index('ix_tasks_user_id', table_name='tasks')
    op.drop_table('tasks')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    TASK_STATUS.drop(op.get_bind(), checkfirst=True)
    PRIORITY.drop(op.get_bind(), checkfirst=True)
