"""create_workspace_role_tables

Revision ID: 4c1d9e7a2b53
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d9e7a2b53"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create workspaces, users and user_workspace_roles tables."""
    op.create_table('workspaces',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('users',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('active_workspace_id', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['active_workspace_id'], ['workspaces.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('user_workspace_roles',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('workspace_id', sa.BigInteger(), nullable=False),
        sa.Column('role_name', sa.String(length=50), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "role_name IN ('global_admin', 'workspace_admin', 'examiner', 'examinee')",
            name='ck_user_workspace_roles_role_name',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'user_id', 'workspace_id', 'role_name', name='uq_user_workspace_roles_assignment'
        ),
    )
    op.create_index('ix_user_workspace_roles_user_id', 'user_workspace_roles', ['user_id'], unique=False)
    op.create_index(
        'ix_user_workspace_roles_workspace_id', 'user_workspace_roles', ['workspace_id'], unique=False
    )


def downgrade() -> None:
    """Drop the workspace role tables."""
    op.drop_index('ix_user_workspace_roles_workspace_id', table_name='user_workspace_roles')
    op.drop_index('ix_user_workspace_roles_user_id', table_name='user_workspace_roles')
    op.drop_table('user_workspace_roles')
    op.drop_table('users')
    op.drop_table('workspaces')
