"""Initial ledger schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

Creates profiles, task_completions, transactions and user_roles.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None


MONEY_FIELDS = (
    'total_balance',
    'available_balance',
    'locked_deposit',
    'today_commission',
    'total_commission',
    'total_revenue',
    'total_withdrawal',
    'level1_commission',
    'level2_commission',
    'level3_commission',
)


def _money_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DECIMAL(precision=18, scale=8),
        nullable=False,
        server_default='0'
    )


def upgrade() -> None:
    """Create ledger tables."""
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column(
            'level',
            sa.Integer(),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'is_vip',
            sa.Boolean(),
            nullable=False,
            server_default=sa.false()
        ),
        sa.Column('invite_code', sa.String(length=20), nullable=False),
        sa.Column('invited_by', sa.Integer(), nullable=True),
        sa.Column(
            'contract_start_date',
            sa.DateTime(timezone=True),
            nullable=True,
            comment='Set by the first approved deposit'
        ),
        *(_money_column(name) for name in MONEY_FIELDS),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.ForeignKeyConstraint(
            ['invited_by'],
            ['profiles.id'],
            ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        *(
            sa.CheckConstraint(
                f'{name} >= 0',
                name=f'check_profile_{name}_non_negative'
            )
            for name in MONEY_FIELDS
        ),
        sa.CheckConstraint(
            'total_balance >= available_balance',
            name='check_profile_total_covers_available'
        ),
        sa.CheckConstraint(
            'level >= 0',
            name='check_profile_level_non_negative'
        )
    )
    op.create_index(
        'ix_profiles_user_id', 'profiles', ['user_id'], unique=True
    )
    op.create_index(
        'ix_profiles_invite_code', 'profiles', ['invite_code'], unique=True
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])
    op.create_index('ix_profiles_invited_by', 'profiles', ['invited_by'])

    op.create_table(
        'task_completions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('task_date', sa.Date(), nullable=False),
        sa.Column(
            'tasks_completed',
            sa.Integer(),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'earnings',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'completed_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['profiles.user_id'],
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'user_id', 'task_date', name='uq_task_completion_user_day'
        ),
        sa.CheckConstraint(
            'tasks_completed >= 0',
            name='check_task_completion_count_non_negative'
        ),
        sa.CheckConstraint(
            'earnings >= 0',
            name='check_task_completion_earnings_non_negative'
        )
    )
    op.create_index(
        'ix_task_completions_user_id', 'task_completions', ['user_id']
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column(
            'type',
            sa.String(length=20),
            nullable=False,
            comment='deposit, withdrawal'
        ),
        sa.Column(
            'amount',
            sa.DECIMAL(precision=18, scale=8),
            nullable=False
        ),
        sa.Column('wallet_address', sa.String(length=255), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='pending',
            comment='pending, approved, rejected'
        ),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', sa.String(length=64), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['profiles.user_id'],
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'amount > 0',
            name='check_transaction_amount_positive'
        ),
        sa.CheckConstraint(
            "type IN ('deposit', 'withdrawal')",
            name='check_transaction_type'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_transaction_status'
        )
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_type', 'transactions', ['type'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])
    op.create_index(
        'ix_transactions_created_at', 'transactions', ['created_at']
    )

    op.create_table(
        'user_roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column(
            'role',
            sa.String(length=20),
            nullable=False,
            server_default='user',
            comment='admin, user'
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('now()')
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'role', name='uq_user_role')
    )
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'])


def downgrade() -> None:
    """Drop ledger tables."""
    op.drop_index('ix_user_roles_user_id', table_name='user_roles')
    op.drop_table('user_roles')

    op.drop_index('ix_transactions_created_at', table_name='transactions')
    op.drop_index('ix_transactions_status', table_name='transactions')
    op.drop_index('ix_transactions_type', table_name='transactions')
    op.drop_index('ix_transactions_user_id', table_name='transactions')
    op.drop_table('transactions')

    op.drop_index(
        'ix_task_completions_user_id', table_name='task_completions'
    )
    op.drop_table('task_completions')

    op.drop_index('ix_profiles_invited_by', table_name='profiles')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_index('ix_profiles_invite_code', table_name='profiles')
    op.drop_index('ix_profiles_user_id', table_name='profiles')
    op.drop_table('profiles')
