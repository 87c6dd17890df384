"""organizations, plans, subscriptions and subscription history

Revision ID: 0001_organization_subscriptions
Revises:
Create Date: 2026-02-03 00:00:00.000000
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = '0001_organization_subscriptions'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'organizations',
        sa.Column('id', sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('contact_first_name', sa.String(length=100), nullable=True),
        sa.Column('contact_last_name', sa.String(length=100), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('admin_uid', sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_organizations_admin_uid', 'organizations', ['admin_uid'])

    op.create_table(
        'plans',
        sa.Column('id', sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('max_members', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('max_projects', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('shared_storage_per_project', sa.BigInteger(), nullable=False, server_default='5368709120'),
        sa.Column('private_storage_per_user', sa.BigInteger(), nullable=False, server_default='1073741824'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='EUR'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
        sa.CheckConstraint('max_members > 0', name='plan_max_members_positive'),
        sa.CheckConstraint('max_projects > 0', name='plan_max_projects_positive'),
        sa.CheckConstraint('shared_storage_per_project >= 0', name='plan_shared_storage_non_negative'),
        sa.CheckConstraint('private_storage_per_user >= 0', name='plan_private_storage_non_negative'),
    )
    op.create_index('ix_plans_is_public', 'plans', ['is_public'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column('organization_id', sa.BigInteger(), nullable=False),
        sa.Column('plan_id', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paused_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('organization_id', name='uq_subscriptions_organization'),
        sa.CheckConstraint(
            "status in ('active', 'paused', 'cancelled', 'expired')",
            name='subscription_status_values',
        ),
    )
    op.create_index('ix_subscriptions_status', 'subscriptions', ['status'])
    op.create_index('ix_subscriptions_plan', 'subscriptions', ['plan_id'])

    op.create_table(
        'subscriptions_history',
        sa.Column('id', sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column('subscription_id', sa.BigInteger(), nullable=False),
        sa.Column('changed_by_user_id', sa.String(length=64), nullable=False),
        sa.Column('change_timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('previous_plan_id', sa.BigInteger(), nullable=True),
        sa.Column('previous_status', sa.String(length=20), nullable=True),
        sa.Column('previous_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('previous_ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('previous_paused_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('previous_cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('new_plan_id', sa.BigInteger(), nullable=False),
        sa.Column('new_status', sa.String(length=20), nullable=False),
        sa.Column('new_started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('new_ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('new_paused_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('new_cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_subscriptions_history_subscription', 'subscriptions_history', ['subscription_id'])


def downgrade() -> None:
    op.drop_index('ix_subscriptions_history_subscription', table_name='subscriptions_history')
    op.drop_table('subscriptions_history')
    op.drop_index('ix_subscriptions_plan', table_name='subscriptions')
    op.drop_index('ix_subscriptions_status', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_plans_is_public', table_name='plans')
    op.drop_table('plans')
    op.drop_index('ix_organizations_admin_uid', table_name='organizations')
    op.drop_table('organizations')
