"""Initial agency ops schema.

Revision ID: 20260301_000001
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        'created_at',
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text('now()'),
    )


def upgrade() -> None:
    """Create tenant, referral, payroll and automation tables."""

    # Tenants and members
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('plan_name', sa.String(64), nullable=True),
        sa.Column('subscription_status', sa.String(32), nullable=True),
        sa.Column('trial_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('trial_extended_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('subscription_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('referred_by_promo_code', sa.String(64), nullable=True, comment='Promo code used at registration'),
        _created_at(),
        sa.PrimaryKeyConstraint('id', name='pk_organizations'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('job_title', sa.String(255), nullable=False, server_default=''),
        sa.Column('salary', sa.DECIMAL(12, 2), nullable=True, comment='Fallback base salary when no scheme applies'),
        sa.Column('balance', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_users_organization_id_organizations', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_organization_id', 'users', ['organization_id'])

    # Affiliate program
    op.create_table(
        'promo_codes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(64), nullable=False, comment='Normalized: lowercase, no whitespace'),
        sa.Column('registrations_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('payments_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_promo_codes_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_promo_codes_user_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_promo_codes'),
    )
    op.create_index('ix_promo_codes_organization_id', 'promo_codes', ['organization_id'])
    op.create_index('ix_promo_codes_user_id', 'promo_codes', ['user_id'])
    op.create_index('ix_promo_codes_code', 'promo_codes', ['code'], unique=True)

    op.create_table(
        'referral_registrations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('referrer_user_id', sa.Uuid(), nullable=False),
        sa.Column('referrer_org_id', sa.Uuid(), nullable=False),
        sa.Column('referred_org_id', sa.Uuid(), nullable=False),
        sa.Column('promo_code_id', sa.Uuid(), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false', comment='Referred organization has paid'),
        _created_at(),
        sa.CheckConstraint('level BETWEEN 1 AND 3', name='ck_referral_registrations_level_range'),
        sa.CheckConstraint('referrer_org_id <> referred_org_id', name='ck_referral_registrations_no_self_referral'),
        sa.ForeignKeyConstraint(['referrer_user_id'], ['users.id'], name='fk_referral_registrations_referrer_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referrer_org_id'], ['organizations.id'], name='fk_referral_registrations_referrer_org_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referred_org_id'], ['organizations.id'], name='fk_referral_registrations_referred_org_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['promo_code_id'], ['promo_codes.id'], name='fk_referral_registrations_promo_code_id_promo_codes', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_referral_registrations'),
    )
    op.create_index('ix_referral_registrations_referrer_user_id', 'referral_registrations', ['referrer_user_id'])
    op.create_index('idx_referral_regs_referred_level', 'referral_registrations', ['referred_org_id', 'level'])
    op.create_index('idx_referral_regs_referrer_org_level', 'referral_registrations', ['referrer_org_id', 'level'])

    op.create_table(
        'referral_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('referrer_user_id', sa.Uuid(), nullable=False),
        sa.Column('referrer_org_id', sa.Uuid(), nullable=False),
        sa.Column('referred_org_id', sa.Uuid(), nullable=False),
        sa.Column('payment_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('commission_percent', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        sa.Column('commission_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending', comment='pending -> ready -> paid'),
        sa.Column('ready_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['referrer_user_id'], ['users.id'], name='fk_referral_transactions_referrer_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referrer_org_id'], ['organizations.id'], name='fk_referral_transactions_referrer_org_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referred_org_id'], ['organizations.id'], name='fk_referral_transactions_referred_org_id_organizations', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_referral_transactions'),
    )
    op.create_index('ix_referral_transactions_referrer_org_id', 'referral_transactions', ['referrer_org_id'])
    op.create_index('idx_referral_tx_referrer', 'referral_transactions', ['referrer_user_id', 'status'])

    # CRM
    op.create_table(
        'clients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('status', sa.String(64), nullable=False, server_default='New Lead'),
        sa.Column('manager_id', sa.Uuid(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_clients_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['manager_id'], ['users.id'], name='fk_clients_manager_id_users', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_clients'),
    )
    op.create_index('ix_clients_organization_id', 'clients', ['organization_id'])
    op.create_index('ix_clients_manager_id', 'clients', ['manager_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('amount', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('type', sa.String(16), nullable=False, comment='income / expense'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_transactions_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], name='fk_transactions_client_id_clients', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_transactions'),
    )
    op.create_index('idx_transactions_client_date', 'transactions', ['client_id', 'date'])

    # Projects and work
    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(32), nullable=True),
        sa.Column('team_ids', postgresql.ARRAY(sa.Uuid()), nullable=False, server_default='{}'),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('content_metrics', postgresql.JSONB(), nullable=False, server_default='{}', comment='{"posts": {"plan": n, "fact": n}, ...}'),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_projects_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], name='fk_projects_client_id_clients', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_projects'),
    )
    op.create_index('ix_projects_organization_id', 'projects', ['organization_id'])
    op.create_index('idx_projects_team_ids', 'projects', ['team_ids'], postgresql_using='gin')

    op.create_table(
        'project_renewals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('renewed_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('renewal_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], name='fk_project_renewals_project_id_projects', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_project_renewals'),
    )
    op.create_index('ix_project_renewals_project_id', 'project_renewals', ['project_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        sa.Column('client_id', sa.Uuid(), nullable=True),
        sa.Column('assignee_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='To Do'),
        sa.Column('priority', sa.String(16), nullable=False, server_default='Medium'),
        sa.Column('type', sa.String(255), nullable=False, server_default='default', comment='KPI rules are keyed by task type'),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('estimated_hours', sa.DECIMAL(12, 4), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_tasks_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], name='fk_tasks_project_id_projects', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], name='fk_tasks_client_id_clients', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assignee_id'], ['users.id'], name='fk_tasks_assignee_id_users', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_tasks'),
    )
    op.create_index('idx_tasks_assignee_status', 'tasks', ['assignee_id', 'status'])

    op.create_table(
        'content_publications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('content_type', sa.String(64), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('assigned_user_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_content_publications_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], name='fk_content_publications_project_id_projects', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_user_id'], ['users.id'], name='fk_content_publications_assigned_user_id_users', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_content_publications'),
    )
    op.create_index('ix_content_publications_project_id', 'content_publications', ['project_id'])
    op.create_index('idx_content_publications_user_published', 'content_publications', ['assigned_user_id', 'published_at'])

    # Payroll
    op.create_table(
        'salary_schemes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('target_type', sa.String(16), nullable=False, comment='jobTitle / user'),
        sa.Column('target_id', sa.String(255), nullable=False),
        sa.Column('base_salary', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('kpi_rules', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('pm_bonus_percent', sa.DECIMAL(5, 2), nullable=False, server_default='0'),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_salary_schemes_organization_id_organizations', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_salary_schemes'),
    )
    op.create_index('idx_salary_schemes_target', 'salary_schemes', ['organization_id', 'target_type', 'target_id'])

    op.create_table(
        'bonus_rules',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('owner_type', sa.String(16), nullable=False),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('metric_source', sa.String(32), nullable=False),
        sa.Column('condition_type', sa.String(16), nullable=False, server_default='always'),
        sa.Column('threshold_value', sa.DECIMAL(12, 2), nullable=True),
        sa.Column('threshold_operator', sa.String(2), nullable=False, server_default='>='),
        sa.Column('tiered_config', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('reward_type', sa.String(16), nullable=False, server_default='fixed_amount'),
        sa.Column('reward_value', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('apply_to_base', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('calculation_period', sa.String(16), nullable=False, server_default='monthly'),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_bonus_rules_organization_id_organizations', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_bonus_rules'),
    )
    op.create_index('idx_bonus_rules_owner', 'bonus_rules', ['organization_id', 'owner_type', 'owner_id'])

    op.create_table(
        'payroll_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('month', sa.String(7), nullable=False, comment='YYYY-MM'),
        sa.Column('fix_salary', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('calculated_kpi', sa.DECIMAL(12, 2), nullable=False, server_default='0', comment='KPI + content + bonuses'),
        sa.Column('manual_bonus', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('manual_penalty', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('advance', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('balance_at_start', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(16), nullable=False, server_default='DRAFT', comment='DRAFT -> FROZEN -> PAID'),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('task_payments', postgresql.JSONB(), nullable=False, server_default='[]'),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_payroll_records_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_payroll_records_user_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_payroll_records'),
        sa.UniqueConstraint('organization_id', 'user_id', 'month', name='uq_payroll_records_org_user_month'),
    )
    op.create_index('ix_payroll_records_user_id', 'payroll_records', ['user_id'])

    # Automation and notifications
    op.create_table(
        'automation_rules',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('trigger_type', sa.String(64), nullable=False),
        sa.Column('trigger_config', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('condition_config', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('action_type', sa.String(64), nullable=False),
        sa.Column('action_config', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('execution_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_executed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], name='fk_automation_rules_organization_id_organizations', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_automation_rules_created_by_users', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_automation_rules'),
    )
    op.create_index('idx_automation_rules_trigger', 'automation_rules', ['organization_id', 'trigger_type', 'is_active'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False, server_default='info'),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_notifications_user_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_notifications'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop all agency ops tables."""
    for table in (
        'notifications',
        'automation_rules',
        'payroll_records',
        'bonus_rules',
        'salary_schemes',
        'content_publications',
        'tasks',
        'project_renewals',
        'projects',
        'transactions',
        'clients',
        'referral_transactions',
        'referral_registrations',
        'promo_codes',
        'users',
        'organizations',
    ):
        op.drop_table(table)
