"""
Enumerations shared by models and services.
"""

import enum


class ReferralTransactionStatus(str, enum.Enum):
    """Commission lifecycle: pending -> ready -> paid."""

    PENDING = "pending"
    READY = "ready"
    PAID = "paid"


class SchemeTargetType(str, enum.Enum):
    """Owner kind of a salary scheme or bonus rule."""

    JOB_TITLE = "jobTitle"
    USER = "user"


class PayrollStatus(str, enum.Enum):
    """Payroll record status: DRAFT -> FROZEN -> PAID."""

    DRAFT = "DRAFT"
    FROZEN = "FROZEN"
    PAID = "PAID"


class MetricSource(str, enum.Enum):
    """Where a bonus rule reads its metric from."""

    SALES_REVENUE = "sales_revenue"
    PROJECT_RETENTION = "project_retention"
    MANUAL_KPI = "manual_kpi"
    TASKS_COMPLETED = "tasks_completed"
    CPL_EFFICIENCY = "cpl_efficiency"
    CUSTOM_METRIC = "custom_metric"


class ConditionType(str, enum.Enum):
    """How a bonus rule decides whether it pays."""

    ALWAYS = "always"
    THRESHOLD = "threshold"
    TIERED = "tiered"


class RewardType(str, enum.Enum):
    """Bonus reward kind."""

    PERCENT = "percent"
    FIXED_AMOUNT = "fixed_amount"


class CalculationPeriod(str, enum.Enum):
    """Period a bonus metric is measured over."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    PER_TRANSACTION = "per_transaction"


class KpiUnit(str, enum.Enum):
    """What a KPI rate is multiplied by."""

    TASK = "task"
    HOUR = "hour"


class ActionType(str, enum.Enum):
    """Automation rule action kinds."""

    CREATE_TASK = "create_task"
    SEND_WHATSAPP = "send_whatsapp"
    SEND_EMAIL = "send_email"
    CHANGE_STATUS = "change_status"
    ASSIGN_MANAGER = "assign_manager"
    WEBHOOK = "webhook"
    CREATE_NOTIFICATION = "create_notification"


class TriggerType(str, enum.Enum):
    """Events that fire automation rules."""

    CLIENT_CREATED = "client_created"
    CLIENT_STATUS_CHANGED = "client_status_changed"
    TASK_CREATED = "task_created"
    TASK_COMPLETED = "task_completed"
    PAYMENT_RECEIVED = "payment_received"
    DEADLINE_APPROACHING = "deadline_approaching"
    PROJECT_CREATED = "project_created"
    PROJECT_STATUS_CHANGED = "project_status_changed"
