"""
Business logic constants for agencyops.

Central location for affiliate and payroll rules used across the services.
"""

from decimal import Decimal


# Affiliate program: 3-level referral chain
REFERRAL_DEPTH = 3

# Reward tiers by number of active referred clients.
# Bounds are inclusive; the last band is unbounded.
REWARD_TIERS: list[dict] = [
    {"min": 0, "max": 5, "percent": 20},
    {"min": 6, "max": 10, "percent": 25},
    {"min": 11, "max": 20, "percent": 30},
    {"min": 21, "max": 40, "percent": 35},
    {"min": 41, "max": 80, "percent": 40},
    {"min": 81, "max": None, "percent": 50},
]

# Share of the tier percent paid at each referral level
LEVEL_SHARES = {
    1: Decimal("1.00"),
    2: Decimal("0.25"),
    3: Decimal("0.10"),
}

# Task statuses used by payroll and automation
TASK_STATUS_DONE = "Done"
TASK_STATUS_TODO = "To Do"

# Job title markers of content (SMM) specialists, matched case-insensitively
SMM_TITLE_MARKERS = ("smm", "контент")

# Content metric key fragments -> KPI task type labels.
# Checked in order; an entry matches when any fragment (or, with
# require_all, every fragment) occurs in the lowercased key.
CONTENT_TYPE_LABELS: list[tuple[tuple[str, ...], str, bool]] = [
    (("post",), "Post", False),
    (("reel",), "Reels Production", False),
    (("stor",), "Stories ", False),
    (("сложный", "visual"), "Сложный визуал", False),
    (("дублир",), "Дублирование контента в другую соц сеть", False),
    (("монитор",), "Мониторинг сообщества", False),
    (("ведение", "язык"), "Ведение на 2 языках", True),
    (("карусель",), "Карусель", False),
]

# Human readable bonus metric names for payroll details
BONUS_METRIC_LABELS = {
    "sales_revenue": "Выручка от продаж",
    "project_retention": "Retention Rate",
    "manual_kpi": "Ручной KPI",
    "tasks_completed": "Выполненные задачи",
    "cpl_efficiency": "CPL эффективность",
    "custom_metric": "Пользовательская метрика",
}
