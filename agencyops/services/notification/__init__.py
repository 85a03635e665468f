"""
Notification service module.

Usage:
    from agencyops.services.notification import NotificationService

    notification_service = NotificationService(session)
    await notification_service.notify(user_id, "Payroll", "Payroll frozen")
"""

from agencyops.services.notification.core import NotificationService


__all__ = ["NotificationService"]
