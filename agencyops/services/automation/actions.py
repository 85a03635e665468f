"""
Automation action dispatch.

Each ActionType has one handler. Handlers report what happened through
ActionResult; unknown action types and webhook failures are reported,
never raised.
"""

import enum
import json
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

import aiohttp
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import TASK_STATUS_TODO
from agencyops.config.settings import settings
from agencyops.models.enums import ActionType
from agencyops.repositories.client_repository import ClientRepository
from agencyops.repositories.project_repository import ProjectRepository
from agencyops.repositories.task_repository import TaskRepository
from agencyops.services.automation.templating import (
    replace_variables,
    replace_variables_in_object,
)
from agencyops.services.notification import NotificationService
from agencyops.utils.exceptions import MUST_LOG


# Network failures plus request building errors (bad header or URL values)
WEBHOOK_ERRORS = MUST_LOG + (ValueError, TypeError)


class ActionStatus(str, enum.Enum):
    """Outcome of an action."""

    EXECUTED = "executed"
    SKIPPED = "skipped"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass
class ActionResult:
    """Result of one dispatched action."""

    action_type: str
    status: ActionStatus
    detail: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def executed(self) -> bool:
        return self.status == ActionStatus.EXECUTED


class MessageSender(Protocol):
    """Messaging collaborator used by send_whatsapp."""

    async def send(self, phone: str, message: str) -> None:
        ...


class LoggingMessageSender:
    """Message sender that only logs outgoing messages."""

    async def send(self, phone: str, message: str) -> None:
        logger.info(
            "WhatsApp message would be sent",
            extra={"phone": phone, "message": message},
        )


def _as_uuid(value: Any) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


ActionHandler = Callable[[dict[str, Any], dict[str, Any]], Awaitable[ActionResult]]


class ActionDispatcher:
    """
    Executes automation actions for one organization.

    Usage:
        dispatcher = ActionDispatcher(session, organization_id)
        result = await dispatcher.execute_action(
            "create_task", {"title": "Call {{client_name}}"}, context
        )
    """

    def __init__(
        self,
        session: AsyncSession,
        organization_id: uuid.UUID,
        message_sender: MessageSender | None = None,
    ) -> None:
        """
        Initialize action dispatcher.

        Args:
            session: Async database session
            organization_id: Organization the actions run for
            message_sender: Messaging collaborator, logs only by default
        """
        self.session = session
        self.organization_id = organization_id
        self.message_sender = message_sender or LoggingMessageSender()
        self.task_repo = TaskRepository(session)
        self.client_repo = ClientRepository(session)
        self.project_repo = ProjectRepository(session)
        self.notification_service = NotificationService(session)

        self._handlers: dict[ActionType, ActionHandler] = {
            ActionType.CREATE_TASK: self._create_task,
            ActionType.SEND_WHATSAPP: self._send_whatsapp,
            ActionType.SEND_EMAIL: self._send_email,
            ActionType.CHANGE_STATUS: self._change_status,
            ActionType.ASSIGN_MANAGER: self._assign_manager,
            ActionType.WEBHOOK: self._webhook,
            ActionType.CREATE_NOTIFICATION: self._create_notification,
        }

    async def execute_action(
        self,
        action_type: str | ActionType,
        action_config: dict[str, Any] | None,
        context: dict[str, Any] | None,
    ) -> ActionResult:
        """
        Execute one action.

        Args:
            action_type: ActionType value
            action_config: Handler configuration
            context: Event data, also used for template substitution

        Returns:
            ActionResult; UNSUPPORTED for unknown action types
        """
        try:
            kind = ActionType(action_type)
        except ValueError:
            logger.warning(f"Unknown action type: {action_type}")
            return ActionResult(
                action_type=str(action_type),
                status=ActionStatus.UNSUPPORTED,
                detail="Unknown action type",
            )

        handler = self._handlers[kind]
        result = await handler(action_config or {}, context or {})

        logger.debug(
            "Automation action dispatched",
            extra={
                "organization_id": str(self.organization_id),
                "action_type": kind.value,
                "status": result.status.value,
            },
        )
        return result

    async def _create_task(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        project_id = _as_uuid(context.get("project_id") or config.get("project_id"))
        if project_id and not await self.project_repo.get_owned(
            self.organization_id, project_id
        ):
            logger.warning(
                "Task not created: project outside organization",
                extra={
                    "organization_id": str(self.organization_id),
                    "project_id": str(project_id),
                },
            )
            return ActionResult(
                action_type=ActionType.CREATE_TASK.value,
                status=ActionStatus.SKIPPED,
                detail="Project not found",
            )

        task = await self.task_repo.create(
            organization_id=self.organization_id,
            title=replace_variables(config.get("title"), context),
            description=replace_variables(config.get("description") or "", context),
            project_id=project_id,
            assignee_id=_as_uuid(config.get("assigned_to")),
            type=config.get("task_type") or "default",
            priority=config.get("priority") or "Medium",
            deadline=_as_datetime(config.get("due_date")),
            status=TASK_STATUS_TODO,
        )
        await self.session.commit()

        return ActionResult(
            action_type=ActionType.CREATE_TASK.value,
            status=ActionStatus.EXECUTED,
            data={"task_id": str(task.id)},
        )

    async def _send_whatsapp(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        message = replace_variables(config.get("message"), context)
        phone = context.get("client_phone") or config.get("phone_number")

        if not phone:
            return ActionResult(
                action_type=ActionType.SEND_WHATSAPP.value,
                status=ActionStatus.SKIPPED,
                detail="No phone number",
            )

        try:
            await self.message_sender.send(phone, message)
        except MUST_LOG as e:
            logger.error(
                f"WhatsApp message failed: {e}",
                extra={"phone": phone},
            )
            return ActionResult(
                action_type=ActionType.SEND_WHATSAPP.value,
                status=ActionStatus.FAILED,
                detail=str(e),
            )

        return ActionResult(
            action_type=ActionType.SEND_WHATSAPP.value,
            status=ActionStatus.EXECUTED,
            data={"phone": phone, "message": message},
        )

    async def _send_email(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        logger.info("Email sending is not implemented")
        return ActionResult(
            action_type=ActionType.SEND_EMAIL.value,
            status=ActionStatus.SKIPPED,
            detail="Email sending is not implemented",
        )

    async def _update_client(
        self,
        action_type: ActionType,
        client_id: Any,
        **values: Any,
    ) -> ActionResult:
        if not client_id or not all(values.values()):
            return ActionResult(
                action_type=action_type.value,
                status=ActionStatus.SKIPPED,
                detail="Missing client or value",
            )

        client = await self.client_repo.get_owned(
            self.organization_id, _as_uuid(client_id)
        )
        if not client:
            return ActionResult(
                action_type=action_type.value,
                status=ActionStatus.SKIPPED,
                detail="Client not found",
            )

        await self.client_repo.update(client.id, **values)
        await self.session.commit()
        return ActionResult(
            action_type=action_type.value,
            status=ActionStatus.EXECUTED,
            data={"client_id": str(client.id)},
        )

    async def _change_status(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        return await self._update_client(
            ActionType.CHANGE_STATUS,
            context.get("client_id"),
            status=config.get("new_status"),
        )

    async def _assign_manager(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        return await self._update_client(
            ActionType.ASSIGN_MANAGER,
            context.get("client_id"),
            manager_id=_as_uuid(config.get("manager_id")),
        )

    async def _webhook(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        url = config.get("webhook_url")
        if not url:
            return ActionResult(
                action_type=ActionType.WEBHOOK.value,
                status=ActionStatus.SKIPPED,
                detail="No webhook URL",
            )

        payload = replace_variables_in_object(config.get("payload") or {}, context)
        body = {**payload, **context}
        headers = {"Content-Type": "application/json"}
        headers.update(
            {str(k): str(v) for k, v in (config.get("headers") or {}).items()}
        )

        try:
            async with aiohttp.ClientSession() as client:
                async with client.post(
                    url,
                    data=json.dumps(body, default=str),
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(
                        total=settings.webhook_timeout_seconds
                    ),
                ) as response:
                    status_code = response.status
        except WEBHOOK_ERRORS as e:
            logger.error(
                f"Webhook execution failed: {e}",
                extra={"url": url},
            )
            return ActionResult(
                action_type=ActionType.WEBHOOK.value,
                status=ActionStatus.FAILED,
                detail=str(e) or type(e).__name__,
            )

        if status_code >= 400:
            logger.warning(
                f"Webhook returned HTTP {status_code}",
                extra={"url": url},
            )
            return ActionResult(
                action_type=ActionType.WEBHOOK.value,
                status=ActionStatus.FAILED,
                detail=f"HTTP {status_code}",
                data={"status_code": status_code},
            )

        return ActionResult(
            action_type=ActionType.WEBHOOK.value,
            status=ActionStatus.EXECUTED,
            data={"status_code": status_code},
        )

    async def _create_notification(
        self, config: dict[str, Any], context: dict[str, Any]
    ) -> ActionResult:
        notification = await self.notification_service.notify(
            user_id=_as_uuid(config.get("user_id") or context.get("user_id")),
            title=config.get("title") or "Automation Notification",
            message=replace_variables(config.get("message"), context),
            type=config.get("notification_type") or "info",
        )

        if notification is None:
            return ActionResult(
                action_type=ActionType.CREATE_NOTIFICATION.value,
                status=ActionStatus.FAILED,
                detail="Notification was not created",
            )

        return ActionResult(
            action_type=ActionType.CREATE_NOTIFICATION.value,
            status=ActionStatus.EXECUTED,
            data={"notification_id": str(notification.id)},
        )
