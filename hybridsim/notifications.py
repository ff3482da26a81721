# hybridsim/notifications.py

"""Observer notifications emitted by the coordinator."""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from .exceptions import NotificationHandlerError
from .logging import get_logger

if TYPE_CHECKING:
    from .events import SimEvent
    from .simulation import Simulation

logger = get_logger(__name__)


class NotificationType(str, Enum):
    """Notification type enumeration."""

    STATUS_CHANGED = "simulation.status_changed"
    BEFORE_EVENT = "event.before"
    AFTER_EVENT = "event.after"
    INTEGRATION_STEP = "integration.step"
    OUTPUT = "simulation.output"
    AFTER_TIME_EVENT = "time_event.after"
    LOG = "component.log"


@dataclass(frozen=True)
class Notification:
    """Immutable snapshot handed to observers."""

    notification_type: NotificationType
    simulation: "Simulation"
    current_time: float
    event: Optional["SimEvent"] = None
    message: Any = None


# Type alias for notification handlers
NotificationHandler = Callable[[Notification], None]


def _type_key(notification_type: NotificationType | str) -> str:
    if isinstance(notification_type, NotificationType):
        return notification_type.value
    return NotificationType(notification_type).value


class NotificationRegistry:
    """Registry for type-specific and wildcard notification handlers.

    Handlers run synchronously on the caller's thread, in registration order,
    type-specific handlers before wildcard handlers.
    """

    def __init__(self):
        self._handlers: dict[str, list[NotificationHandler]] = defaultdict(list)
        self._wildcard_handlers: list[NotificationHandler] = []
        self.logger = get_logger(f"{__name__}.NotificationRegistry")

    def on(self, notification_type: NotificationType | str, handler: NotificationHandler) -> None:
        """Subscribe a handler to a specific notification type.

        Args:
            notification_type: The type of notification to subscribe to
            handler: Callable that receives the notification
        """
        key = _type_key(notification_type)
        self._handlers[key].append(handler)

        self.logger.debug(
            "handler.registered",
            notification_type=key,
            handler_count=len(self._handlers[key]),
        )

    def on_all(self, handler: NotificationHandler) -> None:
        """Subscribe a handler to every notification type."""
        self._wildcard_handlers.append(handler)

    def off(self, notification_type: NotificationType | str, handler: NotificationHandler) -> bool:
        """Unsubscribe a handler from a specific notification type.

        Returns:
            True if handler was removed, False if not found
        """
        key = _type_key(notification_type)

        if key in self._handlers and handler in self._handlers[key]:
            self._handlers[key].remove(handler)
            self.logger.debug("handler.unregistered", notification_type=key)
            return True

        return False

    def off_all(self, handler: NotificationHandler) -> bool:
        """Unsubscribe a wildcard handler."""
        if handler in self._wildcard_handlers:
            self._wildcard_handlers.remove(handler)
            return True

        return False

    def has_handlers(self, notification_type: NotificationType | str) -> bool:
        """True if anything would receive a notification of this type."""
        return bool(self._handlers.get(_type_key(notification_type))) or bool(
            self._wildcard_handlers
        )

    def dispatch(self, notification: Notification, fail_fast: bool = True) -> None:
        """Deliver a notification to all interested handlers.

        Args:
            notification: The notification to deliver
            fail_fast: If True, raise on the first handler error. If False, log and continue.

        Raises:
            NotificationHandlerError: If fail_fast=True and a handler raises an exception
        """
        key = notification.notification_type.value
        all_handlers = self._handlers.get(key, []) + self._wildcard_handlers

        errors = []

        for handler in all_handlers:
            try:
                handler(notification)
            except Exception as e:
                handler_name = getattr(handler, "__name__", repr(handler))

                self.logger.error(
                    "handler.execution_failed",
                    notification_type=key,
                    handler=handler_name,
                    error=str(e),
                )

                if fail_fast:
                    raise NotificationHandlerError(
                        f"Handler {handler_name} failed for {key} at t={notification.current_time}: {e}"
                    ) from e
                errors.append((handler, e))

        if errors:
            self.logger.warning(
                "notification.dispatch_completed_with_errors",
                notification_type=key,
                error_count=len(errors),
            )

    def get_handler_count(self, notification_type: NotificationType | str | None = None) -> int:
        """Get the number of handlers registered.

        Args:
            notification_type: If provided, count handlers for this type only.
                If None, count all handlers including wildcards.
        """
        if notification_type is None:
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._wildcard_handlers)
        return len(self._handlers.get(_type_key(notification_type), []))

    def clear(self) -> None:
        """Remove all registered handlers."""
        self._handlers.clear()
        self._wildcard_handlers.clear()
