import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class NotificationSender(ABC):
    """Delivers reminder and overdue notices to a todo's owner."""

    @abstractmethod
    def send_reminder(self, todo, user) -> None:
        ...

    @abstractmethod
    def send_overdue(self, todo, user) -> None:
        ...


class LoggingNotificationSender(NotificationSender):
    # Stand-in until an email / push provider is wired up

    def send_reminder(self, todo, user) -> None:
        logger.info(
            "Reminder sent for todo %s '%s' to user %s (%s). Due date: %s",
            todo.id, todo.title, user.id, user.email, todo.due_date,
        )

    def send_overdue(self, todo, user) -> None:
        logger.warning(
            "Overdue notification sent for todo %s '%s' to user %s (%s). Due date was: %s",
            todo.id, todo.title, user.id, user.email, todo.due_date,
        )


notifier: NotificationSender = LoggingNotificationSender()
