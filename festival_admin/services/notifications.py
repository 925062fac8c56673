"""User-facing notifications raised by mutations."""
from dataclasses import dataclass
from typing import List


SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """One transient message for the page to show."""

    title: str
    message: str
    level: str = SUCCESS


class NotificationCenter:
    """Queue of notifications waiting to be rendered."""

    def __init__(self):
        self._pending: List[Notification] = []

    def success(self, message: str, title: str = "Successful!") -> None:
        self._pending.append(Notification(title, message, SUCCESS))

    def error(self, message: str = "Please try again later.", title: str = "Error") -> None:
        self._pending.append(Notification(title, message, ERROR))

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Hand over all pending notifications and forget them."""
        drained, self._pending = self._pending, []
        return drained
