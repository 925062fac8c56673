"""
Lifecycle of a single write operation (create, update or delete).

The coordinator is a small state machine: ``reduce_status`` holds the legal
transitions and ``MutationCoordinator.run`` drives it from the outcome of one
awaited call.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from festival_admin.services.notifications import NotificationCenter
from festival_admin.services.query_cache import QueryCache
from festival_admin.utils.exceptions import (
    ApiError,
    ImageUploadError,
    InvalidTransitionError,
    NetworkError,
    NotFoundError,
    RemoteValidationError,
)


logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Please try again later."


class MutationStatus(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class MutationEvent(Enum):
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RESET = "reset"


class ErrorKind(Enum):
    NETWORK = "network"
    SERVER = "server"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    UPLOAD = "upload"


@dataclass(frozen=True)
class Success:
    value: Any = None


@dataclass(frozen=True)
class Failure:
    error: Exception
    kind: ErrorKind


MutationResult = Union[Success, Failure]

_TRANSITIONS = {
    (MutationStatus.IDLE, MutationEvent.STARTED): MutationStatus.IN_FLIGHT,
    (MutationStatus.SUCCEEDED, MutationEvent.STARTED): MutationStatus.IN_FLIGHT,
    (MutationStatus.FAILED, MutationEvent.STARTED): MutationStatus.IN_FLIGHT,
    (MutationStatus.IN_FLIGHT, MutationEvent.SUCCEEDED): MutationStatus.SUCCEEDED,
    (MutationStatus.IN_FLIGHT, MutationEvent.FAILED): MutationStatus.FAILED,
}


def reduce_status(status: MutationStatus, event: MutationEvent) -> MutationStatus:
    """
    Apply one event to a coordinator status.

    Args:
        status: Current status
        event: Event to apply

    Returns:
        The next status

    Raises:
        InvalidTransitionError: If the event is not legal from ``status``
    """
    if event is MutationEvent.RESET:
        if status is MutationStatus.IN_FLIGHT:
            raise InvalidTransitionError("Cannot reset a mutation while it is in flight")
        return MutationStatus.IDLE

    try:
        return _TRANSITIONS[(status, event)]
    except KeyError:
        raise InvalidTransitionError(f"Cannot apply {event.value} to {status.value} mutation") from None


def classify_error(error: ApiError) -> ErrorKind:
    """Map an API error to the kind reported in a Failure."""
    if isinstance(error, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, NetworkError):
        return ErrorKind.NETWORK
    if isinstance(error, RemoteValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, ImageUploadError):
        return ErrorKind.UPLOAD
    return ErrorKind.SERVER


class MutationCoordinator:
    """Runs one kind of write and reacts to how it settles."""

    def __init__(
        self,
        name: str,
        mutation_fn: Callable[..., Awaitable[Any]],
        cache: QueryCache,
        notifications: NotificationCenter,
        invalidate_keys: Sequence[str] = (),
        success_message: Optional[str] = None,
    ):
        """
        Initialize coordinator.

        Args:
            name: Label used in logs, e.g. "create-programme"
            mutation_fn: Coroutine function performing the remote write
            cache: Shared query cache
            notifications: Where success/error messages go
            invalidate_keys: Cache keys made stale by a successful write
            success_message: Text of the success notification (None for silent)
        """
        self.name = name
        self.mutation_fn = mutation_fn
        self.cache = cache
        self.notifications = notifications
        self.invalidate_keys = tuple(invalidate_keys)
        self.success_message = success_message
        self.status = MutationStatus.IDLE
        self.last_result: Optional[MutationResult] = None

    @property
    def is_in_flight(self) -> bool:
        return self.status is MutationStatus.IN_FLIGHT

    def _dispatch(self, event: MutationEvent) -> None:
        self.status = reduce_status(self.status, event)

    def reset(self) -> None:
        self._dispatch(MutationEvent.RESET)
        self.last_result = None

    async def run(self, *args: Any) -> MutationResult:
        """
        Perform the write and settle it.

        Success invalidates the configured keys and notifies. An ``ApiError``
        notifies once and leaves the cache untouched. Other exceptions
        propagate.

        Returns:
            Success(value) or Failure(error, kind)
        """
        if self.is_in_flight:
            logger.warning("%s invoked while already in flight", self.name)
        else:
            self._dispatch(MutationEvent.STARTED)
        return await self._execute(*args)

    async def _execute(self, *args: Any) -> MutationResult:
        try:
            value = await self.mutation_fn(*args)
        except ApiError as error:
            failure = Failure(error=error, kind=classify_error(error))
            self._settle(MutationEvent.FAILED, failure)
            logger.warning("%s failed (%s): %s", self.name, failure.kind.value, error)
            self.notifications.error(GENERIC_ERROR_MESSAGE)
            return failure
        except Exception:
            self._settle(MutationEvent.FAILED, None)
            logger.exception("%s raised an unexpected error", self.name)
            raise

        result = Success(value)
        self._settle(MutationEvent.SUCCEEDED, result)
        for key in self.invalidate_keys:
            self.cache.invalidate(key)
        if self.success_message:
            self.notifications.success(self.success_message)
        return result

    def _settle(self, event: MutationEvent, result: Optional[MutationResult]) -> None:
        if self.status is MutationStatus.IN_FLIGHT:
            self._dispatch(event)
        self.last_result = result
