"""Shared state for a running sync client."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from nutrition_sync.domain.logs import Log
from nutrition_sync.domain.models import Session

T = TypeVar("T")

LOCAL_UID = "local"

_logger = logging.getLogger(__name__)


class ListenerSet(Generic[T]):
    """Set of callbacks that all receive every broadcast value."""

    def __init__(self) -> None:
        self._listeners: dict[int, Callable[[T], None]] = {}
        self._next_token = 0

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a callback and return an idempotent unsubscribe function."""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = callback

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def broadcast(self, value: T) -> None:
        """Deliver ``value`` to a snapshot of the registered callbacks."""
        for callback in list(self._listeners.values()):
            self.deliver(callback, value)

    def deliver(self, callback: Callable[[T], None], value: T) -> None:
        """Call one listener, logging instead of raising if it fails."""
        try:
            callback(value)
        except Exception:
            _logger.exception("Listener raised during delivery")


@dataclass
class SyncContext:
    """Session and subscriber state owned by the application root."""

    session: Session | None = None
    auth_listeners: ListenerSet[Session | None] = field(default_factory=ListenerSet)
    log_listeners: ListenerSet[list[Log]] = field(default_factory=ListenerSet)

    @property
    def uid(self) -> str:
        """Return the uid that scopes stored entities."""
        return self.session.uid if self.session else LOCAL_UID

