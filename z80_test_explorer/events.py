"""Synchronous event emitter feeding the test explorer."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Subscription:
    """Handle returned by subscribe, dispose it to stop receiving events."""

    dispose: Callable[[], None]


@dataclass(kw_only=True)
class EventEmitter[E]:
    """Delivers each fired event to all listeners in subscription order."""

    _listeners: dict[int, Callable[[E], None]] = field(
        default_factory=dict, init=False, repr=False
    )
    _next_token: int = field(default=0, init=False, repr=False)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Callable[[E], None]) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(dispose=lambda: self._listeners.pop(token, None))

    def fire(self, event: E) -> None:
        """Deliver event; a failing listener does not keep others from it."""
        for listener in list(self._listeners.values()):
            try:
                listener(event)
            except Exception as exc:
                log.error("Event listener failed: %s", exc, exc_info=exc)

    def dispose(self) -> None:
        self._listeners.clear()
