"""Refresh listener registry."""

from collections.abc import Callable
from dataclasses import dataclass, field

RefreshListener = Callable[[], None]


@dataclass
class ListenerRegistry:
    """Ordered callbacks invoked after cached state may have changed.

    Listeners run synchronously in registration order. An exception raised by a
    listener propagates to the caller and the remaining listeners are skipped.
    """

    _listeners: list[RefreshListener] = field(default_factory=list)

    @property
    def registered(self) -> tuple[RefreshListener, ...]:
        return tuple(self._listeners)

    def register(self, listener: RefreshListener) -> None:
        """Append a listener."""
        self._listeners.append(listener)

    def notify_all(self) -> None:
        """Invoke every registered listener."""
        for listener in list(self._listeners):
            listener()
