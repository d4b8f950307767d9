"""Observable: synchronous publish/subscribe for state snapshots.

Subscribers are plain callables taking one snapshot argument. They are
called in registration order, synchronously, after each state change, so a
subscriber always sees fully updated state.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List

from .errors import InvalidArgument

Observer = Callable[[Any], None]


class Observable(ABC):
    """Base class for components that publish snapshots to subscribers.

    Subclasses implement ``snapshot()`` and call ``_notify_observers()``
    after every observable mutation.
    """

    def __init__(self):
        self._observers: List[Observer] = []

    @abstractmethod
    def snapshot(self) -> Any:
        """Immutable view of the current state."""

    def register_observer(self, observer: Observer) -> None:
        """Subscribe and immediately deliver the current snapshot.

        Args:
            observer: Callable receiving a snapshot

        Raises:
            InvalidArgument: If observer is not callable
        """
        if not callable(observer):
            raise InvalidArgument(f"observer must be callable, got {observer!r}")
        self._observers.append(observer)
        observer(self.snapshot())

    def remove_observer(self, observer: Observer) -> None:
        """Unsubscribe. Removing an unknown observer is a no-op."""
        # bound methods are equal, not identical, across accesses
        self._observers = [o for o in self._observers if o != observer]

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _notify_observers(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)
