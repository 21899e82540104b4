"""URI-keyed change notifications for query results."""

import inspect
import logging
import threading
import weakref
from typing import Callable

from .uri import is_descendant

log = logging.getLogger(__name__)

Observer = Callable[[str], None]


def _reference(observer: Observer) -> Callable[[], Observer | None]:
    # Bound methods are held weakly so an unclosed cursor can still be collected
    if inspect.ismethod(observer):
        return weakref.WeakMethod(observer)
    return lambda: observer


class ChangeNotifier:
    """Registry of observers interested in changes below a URI.

    An observer registered on a URI is notified when that URI, any URI
    below it, or any URI above it changes. Callbacks run synchronously on
    the thread calling notify_change(). Bound-method observers are weak:
    once their object is collected the registration is dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._observers: list[tuple[str, Callable[[], Observer | None]]] = []

    def register(self, uri: str, observer: Observer) -> None:
        with self._lock:
            self._observers.append((uri, _reference(observer)))

    def _live(self) -> list[tuple[str, Observer]]:
        """Resolve registrations, pruning dead ones. Caller holds the lock."""
        live = []
        kept = []
        for uri, ref in self._observers:
            observer = ref()
            if observer is not None:
                live.append((uri, observer))
                kept.append((uri, ref))
        self._observers = kept
        return live

    def unregister(self, observer: Observer) -> None:
        """Remove every registration of `observer`."""
        with self._lock:
            self._observers = [
                (u, ref) for u, ref in self._observers
                if ref() is not None and ref() != observer
            ]

    def observers(self, uri: str) -> list[Observer]:
        """Observers that a change to `uri` would reach."""
        with self._lock:
            return [
                o for u, o in self._live()
                if is_descendant(uri, u) or is_descendant(u, uri)
            ]

    def notify_change(self, uri: str) -> int:
        """Notify observers of a change to `uri`. Returns number notified."""
        targets = self.observers(uri)
        log.debug("notify_change %s -> %d observer(s)", uri, len(targets))
        for observer in targets:
            observer(uri)
        return len(targets)

    def __len__(self) -> int:
        """Number of live registrations."""
        with self._lock:
            return len(self._live())

    def __bool__(self) -> bool:
        # An empty notifier is still a notifier
        return True
