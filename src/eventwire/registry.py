from __future__ import annotations

import logging
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from .config import WireConfig
from .errors import UnknownChannel

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Enum)

Listener = Callable[..., Any]


def _describe(obj: Any) -> str:
    return getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None) or repr(obj)


class ChannelRegistry(Generic[C]):
    """Cross-wires event sources and listeners per channel.

    A registry is bound to one closed channel enum and one payload arity.
    Sources and listeners may register in either order: a new source is
    back-filled with every listener already recorded for the channel, and a
    new listener is pushed to every source already recorded. Firing happens
    on the sources themselves and never consults these tables.

    Sources are any objects with an ``attach(channel, listener)`` method
    (see eventwire.source.ListenerSink). All operations run under one
    re-entrant lock, so callbacks may register further participants.
    """

    def __init__(self, channels: Type[C], *, arity: int = 1, config: Optional[WireConfig] = None) -> None:
        if not (isinstance(channels, type) and issubclass(channels, Enum)):
            raise TypeError("channels must be an Enum subclass")
        if arity < 0:
            raise ValueError("arity must be >= 0")
        self._channels = channels
        self._arity = arity
        self.config = config or WireConfig()
        self._lock = RLock()
        self._sources: Dict[C, List[Any]] = {}
        self._listeners: Dict[C, List[Listener]] = {}
        self.initialize()

    @property
    def channels(self) -> Type[C]:
        return self._channels

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def lock(self) -> RLock:
        """The lock sources take while snapshotting their listener lists."""
        return self._lock

    def initialize(self) -> None:
        """Ensure every channel has empty source and listener lists.

        Existing lists are cleared in place, so references obtained before a
        reset stay valid. Calling this repeatedly never accumulates entries.
        Recorded listeners are detached from the sources being forgotten, so
        nothing registered before the reset is delivered afterwards.
        """
        with self._lock:
            for channel in self._channels:
                sources = self._sources.setdefault(channel, [])
                listeners = self._listeners.setdefault(channel, [])
                for source in sources:
                    self._detach_all(source, channel, listeners)
                sources.clear()
                listeners.clear()
        logger.debug("Initialized registry for %s (%d channels)", self._channels.__name__, len(self._channels))

    reset = initialize

    def is_known(self, channel: Any) -> bool:
        return isinstance(channel, self._channels)

    def _check(self, channel: Any) -> None:
        if not self.is_known(channel):
            raise UnknownChannel(channel, self._channels)

    def add_source(self, channel: C, source: Any) -> bool:
        """Register a source for a channel and back-fill it with waiting listeners.

        Returns:
            True if the source was added, False if it was ignored as a duplicate.

        Raises:
            UnknownChannel: If channel is not part of this registry's set.
        """
        self._check(channel)
        with self._lock:
            sources = self._sources[channel]
            if not self.config.allow_duplicates and source in sources:
                logger.debug("Source %r already registered for %s", source, channel.name)
                return False
            waiting = list(self._listeners[channel])
            attached: List[Listener] = []
            try:
                for listener in waiting:
                    source.attach(channel, listener)
                    attached.append(listener)
            except Exception:
                # leave the source as it was before the call
                self._detach_all(source, channel, attached)
                raise
            sources.append(source)
        logger.debug("Added source %r for %s (back-filled %d listeners)", source, channel.name, len(waiting))
        return True

    def add_listener(self, channel: C, listener: Listener) -> bool:
        """Register a listener for a channel and push it to every known source.

        The attach pass over existing sources completes before the listener
        is recorded, and walks a snapshot of the source list.

        Returns:
            True if the listener was added, False if it was ignored as a duplicate.

        Raises:
            UnknownChannel: If channel is not part of this registry's set.
            TypeError: If listener is not callable.
        """
        self._check(channel)
        if not callable(listener):
            raise TypeError("listener must be callable")
        with self._lock:
            listeners = self._listeners[channel]
            if not self.config.allow_duplicates and listener in listeners:
                logger.debug("Listener %s already registered for %s", _describe(listener), channel.name)
                return False
            current = list(self._sources[channel])
            for source in current:
                source.attach(channel, listener)
            listeners.append(listener)
        logger.debug("Added listener %s for %s (attached to %d sources)", _describe(listener), channel.name, len(current))
        return True

    def remove_source(self, channel: C, source: Any) -> None:
        """Remove the first matching source entry. Missing sources are ignored.

        The recorded listeners are detached from the removed source when it
        supports ``detach``. The channel's listener record itself is left
        untouched so later sources still receive those listeners.
        """
        self._check(channel)
        with self._lock:
            sources = self._sources[channel]
            if source in sources:
                sources.remove(source)
                self._detach_all(source, channel, self._listeners[channel])
                logger.debug("Removed source %r from %s", source, channel.name)

    @staticmethod
    def _detach_all(source: Any, channel: C, listeners: List[Listener]) -> None:
        detach = getattr(source, "detach", None)
        if detach is not None:
            for listener in listeners:
                detach(channel, listener)

    def remove_listener(self, channel: C, listener: Listener) -> bool:
        """Remove a listener from the record and detach it from every source.

        Sources without a ``detach`` method keep their local attachment.
        Returns True if the listener was in the record.
        """
        self._check(channel)
        with self._lock:
            listeners = self._listeners[channel]
            if listener not in listeners:
                return False
            listeners.remove(listener)
            for source in list(self._sources[channel]):
                detach = getattr(source, "detach", None)
                if detach is not None:
                    detach(channel, listener)
        logger.debug("Removed listener %s from %s", _describe(listener), channel.name)
        return True

    def sources(self, channel: C) -> Tuple[Any, ...]:
        self._check(channel)
        with self._lock:
            return tuple(self._sources[channel])

    def listeners(self, channel: C) -> Tuple[Listener, ...]:
        self._check(channel)
        with self._lock:
            return tuple(self._listeners[channel])

    def __repr__(self) -> str:
        return f"ChannelRegistry({self._channels.__name__}, arity={self._arity})"
