from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Protocol, Tuple, TypeVar

from .errors import ListenerInvocationError, PayloadArityError, UndeclaredChannel, UnknownChannel
from .registry import ChannelRegistry

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Enum)

Listener = Callable[..., Any]


class ListenerSink(Protocol):
    """What the registry needs from a source.

    Anything exposing ``attach`` can be registered with
    ChannelRegistry.add_source; an optional ``detach(channel, listener)`` lets
    ChannelRegistry.remove_listener reach the source as well.
    """

    def attach(self, channel: Any, listener: Listener) -> None:
        """Attach a listener for a channel this sink declared.

        Must ignore channels the sink never declared.
        """


class EventSource(Generic[C]):
    """Lets a participant fire channels without knowing who listens.

    Participants hold one of these instead of inheriting from a base class::

        class Enemy:
            def __init__(self, registry):
                self.events = EventSource(registry, owner=self)
                self.events.declare(GameChannel.ENEMY_KILLED)

            def die(self, points):
                self.events.fire(GameChannel.ENEMY_KILLED, points)

    Listener lists exist only for declared channels; the registry fills them.
    """

    def __init__(self, registry: ChannelRegistry[C], owner: Any = None) -> None:
        self._registry = registry
        self.owner = owner
        self._listeners: Dict[C, List[Listener]] = {}

    @property
    def registry(self) -> ChannelRegistry[C]:
        return self._registry

    def declare(self, channel: C) -> bool:
        """Declare that this source fires ``channel`` and register with the registry.

        Returns False if the channel was already declared and this source is
        still registered for it. A source the registry has since forgotten
        (after a reset or remove_source) registers again and is back-filled.

        Raises:
            UnknownChannel: If the registry does not know the channel.
        """
        if not self._registry.is_known(channel):
            raise UnknownChannel(channel, self._registry.channels)
        with self._registry.lock:
            if channel in self._listeners:
                if self in self._registry.sources(channel):
                    return False
            else:
                self._listeners[channel] = []
            self._registry.add_source(channel, self)
        logger.debug("%r declared %s", self, channel.name)
        return True

    def attach(self, channel: C, listener: Listener) -> None:
        """Add a listener to a declared channel; undeclared channels are ignored."""
        with self._registry.lock:
            listeners = self._listeners.get(channel)
            if listeners is None:
                logger.debug("%r ignoring listener for undeclared %s", self, getattr(channel, "name", channel))
                return
            if not self._registry.config.allow_duplicates and listener in listeners:
                return
            listeners.append(listener)

    def detach(self, channel: C, listener: Listener) -> None:
        """Remove a listener from a channel. Missing entries are ignored."""
        with self._registry.lock:
            listeners = self._listeners.get(channel)
            if listeners and listener in listeners:
                listeners.remove(listener)

    def fire(self, channel: C, *payload: Any) -> int:
        """Invoke every listener attached for ``channel`` with ``payload``.

        Listeners run synchronously in registration order. With the default
        config the first listener exception propagates and the remaining
        listeners are skipped; with ``isolate_listener_errors`` each failure is
        logged and delivery continues.

        Returns:
            Number of listeners invoked.

        Raises:
            UndeclaredChannel: If this source never declared ``channel``.
            PayloadArityError: If the payload size differs from the registry arity.
        """
        with self._registry.lock:
            listeners = self._listeners.get(channel)
            if listeners is None:
                raise UndeclaredChannel(channel, self.owner)
            snapshot = list(listeners)
        if len(payload) != self._registry.arity:
            raise PayloadArityError(channel, self._registry.arity, len(payload))

        logger.debug("%r firing %s to %d listeners. Payload=%r", self, channel.name, len(snapshot), payload)
        config = self._registry.config
        if not config.isolate_listener_errors:
            for listener in snapshot:
                listener(*payload)
            return len(snapshot)

        failures: List[Tuple[Listener, BaseException]] = []
        for listener in snapshot:
            try:
                listener(*payload)
            except Exception as exc:
                logger.exception("Error in listener %r for %s", listener, channel.name)
                failures.append((listener, exc))
        if failures and config.raise_after_isolation:
            raise ListenerInvocationError(channel, failures)
        return len(snapshot)

    def withdraw(self, channel: C) -> None:
        """Stop firing ``channel``: unregister from the registry and drop local listeners."""
        with self._registry.lock:
            if channel not in self._listeners:
                return
            self._registry.remove_source(channel, self)
            del self._listeners[channel]
        logger.debug("%r withdrew %s", self, channel.name)

    def close(self) -> None:
        """Withdraw every declared channel."""
        with self._registry.lock:
            for channel in list(self._listeners):
                self.withdraw(channel)

    def declared(self, channel: C) -> bool:
        return channel in self._listeners

    def declared_channels(self) -> Tuple[C, ...]:
        return tuple(self._listeners)

    def listeners(self, channel: C) -> Tuple[Listener, ...]:
        """Snapshot of the listeners attached for ``channel`` (empty if undeclared)."""
        with self._registry.lock:
            return tuple(self._listeners.get(channel, ()))

    def __repr__(self) -> str:
        if self.owner is None:
            return f"EventSource(at {id(self):#x})"
        return f"EventSource({self.owner!r})"
