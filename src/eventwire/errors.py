from __future__ import annotations

from typing import Any, Callable, List, Sequence, Tuple


class EventWireError(Exception):
    """Base error for eventwire exceptions."""


class UnknownChannel(EventWireError, KeyError):
    """Raised when a channel identifier is not part of the registry's channel set."""

    def __init__(self, channel: Any, channels: type) -> None:
        self.channel = channel
        self.channels = channels
        super().__init__(f"{channel!r} is not a member of {channels.__name__}")

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return str(self.args[0])


class UndeclaredChannel(EventWireError):
    """Raised when a source fires a channel it never declared."""

    def __init__(self, channel: Any, owner: Any = None) -> None:
        self.channel = channel
        self.owner = owner
        who = f" on {owner!r}" if owner is not None else ""
        super().__init__(f"channel {channel!r} was not declared{who}")


class PayloadArityError(EventWireError, TypeError):
    """Raised when fire() receives the wrong number of payload values."""

    def __init__(self, channel: Any, expected: int, got: int) -> None:
        self.channel = channel
        self.expected = expected
        self.got = got
        super().__init__(f"channel {channel!r} expects {expected} payload value(s), got {got}")


class ListenerInvocationError(EventWireError):
    """Raised after an isolated fire when one or more listeners failed."""

    def __init__(self, channel: Any, failures: Sequence[Tuple[Callable[..., Any], BaseException]]) -> None:
        self.channel = channel
        self.failures: List[Tuple[Callable[..., Any], BaseException]] = list(failures)
        super().__init__(f"{len(self.failures)} listener(s) failed while firing {channel!r}")


class ChannelDefinitionError(EventWireError, ValueError):
    """Raised when a channel set cannot be built from the given names."""


class ConfigError(EventWireError):
    """Raised when a configuration file is unreadable or invalid."""
