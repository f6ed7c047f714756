"""
eventwire package root.

Order-independent wiring of event sources and listeners over closed channel
sets. Sources hold an EventSource; listeners register with the shared
ChannelRegistry; neither side references the other.
"""
from importlib.metadata import PackageNotFoundError, version

from .channels import GameChannel, SignalChannel, define_channels, load_channels
from .config import WireConfig, load_config
from .errors import (
    ChannelDefinitionError,
    ConfigError,
    EventWireError,
    ListenerInvocationError,
    PayloadArityError,
    UndeclaredChannel,
    UnknownChannel,
)
from .logging_config import configure_logging
from .registry import ChannelRegistry
from .source import EventSource, ListenerSink

__all__ = [
    "__version__",
    "ChannelDefinitionError",
    "ChannelRegistry",
    "ConfigError",
    "EventSource",
    "EventWireError",
    "GameChannel",
    "ListenerInvocationError",
    "ListenerSink",
    "PayloadArityError",
    "SignalChannel",
    "UndeclaredChannel",
    "UnknownChannel",
    "WireConfig",
    "configure_logging",
    "define_channels",
    "load_channels",
    "load_config",
]

try:
    __version__ = version("eventwire")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
