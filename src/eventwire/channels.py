from __future__ import annotations

import logging
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, List, Optional, Type, Union
from importlib.resources import files as resource_files

import yaml

from .errors import ChannelDefinitionError, ConfigError

logger = logging.getLogger(__name__)


class GameChannel(Enum):
    """Channels that carry a single integer payload."""

    PLAYER_DAMAGED = auto()
    PLAYER_HEALED = auto()
    SCORE_CHANGED = auto()
    ENEMY_KILLED = auto()
    COIN_COLLECTED = auto()
    LEVEL_COMPLETED = auto()


class SignalChannel(Enum):
    """Channels fired without a payload."""

    GAME_STARTED = auto()
    GAME_PAUSED = auto()
    GAME_RESUMED = auto()
    GAME_OVER = auto()


def define_channels(name: str, names: Iterable[str]) -> Type[Enum]:
    """Build a closed channel enum from a list of names.

    Names are upper-cased. Every name must be a valid Python identifier and
    appear only once; the resulting set must not be empty.

    Raises:
        ChannelDefinitionError: If the enum name or any channel name is invalid.
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise ChannelDefinitionError(f"invalid channel set name: {name!r}")

    members: List[str] = []
    for raw in names:
        if not isinstance(raw, str):
            raise ChannelDefinitionError(f"channel names must be strings, got {raw!r}")
        member = raw.strip().upper()
        if not member.isidentifier() or member.startswith("_"):
            raise ChannelDefinitionError(f"invalid channel name: {raw!r}")
        if member in members:
            raise ChannelDefinitionError(f"duplicate channel name: {member}")
        members.append(member)

    if not members:
        raise ChannelDefinitionError(f"channel set {name} has no channels")

    logger.debug("Defined channel set %s with %d channels", name, len(members))
    return Enum(name, members)  # type: ignore[return-value]


def load_channels(path: Optional[Union[str, Path]] = None, name: Optional[str] = None) -> Type[Enum]:
    """Load a channel set from YAML.

    The document holds a ``channels`` list and an optional ``name``. If path
    is None, the embedded resource eventwire/config/channels.yaml is used.
    An explicit ``name`` argument wins over the one in the file.
    """
    if path is None:
        data = resource_files("eventwire.config").joinpath("channels.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded channels resource")
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except OSError as exc:
            raise ConfigError(f"cannot read channel file {path}: {exc}") from exc
        logger.debug("Loaded channels from path: %s", path)

    try:
        raw = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in channel file: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("channel file must contain a mapping")

    names = raw.get("channels")
    if not isinstance(names, list):
        raise ChannelDefinitionError("channel file must define a 'channels' list")

    enum_name = name or str(raw.get("name", "ConfiguredChannel"))
    channels = define_channels(enum_name, names)
    logger.info("Channel set %s: %s", enum_name, [c.name for c in channels])
    return channels
