from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from importlib.resources import files as resource_files

import yaml

from ..errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "EVENTWIRE_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class WireConfig:
    """Registry behaviour switches.

    Attributes:
        allow_duplicates: Keep repeated registrations of the same source or
            listener on a channel (each one delivers). When False they are ignored.
        isolate_listener_errors: Log a failing listener and keep delivering to
            the rest instead of letting the exception abort the fire.
        raise_after_isolation: In isolate mode, raise ListenerInvocationError
            once every listener has run if any of them failed.
    """

    allow_duplicates: bool = False
    isolate_listener_errors: bool = False
    raise_after_isolation: bool = False

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "WireConfig":
        known = {f.name for f in fields(cls)}
        values: Dict[str, bool] = {}
        for key, value in d.items():
            if key not in known:
                logger.warning("Ignoring unknown config key '%s'", key)
                continue
            values[key] = _as_bool(key, value)
        return cls(**values)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "WireConfig":
        """Return a copy with EVENTWIRE_* environment overrides applied."""
        env = os.environ if environ is None else environ
        overrides: Dict[str, bool] = {}
        for f in fields(self):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is not None:
                overrides[f.name] = _as_bool(ENV_PREFIX + f.name.upper(), raw)
        if overrides:
            logger.debug("Applying environment overrides: %s", overrides)
            return replace(self, **overrides)
        return self


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def load_config(path: Optional[Union[str, Path]] = None, environ: Optional[Mapping[str, str]] = None) -> WireConfig:
    """Load registry configuration from YAML.

    If path is None, loads the embedded default resource at
    eventwire/config/wire.yaml. Environment overrides are applied last.
    """
    if path is None:
        data = resource_files("eventwire.config").joinpath("wire.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded wire config resource")
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except OSError as exc:
            raise ConfigError(f"cannot read config file {path}: {exc}") from exc
        logger.debug("Loaded wire config from path: %s", path)

    try:
        raw = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in config file: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("config file must contain a mapping")

    cfg = WireConfig.from_dict(raw).with_env(environ)
    logger.info(
        "Wire config: allow_duplicates=%s isolate_listener_errors=%s raise_after_isolation=%s",
        cfg.allow_duplicates,
        cfg.isolate_listener_errors,
        cfg.raise_after_isolation,
    )
    return cfg
