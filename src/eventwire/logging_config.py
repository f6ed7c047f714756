import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "EVENTWIRE_LOG_LEVEL"
WIRE_LOG_LEVEL_ENV = "EVENTWIRE_WIRE_LOG_LEVEL"


def _resolve_level(name: Optional[str], fallback: int) -> int:
    if not name:
        return fallback
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else fallback


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure the root logger and the eventwire logger hierarchy.

    EVENTWIRE_LOG_LEVEL sets the root level. EVENTWIRE_WIRE_LOG_LEVEL sets
    only the ``eventwire`` loggers, e.g. DEBUG to trace every attach and fire
    without turning on debug output for the host application.
    """
    level = _resolve_level(os.getenv(LOG_LEVEL_ENV), default_level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level)
    wire_level = os.getenv(WIRE_LOG_LEVEL_ENV)
    if wire_level:
        logging.getLogger("eventwire").setLevel(_resolve_level(wire_level, level))
