import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path so eventwire imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from eventwire.channels import GameChannel  # noqa: E402
from eventwire.registry import ChannelRegistry  # noqa: E402


@pytest.fixture()
def registry() -> ChannelRegistry:
    """A fresh registry over the built-in integer-payload game channels."""
    return ChannelRegistry(GameChannel)
