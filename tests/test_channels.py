from enum import Enum
from pathlib import Path

import pytest

from eventwire.channels import GameChannel, define_channels, load_channels
from eventwire.errors import ChannelDefinitionError, ConfigError, UnknownChannel
from eventwire.registry import ChannelRegistry
from eventwire.source import EventSource


def test_builtin_game_channels_are_closed_and_hashable():
    assert issubclass(GameChannel, Enum)
    lookup = {channel: channel.name for channel in GameChannel}
    assert lookup[GameChannel.SCORE_CHANGED] == "SCORE_CHANGED"


def test_define_channels_upper_cases_names():
    Weather = define_channels("WeatherChannel", ["rain_started", "Rain_Stopped"])
    assert [c.name for c in Weather] == ["RAIN_STARTED", "RAIN_STOPPED"]
    assert Weather.__name__ == "WeatherChannel"


@pytest.mark.parametrize(
    "names",
    [
        [],
        ["ok", "OK"],
        ["not a name"],
        ["_private"],
        [3],
    ],
)
def test_define_channels_rejects_bad_names(names):
    with pytest.raises(ChannelDefinitionError):
        define_channels("Bad", names)


def test_define_channels_rejects_bad_set_name():
    with pytest.raises(ValueError):
        define_channels("not valid", ["a"])


def test_load_embedded_channels():
    channels = load_channels()
    assert channels.__name__ == "ConfiguredChannel"
    assert "PLAYER_SPAWNED" in channels.__members__
    assert "DOOR_OPENED" in channels.__members__


def test_load_channels_from_yaml(tmp_path: Path):
    path = tmp_path / "channels.yaml"
    path.write_text("name: UiChannel\nchannels:\n  - button_clicked\n  - menu_opened\n", encoding="utf-8")

    UiChannel = load_channels(path)

    assert [c.name for c in UiChannel] == ["BUTTON_CLICKED", "MENU_OPENED"]
    assert load_channels(path, name="Renamed").__name__ == "Renamed"


def test_load_channels_requires_list(tmp_path: Path):
    path = tmp_path / "channels.yaml"
    path.write_text("channels: nope\n", encoding="utf-8")
    with pytest.raises(ChannelDefinitionError):
        load_channels(path)


def test_load_channels_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_channels(tmp_path / "missing.yaml")


def test_load_channels_invalid_yaml(tmp_path: Path):
    path = tmp_path / "channels.yaml"
    path.write_text("channels: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_channels(path)


def test_registry_over_loaded_set_rejects_other_sets(tmp_path: Path):
    path = tmp_path / "channels.yaml"
    path.write_text("channels:\n  - door_opened\n", encoding="utf-8")
    Doors = load_channels(path, name="DoorChannel")
    registry = ChannelRegistry(Doors)

    opened = []
    registry.add_listener(Doors.DOOR_OPENED, opened.append)
    door = EventSource(registry)
    door.declare(Doors.DOOR_OPENED)
    door.fire(Doors.DOOR_OPENED, 12)
    assert opened == [12]

    # same member name from a different closed set is still foreign
    Embedded = load_channels()
    with pytest.raises(UnknownChannel):
        registry.add_listener(Embedded.DOOR_OPENED, opened.append)
