"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stopfinder_mcp.config import GTFS_STATIC_URL, Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.feed_url == GTFS_STATIC_URL
    assert settings.feed_path is None
    assert settings.cache_dir == Path("cache")
    assert settings.node_capacity == 4
    assert settings.max_depth == 24
    assert settings.padding_km == 0.5
    assert settings.log_level == "INFO"


def test_reads_prefixed_variables():
    settings = Settings.from_env({
        "STOPFINDER_FEED_PATH": "/data/feed.zip",
        "STOPFINDER_NODE_CAPACITY": "8",
        "STOPFINDER_PADDING_KM": "1.5",
        "STOPFINDER_LOG_LEVEL": "debug",
        "UNRELATED": "ignored",
    })

    assert settings.feed_path == Path("/data/feed.zip")
    assert settings.node_capacity == 8
    assert settings.padding_km == 1.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["none", "None", "off", ""])
def test_max_depth_can_be_disabled(value):
    assert Settings.from_env({"STOPFINDER_MAX_DEPTH": value}).max_depth is None


@pytest.mark.parametrize("name, value", [
    ("STOPFINDER_NODE_CAPACITY", "0"),
    ("STOPFINDER_NODE_CAPACITY", "four"),
    ("STOPFINDER_PADDING_KM", "-1"),
    ("STOPFINDER_DOWNLOAD_TIMEOUT", "0"),
])
def test_invalid_values_raise(name, value):
    with pytest.raises(ValidationError):
        Settings.from_env({name: value})
