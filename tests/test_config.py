from __future__ import annotations

from pathlib import Path

import pytest

from cute_couple.config import (
    ConfigStore,
    build_config,
    get_config_store,
    load_config,
    set_global_config_store,
)
from cute_couple.reminders.messages import DEFAULT_SWEET_REMINDERS


def test_defaults() -> None:
    config = build_config({"port": 5000, "log_level": "info"})

    assert config.port == 5000
    assert config.log_level == "INFO"
    assert config.sweet_reminder_interval_seconds == 7200
    assert config.event_check_interval_seconds == 1800
    assert config.event_lookahead_seconds == 3600
    assert config.sweet_reminder_messages == list(DEFAULT_SWEET_REMINDERS)
    assert config.reminders_enabled is True
    assert config.cors_origins == ["http://localhost:3000"]
    assert config.upload_max_bytes == 10 * 1024 * 1024
    assert Path(config.db_path).is_absolute()


def test_required_keys() -> None:
    with pytest.raises(ValueError, match="port"):
        build_config({"log_level": "INFO"})


def test_unknown_key_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown config key"):
        build_config({"port": 5000, "log_level": "INFO", "mongo_uri": "x"})


@pytest.mark.parametrize("messages", [[], ["  "], "just one string"])
def test_pool_must_be_non_empty_list(messages) -> None:
    with pytest.raises(ValueError, match="sweet_reminder_messages"):
        build_config({"port": 5000, "log_level": "INFO", "sweet_reminder_messages": messages})


@pytest.mark.parametrize(
    "key", ["sweet_reminder_interval_seconds", "event_check_interval_seconds", "event_lookahead_seconds"]
)
def test_intervals_must_be_positive(key: str) -> None:
    with pytest.raises(ValueError, match=key):
        build_config({"port": 5000, "log_level": "INFO", key: 0})


def test_load_config_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "setting.toml"
    path.write_text(
        "\n".join(
            [
                "port = 5001",
                'log_level = "DEBUG"',
                f'db_path = "{(tmp_path / "app.db").as_posix()}"',
                "event_lookahead_seconds = 900",
                'sweet_reminder_messages = ["A", "B"]',
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.port == 5001
    assert config.event_lookahead_seconds == 900
    assert config.sweet_reminder_messages == ["A", "B"]
    assert Path(config.db_path) == (tmp_path / "app.db").resolve()


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_global_store_roundtrip() -> None:
    config = build_config({"port": 5000, "log_level": "INFO"})
    set_global_config_store(ConfigStore(config))
    assert get_config_store().config is config
