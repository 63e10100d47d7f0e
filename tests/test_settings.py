from __future__ import annotations

from pathlib import Path

import pytest

from duebuckets.domain.buckets import Bucket
from duebuckets.settings import DEFAULT_MIN_DELAY_MS, SettingsError, load_settings


def _write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_config(tmp_path: Path) -> None:
    settings = load_settings(environ={}, cwd=tmp_path)

    assert settings.source is None
    assert settings.board.type == "trello"
    assert settings.min_delay_ms == DEFAULT_MIN_DELAY_MS
    assert settings.interval_seconds == 3600.0
    assert settings.list_mapping.missing() == list(Bucket)


def test_yaml_then_environment(tmp_path: Path) -> None:
    _write_config(
        tmp_path / "config" / "duebuckets.yaml",
        """
board:
  type: trello
  board_id: from-yaml
  api_key: yaml-key
lists:
  overdue: L-overdue
  This week: L-week
reconcile:
  min_delay_ms: 250
  interval_seconds: 600
logging:
  level: debug
""",
    )
    environ = {"TRELLO_TOKEN": "env-token", "TRELLO_BOARD_ID": "from-env", "LATER_LIST_ID": "L-later"}

    settings = load_settings(environ=environ, cwd=tmp_path)

    assert settings.source == (tmp_path / "config" / "duebuckets.yaml").resolve()
    assert settings.board.board_id == "from-env"
    assert settings.board.api_key == "yaml-key"
    assert settings.board.token == "env-token"
    assert settings.list_mapping.target_for(Bucket.OVERDUE) == "L-overdue"
    assert settings.list_mapping.target_for(Bucket.THIS_WEEK) == "L-week"
    assert settings.list_mapping.target_for(Bucket.LATER) == "L-later"
    assert settings.min_delay_ms == 250
    assert settings.interval_seconds == 600.0
    assert settings.log_level == "DEBUG"
    masked = settings.to_dict()
    assert masked["board"]["api_key"] == "***"
    assert masked["board"]["token"] == "***"


def test_snapshot_path_resolved_against_config_dir(tmp_path: Path) -> None:
    config = _write_config(
        tmp_path / "conf" / "settings.yaml",
        "board:\n  type: snapshot\n  path: board.json\n  write_back: true\n",
    )

    settings = load_settings(config, environ={}, cwd=tmp_path)

    assert settings.board.path == (tmp_path / "conf" / "board.json").resolve()
    assert settings.board.write_back is True


def test_config_env_variable(tmp_path: Path) -> None:
    config = _write_config(tmp_path / "elsewhere.yaml", "reconcile:\n  min_delay_ms: 5\n")

    settings = load_settings(environ={"DUEBUCKETS_CONFIG": str(config)}, cwd=tmp_path)

    assert settings.min_delay_ms == 5


def test_explicit_missing_config_fails(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "absent.yaml", environ={}, cwd=tmp_path)


@pytest.mark.parametrize(
    "text",
    [
        "- not a mapping\n",
        "lists:\n  someday: L1\n",
        "reconcile:\n  min_delay_ms: -1\n",
        "reconcile:\n  min_delay_ms: soon\n",
        "board:\n  type: snapshot\n",
        "board:\n  type: jira\n",
        "board: [1, 2]\n",
    ],
)
def test_invalid_config_rejected(tmp_path: Path, text: str) -> None:
    config = _write_config(tmp_path / "bad.yaml", text)

    with pytest.raises(SettingsError):
        load_settings(config, environ={}, cwd=tmp_path)


def test_invalid_environment_delay(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        load_settings(environ={"DUEBUCKETS_DELAY_MS": "fast"}, cwd=tmp_path)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("false", False), ("'false'", False), ("'yes'", True), ("off", False)],
)
def test_write_back_parsed_as_boolean(tmp_path: Path, value: str, expected: bool) -> None:
    config = _write_config(
        tmp_path / "settings.yaml",
        f"board:\n  type: snapshot\n  path: board.json\n  write_back: {value}\n",
    )

    settings = load_settings(config, environ={}, cwd=tmp_path)

    assert settings.board.write_back is expected


@pytest.mark.parametrize("value", ["'sometimes'", "2", "[true]"])
def test_write_back_rejects_non_boolean(tmp_path: Path, value: str) -> None:
    config = _write_config(
        tmp_path / "settings.yaml",
        f"board:\n  type: snapshot\n  path: board.json\n  write_back: {value}\n",
    )

    with pytest.raises(SettingsError):
        load_settings(config, environ={}, cwd=tmp_path)
