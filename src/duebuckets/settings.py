"""Runtime settings for the due-date bucket reconciler."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from duebuckets.domain.buckets import Bucket, ListMapping, ListMappingError

DEFAULT_CONFIG_RELATIVE = Path("config") / "duebuckets.yaml"
CONFIG_ENV = "DUEBUCKETS_CONFIG"
DEFAULT_MIN_DELAY_MS = 100
DEFAULT_INTERVAL_SECONDS = 3600.0
DEFAULT_REQUEST_TIMEOUT = 30.0
BOARD_TYPES = {"trello", "snapshot"}

LIST_ENV_VARS = {
    Bucket.OVERDUE: "OVERDUE_LIST_ID",
    Bucket.TODAY: "TODAY_LIST_ID",
    Bucket.TOMORROW: "TOMORROW_LIST_ID",
    Bucket.THIS_WEEK: "THIS_WEEK_LIST_ID",
    Bucket.NEXT_WEEK: "NEXT_WEEK_LIST_ID",
    Bucket.LATER: "LATER_LIST_ID",
}


class SettingsError(ValueError):
    """Raised when the configuration cannot be loaded or is malformed."""


@dataclass(frozen=True)
class BoardSettings:
    type: str = "trello"
    board_id: str | None = None
    api_key: str | None = None
    token: str | None = None
    base_url: str = "https://api.trello.com/1"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    path: Path | None = None
    write_back: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "board_id": self.board_id,
            "api_key": "***" if self.api_key else None,
            "token": "***" if self.token else None,
            "base_url": self.base_url,
            "request_timeout": self.request_timeout,
            "path": str(self.path) if self.path else None,
            "write_back": self.write_back,
        }


@dataclass(frozen=True)
class Settings:
    board: BoardSettings = field(default_factory=BoardSettings)
    list_mapping: ListMapping = field(default_factory=ListMapping)
    min_delay_ms: int = DEFAULT_MIN_DELAY_MS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    log_level: str = "INFO"
    source: Path | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source) if self.source else None,
            "board": self.board.to_dict(),
            "lists": self.list_mapping.to_dict(),
            "reconcile": {
                "min_delay_ms": self.min_delay_ms,
                "interval_seconds": self.interval_seconds,
            },
            "logging": {"level": self.log_level},
        }


def load_settings(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Settings:
    """Build settings from defaults, then the YAML file, then environment variables."""

    env = os.environ if environ is None else environ
    base = cwd or Path.cwd()

    explicit = config_path is not None or bool(env.get(CONFIG_ENV))
    if config_path is None:
        config_path = Path(env[CONFIG_ENV]) if env.get(CONFIG_ENV) else DEFAULT_CONFIG_RELATIVE
    if not config_path.is_absolute():
        config_path = (base / config_path).resolve()

    raw: Dict[str, Any] = {}
    source: Path | None = None
    if config_path.exists():
        raw = _read_yaml(config_path)
        source = config_path
    elif explicit:
        raise SettingsError(f"config not found at {config_path}")

    settings = _from_mapping(raw, config_dir=config_path.parent)
    settings = _apply_environment(settings, env)
    settings = replace(settings, source=source)
    _validate(settings)
    return settings


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"config invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError("config root must be a mapping")
    return data


def _section(raw: Mapping[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SettingsError(f"config section '{name}' must be a mapping")
    return dict(value)


def _from_mapping(raw: Mapping[str, Any], *, config_dir: Path) -> Settings:
    board_raw = _section(raw, "board")
    lists_raw = _section(raw, "lists")
    reconcile_raw = _section(raw, "reconcile")
    logging_raw = _section(raw, "logging")

    path_value = board_raw.get("path")
    snapshot_path: Path | None = None
    if path_value:
        snapshot_path = Path(str(path_value))
        if not snapshot_path.is_absolute():
            snapshot_path = (config_dir / snapshot_path).resolve()

    board = BoardSettings(
        type=str(board_raw.get("type", "trello")).strip().lower(),
        board_id=_optional_str(board_raw.get("board_id")),
        api_key=_optional_str(board_raw.get("api_key")),
        token=_optional_str(board_raw.get("token")),
        base_url=str(board_raw.get("base_url") or BoardSettings.base_url),
        request_timeout=_as_float(board_raw.get("request_timeout", DEFAULT_REQUEST_TIMEOUT), "board.request_timeout"),
        path=snapshot_path,
        write_back=_as_bool(board_raw.get("write_back", False), "board.write_back"),
    )
    try:
        mapping = ListMapping.from_config(lists_raw)
    except ListMappingError as exc:
        raise SettingsError(f"config lists invalid: {exc}") from exc

    return Settings(
        board=board,
        list_mapping=mapping,
        min_delay_ms=_as_int(reconcile_raw.get("min_delay_ms", DEFAULT_MIN_DELAY_MS), "reconcile.min_delay_ms"),
        interval_seconds=_as_float(
            reconcile_raw.get("interval_seconds", DEFAULT_INTERVAL_SECONDS), "reconcile.interval_seconds"
        ),
        log_level=str(logging_raw.get("level", "INFO")).upper(),
    )


def _apply_environment(settings: Settings, env: Mapping[str, str]) -> Settings:
    board_overrides: Dict[str, Any] = {}
    for key, var in (("api_key", "TRELLO_API_KEY"), ("token", "TRELLO_TOKEN"), ("board_id", "TRELLO_BOARD_ID")):
        if env.get(var):
            board_overrides[key] = env[var]
    if board_overrides:
        settings = replace(settings, board=replace(settings.board, **board_overrides))

    entries = dict(settings.list_mapping.entries)
    for bucket, var in LIST_ENV_VARS.items():
        value = env.get(var, "").strip()
        if value:
            entries[bucket] = value
    settings = replace(settings, list_mapping=ListMapping(entries=entries))

    if env.get("DUEBUCKETS_DELAY_MS"):
        settings = replace(settings, min_delay_ms=_as_int(env["DUEBUCKETS_DELAY_MS"], "DUEBUCKETS_DELAY_MS"))
    if env.get("DUEBUCKETS_INTERVAL"):
        settings = replace(
            settings, interval_seconds=_as_float(env["DUEBUCKETS_INTERVAL"], "DUEBUCKETS_INTERVAL")
        )
    if env.get("DUEBUCKETS_LOG_LEVEL"):
        settings = replace(settings, log_level=env["DUEBUCKETS_LOG_LEVEL"].strip().upper())
    return settings


def _validate(settings: Settings) -> None:
    if settings.board.type not in BOARD_TYPES:
        raise SettingsError(f"board type '{settings.board.type}' not supported")
    if settings.board.type == "snapshot" and settings.board.path is None:
        raise SettingsError("snapshot board requires board.path")
    if settings.min_delay_ms < 0:
        raise SettingsError("reconcile.min_delay_ms must be non-negative")
    if settings.interval_seconds <= 0:
        raise SettingsError("reconcile.interval_seconds must be positive")
    if settings.board.request_timeout <= 0:
        raise SettingsError("board.request_timeout must be positive")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"{name} must be an integer") from exc


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"true", "yes", "on", "1"}:
            return True
        if text in {"false", "no", "off", "0", ""}:
            return False
    raise SettingsError(f"{name} must be a boolean")


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"{name} must be a number") from exc


__all__ = ["BoardSettings", "Settings", "SettingsError", "load_settings"]
