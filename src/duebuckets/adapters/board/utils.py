"""Shared helpers for board client adapters."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List

from duebuckets.domain.buckets import Card, CardError
from duebuckets.ports.board import BoardList, TransportError

logger = logging.getLogger("duebuckets.adapters.board")


def parse_due(value: Any) -> datetime | None:
    """Parse an ISO-8601 due value; ``Z`` suffixes are accepted."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        logger.warning("Ignoring non-string due value %r", value)
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparsable due value %r", value)
        return None


def normalise_cards(entries: Iterable[Any]) -> List[Card]:
    """Build cards from raw entries; malformed entries are logged and dropped."""

    cards: List[Card] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Ignoring board card #%d: expected an object, got %s", index, type(entry).__name__)
            continue
        try:
            cards.append(
                Card(
                    id=str(entry.get("id") or ""),
                    name=str(entry.get("name") or ""),
                    due=parse_due(entry.get("due")),
                    list_id=str(entry.get("idList") or entry.get("list_id") or ""),
                )
            )
        except CardError as exc:
            logger.warning("Ignoring board card #%d: %s", index, exc)
    return cards


def normalise_lists(entries: Iterable[Any]) -> List[BoardList]:
    lists: List[BoardList] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        lists.append(BoardList(id=str(entry["id"]), name=str(entry.get("name", ""))))
    return lists


def read_snapshot(path: Path) -> Any:
    if not path.exists():
        raise TransportError(f"board snapshot not found at {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TransportError(f"board snapshot invalid JSON: {exc}") from exc
