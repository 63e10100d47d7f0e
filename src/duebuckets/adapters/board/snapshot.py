"""Board client backed by a JSON snapshot file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from duebuckets.adapters.board.utils import normalise_cards, normalise_lists, read_snapshot
from duebuckets.domain.buckets import Card
from duebuckets.ports.board import (
    BoardClient,
    BoardList,
    MoveError,
    MoveResult,
    MoveSuccess,
    TransportError,
)


class SnapshotBoardClient(BoardClient):
    """Reads ``{"cards": [...], "lists": [...]}`` and applies moves in memory.

    Every ``list_cards`` call re-reads the file; moves applied afterwards are
    held in memory until the next listing. With ``write_back`` enabled each
    successful move is persisted to the file so that a later run observes it.
    """

    def __init__(self, path: Path, *, write_back: bool = False) -> None:
        self._path = path
        self._write_back = write_back
        self._payload: Dict[str, Any] | None = None

    def list_cards(self) -> Sequence[Card]:
        self._payload = None
        return normalise_cards(self._cards_payload())

    def list_board_lists(self) -> Sequence[BoardList]:
        lists = self._load().get("lists", [])
        if not isinstance(lists, list):
            raise TransportError("board snapshot 'lists' must be a list")
        return normalise_lists(lists)

    def move_card(self, card_id: str, list_id: str) -> MoveResult:
        try:
            entries = self._cards_payload()
            known_lists = {entry.id for entry in self.list_board_lists()}
        except TransportError as exc:
            return MoveError(card_id=card_id, list_id=list_id, reason=str(exc))
        if known_lists and list_id not in known_lists:
            return MoveError(card_id=card_id, list_id=list_id, reason=f"unknown list {list_id}")
        for entry in entries:
            if isinstance(entry, dict) and str(entry.get("id")) == card_id:
                entry["idList"] = list_id
                if self._write_back:
                    try:
                        self._save()
                    except TransportError as exc:
                        return MoveError(card_id=card_id, list_id=list_id, reason=str(exc))
                return MoveSuccess(card_id=card_id, list_id=list_id)
        return MoveError(card_id=card_id, list_id=list_id, reason=f"card {card_id} not found")

    def _cards_payload(self) -> List[Any]:
        cards = self._load().get("cards")
        if not isinstance(cards, list):
            raise TransportError("board snapshot missing 'cards' list")
        return cards

    def _load(self) -> Dict[str, Any]:
        if self._payload is None:
            payload = read_snapshot(self._path)
            if isinstance(payload, list):
                payload = {"cards": payload}
            if not isinstance(payload, dict):
                raise TransportError("board snapshot must be an object or list")
            self._payload = payload
        return self._payload

    def _save(self) -> None:
        if self._payload is None:
            raise TransportError("board snapshot not loaded")
        try:
            self._path.write_text(json.dumps(self._payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise TransportError(f"board snapshot write failed: {exc}") from exc
