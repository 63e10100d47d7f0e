"""Trello board client adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

import requests

from duebuckets.adapters.board.utils import normalise_cards, normalise_lists
from duebuckets.domain.buckets import Card
from duebuckets.ports.board import (
    BoardClient,
    BoardList,
    MoveError,
    MoveResult,
    MoveSuccess,
    TransportError,
)

DEFAULT_BASE_URL = "https://api.trello.com/1"
DEFAULT_TIMEOUT = 30.0
CARD_FIELDS = "id,name,due,idList"
LIST_FIELDS = "id,name"

logger = logging.getLogger("duebuckets.adapters.trello")


@dataclass
class TrelloAuthConfig:
    api_key: str | None
    token: str | None

    def resolve(self) -> Dict[str, str]:
        if not self.api_key or not self.token:
            raise TransportError("trello client requires non-empty api_key and token")
        return {"key": self.api_key, "token": self.token}


class TrelloBoardClient(BoardClient):
    def __init__(
        self,
        board_id: str,
        auth: TrelloAuthConfig,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not board_id:
            raise TransportError("trello client requires a board id")
        self._board_id = board_id
        self._auth = auth
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def list_cards(self) -> Sequence[Card]:
        payload = self._get(f"/boards/{self._board_id}/cards", fields=CARD_FIELDS)
        if not isinstance(payload, list):
            raise TransportError("trello cards response must be a list")
        cards = normalise_cards(payload)
        logger.debug("Fetched %d cards from board %s", len(cards), self._board_id)
        return cards

    def list_board_lists(self) -> Sequence[BoardList]:
        payload = self._get(f"/boards/{self._board_id}/lists", fields=LIST_FIELDS)
        if not isinstance(payload, list):
            raise TransportError("trello lists response must be a list")
        return normalise_lists(payload)

    def move_card(self, card_id: str, list_id: str) -> MoveResult:
        try:
            params = self._auth.resolve()
        except TransportError as exc:
            return MoveError(card_id=card_id, list_id=list_id, reason=str(exc))
        try:
            response = self._session.put(
                f"{self._base_url}/cards/{card_id}",
                params=params,
                json={"idList": list_id},
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            return MoveError(card_id=card_id, list_id=list_id, reason=f"request failed: {exc}")
        if response.status_code >= 400:
            return MoveError(
                card_id=card_id,
                list_id=list_id,
                reason=f"trello move failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        return MoveSuccess(card_id=card_id, list_id=list_id)

    def _get(self, path: str, **extra: str) -> Any:
        params: Dict[str, str] = dict(self._auth.resolve())
        params.update(extra)
        try:
            response = self._session.get(
                f"{self._base_url}{path}",
                params=params,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"trello request failed: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"trello request failed: {response.status_code} {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"trello response is not JSON: {exc}") from exc


__all__ = ["DEFAULT_BASE_URL", "TrelloAuthConfig", "TrelloBoardClient"]
