"""Port for task-board integrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence, Union

from duebuckets.domain.buckets import Card


class TransportError(RuntimeError):
    """Raised when the board cannot be reached or answers with a non-success status."""


@dataclass(frozen=True)
class BoardList:
    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class MoveSuccess:
    card_id: str
    list_id: str


@dataclass(frozen=True)
class MoveError:
    """A single card move that the board rejected or never answered."""

    card_id: str
    list_id: str
    reason: str
    status_code: int | None = None


MoveResult = Union[MoveSuccess, MoveError]


class BoardClient(ABC):
    """Abstract client for the board that holds the bucket lists."""

    @abstractmethod
    def list_cards(self) -> Sequence[Card]:
        """Return every open card on the board."""

    @abstractmethod
    def move_card(self, card_id: str, list_id: str) -> MoveResult:
        """Move a card; failures are returned as :class:`MoveError`, never raised."""

    @abstractmethod
    def list_board_lists(self) -> Sequence[BoardList]:
        """Return the board's lists for configuration checks."""
