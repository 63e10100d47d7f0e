"""Domain models for due-date bucket reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping


class CardError(ValueError):
    """Raised when a card payload is invalid."""


class ListMappingError(ValueError):
    """Raised when a list mapping key does not name a bucket."""


class Bucket(str, Enum):
    """Due-date categories, listed from most to least urgent."""

    OVERDUE = "Overdue"
    TODAY = "Today"
    TOMORROW = "Tomorrow"
    THIS_WEEK = "This week"
    NEXT_WEEK = "Next week"
    LATER = "Later"

    @property
    def slug(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Any) -> "Bucket":
        """Accept the label (``"This week"``), the member name or the slug (``this_week``)."""

        if isinstance(value, cls):
            return value
        text = str(value).strip()
        normalised = text.lower().replace("-", "_").replace(" ", "_")
        for bucket in cls:
            if text == bucket.value or normalised == bucket.slug:
                return bucket
        raise ListMappingError(f"unknown bucket '{value}'")


@dataclass(frozen=True)
class Card:
    """A board card as observed at the start of a reconciliation run."""

    id: str
    name: str
    due: datetime | None
    list_id: str

    def __post_init__(self) -> None:
        if not self.id:
            raise CardError("card id must be a non-empty string")
        if not self.list_id:
            raise CardError(f"card {self.id} has no list id")


@dataclass(frozen=True)
class ListMapping:
    entries: Mapping[Bucket, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, raw: Mapping[Any, Any] | None) -> "ListMapping":
        entries: Dict[Bucket, str] = {}
        for key, value in (raw or {}).items():
            bucket = Bucket.parse(key)
            if value is None or not str(value).strip():
                continue
            entries[bucket] = str(value).strip()
        return cls(entries=entries)

    def target_for(self, bucket: Bucket) -> str | None:
        return self.entries.get(bucket)

    def missing(self) -> List[Bucket]:
        return [bucket for bucket in Bucket if bucket not in self.entries]

    def list_ids(self) -> Iterable[str]:
        return self.entries.values()

    def to_dict(self) -> Dict[str, str | None]:
        return {bucket.value: self.entries.get(bucket) for bucket in Bucket}


class CardAction(str, Enum):
    MOVED = "moved"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class CardOutcome:
    card_id: str
    name: str
    bucket: Bucket
    action: CardAction
    target_list_id: str | None = None
    error: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "card_id": self.card_id,
            "name": self.name,
            "bucket": self.bucket.value,
            "action": self.action.value,
        }
        if self.target_list_id:
            payload["target_list_id"] = self.target_list_id
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass
class ReconciliationResult:
    moved: int = 0
    skipped: int = 0
    failed: int = 0
    unchanged: int = 0
    cancelled: bool = False
    outcomes: List[CardOutcome] = field(default_factory=list)

    def record(self, outcome: CardOutcome) -> None:
        if outcome.action == CardAction.MOVED:
            self.moved += 1
        elif outcome.action == CardAction.FAILED:
            self.failed += 1
        elif outcome.action == CardAction.SKIPPED:
            self.skipped += 1
        else:
            self.unchanged += 1
        self.outcomes.append(outcome)

    @property
    def total(self) -> int:
        return self.moved + self.skipped + self.failed + self.unchanged

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "moved": self.moved,
            "skipped": self.skipped,
            "failed": self.failed,
            "unchanged": self.unchanged,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary(),
            "cancelled": self.cancelled,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
