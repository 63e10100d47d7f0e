"""Application service that moves cards into the list for their due-date bucket."""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime
from typing import Callable

from duebuckets.domain.buckets import (
    Card,
    CardAction,
    CardOutcome,
    ListMapping,
    ReconciliationResult,
    classify,
)
from duebuckets.ports.board import BoardClient, MoveError, TransportError
from duebuckets.settings import DEFAULT_MIN_DELAY_MS, Settings

logger = logging.getLogger("duebuckets.reconcile")


class ReconcileError(RuntimeError):
    """Raised when a reconciliation run cannot be performed."""


class ReconcileInProgressError(ReconcileError):
    """Raised when a run is requested while another one still holds the board."""


class Reconciler:
    """Single-pass, sequential reconciliation of a board against a list mapping.

    Each call to :meth:`run` lists the cards afresh, classifies every card and
    moves only those that sit outside their bucket's list. Moves are issued one
    at a time with at least ``min_delay_ms`` between them. Runs are serialised
    by an internal lock; a second concurrent caller is refused rather than
    queued.
    """

    def __init__(
        self,
        client: BoardClient,
        list_mapping: ListMapping,
        *,
        min_delay_ms: int = DEFAULT_MIN_DELAY_MS,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_delay_ms < 0:
            raise ValueError("min_delay_ms must be non-negative")
        self._client = client
        self._mapping = list_mapping
        self._min_delay = min_delay_ms / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, client: BoardClient, **kwargs) -> "Reconciler":
        return cls(client, settings.list_mapping, min_delay_ms=settings.min_delay_ms, **kwargs)

    @property
    def list_mapping(self) -> ListMapping:
        return self._mapping

    def run(self, *, cancel: threading.Event | None = None) -> ReconciliationResult:
        if not self._lock.acquire(blocking=False):
            raise ReconcileInProgressError("reconcile.busy: another run is in progress")
        try:
            return self._run(cancel)
        finally:
            self._lock.release()

    def _run(self, cancel: threading.Event | None) -> ReconciliationResult:
        logger.info("Starting card reconciliation")
        try:
            cards = list(self._client.list_cards())
        except TransportError as exc:
            logger.error("Listing cards failed: %s", exc)
            raise ReconcileError(f"reconcile.list_failed: {exc}") from exc
        logger.info("Found %d cards", len(cards))

        now = self._clock()
        result = ReconciliationResult()
        for card in cards:
            if cancel is not None and cancel.is_set():
                result.cancelled = True
                logger.warning("Reconciliation cancelled before card %s", card.id)
                break
            outcome = self._reconcile_card(card, now)
            result.record(outcome)
            if outcome.action in (CardAction.MOVED, CardAction.FAILED) and self._min_delay > 0:
                self._sleep(self._min_delay)

        logger.info(
            "Card reconciliation complete. Moved: %d, Skipped: %d, Failed: %d",
            result.moved,
            result.skipped,
            result.failed,
        )
        return result

    def _reconcile_card(self, card: Card, now: datetime) -> CardOutcome:
        bucket = classify(card.due, now)
        target = self._mapping.target_for(bucket)
        if target is None:
            logger.warning('No list configured for "%s"; skipping card "%s"', bucket.value, card.name)
            return CardOutcome(card.id, card.name, bucket, CardAction.SKIPPED)
        if card.list_id == target:
            return CardOutcome(card.id, card.name, bucket, CardAction.UNCHANGED, target_list_id=target)

        logger.info('Moving card "%s" to "%s"', card.name, bucket.value)
        try:
            move = self._client.move_card(card.id, target)
        except TransportError as exc:
            move = MoveError(card_id=card.id, list_id=target, reason=str(exc))
        if isinstance(move, MoveError):
            logger.error("Error moving card %s: %s", card.id, move.reason)
            return CardOutcome(
                card.id, card.name, bucket, CardAction.FAILED, target_list_id=target, error=move.reason
            )
        return CardOutcome(card.id, card.name, bucket, CardAction.MOVED, target_list_id=target)
