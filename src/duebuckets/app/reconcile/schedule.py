"""Fixed-interval trigger for reconciliation runs."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from duebuckets.domain.buckets import ReconciliationResult

from .service import ReconcileError, Reconciler

logger = logging.getLogger("duebuckets.schedule")


class PeriodicTrigger:
    """Calls :meth:`Reconciler.run` every ``interval_seconds`` until stopped.

    A failed run is logged and retried on the next tick. :meth:`stop` wakes the
    trigger immediately and asks the current run to halt before its next card.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        interval_seconds: float,
        *,
        on_result: Callable[[ReconciliationResult], None] | None = None,
        on_error: Callable[[ReconcileError], None] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._reconciler = reconciler
        self._interval = interval_seconds
        self._on_result = on_result
        self._on_error = on_error
        self._stop_event = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()

    def run_once(self) -> ReconciliationResult | None:
        start = time.perf_counter()
        try:
            result = self._reconciler.run(cancel=self._stop_event)
        except ReconcileError as exc:
            logger.error("Scheduled reconciliation failed: %s", exc)
            if self._on_error is not None:
                self._on_error(exc)
            return None
        duration = (time.perf_counter() - start) * 1000
        logger.info("Scheduled reconciliation finished in %.0f ms", duration)
        if self._on_result is not None:
            self._on_result(result)
        return result

    def run_forever(self, *, max_iterations: int = 0) -> int:
        """Run until stopped or until ``max_iterations`` runs (0 = unbounded); return the run count."""

        executed = 0
        logger.info("Reconciliation scheduled every %.0f seconds", self._interval)
        while not self._stop_event.is_set():
            self.run_once()
            executed += 1
            if max_iterations and executed >= max_iterations:
                break
            if self._stop_event.wait(self._interval):
                break
        return executed
