"""Bucket domain exports."""

from .calendar import WeekBoundaries, classify, end_of_day, start_of_day, to_local, week_boundaries
from .models import (
    Bucket,
    Card,
    CardAction,
    CardError,
    CardOutcome,
    ListMapping,
    ListMappingError,
    ReconciliationResult,
)

__all__ = [
    "Bucket",
    "Card",
    "CardAction",
    "CardError",
    "CardOutcome",
    "ListMapping",
    "ListMappingError",
    "ReconciliationResult",
    "WeekBoundaries",
    "classify",
    "end_of_day",
    "start_of_day",
    "to_local",
    "week_boundaries",
]
