"""Card reconciliation package."""

from .lists import ListMappingReport, check_list_mapping
from .schedule import PeriodicTrigger
from .service import ReconcileError, ReconcileInProgressError, Reconciler

__all__ = [
    "ListMappingReport",
    "PeriodicTrigger",
    "ReconcileError",
    "ReconcileInProgressError",
    "Reconciler",
    "check_list_mapping",
]
