"""Domain layer for due-date bucket reconciliation."""
