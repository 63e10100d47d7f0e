"""Ports consumed by the reconciliation core."""
