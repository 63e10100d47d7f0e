"""Concrete board client adapters."""
