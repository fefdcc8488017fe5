"""Spare parts inventory: parts, categories, stock status and audit trail."""

__version__ = "1.0.0"
