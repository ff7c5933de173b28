"""Mini README: Shared utilities for freightbooks.

Currently hosts the coercion helpers used when records are built from loose
dictionaries (JSON workbooks, UI payloads).
"""

from .coercion import coerce_amount, optional_amount, optional_str, parse_date

__all__ = ["coerce_amount", "optional_amount", "optional_str", "parse_date"]
