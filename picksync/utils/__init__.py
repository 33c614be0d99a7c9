"""Utility functions."""

from picksync.utils.dates import (
    add_months,
    format_espn_date,
    parse_date,
    parse_datetime,
    utcnow,
)
from picksync.utils.numbers import safe_int

__all__ = [
    "add_months",
    "format_espn_date",
    "parse_date",
    "parse_datetime",
    "safe_int",
    "utcnow",
]
