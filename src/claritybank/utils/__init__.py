"""Utility functions for claritybank."""

from claritybank.utils.timestamps import parse_timestamp, resolve_timezone, to_local
from claritybank.utils.amount_parser import parse_amount

__all__ = ["parse_timestamp", "resolve_timezone", "to_local", "parse_amount"]
