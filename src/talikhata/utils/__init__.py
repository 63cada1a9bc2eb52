"""Utility functions for talikhata."""

from talikhata.utils.date_parser import parse_date, get_date_range
from talikhata.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_date_range", "parse_amount"]
