"""Utility functions for financy."""

from financy.utils.date_parser import parse_date
from financy.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
