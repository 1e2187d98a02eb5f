"""Utility functions for ledgersync."""

from ledgersync.utils.date_parser import parse_date, recent_months
from ledgersync.utils.amount_parser import parse_amount, parse_whole_amount

__all__ = ["parse_date", "recent_months", "parse_amount", "parse_whole_amount"]
