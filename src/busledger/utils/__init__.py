"""Utility functions for busledger."""

from busledger.utils.date_parser import parse_date
from busledger.utils.amount_parser import coerce_amount, parse_amount
from busledger.utils.ids import new_id

__all__ = ["parse_date", "parse_amount", "coerce_amount", "new_id"]
