"""Parsing of expense and breakdown items typed on the command line."""

from busledger.domain.entities import BreakdownItem, ExpenseItem
from busledger.utils.amount_parser import coerce_amount
from busledger.utils.ids import new_id


def parse_expense_spec(spec: str) -> ExpenseItem:
    """Parse ``category:amount[:liters[:comment]]`` into an expense item.

    A non-numeric amount or liters value counts as zero.

    Raises:
        ValueError: If the category is missing
    """
    parts = spec.split(":", 3)
    category = parts[0].strip()
    if not category:
        raise ValueError(f"Missing expense category in '{spec}'")
    amount = coerce_amount(parts[1]) if len(parts) > 1 else coerce_amount(None)
    liters = coerce_amount(parts[2]) if len(parts) > 2 and parts[2].strip() else None
    comment = parts[3].strip() if len(parts) > 3 else ""
    return ExpenseItem(
        id=new_id(),
        category=category,
        amount=amount,
        liters=liters or None,
        comment=comment,
    )


def parse_breakdown_spec(spec: str) -> BreakdownItem:
    """Parse ``category:amount[:part changed[:cause]]`` into a breakdown item.

    A non-numeric amount counts as zero.

    Raises:
        ValueError: If the category is missing
    """
    parts = spec.split(":", 3)
    category = parts[0].strip()
    if not category:
        raise ValueError(f"Missing breakdown category in '{spec}'")
    return BreakdownItem(
        id=new_id(),
        category=category,
        amount=coerce_amount(parts[1]) if len(parts) > 1 else coerce_amount(None),
        part_changed=parts[2].strip() if len(parts) > 2 else "",
        cause=parts[3].strip() if len(parts) > 3 else "",
    )
