"""Tests for command-line item parsing."""

from decimal import Decimal

import pytest

from busledger.domain.entities import expense_category_label
from busledger.utils.item_parser import parse_breakdown_spec, parse_expense_spec


def test_expense_with_all_parts():
    """Test parsing a full expense."""
    item = parse_expense_spec("carburant:15000:20:full tank: station A")
    assert item.category == "carburant"
    assert item.amount == Decimal("15000")
    assert item.liters == Decimal("20")
    assert item.comment == "full tank: station A"
    assert item.is_automated is False


def test_expense_bad_amount_counts_as_zero():
    """Test an expense with a bad amount."""
    item = parse_expense_spec("parking:abc")
    assert item.amount == Decimal("0")
    assert item.liters is None


def test_expense_requires_category():
    """Test an expense without a category."""
    with pytest.raises(ValueError):
        parse_expense_spec(":500")


def test_breakdown():
    """Test parsing a full breakdown."""
    item = parse_breakdown_spec("Brakes:8000:pads:worn out")
    assert item.category == "Brakes"
    assert item.amount == Decimal("8000")
    assert item.part_changed == "pads"
    assert item.cause == "worn out"


def test_breakdown_minimal():
    """Test parsing a breakdown with only category and amount."""
    item = parse_breakdown_spec("Engine")
    assert item.amount == Decimal("0")
    assert item.part_changed == ""


def test_expense_category_label():
    """Test expense category labels."""
    assert expense_category_label("carburant") == "Fuel"
    assert expense_category_label("unknown") == "unknown"
