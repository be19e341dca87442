"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from busledger.domain.entities import (
    COLLECTION_ATTRIBUTES,
    EXPENSE_CATEGORIES,
    AppData,
    DayType,
    Debt,
    DebtStatus,
    Settings,
    SupplierType,
)


def test_entities_are_immutable():
    """Test that entities are frozen."""
    debt = Debt(
        id="d1",
        supplier="Garage",
        supplier_type=SupplierType.MECHANIC,
        part="Clutch",
        amount=Decimal("100"),
        remaining_amount=Decimal("100"),
        date_created=date(2024, 3, 15),
        date_due=None,
        status=DebtStatus.PENDING,
    )
    with pytest.raises(FrozenInstanceError):
        debt.amount = Decimal("1")


def test_enums_use_stored_values():
    """Test enum values."""
    assert DayType("maintenance") is DayType.MAINTENANCE
    assert DayType.NORMAL == "normal"


def test_settings_defaults():
    """Test default settings."""
    settings = Settings()
    assert settings.currency == "Fr"
    assert settings.vehicle_name == "Toyota Hiace"
    assert settings.staff.driver_name == ""


def test_app_data_starts_empty():
    """Test an empty aggregate."""
    data = AppData()
    assert data.cash_balance == Decimal("0")
    for attribute in COLLECTION_ATTRIBUTES.values():
        assert getattr(data, attribute) == []


def test_liter_categories():
    """Test which categories track liters."""
    with_liters = {value for value, _, has_liters in EXPENSE_CATEGORIES if has_liters}
    assert "carburant" in with_liters
    assert "parking" not in with_liters
