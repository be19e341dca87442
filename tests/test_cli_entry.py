"""Tests for daily entry commands."""

from datetime import date
from decimal import Decimal

from busledger.cli.main import cli
from busledger.domain.automation import new_automation
from busledger.domain.ledger import LedgerStore
from busledger.domain.revenue import build_daily_entry


def invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def reload(temp_db):
    return LedgerStore.open(temp_db)


def test_add_entry(cli_runner, temp_db):
    """Test adding an entry."""
    result = invoke(
        cli_runner,
        temp_db,
        "entry",
        "add",
        "--date",
        "2024-03-15",
        "--revenue",
        "35000",
        "--expense",
        "carburant:5000:20",
    )

    assert result.exit_code == 0, result.output
    assert "Recorded entry" in result.output
    assert "net 30,000 Fr" in result.output

    store = reload(temp_db)
    assert store.cash_balance == Decimal("30000")
    entry = store.find_entry_by_date(date(2024, 3, 15))
    assert entry.expenses[0].liters == Decimal("20")


def test_add_maintenance_entry_with_breakdown(cli_runner, temp_db):
    """Test adding a maintenance entry with a breakdown."""
    result = invoke(
        cli_runner,
        temp_db,
        "entry",
        "add",
        "--date",
        "2024-03-15",
        "--type",
        "maintenance",
        "--revenue",
        "9999",
        "--breakdown",
        "Brakes:8000:pads:wear",
    )

    assert result.exit_code == 0, result.output
    entry = reload(temp_db).find_entry_by_date(date(2024, 3, 15))
    assert entry.revenue == Decimal("0")
    assert entry.net_revenue == Decimal("-8000")
    assert entry.breakdowns[0].part_changed == "pads"


def test_add_entry_non_numeric_revenue_counts_as_zero(cli_runner, temp_db):
    """Test adding an entry with non-numeric revenue."""
    result = invoke(cli_runner, temp_db, "entry", "add", "--date", "2024-03-15", "--revenue", "lots")
    assert result.exit_code == 0, result.output
    assert reload(temp_db).cash_balance == Decimal("0")


def test_add_entry_twice_for_same_date_fails(cli_runner, temp_db):
    """Test adding a second entry for the same date."""
    invoke(cli_runner, temp_db, "entry", "add", "--date", "2024-03-15", "--revenue", "100")
    result = invoke(cli_runner, temp_db, "entry", "add", "--date", "2024-03-15", "--revenue", "200")

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert reload(temp_db).cash_balance == Decimal("100")


def test_add_entry_invalid_date(cli_runner, temp_db):
    """Test adding an entry with an invalid date."""
    result = invoke(cli_runner, temp_db, "entry", "add", "--date", "not a date")
    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_add_entry_invalid_expense(cli_runner, temp_db):
    """Test adding an entry with a malformed expense."""
    result = invoke(cli_runner, temp_db, "entry", "add", "--expense", ":500")
    assert result.exit_code == 1
    assert "Missing expense category" in result.output


def test_add_entry_with_automations(cli_runner, store, temp_db):
    """Test adding an entry with daily automations."""
    store.add_automation(new_automation("salaire_chauffeur", Decimal("5000")))

    result = invoke(
        cli_runner, temp_db, "entry", "add", "--date", "2024-03-15", "--revenue", "35000", "--with-automations"
    )

    assert result.exit_code == 0, result.output
    entry = reload(temp_db).find_entry_by_date(date(2024, 3, 15))
    assert entry.expenses[0].is_automated is True
    assert entry.net_revenue == Decimal("30000")


def test_list_entries(cli_runner, store, temp_db):
    """Test listing entries."""
    store.add_daily_entry(build_daily_entry(date(2024, 3, 14), revenue=Decimal("1000")))
    store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("2000")))

    result = invoke(cli_runner, temp_db, "entry", "list", "--start-date", "2024-03-15")

    assert result.exit_code == 0, result.output
    assert "2024-03-15" in result.output
    assert "2024-03-14" not in result.output
    assert "Count: 1" in result.output


def test_list_entries_empty(cli_runner, temp_db):
    """Test listing entries when none exist."""
    result = invoke(cli_runner, temp_db, "entry", "list")
    assert result.exit_code == 0
    assert "No entries found." in result.output


def test_show_entry_by_prefix(cli_runner, store, temp_db):
    """Test showing an entry by id prefix."""
    entry = store.add_daily_entry(
        build_daily_entry(date(2024, 3, 15), revenue=Decimal("1000"), comment="market day")
    )
    result = invoke(cli_runner, temp_db, "entry", "show", entry.id[:8])

    assert result.exit_code == 0, result.output
    assert "market day" in result.output
    assert "Net revenue: 1,000 Fr" in result.output


def test_show_unknown_entry(cli_runner, temp_db):
    """Test showing an unknown entry."""
    result = invoke(cli_runner, temp_db, "entry", "show", "zzz")
    assert result.exit_code == 1
    assert "Entry zzz not found" in result.output


def test_edit_entry_moves_cash_by_delta(cli_runner, store, temp_db):
    """Test that editing an entry moves cash by the difference."""
    entry = store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("30000")))

    result = invoke(cli_runner, temp_db, "entry", "edit", entry.id, "--revenue", "35000")

    assert result.exit_code == 0, result.output
    assert "30,000 Fr -> 35,000 Fr" in result.output
    assert reload(temp_db).cash_balance == Decimal("35000")


def test_edit_entry_nothing_to_update(cli_runner, store, temp_db):
    """Test editing with no fields."""
    entry = store.add_daily_entry(build_daily_entry(date(2024, 3, 15)))
    result = invoke(cli_runner, temp_db, "entry", "edit", entry.id)
    assert "Nothing to update." in result.output


def test_delete_entry(cli_runner, store, temp_db):
    """Test deleting an entry."""
    entry = store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("30000")))

    result = invoke(cli_runner, temp_db, "entry", "delete", entry.id, "--yes")

    assert result.exit_code == 0, result.output
    store = reload(temp_db)
    assert store.daily_entries == ()
    assert store.cash_balance == Decimal("0")


def test_delete_entry_cancelled(cli_runner, store, temp_db):
    """Test declining an entry deletion."""
    entry = store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("30000")))

    result = invoke(cli_runner, temp_db, "entry", "delete", entry.id, input="n\n")

    assert "Deletion cancelled." in result.output
    assert len(reload(temp_db).daily_entries) == 1


def test_draft_entry(cli_runner, store, temp_db):
    """Test drafting an entry."""
    store.add_automation(new_automation("salaire_chauffeur", Decimal("5000")))

    result = invoke(cli_runner, temp_db, "entry", "draft", "--date", "2024-03-15")

    assert result.exit_code == 0, result.output
    assert "Draft (not saved)" in result.output
    assert "Driver salary" in result.output
    assert reload(temp_db).daily_entries == ()


def test_list_categories(cli_runner, temp_db):
    """Test listing categories."""
    result = invoke(cli_runner, temp_db, "entry", "categories")

    assert result.exit_code == 0
    assert "carburant" in result.output
    assert "Fuel (liters)" in result.output
    assert "Brakes" in result.output
