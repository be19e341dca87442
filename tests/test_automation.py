"""Tests for the automation engine."""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from busledger.domain.automation import expense_from_task, is_due, new_automation
from busledger.domain.entities import DayType, Frequency
from busledger.domain.revenue import build_daily_entry

NOW = datetime(2024, 3, 15, 9, 0)


def add_task(store, frequency=Frequency.DAILY, amount="5000", last_triggered=None, **kwargs):
    task = new_automation("salaire_chauffeur", Decimal(amount), frequency=frequency, **kwargs)
    if last_triggered is not None:
        task = replace(task, last_triggered=last_triggered)
    return store.add_automation(task)


class TestIsDue:
    def test_inactive_task_never_due(self):
        """Test that a paused task is never due."""
        task = new_automation("assurance", Decimal("1"), frequency=Frequency.MONTHLY, is_active=False)
        assert not is_due(task, NOW)

    def test_never_triggered_task_is_due(self):
        """Test that a task that never fired is due."""
        assert is_due(new_automation("assurance", Decimal("1"), frequency=Frequency.WEEKLY), NOW)

    def test_weekly_window_measured_from_midnight(self):
        """Test that the weekly window counts from midnight of the last trigger."""
        task = replace(new_automation("lavage", Decimal("1"), frequency=Frequency.WEEKLY), last_triggered=date(2024, 3, 8))
        assert is_due(task, datetime(2024, 3, 15, 0, 0))
        assert not is_due(task, datetime(2024, 3, 14, 23, 59))


def test_new_automation_defaults_name_to_category_label():
    """Test creating an automation with defaults."""
    task = new_automation("salaire_chauffeur", Decimal("5000"))
    assert task.name == "Driver salary"
    assert task.frequency == Frequency.DAILY
    assert task.is_active is True


def test_expense_from_task_falls_back_to_name_for_comment():
    """Test the comment of an automated expense."""
    task = new_automation("parking", Decimal("500"), name="Station parking")
    item = expense_from_task(task)

    assert item.comment == "Station parking"
    assert item.is_automated is True
    assert item.automation_id == task.id
    assert item.amount == Decimal("500")
    assert item.category == "parking"


def test_monthly_not_due_after_ten_days(store, engine):
    """Test a monthly task ten days after it fired."""
    add_task(store, Frequency.MONTHLY, last_triggered=date(2024, 3, 5))
    assert engine.trigger_due_automations(NOW) == []


def test_monthly_due_after_thirty_one_days(store, engine):
    """Test a monthly task thirty-one days after it fired."""
    task = add_task(store, Frequency.MONTHLY, last_triggered=date(2024, 2, 13))
    items = engine.trigger_due_automations(NOW)

    assert [item.automation_id for item in items] == [task.id]
    assert store.get_automation(task.id).last_triggered == date(2024, 3, 15)


def test_weekly_fires_once_per_window(store, engine):
    """Test that a weekly task fires once per window."""
    add_task(store, Frequency.WEEKLY)
    assert len(engine.trigger_due_automations(NOW)) == 1
    assert engine.trigger_due_automations(NOW) == []
    assert engine.trigger_due_automations(datetime(2024, 3, 21, 23, 0)) == []
    assert len(engine.trigger_due_automations(datetime(2024, 3, 22, 0, 0))) == 1


def test_daily_fires_every_call_without_stamp(store, engine):
    """Test that daily tasks fire every time and are not stamped."""
    task = add_task(store, Frequency.DAILY)
    assert len(engine.trigger_due_automations(NOW)) == 1
    assert len(engine.trigger_due_automations(NOW)) == 1
    assert store.get_automation(task.id).last_triggered is None


def test_inactive_tasks_are_skipped(store, engine):
    """Test that paused tasks are skipped."""
    task = add_task(store, Frequency.DAILY)
    store.toggle_automation(task.id)
    assert engine.trigger_due_automations(NOW) == []


def test_draft_expenses_only_active_daily(store, engine):
    """Test drafting expenses from active daily tasks."""
    daily = add_task(store, Frequency.DAILY, comment="Moussa")
    add_task(store, Frequency.WEEKLY)
    paused = add_task(store, Frequency.DAILY)
    store.toggle_automation(paused.id)

    drafts = engine.draft_expenses(date(2024, 3, 15))
    assert [item.automation_id for item in drafts] == [daily.id]
    assert drafts[0].comment == "Moussa"
    assert store.daily_entries == ()


def test_draft_daily_entry_returns_existing_entry(store, engine):
    """Test drafting a day that already has an entry."""
    add_task(store, Frequency.DAILY)
    existing = store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("100")))
    assert engine.draft_daily_entry(date(2024, 3, 15)) == existing


def test_draft_daily_entry_prefills_new_entry(store, engine):
    """Test drafting a new entry."""
    add_task(store, Frequency.DAILY, amount="5000")
    draft = engine.draft_daily_entry(date(2024, 3, 16))

    assert draft.day_type == DayType.NORMAL
    assert len(draft.expenses) == 1
    assert draft.net_revenue == Decimal("-5000")
    assert store.get_daily_entry(draft.id) is None


def test_record_due_automations_creates_entry(store, engine):
    """Test booking automations on a day without an entry."""
    add_task(store, Frequency.DAILY, amount="5000")
    add_task(store, Frequency.WEEKLY, amount="1000")

    entry = engine.record_due_automations(date(2024, 3, 15), now=NOW)

    assert entry.date == date(2024, 3, 15)
    assert len(entry.expenses) == 2
    assert entry.net_revenue == Decimal("-6000")
    assert store.cash_balance == Decimal("-6000")


def test_record_due_automations_does_not_double_book(store, engine):
    """Test booking automations twice on the same day."""
    add_task(store, Frequency.DAILY, amount="5000")
    add_task(store, Frequency.WEEKLY, amount="1000")

    engine.record_due_automations(date(2024, 3, 15), now=NOW)
    assert engine.record_due_automations(date(2024, 3, 15), now=NOW) is None
    assert len(store.daily_entries) == 1
    assert store.cash_balance == Decimal("-6000")


def test_record_due_automations_extends_existing_entry(store, engine):
    """Test booking automations onto an existing entry."""
    entry = store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("35000")))
    add_task(store, Frequency.DAILY, amount="5000")

    updated = engine.record_due_automations(date(2024, 3, 15), now=NOW)

    assert updated.id == entry.id
    assert updated.net_revenue == Decimal("30000")
    assert store.cash_balance == Decimal("30000")


def test_record_due_automations_skips_inactive_day(store, engine):
    """Test that an inactive day neither books nor stamps a due charge."""
    store.add_daily_entry(build_daily_entry(date(2024, 3, 15), DayType.INACTIVE))
    task = add_task(store, Frequency.MONTHLY, amount="10000")

    assert engine.record_due_automations(date(2024, 3, 15), now=NOW) is None

    assert store.get_automation(task.id).last_triggered is None
    assert store.find_entry_by_date(date(2024, 3, 15)).expenses == ()
    assert store.cash_balance == Decimal("0")

    entry = engine.record_due_automations(date(2024, 3, 16), now=datetime(2024, 3, 16, 9, 0))
    assert entry.net_revenue == Decimal("-10000")
    assert store.cash_balance == Decimal("-10000")
    assert store.get_automation(task.id).last_triggered == date(2024, 3, 16)
