"""Summary command."""

from decimal import Decimal

import click

from busledger.cli.display import currency_of, format_money
from busledger.cli.error_handling import parse_date_or_exit
from busledger.domain.entities import expense_category_label
from busledger.domain.summary import SummaryService
from busledger.utils.date_parser import PERIODS


@click.command("summary")
@click.option("--period", type=click.Choice(PERIODS), default="month", show_default=True,
              help="Last 7 days, current month or everything")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative); overrides --period")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative); overrides --period")
@click.pass_context
def summary(ctx, period: str, start_date: str | None, end_date: str | None) -> None:
    """Show revenue, costs, debt and a health score for a period.

    Examples:
        busledger summary
        busledger summary --period week
        busledger summary --start-date 2024-01-01 --end-date 2024-03-31
    """
    service = SummaryService(ctx.obj["store"])

    if start_date or end_date:
        start = parse_date_or_exit(ctx, start_date)
        end = parse_date_or_exit(ctx, end_date)
        result = service.summarize(start, end)
    else:
        result = service.summarize_period(period)

    currency = currency_of(ctx)

    def money(amount):
        return format_money(amount, currency)

    start_label = result.start_date or "beginning"
    end_label = result.end_date or "today"
    click.echo(f"\nSummary from {start_label} to {end_label}")
    click.echo("=" * 50)
    click.echo(
        f"Days recorded: {result.entry_count} "
        f"({result.normal_days} normal, {result.maintenance_days} maintenance, {result.inactive_days} inactive)"
    )
    click.echo(f"Revenue:          {money(result.total_revenue):>20}")
    click.echo(f"Expenses:         {money(result.total_expenses):>20}")
    click.echo(f"Breakdowns:       {money(result.total_breakdown_cost):>20}  ({result.breakdown_count})")
    click.echo(f"Net:              {money(result.total_net):>20}")
    click.echo("-" * 50)
    whole = Decimal("1")
    avg_revenue = result.average_daily_revenue.quantize(whole)
    avg_net = result.average_daily_net.quantize(whole)
    click.echo(f"Avg revenue/day:  {money(avg_revenue):>20}")
    click.echo(f"Avg net/day:      {money(avg_net):>20}")
    click.echo(f"Expense ratio:    {result.expense_ratio:>19}%")
    click.echo(f"Profit margin:    {result.profit_margin:>19}%")
    click.echo("-" * 50)
    click.echo(f"Outstanding debt: {money(result.outstanding_debt):>20}")
    click.echo(f"Provisional debt: {money(result.provisional_debt):>20}")
    click.echo(f"Cash balance:     {money(result.cash_balance):>20}")

    if result.expenses_by_category:
        click.echo("\nExpenses by category:")
        for category, total in result.expenses_by_category:
            click.echo(f"  {expense_category_label(category):<24} {money(total):>20}")

    if result.breakdowns_by_category:
        click.echo("\nBreakdowns by category:")
        for item in result.breakdowns_by_category:
            click.echo(f"  {item.category:<24} {money(item.total):>20}  ({item.count})")

    if result.best_day is not None:
        click.echo(f"\nBest day:  {result.best_day.date} ({money(result.best_day.net_revenue)})")
        click.echo(f"Worst day: {result.worst_day.date} ({money(result.worst_day.net_revenue)})")

    click.echo(f"\nHealth score: {result.health_score}/100 ({result.health_label})")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
