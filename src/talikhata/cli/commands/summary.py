"""Summary commands."""

import click
from talikhata.domain.errors import DomainError
from talikhata.domain.summary import SummaryService
from talikhata.cli.date_filters import period_options, resolve_cli_date_range
from talikhata.cli.error_handling import handle_domain_error
from talikhata.cli.formatting import format_money


def _describe_range(start_date, end_date) -> str:
    if start_date is None and end_date is None:
        return "all time"
    start = start_date.isoformat() if start_date else "beginning"
    end = end_date.isoformat() if end_date else "today"
    return f"{start} to {end}"


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--top", type=int, default=5, show_default=True, help="How many top debtors to list")
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    today: bool,
    this_week: bool,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
    top: int,
):
    """Show a business overview.

    Transaction totals follow the chosen period; receivables and payables
    always reflect current customer balances.

    Examples:
        talikhata summary
        talikhata summary --this-month
        talikhata summary --start-date 2024-01-01 --end-date 2024-03-31
    """
    db = ctx.obj["db"]
    service = SummaryService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "today": today,
            "this-week": this_week,
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    try:
        overview = service.overview(start_date=start, end_date=end, top=top)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transactions ({_describe_range(overview.start_date, overview.end_date)})")
    click.echo("-" * 40)
    click.echo(f"{'Count':<20} {overview.transaction_count:>19}")
    click.echo(f"{'Given':<20} {format_money(overview.total_given):>19}")
    click.echo(f"{'Received':<20} {format_money(overview.total_received):>19}")
    click.echo(f"{'Refunded':<20} {format_money(overview.total_refund):>19}")
    click.echo(f"{'Net':<20} {format_money(overview.net_balance):>19}")

    click.echo("\nCustomers")
    click.echo("-" * 40)
    click.echo(f"{'Active customers':<20} {overview.customer_count:>19}")
    click.echo(f"{'To receive':<20} {format_money(overview.net_receivable):>19}")
    click.echo(f"{'To give':<20} {format_money(overview.net_payable):>19}")
    click.echo(f"{'Total due':<20} {format_money(overview.total_due):>19}")
    click.echo(f"{'Customers with due':<20} {overview.customers_with_due:>19}")

    if overview.top_debtors:
        click.echo("\nTop dues")
        click.echo("-" * 40)
        for c in overview.top_debtors:
            click.echo(f"{c.name[:24]:<24} {format_money(c.due_amount):>15}")


def register_commands(cli):
    """Register summary command with CLI."""
    cli.add_command(summary)
