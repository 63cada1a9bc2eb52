"""CLI helpers for date range resolution."""

from datetime import date

import click

from talikhata.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    chosen = [period for period, is_set in period_flags.items() if is_set]

    if len(chosen) > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if chosen and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if chosen:
        return get_date_range(chosen[0])

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)
    return start, end


def period_options(func):
    """Add --today/--this-week/... flags to a command."""
    flags = [
        ("--today", "Only today"),
        ("--this-week", "From Monday of this week"),
        ("--this-month", "From the 1st of this month"),
        ("--last-month", "The whole of last month"),
        ("--this-year", "From January 1st of this year"),
        ("--last-year", "The whole of last year"),
    ]
    for flag, help_text in reversed(flags):
        func = click.option(flag, is_flag=True, help=help_text)(func)
    return func
