"""CLI helpers for date range and report filter resolution."""

from datetime import date
import functools

import click

from farmledger.domain.entities import ALL, ReportFilter
from farmledger.utils.date_parser import get_date_range, parse_date, year_range

PERIOD_FLAGS = (
    "this-month",
    "this-quarter",
    "this-year",
    "last-month",
    "last-quarter",
    "last-year",
)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    year: int | None = None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags, --year or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)
    if year is not None:
        period_count += 1

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--year, --this-month, --this-year, --last-month, --last-year, ...) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--year, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if year is not None:
        start, end = year_range(year)
    elif period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
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

        if start is None and end is None and default_range is not None:
            start, end = default_range

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date is after end date.", err=True)
        ctx.exit(1)

    return start, end


def report_filter_options(func):
    """Add date range, period, plot and season options to a report command.

    The wrapped command receives a single ``report_filter`` keyword argument.
    """

    @click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
    @click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
    @click.option("--year", type=int, help="Calendar year (e.g., 2024)")
    @click.option("--this-month", is_flag=True, help="Filter to current month")
    @click.option("--this-quarter", is_flag=True, help="Filter to current quarter")
    @click.option("--this-year", is_flag=True, help="Filter to current year")
    @click.option("--last-month", is_flag=True, help="Filter to previous month")
    @click.option("--last-quarter", is_flag=True, help="Filter to previous quarter")
    @click.option("--last-year", is_flag=True, help="Filter to previous year")
    @click.option("--plot", default=ALL, show_default=True, help="Only lines tagged with this plot")
    @click.option("--season", default=ALL, show_default=True, help="Only lines tagged with this season")
    @click.pass_context
    @functools.wraps(func)
    def wrapper(ctx, *args, start_date, end_date, year, plot, season, **kwargs):
        period_flags = {period: kwargs.pop(period.replace("-", "_")) for period in PERIOD_FLAGS}
        start, end = resolve_cli_date_range(
            ctx,
            start_date=start_date,
            end_date=end_date,
            period_flags=period_flags,
            year=year,
        )
        report_filter = ReportFilter(start_date=start, end_date=end, plot_id=plot, season_id=season)
        return ctx.invoke(func, *args, report_filter=report_filter, **kwargs)

    return wrapper
