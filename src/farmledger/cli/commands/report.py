"""Financial report commands."""

import click
from farmledger.cli.date_filters import report_filter_options
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import echo_balance_check, echo_rows, format_amount
from farmledger.domain.entities import GroupBy, ReportFilter
from farmledger.domain.errors import DomainError
from farmledger.domain.reporting import ReportService
from farmledger.utils.table_export import write_csv_table

export_option = click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Also write the report to this CSV file",
)


def _describe_filter(report_filter: ReportFilter, point_in_time: bool) -> str:
    """Human-readable period and dimension description for a report title."""
    if point_in_time:
        period = f"As of {report_filter.end_date}" if report_filter.end_date else "As of today"
    elif report_filter.start_date and report_filter.end_date:
        period = f"{report_filter.start_date} to {report_filter.end_date}"
    elif report_filter.start_date:
        period = f"From {report_filter.start_date}"
    elif report_filter.end_date:
        period = f"Through {report_filter.end_date}"
    else:
        period = "All time"

    parts = [period]
    if report_filter.plot_filter_active:
        parts.append(f"plot {report_filter.plot_id}")
    if report_filter.season_filter_active:
        parts.append(f"season {report_filter.season_id}")
    return ", ".join(parts)


def _service(ctx) -> ReportService:
    try:
        return ReportService(ctx.obj["db"], ctx.obj["currency"])
    except DomainError as e:
        handle_domain_error(ctx, e)


def _export(table, export_path: str | None) -> None:
    if export_path:
        count = write_csv_table(table, export_path)
        click.echo(f"\nExported {count} rows to {export_path}")


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("balance-sheet")
@export_option
@report_filter_options
@click.pass_context
def balance_sheet(ctx, report_filter: ReportFilter, export_path: str | None):
    """Assets, liabilities and equity as of the end date.

    Income and expense activity up to the end date appears in equity as
    retained earnings.
    """
    service = _service(ctx)
    report = service.balance_sheet(report_filter)

    title = f"Balance Sheet ({service.currency}) - {_describe_filter(report_filter, True)}"
    echo_rows(title, ("Account", "Amount"), report.rows())
    echo_balance_check(report.is_balanced, report.difference)
    _export(report.to_table(), export_path)


@report_group.command("trial-balance")
@export_option
@report_filter_options
@click.pass_context
def trial_balance(ctx, report_filter: ReportFilter, export_path: str | None):
    """Closing balance of every account in debit and credit columns."""
    service = _service(ctx)
    report = service.trial_balance(report_filter)

    title = f"Trial Balance ({service.currency}) - {_describe_filter(report_filter, True)}"
    echo_rows(title, ("Account", "Debit", "Credit"), report.rows())
    echo_balance_check(report.is_balanced, report.total_debits - report.total_credits)
    _export(report.to_table(), export_path)


@report_group.command("income-statement")
@export_option
@report_filter_options
@click.pass_context
def income_statement(ctx, report_filter: ReportFilter, export_path: str | None):
    """Revenue, expenses and net income for the period."""
    service = _service(ctx)
    report = service.income_statement(report_filter)

    title = f"Income Statement ({service.currency}) - {_describe_filter(report_filter, False)}"
    echo_rows(title, ("Account", "Amount"), report.rows())
    _export(report.to_table(), export_path)


@report_group.command("profitability")
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in GroupBy], case_sensitive=False),
    default=GroupBy.PLOT.value,
    show_default=True,
    help="Breakdown key",
)
@export_option
@report_filter_options
@click.pass_context
def profitability(ctx, report_filter: ReportFilter, group_by: str, export_path: str | None):
    """Revenue, expenses and net profit broken down by plot, season, category or account."""
    service = _service(ctx)
    report = service.profitability(report_filter, GroupBy(group_by.lower()))

    click.echo(f"\nTotal Revenue:  {format_amount(report.total_revenue):>20}")
    click.echo(f"Total Expenses: {format_amount(report.total_expenses):>20}")
    click.echo(f"Net Profit:     {format_amount(report.net_profit):>20}")

    table = report.to_table()
    title = f"Profitability by {report.group_by.value} ({service.currency}) - {_describe_filter(report_filter, False)}"
    echo_rows(title, table[0], report.rows(), label_width=35, value_width=18)
    _export(table, export_path)


@report_group.command("expenses")
@export_option
@report_filter_options
@click.pass_context
def expenses_by_category(ctx, report_filter: ReportFilter, export_path: str | None):
    """Expenses grouped by journal category with each category's share."""
    service = _service(ctx)
    report = service.expenses_by_category(report_filter)

    if not report.categories:
        click.echo("No expenses found for the selected period.")
        return

    title = f"Expenses by Category ({service.currency}) - {_describe_filter(report_filter, False)}"
    echo_rows(title, ("Category", "Amount", "% of Total"), report.rows(), label_width=40)
    _export(report.to_table(), export_path)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
