"""Financial projection command."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import echo_rows, format_amount
from farmledger.domain.errors import DomainError
from farmledger.domain.projection import DEFAULT_PROJECTION_YEARS, Scenario
from farmledger.domain.projection_statements import Statement, statement_rows, statement_table
from farmledger.domain.reporting import ProjectionService
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date
from farmledger.utils.table_export import write_csv_table

# Option name -> ScenarioAssumptions field
ASSUMPTION_OPTIONS = {
    "revenue-growth": ("revenue_growth", "Revenue growth, % per year"),
    "cogs-ratio": ("cogs_ratio", "Cost of sales, % of revenue"),
    "sga-ratio": ("sga_ratio", "SG&A, % of revenue"),
    "depreciation-rate": ("depreciation_rate", "Depreciation, % of net book value"),
    "interest-expense": ("interest_expense", "Interest expense per year"),
    "tax-rate": ("tax_rate", "Tax rate, % of profit before tax"),
    "receivables-days": ("receivables_days", "Receivables, days of revenue"),
    "inventory-days": ("inventory_days", "Inventory, days of cost of sales"),
    "payables-days": ("payables_days", "Payables, days of cost of sales"),
    "capex-ratio": ("capex_ratio", "Capital expenditure, % of revenue"),
    "new-debt": ("new_debt", "New borrowing per year"),
    "debt-repayment": ("debt_repayment", "Debt repaid per year"),
    "capital-injection": ("capital_injection", "Owner's capital injected per year"),
    "dividend-payout-ratio": ("dividend_payout_ratio", "Dividends, % of profit after tax"),
}

STATEMENT_TITLES = {
    Statement.INCOME: "Projected Income Statement",
    Statement.BALANCE: "Projected Balance Sheet",
    Statement.CASHFLOW: "Projected Cash Flow Statement",
}


def assumption_options(func):
    """Add one --<assumption> override option per ScenarioAssumptions field."""
    for option_name, (field, help_text) in reversed(ASSUMPTION_OPTIONS.items()):
        func = click.option(f"--{option_name}", field, help=help_text)(func)
    return func


@click.command("project")
@click.option(
    "--scenario",
    type=click.Choice([s.value for s in Scenario], case_sensitive=False),
    default=Scenario.BASE.value,
    show_default=True,
    help="Assumption set to start from",
)
@click.option("--years", type=int, default=DEFAULT_PROJECTION_YEARS, show_default=True, help="Years to project")
@click.option(
    "--statement",
    type=click.Choice([s.value for s in Statement], case_sensitive=False),
    default=Statement.INCOME.value,
    show_default=True,
    help="Statement to show",
)
@click.option("--as-of", help="Last day of the base year (defaults to today)")
@click.option("--inventory-value", help="Stock valuation to use instead of the inventory account")
@assumption_options
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Also write the statement to this CSV file",
)
@click.pass_context
def project_financials(
    ctx,
    scenario: str,
    years: int,
    statement: str,
    as_of: str | None,
    inventory_value: str | None,
    export_path: str | None,
    **assumption_values,
):
    """Project the income statement, balance sheet and cash flow forward.

    The base year is the trailing twelve months of the ledger. Roles
    (see 'farmledger role') tell the projection which accounts hold cash,
    receivables, payables, fixed assets and owner's capital.

    Examples:
        farmledger project --years 3
        farmledger project --scenario optimistic --statement balance
        farmledger project --revenue-growth 12 --tax-rate 20 --statement cashflow --export cf.csv
    """
    db = ctx.obj["db"]

    try:
        base_date = parse_date(as_of) if as_of else None
        stock_value = parse_amount(inventory_value) if inventory_value else None
        overrides = {
            field: parse_amount(value)
            for field, value in assumption_values.items()
            if value is not None
        }
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if years <= 0:
        click.echo("Nothing to project: --years must be positive.")
        return

    try:
        service = ProjectionService(db, ctx.obj["currency"])
        base = service.base_year(as_of=base_date, inventory_value=stock_value)
        projections = service.project(
            scenario=scenario.lower(),
            years=years,
            as_of=base_date,
            inventory_value=stock_value,
            **overrides,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nBase year {base.year} ({service.report_service.currency}):")
    click.echo(f"  Revenue:       {format_amount(base.revenue):>16}")
    click.echo(f"  Cost of sales: {format_amount(base.cogs):>16}")
    click.echo(f"  SG&A:          {format_amount(base.sga):>16}")
    click.echo(f"  Cash:          {format_amount(base.cash):>16}")

    chosen = Statement(statement.lower())
    columns = ["Line"] + [str(year.year) for year in projections]
    title = f"{STATEMENT_TITLES[chosen]} - {scenario.lower()} scenario"
    echo_rows(title, columns, statement_rows(projections, chosen), label_width=45, value_width=16)

    if chosen == Statement.BALANCE:
        unbalanced = [str(year.year) for year in projections if not year.balance_sheet.is_balanced]
        if unbalanced:
            click.echo(f"\nStatus: NOT BALANCED in {', '.join(unbalanced)}")
        else:
            click.echo("\nStatus: Balanced")

    if export_path:
        count = write_csv_table(statement_table(projections, chosen), export_path)
        click.echo(f"\nExported {count} rows to {export_path}")


def register_commands(cli):
    """Register project command with main CLI."""
    cli.add_command(project_financials)
