"""Payroll command."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import format_amount
from farmledger.domain.errors import DomainError
from farmledger.domain.payroll import PayItem, PayrollService, payroll_total
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date


@click.command("payroll")
@click.option("--start", "start_date", required=True, help="First day of the pay period")
@click.option("--end", "end_date", required=True, help="Last day of the pay period")
@click.option(
    "--pay",
    "pay",
    multiple=True,
    nargs=3,
    metavar="WORKER HOURS RATE",
    help="Hours worked and hourly rate for one worker (repeatable)",
)
@click.option("--amount", help="Lump sum to pay in addition to --pay items")
@click.option("--date", "entry_date", help="Posting date (defaults to the period end)")
@click.pass_context
def run_payroll(ctx, start_date: str, end_date: str, pay, amount: str | None, entry_date: str | None):
    """Post payroll from the wages account to the cash account.

    Requires the 'wages' and 'cash' roles to be bound.

    Examples:
        farmledger payroll --start 2024-03-01 --end 2024-03-15 --pay Ama 40 12.5 --pay Kofi 32 12.5
        farmledger payroll --start "last month" --end today --amount 2400
    """
    db = ctx.obj["db"]
    service = PayrollService(db)

    try:
        period_start = parse_date(start_date)
        period_end = parse_date(end_date)
        posting_date = parse_date(entry_date) if entry_date else None
        items = [PayItem(worker, parse_amount(hours), parse_amount(rate)) for worker, hours, rate in pay]
        lump_sum = parse_amount(amount) if amount is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for item in items:
        click.echo(f"{item.worker:<30} {item.hours:>8} h x {format_amount(item.pay_rate):>10} = {format_amount(item.gross_pay):>12}")

    try:
        entry_id = service.run_payroll(
            period_start, period_end, pay_items=items, amount=lump_sum, entry_date=posting_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    total = payroll_total(items, lump_sum)
    click.echo(f"Payroll posted as journal entry {entry_id} ({format_amount(total)})")


def register_commands(cli):
    """Register payroll command with main CLI."""
    cli.add_command(run_payroll)
