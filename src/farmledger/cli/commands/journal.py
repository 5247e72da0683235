"""Journal entry commands."""

from datetime import date

import click
from farmledger.cli.account_resolution import resolve_account_or_exit
from farmledger.cli.date_filters import resolve_cli_date_range
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import format_amount
from farmledger.domain.account import AccountService
from farmledger.domain.entities import JournalEntryLine, LineType
from farmledger.domain.errors import DomainError
from farmledger.domain.journal import JOURNAL_CATEGORIES, JournalService
from farmledger.domain.ledger import entry_totals, is_balanced
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date


def _parse_lines(
    ctx,
    account_service: AccountService,
    values: tuple[str, ...],
    line_type: LineType,
    currency: str,
    plot: str | None,
    season: str | None,
) -> list[JournalEntryLine]:
    """Turn ACCOUNT=AMOUNT option values into journal lines."""
    lines = []
    for value in values:
        if "=" not in value:
            click.echo(f"Error: Expected ACCOUNT=AMOUNT, got '{value}'", err=True)
            ctx.exit(1)
        account, amount_str = value.rsplit("=", 1)
        account_id = resolve_account_or_exit(ctx, account_service, account.strip(), currency=currency)
        try:
            amount = parse_amount(amount_str)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
        lines.append(JournalEntryLine(account_id, line_type, amount, plot, season))
    return lines


def _parse_date_or_exit(ctx, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@click.group()
def journal_group():
    """Record and review journal entries."""
    pass


@journal_group.command("add")
@click.option("--date", "entry_date", default="today", help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", required=True, help="Entry description")
@click.option("--category", help="Category (see 'farmledger journal categories')")
@click.option("--currency", help="Entry currency (defaults to the reporting currency)")
@click.option("--debit", multiple=True, metavar="ACCOUNT=AMOUNT", help="Debit line (repeatable)")
@click.option("--credit", multiple=True, metavar="ACCOUNT=AMOUNT", help="Credit line (repeatable)")
@click.option("--plot", help="Plot the lines belong to")
@click.option("--season", help="Season the lines belong to")
@click.pass_context
def add_entry(
    ctx,
    entry_date: str,
    description: str,
    category: str | None,
    currency: str | None,
    debit: tuple[str, ...],
    credit: tuple[str, ...],
    plot: str | None,
    season: str | None,
):
    """Record a balanced journal entry.

    Examples:
        farmledger journal add --description "Maize seed" --category Seed-Maize \\
            --debit "Seed=450" --credit "Cash at Bank=450"
        farmledger journal add --date 2024-03-01 --description "Harvest sale" \\
            --debit "Cash at Bank=1200" --credit "Crop Sales=1200" --plot north-field
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = JournalService(db)
    currency = (currency or ctx.obj["currency"]).upper()

    parsed_date = _parse_date_or_exit(ctx, entry_date)
    lines = _parse_lines(ctx, account_service, debit, LineType.DEBIT, currency, plot, season)
    lines += _parse_lines(ctx, account_service, credit, LineType.CREDIT, currency, plot, season)

    try:
        entry_id = service.create_entry(
            entry_date=parsed_date,
            description=description,
            currency=currency,
            lines=lines,
            category=category,
        )
        debits, _credits = entry_totals(lines)
        click.echo(f"Recorded journal entry {entry_id} ({format_amount(debits)} {currency})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--account", help="Only entries touching this account (name or ID)")
@click.option("--all-currencies", is_flag=True, help="Show entries in every currency")
@click.pass_context
def list_entries(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    account: str | None,
    all_currencies: bool,
):
    """List journal entries."""
    db = ctx.obj["db"]
    service = JournalService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
    )
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    entries = service.list_entries(
        start_date=start,
        end_date=end,
        currency=None if all_currencies else ctx.obj["currency"],
        account_id=account_id,
    )
    if not entries:
        click.echo("No journal entries found.")
        return

    click.echo(f"\nFound {len(entries)} journal entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>14} {'Cur':<4} {'Category':<22} {'Description':<38}")
    click.echo("-" * 100)
    for entry in entries:
        debits, _credits = entry_totals(entry.lines)
        click.echo(
            f"{entry.id:<6} {str(entry.date):<12} {format_amount(debits):>14} {entry.currency:<4} "
            f"{(entry.category or '')[:22]:<22} {entry.description[:38]:<38}"
        )


@journal_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show one journal entry with its lines."""
    db = ctx.obj["db"]
    service = JournalService(db)

    entry = service.get_entry(entry_id)
    if entry is None:
        click.echo(f"Error: Journal entry {entry_id} not found", err=True)
        ctx.exit(1)

    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts()}
    click.echo(f"\nJournal Entry {entry.id}")
    click.echo(f"  Date: {entry.date}")
    click.echo(f"  Description: {entry.description}")
    click.echo(f"  Category: {entry.category or 'Uncategorized'}")
    click.echo(f"  Currency: {entry.currency}")
    click.echo("-" * 80)
    click.echo(f"{'Account':<40} {'Debit':>18} {'Credit':>18}")
    click.echo("-" * 80)
    for line in entry.lines:
        name = accounts.get(line.account_id, f"<missing account {line.account_id}>")
        amount = format_amount(line.amount)
        debit, credit = (amount, "") if line.type == LineType.DEBIT else ("", amount)
        click.echo(f"{name[:40]:<40} {debit:>18} {credit:>18}")
        if line.plot_id or line.season_id:
            click.echo(f"    plot: {line.plot_id or '-'}  season: {line.season_id or '-'}")
    debits, credits = entry_totals(entry.lines)
    click.echo("-" * 80)
    click.echo(f"{'Total':<40} {format_amount(debits):>18} {format_amount(credits):>18}")
    click.echo(f"\nStatus: {'Balanced' if is_balanced(entry.lines) else 'NOT BALANCED'}")


@journal_group.command("edit")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="New entry date")
@click.option("--description", help="New description")
@click.option("--category", help="New category")
@click.pass_context
def edit_entry(ctx, entry_id: int, entry_date: str | None, description: str | None, category: str | None):
    """Change the date, description or category of an entry."""
    db = ctx.obj["db"]
    service = JournalService(db)

    parsed_date = _parse_date_or_exit(ctx, entry_date) if entry_date is not None else None
    try:
        service.update_entry(
            entry_id, entry_date=parsed_date, description=description, category=category
        )
        click.echo(f"Updated journal entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a journal entry."""
    db = ctx.obj["db"]
    service = JournalService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete journal entry {entry_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entry(entry_id)
        click.echo(f"Deleted journal entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("categories")
def list_categories():
    """List the suggested journal categories."""
    for category in JOURNAL_CATEGORIES:
        click.echo(category)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
