"""Chart of accounts commands."""

import click
from farmledger.cli.account_resolution import resolve_account_or_exit
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import format_amount
from farmledger.domain.account import AccountService
from farmledger.domain.entities import AccountType
from farmledger.domain.errors import DomainError
from farmledger.utils.amount_parser import parse_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


def _parse_amount_or_exit(ctx, value: str, what: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {what}: {e}", err=True)
        ctx.exit(1)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type",
)
@click.option("--currency", help="Currency code (defaults to the reporting currency)")
@click.option("--initial-balance", default="0", help="Opening balance in the account's natural direction")
@click.pass_context
def create_account(ctx, name: str, account_type: str, currency: str | None, initial_balance: str):
    """Create a new account.

    Examples:
        farmledger account create "Cash at Bank" --type Asset --initial-balance 5000
        farmledger account create "Crop Sales" --type Income
        farmledger account create "Seed" --type Expense --currency GHS
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    balance = _parse_amount_or_exit(ctx, initial_balance, "initial balance")

    try:
        account_id = service.create_account(
            name=name,
            account_type=account_type,
            currency=currency or ctx.obj["currency"],
            initial_balance=balance,
        )
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all-currencies", is_flag=True, help="Show accounts in every currency")
@click.pass_context
def list_accounts(ctx, all_currencies: bool):
    """List accounts in the reporting currency."""
    db = ctx.obj["db"]
    service = AccountService(db)

    currency = None if all_currencies else ctx.obj["currency"]
    accounts = service.list_accounts(currency=currency)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:30s} | {acc.type.value:9s} | {acc.currency} "
            f"| Opening: {format_amount(acc.initial_balance):>14}"
        )


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="New account type",
)
@click.option("--currency", help="New currency code")
@click.option("--initial-balance", help="New opening balance")
@click.pass_context
def edit_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    currency: str | None,
    initial_balance: str | None,
) -> None:
    """Edit an account.

    ACCOUNT can be an account name or ID. Only the options given are changed.

    Examples:
        farmledger account edit "Seed" --name "Seed and Seedlings"
        farmledger account edit 3 --initial-balance 1200
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    balance = None
    if initial_balance is not None:
        balance = _parse_amount_or_exit(ctx, initial_balance, "initial balance")

    try:
        service.update_account(
            account_id,
            name=name,
            account_type=account_type,
            currency=currency,
            initial_balance=balance,
        )
        click.echo(f"Updated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    Journal lines already posted to the account are kept but no longer
    count toward any report.

    Examples:
        farmledger account delete "Old Tractor Loan"
        farmledger account delete 7 --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    line_count = db.get_account_line_count(account_id)
    if line_count:
        click.echo(
            f"Warning: {line_count} journal line{'s' if line_count != 1 else ''} "
            f"reference '{account_obj.name}' and will be left without an account."
        )

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
