"""Account role and expense classification commands."""

import click
from farmledger.cli.account_resolution import resolve_account_or_exit
from farmledger.cli.error_handling import handle_domain_error
from farmledger.domain.account import AccountService
from farmledger.domain.entities import AccountRole, ExpenseClass
from farmledger.domain.errors import DomainError
from farmledger.domain.roles import ROLE_ACCOUNT_TYPES, AccountRoleService

ROLE_NAMES = [role.value for role in AccountRole]


@click.group()
def role_group():
    """Bind well-known roles (cash, wages, ...) to accounts."""
    pass


@role_group.command("bind")
@click.argument("role", type=click.Choice(ROLE_NAMES, case_sensitive=False))
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def bind_role(ctx, role: str, account: str):
    """Bind ROLE to ACCOUNT (name or ID).

    Examples:
        farmledger role bind cash "Cash at Bank"
        farmledger role bind wages "Labor Wages"
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    try:
        AccountRoleService(db).bind_role(role, account_id)
        click.echo(f"Bound role '{role.lower()}' to account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@role_group.command("unbind")
@click.argument("role", type=click.Choice(ROLE_NAMES, case_sensitive=False))
@click.pass_context
def unbind_role(ctx, role: str):
    """Remove the binding for ROLE."""
    AccountRoleService(ctx.obj["db"]).unbind_role(role)
    click.echo(f"Unbound role '{role.lower()}'")


@role_group.command("list")
@click.pass_context
def list_roles(ctx):
    """List roles, their bound accounts and expense classifications."""
    db = ctx.obj["db"]
    service = AccountRoleService(db)
    accounts = {acc.id: acc for acc in AccountService(db).list_accounts()}
    bindings = service.get_roles()

    click.echo("\nRoles:")
    click.echo("-" * 60)
    for role in AccountRole:
        account_id = bindings.get(role)
        if account_id is None:
            target = "(unbound)"
        elif account_id in accounts:
            target = f"{accounts[account_id].name} (ID: {account_id})"
        else:
            target = f"<missing account {account_id}>"
        click.echo(f"{role.value:<12} {ROLE_ACCOUNT_TYPES[role].value:<10} {target}")

    classification = service.expense_classification()
    if classification:
        click.echo("\nExpense classification:")
        click.echo("-" * 60)
        for account_id, expense_class in classification.items():
            name = accounts[account_id].name if account_id in accounts else str(account_id)
            click.echo(f"{name:<40} {expense_class.value}")


@role_group.command("classify")
@click.argument("account", metavar="ACCOUNT")
@click.argument("expense_class", type=click.Choice([c.value for c in ExpenseClass] + ["default"], case_sensitive=False))
@click.pass_context
def classify_expense(ctx, account: str, expense_class: str):
    """Treat an expense ACCOUNT as cost of sales or SG&A in projections.

    Use "default" to go back to classification by account name.

    Examples:
        farmledger role classify "Fuel" cogs
        farmledger role classify "Fuel" default
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    value = None if expense_class.lower() == "default" else expense_class
    try:
        AccountRoleService(db).classify_expense(account_id, value)
        click.echo(f"Account {account_id} classified as {value or 'default'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register role commands with main CLI."""
    cli.add_command(role_group, name="role")
