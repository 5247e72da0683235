"""CLI helper for resolving account arguments."""

from __future__ import annotations

import click
from farmledger.domain.account import AccountService
from farmledger.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context,
    account_service: AccountService,
    account: str | int,
    currency: str | None = None,
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    Args:
        ctx: Click context
        account_service: AccountService instance
        account: Account name or ID as typed by the user
        currency: Optional currency the account must use
    """
    try:
        return resolve_account(account_service, account, currency=currency)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
