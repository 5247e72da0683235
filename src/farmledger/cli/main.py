"""Main CLI entry point."""

import click
from farmledger.database.factories import create_sqlite_database
from farmledger.logging_config import configure_logging

# Import and register all commands at module level
from farmledger.cli.commands import (
    account,
    journal,
    import_cmd,
    role,
    payroll,
    sale,
    report,
    project,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FARMLEDGER_DB_PATH environment variable)",
    envvar="FARMLEDGER_DB_PATH",
)
@click.option(
    "--currency",
    default="USD",
    show_default=True,
    envvar="FARMLEDGER_CURRENCY",
    help="Reporting currency (overrides FARMLEDGER_CURRENCY environment variable)",
)
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, currency: str, verbose: int):
    """Farmledger - double-entry bookkeeping for farms.

    Record journal entries against a chart of accounts, run payroll, post sales,
    and produce balance sheets, trial balances, income statements,
    profitability breakdowns and multi-year projections.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["currency"] = currency.strip().upper()

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
journal.register_commands(cli)
import_cmd.register_commands(cli)
role.register_commands(cli)
payroll.register_commands(cli)
sale.register_commands(cli)
report.register_commands(cli)
project.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
