"""CSV import command."""

import click
from farmledger.domain.journal_import import JournalImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import journal entries from a CSV file.

    The file needs the columns: Date, Description, Category, Currency,
    Debit Account, Debit Amount, Credit Account, Credit Amount. Optional
    Plot and Season columns tag both lines of each entry.

    Accounts are matched by name and currency. If any row is invalid,
    nothing is imported.
    """
    db = ctx.obj["db"]
    service = JournalImportService(db)

    try:
        result = service.import_csv(csv_file_path=csv_file)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} journal entries")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
