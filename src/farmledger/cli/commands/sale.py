"""Sale command."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.formatting import format_amount
from farmledger.domain.errors import DomainError
from farmledger.domain.sales import SaleItem, SalesService, sale_total
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.date_parser import parse_date


@click.command("sale")
@click.option("--customer", required=True, help="Customer name")
@click.option(
    "--item",
    "item_values",
    multiple=True,
    required=True,
    nargs=3,
    metavar="PRODUCT QUANTITY PRICE",
    help="Product, quantity sold and unit price (repeatable)",
)
@click.option("--date", "sale_date", default="today", help="Sale date (defaults to today)")
@click.option("--invoice", help="Invoice number")
@click.option("--plot", help="Plot the produce came from")
@click.option("--season", help="Season the produce came from")
@click.pass_context
def record_sale(ctx, customer: str, item_values, sale_date: str, invoice: str | None, plot: str | None, season: str | None):
    """Post a credit sale from the sales account to receivables.

    Requires the 'receivables' and 'sales' roles to be bound.

    Examples:
        farmledger sale --customer "Accra Market" --item Maize 20 45.50
        farmledger sale --customer Kumasi --item Maize 10 40 --item Cassava 5 12 --invoice INV-0042 --plot north
    """
    service = SalesService(ctx.obj["db"])

    try:
        posted_on = parse_date(sale_date)
        items = [
            SaleItem(product, parse_amount(quantity), parse_amount(price))
            for product, quantity, price in item_values
        ]
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for item in items:
        click.echo(f"{item.product:<30} {item.quantity:>8} x {format_amount(item.unit_price):>10} = {format_amount(item.amount):>12}")

    try:
        entry_id = service.record_sale(
            posted_on, customer, items, invoice_number=invoice, plot_id=plot, season_id=season
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Sale posted as journal entry {entry_id} ({format_amount(sale_total(items))})")


def register_commands(cli):
    """Register sale command with main CLI."""
    cli.add_command(record_sale)
