# Overview: Flask CLI command groups for bootstrap, market-rate ingest and inspection.

# backend/jewelry_admin/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to "jewelry_admin:create_app".
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and seeds default categories and materials.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Market rates:
# - python -m flask rates record --time "9 AM" --gold 2350.5 --exchange 4480
#   Append one gold price and one exchange rate sample to today's rows.
# - python -m flask rates list --limit 7
#   Show recent daily rows with their samples.
#
# Inspection:
# - python -m flask invoices list [--type pawn]
#   List invoices, newest first.
# - python -m flask items low-stock
#   List items with 0 < stock <= LOW_STOCK_THRESHOLD, and out-of-stock items.

import click
from flask.cli import with_appcontext

from .constants import DEFAULT_MATERIALS, ITEM_CATEGORIES
from .extensions import db
from .services import invoice_service, item_service, market_service, settings_service
from .validation import AppError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create tables (if missing) and seed the lookup lists.

    Seeds categories (Rings, Necklaces, ...) and the standard material
    qualities (24K Gold, Platinum, ...). Existing rows are left alone.
    """
    click.echo("START Initializing jewelry admin...")
    db.create_all()

    created = settings_service.seed_defaults(
        [c.capitalize() for c in ITEM_CATEGORIES],
        DEFAULT_MATERIALS,
    )
    click.echo(f"PASS Categories created: {created['categories']}")
    click.echo(f"PASS Materials created: {created['materials']}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to seed settings.")


@click.group('rates')
def rates_group():
    """Market rate ingest and inspection."""


@rates_group.command('record')
@click.option('--time', 'time_label', required=True, help='Sample label, e.g. "9 AM"')
@click.option('--gold', 'gold_price', required=True, type=float, help='Gold price')
@click.option('--exchange', 'exchange_rate', required=True, type=float, help='Exchange rate')
@with_appcontext
def record_rates(time_label, gold_price, exchange_rate):
    """Append one reading for both rate types."""
    try:
        result = market_service.record_market_rates(
            time_label=time_label,
            gold_price=gold_price,
            exchange_rate=exchange_rate,
        )
    except AppError as e:
        raise click.ClickException(str(e))

    for rate_type, row in result.items():
        click.echo(f"PASS {rate_type}: {len(row['hourly_rate'])} sample(s) today (row {row['id']})")


@rates_group.command('list')
@click.option('--limit', default=7, type=int, help='Number of daily rows')
@click.option('--type', 'rate_type', type=click.Choice(['gold', 'exchange_rate']), help='Filter by type')
@with_appcontext
def list_rates(limit, rate_type):
    rows = market_service.list_market_rates(limit=limit, rate_type=rate_type)
    if not rows:
        click.echo("No market rates recorded.")
        return

    for row in rows:
        samples = ", ".join(f"{s['time']}={s['value']}" for s in row["hourly_rate"])
        click.echo(f"{row['created_at'][:10]} {row['type']:<14} {samples}")


@click.group('invoices')
def invoices_group():
    """Invoice inspection."""


@invoices_group.command('list')
@click.option('--type', 'invoice_type', type=click.Choice(['sales', 'pawn', 'buy']), help='Filter by type')
@with_appcontext
def list_invoices_cli(invoice_type):
    invoices = invoice_service.list_invoices()
    if invoice_type:
        invoices = [i for i in invoices if i["type"] == invoice_type]

    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'Number':<18} {'Type':<7} {'Status':<15} {'Customer':<25} {'Total':>12} {'Lines':>6}")
    click.echo("="*90)
    for inv in invoices:
        click.echo(
            f"{inv['invoice_number']:<18} {inv['type']:<7} {inv['status']:<15} "
            f"{inv['customer_name'][:25]:<25} {inv['total']:>12,.2f} {len(inv['items']):>6}"
        )


@click.group('items')
def items_group():
    """Catalog inspection."""


@items_group.command('low-stock')
@with_appcontext
def low_stock_cli():
    for status in ("low-stock", "out-of-stock"):
        result = item_service.list_items(stock_status=status, page=1, page_size=100)
        click.echo(f"\n{status}: {result['pagination']['total']}")
        for item in result["items"]:
            click.echo(f"  {item['id']:<32} {item['name'][:30]:<30} stock={item['stock']}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(rates_group)
    app.cli.add_command(invoices_group)
    app.cli.add_command(items_group)
