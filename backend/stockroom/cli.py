# Overview: Flask CLI commands for database bootstrap and demo data.

# backend/stockroom/cli.py
# Commands Legend (run from the backend directory):
# - flask --app stockroom catalog init-db
#   Create all tables (idempotent).
# - flask --app stockroom catalog reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - flask --app stockroom catalog seed-demo
#   Load a small demo catalog (skipped when products already exist).

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Product
from .services import catalog_service, inventory_service


DEMO_PRODUCTS = [
    {
        "name": "Basic Cotton T-Shirt",
        "category": "T-Shirts",
        "brand": "Urban Style",
        "sale_price_cents": 7990,
        "cost_price_cents": 3200,
        "min_stock_threshold": 5,
        "variants": [
            {"size": "S", "color": "White", "initial_stock": 15},
            {"size": "M", "color": "White", "initial_stock": 20},
            {"size": "L", "color": "Black", "initial_stock": 3},
            {"size": "XL", "color": "Black", "initial_stock": 0},
        ],
    },
    {
        "name": "Slim Jeans",
        "category": "Trousers",
        "brand": "Denim Co",
        "sale_price_cents": 18990,
        "cost_price_cents": 7800,
        "min_stock_threshold": 3,
        "variants": [
            {"size": "M", "color": "Navy Blue", "initial_stock": 12},
            {"size": "XL", "color": "Navy Blue", "initial_stock": 2},
        ],
    },
    {
        "name": "Floral Midi Dress",
        "category": "Dresses",
        "brand": "Bloom",
        "sale_price_cents": 22990,
        "cost_price_cents": 9500,
        "min_stock_threshold": 2,
        "variants": [
            {"size": "S", "color": "Pink", "initial_stock": 4},
            {"size": "M", "color": "Pink", "initial_stock": 1},
        ],
    },
]


@click.group("catalog")
def catalog_group():
    """Catalog database bootstrap commands."""


@catalog_group.command("init-db")
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@catalog_group.command("reset-db")
@click.option("--yes", is_flag=True, help="Confirm destructive reset")
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate every table."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@catalog_group.command("seed-demo")
@with_appcontext
def seed_demo():
    """Load demo products, then run the stock alert rule over every variant."""
    if db.session.query(Product).count():
        click.echo("SKIP Products already present")
        return

    for draft in DEMO_PRODUCTS:
        product = catalog_service.add_product(draft)
        for variant in product.variants:
            inventory_service.update_variant_stock(product.id, variant.id, variant.current_stock)
        click.echo(f"PASS Created {product.reference} {product.name} ({len(product.variants)} variants)")


def register_commands(app):
    app.cli.add_command(catalog_group)
