# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/tailpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to tailpos (PowerShell: $env:FLASK_APP="tailpos").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system first-run --sample | --blank
#   Resolve the first-run prompt without the UI.
#
# Catalog:
# - python -m flask products list [--keyword kopi]
# - python -m flask products add --name "Kopi Susu" --price 15000 [--image img/kopi.png] [--option Iced]
#
# Users:
# - python -m flask users list
# - python -m flask users create --username kasir --password secret [--name "Kasir"] [--role cashier]
#
# Sales:
# - python -m flask sales list

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import auth_service, bootstrap_service, products_service, sales_service
from .services.receipt_service import price_format
from .services.register_service import get_pos_session
from .services.store_service import StorageError
from .validation import ValidationError, ConflictError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database ready")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA, including the first-run marker.
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete")


@system_group.command('first-run')
@click.option('--sample/--blank', default=True, help='Load the bundled sample data or start empty')
@click.option('--path', type=click.Path(exists=True, dir_okay=False), default=None, help='Alternative sample file')
@with_appcontext
def first_run(sample, path):
    """Resolve the first-run prompt."""
    session = get_pos_session()
    try:
        if sample:
            result = bootstrap_service.start_with_sample_data(session, path)
        else:
            result = bootstrap_service.start_blank(session)
    except (ValidationError, StorageError) as e:
        raise click.ClickException(str(e))

    if result["skipped"]:
        click.echo("SKIP First run already completed")
    else:
        click.echo(f"PASS Loaded {result['products']} products, {result['users']} users")


@click.group('products')
def products_group():
    """Catalog inspection and editing."""


@products_group.command('list')
@click.option('--keyword', default='', help='Filter by product name')
@with_appcontext
def list_products(keyword):
    products = products_service.filtered_products(keyword)
    if not products:
        click.echo("No products.")
        return
    for p in products:
        option = f" [{p['option']}]" if p.get("option") else ""
        click.echo(f"{p['id']:>4}  {p['name']}{option}  {price_format(p['price'])}")


@products_group.command('add')
@click.option('--name', required=True)
@click.option('--price', required=True, type=int)
@click.option('--image', default=None)
@click.option('--option', 'option_', default=None)
@with_appcontext
def add_product(name, price, image, option_):
    try:
        product = products_service.create_product({
            "name": name,
            "price": price,
            "image": image,
            "option": option_,
        })
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created product {product['id']}: {product['name']}")


@click.group('users')
def users_group():
    """Till operator accounts."""


@users_group.command('list')
@with_appcontext
def list_users():
    users = auth_service.list_users()
    if not users:
        click.echo("No users.")
        return
    for u in users:
        click.echo(f"{u['id']:>4}  {u['username']:<20} {u.get('role') or '-'}")


@users_group.command('create')
@click.option('--username', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--name', default=None)
@click.option('--role', default=auth_service.DEFAULT_ROLE)
@with_appcontext
def create_user(username, password, name, role):
    try:
        user_id = auth_service.create_user(username, password, name=name, role=role)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user {user_id}: {username}")


@click.group('sales')
def sales_group():
    """Sales history."""


@sales_group.command('list')
@with_appcontext
def list_sales():
    sales = sales_service.list_sales()
    if not sales:
        click.echo("No sales.")
        return
    for s in sales:
        count = sum(item["qty"] for item in s["items"])
        click.echo(f"{s['receipt_no']:<24} {s['date']:<16} {count:>3} items  {price_format(s['total'])}")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(products_group)
    app.cli.add_command(users_group)
    app.cli.add_command(sales_group)
