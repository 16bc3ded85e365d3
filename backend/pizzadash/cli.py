# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/pizzadash/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Data:
# - python -m flask data seed
#   Restore products, orders, customers and pizza settings from the built-in dataset (accounts are kept).
# - python -m flask data reset --yes
#   DEV/TEST only: restore the built-in dataset and delete every account and notification.
#
# Accounts:
# - python -m flask users list
#   List accounts with role and approval status.
# - python -m flask users create --name "Maria Souza" --email maria@pizza.local --password secret1 --role administrator
#   Create an approved account (prompts if options are omitted).
#
# Orders:
# - python -m flask orders clear --yes
#   Delete every order.

import click
from flask.cli import with_appcontext

from .extensions import get_store
from .models.records import USER_APPROVED, USER_ROLES, USER_STATUSES
from .seed_data import default_seed
from .services import auth_service
from .services.entity_store import NOTIFICATIONS, ORDERS, USERS
from .validation import ConflictError, ValidationError, check_min_length, validate_email


@click.group('data')
def data_group():
    """Dataset maintenance commands."""


@data_group.command('seed')
@with_appcontext
def seed_data():
    """Restore the built-in catalog, orders, customers and settings. Accounts are kept."""
    store = get_store()
    seed = default_seed()
    seed[USERS] = [u.to_record() for u in store.users]
    seed[NOTIFICATIONS] = [n.to_dict() for n in store.notifications]
    store.reseed(seed)

    click.echo(f"PASS Seeded {len(store.products)} products, {len(store.orders)} orders, "
               f"{len(store.customers)} customers")
    click.echo("NOTE The active session was ended; log in again.")


@data_group.command('reset')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_data(yes):
    """
    DANGER: Restore the built-in dataset and delete every account.

    The first administrator to register afterwards is approved automatically.
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL ACCOUNTS AND ORDERS. Are you sure?", abort=True)

    store = get_store()
    store.reseed()
    click.echo("PASS Data reset complete. Register an administrator to get started.")


@click.group('users')
def users_group():
    """Account inspection and bootstrap commands."""


@users_group.command('list')
@click.option('--status', type=click.Choice(sorted(USER_STATUSES)), help='Filter by approval status')
@with_appcontext
def list_users(status):
    """List all accounts with their role and status."""
    users = auth_service.list_users(get_store())
    if status:
        users = [u for u in users if u.status == status]

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'Name':<25} {'Email':<35} {'Role':<15} {'Status'}")
    click.echo("="*90)
    for user in users:
        click.echo(f"{user.name:<25} {user.email:<35} {user.role:<15} {user.status}")
    click.echo("="*90 + "\n")


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(sorted(USER_ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(name, email, password, role):
    """
    Create an approved account without going through registration.

    Password must be at least 6 characters.
    """
    try:
        check_min_length("name", name.strip(), 3)
        validate_email(email.strip())
        user = auth_service.create_user(
            get_store(),
            name=name.strip(),
            email=email.strip(),
            password=password,
            role=role,
            status=USER_APPROVED,
        )
    except ValidationError as e:
        raise click.ClickException(f"Validation failed: {e}")
    except ConflictError as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user: {user.name} ({user.email}) with role '{user.role}'")
    click.echo("SECURITY Password securely hashed with bcrypt")


@click.group('orders')
def orders_group():
    """Order maintenance commands."""


@orders_group.command('clear')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def clear_orders(yes):
    """DANGER: Delete every order. Customers keep their totals."""
    if not yes:
        click.confirm("WARN This will DELETE ALL ORDERS. Are you sure?", abort=True)

    store = get_store()
    removed = len(store.orders)
    store.replace(ORDERS, [])
    click.echo(f"PASS Deleted {removed} orders")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(data_group)
    app.cli.add_command(users_group)
    app.cli.add_command(orders_group)
