# Overview: Flask CLI command groups for bootstrap, user setup, and maintenance.

# backend/storeledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables that do not exist yet (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User bootstrap:
# - python -m flask users create --email owner@example.com --store-name "Sharma Traders" ...
#   Create a store owner and their store (prompts if options are omitted).
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired or revoked session tokens older than the retention window.

import click
from flask.cli import with_appcontext

from .errors import LedgerError
from .extensions import db
from .services import auth_service
from .services import session_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables. Existing tables and data are left alone."""
    db.create_all()
    click.echo("PASS Database tables created")


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
    click.echo("BUILD Recreating tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('users')
def users_group():
    """Store owner commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Login email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password (6+ chars)')
@click.option('--first-name', prompt=True)
@click.option('--last-name', prompt=True)
@click.option('--store-name', prompt=True)
@click.option('--store-phone', prompt=True)
@click.option('--country-code', default='+91', show_default=True)
@click.option('--gst-number', default='', help='Optional GST registration number')
@click.option('--village', prompt='Village or town')
@click.option('--post-office', prompt=True)
@click.option('--police-station', prompt=True)
@click.option('--district', prompt=True)
@click.option('--state', prompt=True)
@click.option('--postal-pin', prompt=True)
@with_appcontext
def create_user_cli(email, password, first_name, last_name, store_name, store_phone, country_code,
                    gst_number, village, post_office, police_station, district, state, postal_pin):
    """Create a store owner together with their store."""
    payload = {
        "email": email,
        "password": password,
        "confirmPassword": password,
        "firstName": first_name,
        "lastName": last_name,
        "storeName": store_name,
        "storePhone": store_phone,
        "countryCode": country_code,
        "gstNumber": gst_number,
        "village": village,
        "postOffice": post_office,
        "policeStation": police_station,
        "district": district,
        "state": state,
        "postalPin": postal_pin,
    }
    try:
        user, store = auth_service.register_owner(payload)
    except LedgerError as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Created user {user.email} (ID: {user.id})")
    click.echo(f"PASS Created store {store.name} (ID: {store.id})")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """Delete expired or revoked session tokens older than the retention window."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
