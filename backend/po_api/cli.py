# Overview: Flask CLI command groups for bootstrap, inspection, maintenance and serving.

# backend/po_api/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent: creates missing tables and seeds the default administrator.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
# - python -m flask users create --username jdoe --email jdoe@example.com --password "secret1"
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired or revoked sessions older than the retention window.
#
# Serving:
# - python -m flask serve --port 4000
#   Threaded server; SIGINT/SIGTERM drain in-flight requests before exiting.

import sys

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import User
from .services import auth_service
from .services import session_service
from .services.schema_service import init_database, reset_database
from .validation import ConflictError, ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create tables and the default administrator.

    Default credentials: admin / admin123 (override with ADMIN_USERNAME,
    ADMIN_PASSWORD, ADMIN_EMAIL). Change them in production!
    """
    click.echo("START Initializing database...")
    init_database()
    users = db.session.query(User).count()
    click.echo(f"PASS Tables ready, {users} user(s) present")
    click.echo(f"PASS Administrator: {current_app.config.get('ADMIN_USERNAME', 'admin')}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        sys.exit(1)
    reset_database()
    click.echo("PASS Database reset; default administrator re-seeded")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--full-name', default=None, help='Display name')
@with_appcontext
def create_user_cli(username, email, password, full_name):
    """Create a new user (same rules as /api/auth/signup)."""
    try:
        user = auth_service.signup(username, email, password, full_name)
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL Failed to create user: {e}")
        sys.exit(1)

    click.echo(f"PASS Created user: {user.username} ({user.email})")
    click.echo(f"     User ID: {user.id}")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.created_at.asc()).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 80)
    click.echo(f"{'Username':<20} {'Email':<30} {'Full name':<20} {'Active'}")
    click.echo("=" * 80)
    for user in users:
        active_str = "yes" if user.is_active else "no"
        click.echo(f"{user.username:<20} {user.email or '-':<30} {user.full_name or '-':<20} {active_str}")
    click.echo("=" * 80 + "\n")


@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """Delete expired or revoked sessions older than the retention window."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"PASS Deleted {deleted} session(s)")


@click.command('serve')
@click.option('--host', default='0.0.0.0', show_default=True)
@click.option('--port', type=int, default=None, help='Defaults to the PORT setting')
@with_appcontext
def serve_cli(host, port):
    """Run the API on a threaded server with graceful shutdown."""
    from .server import serve

    app = current_app._get_current_object()
    serve(app, host, port or app.config.get("PORT", 4000))


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
    app.cli.add_command(serve_cli)
