#!/usr/bin/env python3
"""
Award Pool Management CLI

Command-line management for the award pool: database setup, admin
accounts, the category ballot, lobby status and participation limits.
"""

import json
import logging

import click
from flask.cli import with_appcontext
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from awardpool import create_app, db
from awardpool.errors import PoolError
from awardpool.models import Admin, Category, Lobby, Participant
from awardpool.services import (
    category_service,
    leaderboard_service,
    limits_service,
    lobby_service,
)

app = create_app()


@click.group()
def cli():
    """Award Pool Management CLI"""
    pass


# Database Commands
@cli.group("db")
def db_cmd():
    """Database management commands"""
    pass


@db_cmd.command("init")
@with_appcontext
def init_db():
    """Create all database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command("drop")
@with_appcontext
def drop_db():
    """Drop all database tables"""
    if not click.confirm("This will delete ALL data. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        click.echo("✅ Database dropped.")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error dropping database: {str(e)}")


# Admin Commands
@cli.group()
def admin():
    """Admin account commands"""
    pass


@admin.command("create")
@click.argument("username")
@click.password_option()
@with_appcontext
def create_admin(username, password):
    """Create an admin account (bypasses the admin limit)"""
    try:
        account = Admin.create_admin(username, password)
        click.echo(f"✅ Created admin '{account.username}' (id {account.id})")
    except PoolError as e:
        click.echo(f"❌ {e.message}")


@admin.command("list")
@with_appcontext
def list_admins():
    """List admin accounts"""
    admins = Admin.query.order_by(Admin.id).all()

    if not admins:
        click.echo("No admins found.")
        return

    site_admin = app.config.get("SITE_ADMIN_USERNAME")
    click.echo("Admins:")
    for a in admins:
        marker = " (site admin)" if a.username == site_admin else ""
        click.echo(f"  {a.id}: {a.username}{marker} - {a.lobbies.count()} lobbies")


# Category Commands
@cli.group()
def category():
    """Category ballot commands"""
    pass


@category.command("list")
@with_appcontext
def list_categories():
    """Show the ballot with nominees and winners"""
    categories = category_service.list_categories()

    if not categories:
        click.echo("No categories found.")
        return

    for c in categories:
        click.echo(f"[{c.id}] {c.name} (order {c.display_order})")
        for n in c.nominees:
            marker = "🏆" if n.is_winner else "  "
            click.echo(f"    {marker} {n.id}: {n.name}")


@category.command("import")
@click.argument("path", type=click.File("r"))
@with_appcontext
def import_categories(path):
    """Import categories from a JSON file: [{"name": ..., "nominees": [...]}]"""
    try:
        items = json.load(path)
    except json.JSONDecodeError as e:
        click.echo(f"❌ Invalid JSON: {e}")
        return

    if isinstance(items, dict):
        items = items.get("categories")

    try:
        result = category_service.bulk_import(items)
    except PoolError as e:
        click.echo(f"❌ {e.message}")
        return

    click.echo(
        f"✅ Imported {result['categories_created']} categories and "
        f"{result['nominees_created']} nominees"
    )


@category.command("set-winner")
@click.argument("category_id", type=int)
@click.argument("nominee_id", type=int)
@with_appcontext
def set_winner(category_id, nominee_id):
    """Announce the winner of a category"""
    try:
        nominee = category_service.set_winner(category_id, nominee_id)
        click.echo(f"✅ {nominee.name} wins {nominee.category.name}")
    except PoolError as e:
        click.echo(f"❌ {e.message}")


@category.command("clear-winner")
@click.argument("category_id", type=int)
@with_appcontext
def clear_winner(category_id):
    """Withdraw the winner of a category"""
    try:
        category_service.clear_winner(category_id)
        click.echo(f"✅ Cleared winner of category {category_id}")
    except PoolError as e:
        click.echo(f"❌ {e.message}")


# Lobby Commands
@cli.group()
def lobby():
    """Lobby commands"""
    pass


@lobby.command("list")
@with_appcontext
def list_lobbies():
    """List all lobbies"""
    lobbies = Lobby.query.order_by(Lobby.created_at.desc()).all()

    if not lobbies:
        click.echo("No lobbies found.")
        return

    icons = {
        Lobby.STATUS_OPEN: "🟢",
        Lobby.STATUS_LOCKED: "🔒",
        Lobby.STATUS_COMPLETED: "✅",
    }
    click.echo("Lobbies:")
    for lb in lobbies:
        click.echo(
            f"  {icons.get(lb.status, '⚪')} {lb.id}: {lb.name} "
            f"({lb.admin.username}, {lb.get_participant_count()} participants)"
        )


def _apply(lobby_id, action):
    try:
        lb = lobby_service.operator_transition(lobby_id, action)
        click.echo(f"✅ Lobby {lb.id} is now {lb.status}")
    except PoolError as e:
        click.echo(f"❌ {e.message}")


@lobby.command("lock")
@click.argument("lobby_id")
@with_appcontext
def lock_lobby(lobby_id):
    """Stop accepting submissions"""
    _apply(lobby_id, "lock")


@lobby.command("unlock")
@click.argument("lobby_id")
@with_appcontext
def unlock_lobby(lobby_id):
    """Reopen a locked lobby"""
    _apply(lobby_id, "unlock")


@lobby.command("complete")
@click.argument("lobby_id")
@with_appcontext
def complete_lobby(lobby_id):
    """Mark a lobby completed"""
    _apply(lobby_id, "complete")


# Limits Commands
@cli.group()
def limits():
    """Participation limit commands"""
    pass


@limits.command("show")
@with_appcontext
def show_limits():
    """Show the configured limits"""
    system_config = limits_service.get_system_config()
    for key, cap in limits_service.HARD_CAPS.items():
        click.echo(f"  {key}: {getattr(system_config, key)} (hard cap {cap})")


@limits.command("set")
@click.option("--max-admins", type=int)
@click.option("--max-lobbies-per-admin", type=int)
@click.option("--max-participants-per-lobby", type=int)
@with_appcontext
def set_limits(max_admins, max_lobbies_per_admin, max_participants_per_lobby):
    """Update one or more limits"""
    try:
        system_config = limits_service.update_system_config(
            max_admins=max_admins,
            max_lobbies_per_admin=max_lobbies_per_admin,
            max_participants_per_lobby=max_participants_per_lobby,
        )
    except PoolError as e:
        click.echo(f"❌ {e.message}")
        return

    click.echo(
        f"✅ Limits: {system_config.max_admins} admins, "
        f"{system_config.max_lobbies_per_admin} lobbies per admin, "
        f"{system_config.max_participants_per_lobby} participants per lobby"
    )


# Leaderboard Commands
@cli.group()
def leaderboard():
    """Leaderboard commands"""
    pass


@leaderboard.command("show")
@click.argument("lobby_id")
@with_appcontext
def show_leaderboard(lobby_id):
    """Print the ranked leaderboard of a lobby"""
    try:
        board = leaderboard_service.get_leaderboard(lobby_id)
    except PoolError as e:
        click.echo(f"❌ {e.message}")
        return

    stats = board["stats"]
    click.echo(
        f"{board['lobby_name']} ({board['lobby_status']}) - "
        f"{stats['categories_announced']}/{stats['total_categories']} announced"
    )
    for entry in board["entries"]:
        click.echo(
            f"  {entry['rank']:>3}. {entry['name']:<30} "
            f"{entry['score']}/{entry['total_picks']}"
        )


@cli.command()
@with_appcontext
def status():
    """Show system status"""
    click.echo("🏆 Award Pool Status")
    click.echo("=" * 30)

    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        logging.error(f"Status check failed - SQL error: {e}")
        return

    click.echo(f"👥 Admins: {Admin.query.count()}")
    click.echo(f"🎟️  Lobbies: {Lobby.query.count()}")
    click.echo(f"🙋 Participants: {Participant.query.count()}")

    category_count = Category.query.count()
    announced = len(category_service.current_winners())
    click.echo(f"🏅 Categories: {announced}/{category_count} announced")


if __name__ == "__main__":
    with app.app_context():
        cli()
