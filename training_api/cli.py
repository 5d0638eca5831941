"""Command-line interface for account maintenance.

Usage:
    training-api init-db
    training-api list-accounts
    training-api set-password alice
"""

from __future__ import annotations

import click

from .core import DATABASE_URL, make_engine, setup_logging
from .core.errors import AuthError
from .services import CredentialStore, IdentityReconciler


def _store(url: str) -> CredentialStore:
    store = CredentialStore(make_engine(url))
    store.create_schema()
    return store


@click.group()
@click.option(
    "--database-url",
    default=DATABASE_URL,
    show_default=True,
    help="SQLAlchemy URL of the account database.",
)
@click.pass_context
def cli(ctx: click.Context, database_url: str) -> None:
    """Training Sessions account management."""
    setup_logging()
    ctx.obj = database_url


@cli.command("init-db")
@click.pass_obj
def init_db(database_url: str) -> None:
    """Create the account table if it does not exist."""
    _store(database_url)
    click.echo("Database ready")


@cli.command("list-accounts")
@click.pass_obj
def list_accounts(database_url: str) -> None:
    """List every account (password hashes are never shown)."""
    accounts = _store(database_url).list_all()
    if not accounts:
        click.echo("No accounts")
        return
    for account in accounts:
        click.echo(
            f"{account.id:>5}  {account.username:<32} {account.provider:<7} "
            f"{account.email or '-'}"
        )


@cli.command("set-password")
@click.argument("username")
@click.password_option()
@click.pass_obj
def set_password(database_url: str, username: str, password: str) -> None:
    """Set a new password for USERNAME."""
    reconciler = IdentityReconciler(_store(database_url))
    try:
        reconciler.set_password(username, password)
    except AuthError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Password updated for user '{username}'")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
