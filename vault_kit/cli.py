"""
Command-line interface for Vault Kit.

This module provides a CLI for administering users and their items,
including key parameter lookup, size reports, signatures, backups and
feature disabling.
"""

import json as json_lib
import logging
import sys
import time
from typing import Optional

import click

from vault_kit import __version__
from vault_kit.errors import (
    InvalidBackupName,
    MalformedBackup,
    NotFound,
    UnsupportedSchemeVersion,
)
from vault_kit.models import User
from vault_kit.storage import SQLiteBackend

from .core import VaultKit


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--connection-string",
    envvar="VAULT_KIT_CONNECTION_STRING",
    help="Path to the SQLite database",
)
@click.option(
    "--backup-dir",
    envvar="VAULT_KIT_BACKUP_DIR",
    help="Directory backups are written to",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode",
)
@click.pass_context
def cli(
    ctx: click.Context,
    connection_string: Optional[str],
    backup_dir: Optional[str],
    debug: bool,
):
    """Vault Kit: account security and encrypted item management."""
    if debug:
        click.echo("Debug mode enabled")

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )

    ctx.ensure_object(dict)
    ctx.obj["storage"] = SQLiteBackend(connection_string)
    ctx.obj["backup_dir"] = backup_dir


def _vault(ctx: click.Context, email: str) -> VaultKit:
    try:
        return VaultKit(
            email, storage=ctx.obj["storage"], backup_dir=ctx.obj["backup_dir"]
        )
    except NotFound as e:
        raise click.ClickException(str(e))


@cli.command("add-user")
@click.argument("email")
@click.option("--version", "scheme_version", default="004", help="Credential scheme version")
@click.option("--pw-nonce", help="Password nonce")
@click.option("--pw-salt", help="Legacy password salt")
@click.option("--pw-cost", type=int, help="Legacy iteration count")
@click.option("--origination", default="registration", help="How the key params were created")
@click.pass_context
def add_user(
    ctx: click.Context,
    email: str,
    scheme_version: str,
    pw_nonce: Optional[str],
    pw_salt: Optional[str],
    pw_cost: Optional[int],
    origination: str,
):
    """Store a user."""
    user = ctx.obj["storage"].create_user(
        User(
            email=email,
            version=scheme_version,
            pw_nonce=pw_nonce,
            pw_salt=pw_salt,
            pw_cost=pw_cost,
            kp_origination=origination,
            kp_created=int(time.time()),
        )
    )
    click.echo(f"User created: {user.uuid}")


@cli.command("add-item")
@click.argument("email")
@click.argument("content")
@click.option("--content-type", help="Content type tag, e.g. 'Note' or 'SF|MFA'")
@click.pass_context
def add_item(ctx: click.Context, email: str, content: str, content_type: Optional[str]):
    """Store an item for a user."""
    vault = _vault(ctx, email)
    item = vault.storage.create_item(vault.user.uuid, content, content_type=content_type)
    click.echo(f"Item created: {item.uuid}")


@cli.command("key-params")
@click.argument("email")
@click.option("--extended", is_flag=True, help="Include creation time and origination")
@click.option("--json", is_flag=True, help="Output results as JSON")
@click.pass_context
def key_params(ctx: click.Context, email: str, extended: bool, json: bool):
    """Show the key derivation parameters for a user."""
    vault = _vault(ctx, email)
    try:
        params = vault.key_params(extended=extended)
    except UnsupportedSchemeVersion as e:
        raise click.ClickException(str(e))

    if json:
        click.echo(json_lib.dumps(params))
    else:
        for key, value in params.items():
            click.echo(f"{key}: {value}")


@cli.command("data-size")
@click.argument("email")
@click.pass_context
def data_size(ctx: click.Context, email: str):
    """Show the total size of a user's items."""
    click.echo(_vault(ctx, email).total_data_size())


@cli.command("items-by-size")
@click.argument("email")
@click.option("--limit", default=10, help="Maximum number of items to show")
@click.option("--json", is_flag=True, help="Output results as JSON")
@click.pass_context
def items_by_size(ctx: click.Context, email: str, limit: int, json: bool):
    """List a user's largest items."""
    rows = _vault(ctx, email).items_by_size()[:limit]

    if json:
        click.echo(
            json_lib.dumps(
                [row.model_dump(include={"uuid", "content_type", "size"}) for row in rows]
            )
        )
    else:
        for i, row in enumerate(rows):
            click.echo(f"{i+1}. {row.uuid} {row.content_type or '-'} {row.size} bytes")


@cli.command()
@click.argument("email")
@click.pass_context
def signature(ctx: click.Context, email: str):
    """Show the integrity signature of a user's items."""
    click.echo(_vault(ctx, email).compute_data_signature())


@cli.command()
@click.argument("email")
@click.pass_context
def backup(ctx: click.Context, email: str):
    """Write a backup file for a user."""
    try:
        path = _vault(ctx, email).download_backup()
    except InvalidBackupName as e:
        raise click.ClickException(str(e))
    click.echo(f"Backup written: {path}")


@cli.command()
@click.argument("email")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def restore(ctx: click.Context, email: str, path: str):
    """Import the items of a backup file for a user."""
    try:
        created = _vault(ctx, email).restore_backup(path)
    except MalformedBackup as e:
        raise click.ClickException(str(e))
    click.echo(f"Restored {created} items")


@cli.command("disable-mfa")
@click.argument("email")
@click.option("--force", is_flag=True, help="Ignore the allowEmailRecovery setting")
@click.pass_context
def disable_mfa(ctx: click.Context, email: str, force: bool):
    """Disable MFA for a user."""
    if _vault(ctx, email).disable_mfa(force=force):
        click.echo("MFA disabled")
    else:
        click.echo("MFA unchanged")


@cli.command("disable-email-backups")
@click.argument("email")
@click.pass_context
def disable_email_backups(ctx: click.Context, email: str):
    """Disable email backups for a user."""
    if _vault(ctx, email).disable_email_backups():
        click.echo("Email backups disabled")
    else:
        click.echo("Email backups unchanged")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
