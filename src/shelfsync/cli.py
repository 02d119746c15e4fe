"""Command-line interface for ShelfSync.

A thin caller of ``CollectionSyncService``: it resolves the account and the
catalog stores from settings, reads a membership snapshot from JSON, and
prints the outcome.
"""

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from shelfsync.application.services.collection_sync_service import CollectionSyncService
from shelfsync.core.config import Settings, get_settings
from shelfsync.core.logging import configure_logging, get_logger
from shelfsync.domain.entities.errors import CatalogSyncError
from shelfsync.domain.entities.membership import MembershipSnapshot
from shelfsync.domain.entities.sync_result import SyncStatus
from shelfsync.infrastructure.catalog.base import CatalogStore
from shelfsync.infrastructure.catalog.paths import STEAM_ID64_BASE, discover_account_ids, steam_id3_from_id64
from shelfsync.infrastructure.catalog.store_factory import candidate_stores

BACKEND_CHOICES = ["auto", "file", "leveldb"]


def _settings(backend: str | None) -> Settings:
    settings = get_settings()
    if backend:
        settings = settings.model_copy(update={"catalog_backend": backend})
    return settings


def _resolve_account(account: str | None, settings: Settings) -> str:
    """Turn the --account option (SteamID3 or SteamID64) into a SteamID3."""
    if account:
        if not account.isdigit():
            raise click.BadParameter("must be a numeric SteamID3 or SteamID64", param_hint="--account")
        if int(account) > STEAM_ID64_BASE:
            return steam_id3_from_id64(account)
        return account

    if settings.steam_path:
        accounts = discover_account_ids(settings.steam_path)
        if len(accounts) == 1:
            return accounts[0]
        if len(accounts) > 1:
            raise click.UsageError(
                f"Several Steam accounts found ({', '.join(accounts)}); pick one with --account"
            )
    raise click.UsageError("No Steam account found; pass --account")


def _stores(account: str | None, backend: str | None) -> list[CatalogStore]:
    settings = _settings(backend)
    steam_id3 = _resolve_account(account, settings)
    try:
        stores = candidate_stores(steam_id3, settings)
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    if not stores:
        raise click.UsageError(
            "No catalog location configured; set SHELFSYNC_STEAM_PATH or SHELFSYNC_LOCAL_APP_DATA"
        )
    return stores


account_option = click.option(
    "--account",
    type=str,
    default=None,
    help="SteamID3 or SteamID64 of the account (auto-detected when only one exists)",
)
backend_option = click.option(
    "--backend",
    type=click.Choice(BACKEND_CHOICES),
    default=None,
    help="Catalog backend to use (overrides config)",
)


@click.group()
@click.version_option(version="0.1.0", prog_name="ShelfSync")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides config)",
)
def cli(log_level: str | None) -> None:
    """ShelfSync - push game categories into Steam's library collections."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command()
@account_option
@backend_option
def probe(account: str | None, backend: str | None) -> None:
    """Report which catalog stores exist for the account."""
    for store in _stores(account, backend):
        try:
            present = store.probe()
        except CatalogSyncError as e:
            click.echo(f"{store.backend.value:8} error      {store.describe()}: {e}")
            continue
        state = "present" if present else "missing"
        click.echo(f"{store.backend.value:8} {state:10} {store.describe()}")


@cli.command()
@account_option
@backend_option
def collections(account: str | None, backend: str | None) -> None:
    """List the user collections currently stored for the account."""
    service = CollectionSyncService()
    for store in _stores(account, backend):
        try:
            if not store.probe():
                continue
            found = service.list_collections(store)
        except CatalogSyncError as e:
            click.echo(f"ERROR: {e}", err=True)
            sys.exit(1)

        click.echo(f"{store.backend.value}: {store.describe()}")
        for collection in found:
            kind = "dynamic" if collection.is_dynamic else "static"
            click.echo(f"  {collection.name:30} {kind:8} {len(collection.added):6} games  {collection.key}")
        return

    click.echo("No collections catalog found for this account.")


@cli.command()
@click.option(
    "--snapshot",
    "snapshot_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON membership snapshot: categories, members, hidden, favorite",
)
@account_option
@backend_option
def sync(snapshot_path: Path, account: str | None, backend: str | None) -> None:
    """Merge a membership snapshot into the account's collections."""
    logger = get_logger(__name__)

    try:
        snapshot = MembershipSnapshot.from_dict(json.loads(snapshot_path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValueError) as e:
        raise click.BadParameter(f"invalid snapshot: {e}", param_hint="--snapshot") from e

    stores = _stores(account, backend)
    logger.info("Starting collection sync", stores=[store.describe() for store in stores])

    result = CollectionSyncService().sync_first_supported(stores, snapshot)
    if result is None or result.status is SyncStatus.NOT_APPLICABLE:
        click.echo("Steam collections are not supported on this installation; nothing written.")
        return

    if result.status is SyncStatus.FAILED:
        click.echo(f"ERROR: {result.message}", err=True)
        sys.exit(1)

    click.echo(result.message)
    if result.parse_failures:
        click.echo(
            f"Left {len(result.parse_failures)} unreadable collection(s) untouched: "
            + ", ".join(result.parse_failures)
        )


@cli.command()
def info() -> None:
    """Display ShelfSync configuration."""
    settings = get_settings()

    click.echo(f"""
ShelfSync v{settings.app_version}
{'=' * 40}

Steam:
  Steam Path:     {settings.steam_path}
  Local AppData:  {settings.local_app_data}
  LevelDB Path:   {settings.leveldb_path}

Catalog:
  Backend:        {settings.catalog_backend}
  Backup:         {settings.backup_on_commit}

Logging:
  Level:          {settings.log_level}
  Format:         {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `shelfsync` command and by `python -m shelfsync`.
    """
    cli()


if __name__ == "__main__":
    main()
