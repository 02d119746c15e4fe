"""Build catalog stores from settings."""

from shelfsync.core.config import Settings, get_settings
from shelfsync.core.logging import get_logger
from shelfsync.domain.entities.sync_result import CatalogBackend
from shelfsync.infrastructure.catalog.base import CatalogStore
from shelfsync.infrastructure.catalog.file_catalog_store import FileCatalogStore
from shelfsync.infrastructure.catalog.leveldb_catalog_store import LevelDbCatalogStore
from shelfsync.infrastructure.catalog.paths import catalog_file_path, leveldb_directory

logger = get_logger(__name__)


def create_catalog_store(
    backend: CatalogBackend, steam_id3: str, settings: Settings | None = None
) -> CatalogStore:
    """Create the store for one backend.

    Raises:
        ValueError: If the settings lack the path the backend needs.
    """
    settings = settings or get_settings()

    if backend is CatalogBackend.FILE:
        if not settings.steam_path:
            raise ValueError("steam_path is not configured (set SHELFSYNC_STEAM_PATH)")
        return FileCatalogStore(
            path=catalog_file_path(settings.steam_path, steam_id3),
            backup=settings.backup_on_commit,
        )

    if backend is CatalogBackend.LEVELDB:
        if settings.leveldb_path:
            database_path = settings.leveldb_path
        elif settings.local_app_data:
            database_path = str(leveldb_directory(settings.local_app_data))
        else:
            raise ValueError(
                "Neither leveldb_path nor local_app_data is configured "
                "(set SHELFSYNC_LEVELDB_PATH or SHELFSYNC_LOCAL_APP_DATA)"
            )
        return LevelDbCatalogStore(
            database_path=database_path,
            steam_id3=steam_id3,
            paranoid_checks=settings.leveldb_paranoid_checks,
        )

    raise ValueError(f"Unsupported catalog backend: {backend}")


def candidate_stores(steam_id3: str, settings: Settings | None = None) -> list[CatalogStore]:
    """Stores to try for an account, in preference order.

    With ``catalog_backend="auto"`` this is every backend the settings can
    locate, LevelDB first since current Steam clients keep the catalog there.
    Otherwise it is just the configured backend.
    """
    settings = settings or get_settings()

    if settings.catalog_backend != "auto":
        return [create_catalog_store(CatalogBackend(settings.catalog_backend), steam_id3, settings)]

    stores: list[CatalogStore] = []
    for backend in (CatalogBackend.LEVELDB, CatalogBackend.FILE):
        try:
            stores.append(create_catalog_store(backend, steam_id3, settings))
        except ValueError as e:
            logger.debug("Catalog backend not configured", backend=backend.value, reason=str(e))
    return stores
