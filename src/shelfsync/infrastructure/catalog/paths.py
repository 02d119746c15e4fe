"""Locations of Steam's collections catalog.

Steam keeps the catalog either as a JSON file under the account's userdata
directory, or as one entry in the Local Storage LevelDB of its embedded
browser (``htmlcache``). Both are addressed by the account's SteamID3.
"""

from pathlib import Path

CATALOG_FILE_NAME = "cloud-storage-namespace-1.json"
STORAGE_ORIGIN = "https://steamloopback.host"

# Offset between a 64-bit individual SteamID and its 32-bit account id
STEAM_ID64_BASE = 76561197960265728


def steam_id3_from_id64(steam_id64: int | str) -> str:
    """Convert a 64-bit SteamID into the account id used in userdata paths.

    Raises:
        ValueError: If the value is not a SteamID64 of an individual account.
    """
    value = int(steam_id64)
    if value <= STEAM_ID64_BASE:
        raise ValueError(f"Not a 64-bit individual SteamID: {steam_id64}")
    return str(value - STEAM_ID64_BASE)


def catalog_file_path(steam_path: str | Path, steam_id3: str) -> Path:
    """Path of the file catalog for one account."""
    return Path(steam_path) / "userdata" / str(steam_id3) / "config" / "cloudstorage" / CATALOG_FILE_NAME


def leveldb_directory(local_app_data: str | Path) -> Path:
    """Directory of the embedded browser's Local Storage LevelDB."""
    return Path(local_app_data) / "Steam" / "htmlcache" / "Local Storage" / "leveldb"


def leveldb_catalog_key(steam_id3: str) -> bytes:
    """Composite Local Storage key holding the catalog for one account.

    Chromium stores origin-scoped entries as ``_<origin>\\x00\\x01<name>``.
    """
    return f"_{STORAGE_ORIGIN}\x00\x01U{steam_id3}-cloud-storage-namespace-1".encode("utf-8")


def discover_account_ids(steam_path: str | Path) -> list[str]:
    """List account ids under ``userdata`` that have a catalog file, sorted numerically."""
    userdata = Path(steam_path) / "userdata"
    if not userdata.is_dir():
        return []

    account_ids = [
        entry.name
        for entry in userdata.iterdir()
        if entry.is_dir()
        and entry.name.isdigit()
        and catalog_file_path(steam_path, entry.name).is_file()
    ]
    return sorted(account_ids, key=int)
