"""Layout of the on-disk kclcat data directory.

By default we use a `.kclcat/` directory inside the current working
directory, similar to how Git uses `.git/` for repository state:

    .kclcat/
        config.json                 remote coordinates and credential
        cache/
            sha-cache.json          last-known remote state per file
            sha-cache.json.lock     lock held while mutating the cache
            screenshots/<id>.png    cached preview images
        temp/                       scratch files, removed on shutdown
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any, Final

DATA_DIR_NAME: Final[str] = ".kclcat"
CONFIG_FILENAME: Final[str] = "config.json"
CACHE_FILENAME: Final[str] = "sha-cache.json"
SCREENSHOT_SUFFIX: Final[str] = ".png"


def data_dir_or_default(data_dir: str | Path | None) -> Path:
    """
    Return data_dir as a Path if not empty. Otherwise return the
    default value for the data_dir (i.e., `./.kclcat` like git).
    """
    return Path.cwd() / DATA_DIR_NAME if data_dir is None else Path(data_dir)


def config_path_for_data_dir(data_dir: Path) -> Path:
    """Return the configuration file path under the given data directory."""
    return data_dir / CONFIG_FILENAME


def cache_path_for_data_dir(data_dir: Path) -> Path:
    """Return the cache file path under the given data directory."""
    return data_dir / "cache" / CACHE_FILENAME


def screenshots_dir_for_data_dir(data_dir: Path) -> Path:
    """Return the directory containing the cached preview images."""
    return data_dir / "cache" / "screenshots"


def temp_dir_for_data_dir(data_dir: Path) -> Path:
    """Return the directory under which we create scratch areas."""
    return data_dir / "temp"


def write_json_atomically(data: Any, dest_path: Path) -> None:
    """Serialize data as indented JSON and atomically replace dest_path."""
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    # Operate inside a temporary directory in the destination directory so
    # `os.replace()` is atomic and we avoid cross-filesystem moves.
    with TemporaryDirectory(dir=dest_path.parent) as tmp_dir:
        tmp_file = Path(tmp_dir) / dest_path.name
        with open(tmp_file, "w") as filep:
            json.dump(data, filep, indent=2)
            filep.write("\n")
        os.replace(tmp_file, dest_path)
