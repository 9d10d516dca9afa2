"""Module containing the local cache of the remote repository state.

The cache is a single JSON object saved at `$datadir/cache/sha-cache.json`
whose keys are file identifiers (the file name without the `.kcl` suffix):

{
  "bracket": {
    "sha": "3a421c62179a...",
    "mass": 1.23,
    "mass-unit": "lb",
    "author": "Alice"
  }
}

The whole file is read on load and rewritten on save. We never write it
partially: saving goes through a temporary file that atomically replaces
the previous version.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import dacite
from filelock import BaseFileLock, FileLock

from .datadir import cache_path_for_data_dir, data_dir_or_default, write_json_atomically
from .errors import CacheCorrupt

UNKNOWN_AUTHOR: Final[str] = "Unknown"
"""Sentinel author used when no revision metadata is available."""

log = logging.getLogger("cache")


@dataclass(kw_only=True)
class CacheEntry:
    """
    Last-known state of a single tracked file.

    Attributes:
        sha: opaque content fingerprint from the remote host
        mass: last computed mass or None
        mass_unit: unit paired with mass or None
        author: most recent contributor or UNKNOWN_AUTHOR
    """

    sha: str
    mass: float | None = None
    mass_unit: str | None = None
    author: str = UNKNOWN_AUTHOR

    def to_json(self) -> dict[str, Any]:
        """Return the JSON representation used on disk."""
        return {
            "sha": self.sha,
            "mass": self.mass,
            "mass-unit": self.mass_unit,
            "author": self.author,
        }

    @classmethod
    def from_json(cls, value: dict[str, Any]) -> CacheEntry:
        """Build an entry from its on-disk JSON representation."""
        data = dict(value)
        data["mass_unit"] = data.pop("mass-unit", None)
        # The mass may have been serialized as an integer (e.g., `2`)
        return dacite.from_dict(cls, data, config=dacite.Config(cast=[float]))


@dataclass(kw_only=True)
class CacheState:
    """In-memory copy of the whole cache."""

    entries: dict[str, CacheEntry] = field(default_factory=dict)

    def get_entry(self, file_id: str) -> CacheEntry:
        """
        Return the entry for the given file identifier.

        Raises:
            KeyError: if there is no cache entry for file_id.
        """
        try:
            return self.entries[file_id]
        except KeyError as exc:
            raise KeyError(f"no cache entry for {file_id}") from exc

    def upsert(self, file_id: str, sha: str, author: str) -> CacheEntry:
        """
        Record the remote fingerprint and author of file_id.

        An existing entry keeps its mass and mass unit. A new entry
        starts with both set to None.
        """
        entry = self.entries.get(file_id)
        if entry is None:
            entry = CacheEntry(sha=sha, author=author)
            self.entries[file_id] = entry
            return entry
        entry.sha = sha
        entry.author = author
        return entry

    def set_mass(self, file_id: str, mass: float, mass_unit: str) -> CacheEntry:
        """
        Record a freshly computed mass for file_id.

        Mass and unit are always updated together.

        Raises:
            KeyError: if there is no cache entry for file_id.
        """
        entry = self.get_entry(file_id)
        entry.mass = mass
        entry.mass_unit = mass_unit
        return entry

    def to_json(self) -> dict[str, Any]:
        """Return the JSON representation used on disk."""
        return {file_id: entry.to_json() for file_id, entry in self.entries.items()}


def load_cache(cache_file: Path) -> CacheState:
    """
    Load cache from the given file, or return an empty cache if not found.

    Raises:
        CacheCorrupt: if the file is not a valid cache.
    """
    if not cache_file.exists():
        log.info("no cache at %s, starting with an empty cache", cache_file)
        return CacheState()

    try:
        with open(cache_file) as filep:
            data = json.load(filep)
    except json.JSONDecodeError as exc:
        raise CacheCorrupt(f"invalid JSON in {cache_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise CacheCorrupt(f"cache in {cache_file} must be a JSON object")

    try:
        entries = {file_id: CacheEntry.from_json(value) for file_id, value in data.items()}
    except (dacite.DaciteError, TypeError, ValueError) as exc:
        raise CacheCorrupt(f"invalid entry in {cache_file}: {exc}") from exc

    return CacheState(entries=entries)


def save_cache(state: CacheState, cache_file: Path) -> None:
    """Save the whole cache to the given file, replacing the previous version."""
    log.info("saving cache with %d entries to %s", len(state.entries), cache_file)
    write_json_atomically(state.to_json(), cache_file)


class LocalCache:
    """
    Handle to the on-disk cache of the remote repository state.

    The cache file lives at $datadir/cache/sha-cache.json, where $datadir
    defaults to .kclcat in the current working directory.

    The library assumes a single writer. Use `lock()` when more than one
    process may operate on the same data directory.
    """

    def __init__(
        self,
        *,
        data_dir: str | Path | None = None,
    ) -> None:
        self.data_dir = data_dir_or_default(data_dir)
        self.path = cache_path_for_data_dir(self.data_dir)

    def load(self) -> CacheState:
        """Return the full persisted cache (empty if it does not exist yet)."""
        return load_cache(self.path)

    def save(self, state: CacheState) -> None:
        """Durably persist the full cache, overwriting any prior version."""
        save_cache(state, self.path)

    def lock(self) -> BaseFileLock:
        """Return a FileLock guarding the cache file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(self.path.with_name(self.path.name + ".lock"))
