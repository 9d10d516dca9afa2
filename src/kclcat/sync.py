"""Synchronize the local cache with the remote repository state."""

from __future__ import annotations

import logging
from typing import Protocol

from tqdm import tqdm

from .cache import CacheState
from .config import Configuration
from .errors import ConfigMissing
from .ghremote import RemoteFile

log = logging.getLogger("sync")


class CacheStore(Protocol):
    """Loads and saves the whole cache (see cache.LocalCache)."""

    def load(self) -> CacheState: ...

    def save(self, state: CacheState) -> None: ...


class RepositoryLister(Protocol):
    """Lists files and authors (see ghremote.GitHubRepositoryClient)."""

    def list_files(self) -> list[RemoteFile]: ...

    def latest_author(self, file_id: str) -> str: ...


def synchronize(
    config: Configuration | None,
    cache: CacheStore,
    client: RepositoryLister,
    *,
    progress: bool = False,
) -> CacheState:
    """
    Bring the cache up to date with the remote files and their authors.

    We list the remote files once and then look up the latest author of
    each file, one request at a time, regardless of whether the
    fingerprint changed. The mass fields are never touched.

    The cache is saved once, at the end. If any remote call fails, the
    exception propagates and the persisted cache is left untouched.

    Raises:
        ConfigMissing: if config is None.
    """
    if config is None:
        raise ConfigMissing("cannot synchronize without a configuration: run `kclcat setup`")

    log.info("synchronizing %s@%s... start", config.repo, config.branch)
    state = cache.load()
    remote_files = client.list_files()

    for remote_file in tqdm(remote_files, desc="sync", unit="file", disable=not progress):
        author = client.latest_author(remote_file.file_id)
        log.debug("file: %s, sha: %s, author: %s", remote_file.file_id, remote_file.sha, author)
        state.upsert(remote_file.file_id, remote_file.sha, author)

    cache.save(state)
    log.info("synchronizing %s@%s... ok (%d files)", config.repo, config.branch, len(remote_files))
    return state
