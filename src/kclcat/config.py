"""Module containing the kclcat configuration store.

The configuration is a JSON object saved at `$datadir/config.json`:

    {
      "token": "ghp_...",
      "repo": "owner/name",
      "branch": "main"
    }

The `branch` field is optional and defaults to `main`. A configuration is
validated against the remote host before being saved.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Final, Protocol

import dacite

from .datadir import write_json_atomically
from .errors import AuthFailure, ConfigMissing, NotFound, RemoteUnavailable

DEFAULT_BRANCH: Final[str] = "main"

log = logging.getLogger("config")


@dataclass(frozen=True, kw_only=True)
class Configuration:
    """Coordinates of the remote repository and the access credential."""

    token: str
    repo: str
    branch: str = DEFAULT_BRANCH

    def __post_init__(self):
        if not self.token.strip():
            raise ConfigMissing("the access token is empty")
        owner, sep, name = self.repo.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ConfigMissing(f"invalid repository {self.repo!r} (expected owner/name)")
        if not self.branch:
            raise ConfigMissing("the branch is empty")

    @property
    def owner(self) -> str:
        return self.repo.split("/")[0]

    @property
    def name(self) -> str:
        return self.repo.split("/")[1]


@dataclass(frozen=True, kw_only=True)
class ValidationResult:
    """Outcome of validating a configuration against the remote host."""

    ok: bool
    message: str


class RepositoryChecker(Protocol):
    """
    Checks a configuration against the remote host.

    Methods:
        check_credential: raise AuthFailure if the token is rejected.
        check_repository: raise NotFound if the repository is not readable.
    """

    def check_credential(self) -> None: ...

    def check_repository(self) -> None: ...


def load_config(config_path: Path) -> Configuration:
    """
    Load the configuration from the given file.

    Raises:
        ConfigMissing: if the file does not exist or is incomplete.
    """
    if not config_path.exists():
        raise ConfigMissing(f"no configuration at {config_path}: run `kclcat setup`")

    try:
        with open(config_path) as filep:
            data = json.load(filep)
    except json.JSONDecodeError as exc:
        raise ConfigMissing(f"invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigMissing(f"configuration in {config_path} must be a mapping")

    try:
        return dacite.from_dict(Configuration, data)
    except (dacite.DaciteError, TypeError) as exc:
        raise ConfigMissing(f"incomplete configuration in {config_path}: {exc}") from exc


def save_config(config: Configuration, config_path: Path) -> None:
    """Durably save the configuration, overwriting any prior version."""
    log.info("saving configuration for %s to %s", config.repo, config_path)
    write_json_atomically(asdict(config), config_path)


def validate_config(config: Configuration, checker: RepositoryChecker) -> ValidationResult:
    """
    Make sure the credential authenticates and the repository is readable.

    Remote rejections are reported through the returned ValidationResult
    rather than raised, so the setup flow can show them to the user.
    """
    log.info("validating credential... start")
    try:
        checker.check_credential()
    except AuthFailure as exc:
        log.warning("validating credential... failure: %s", exc)
        return ValidationResult(ok=False, message=f"Invalid access token: {exc}")
    except RemoteUnavailable as exc:
        log.warning("validating credential... failure: %s", exc)
        return ValidationResult(ok=False, message=f"Cannot reach the remote host: {exc}")
    log.info("validating credential... ok")

    log.info("validating repository %s... start", config.repo)
    try:
        checker.check_repository()
    except (AuthFailure, NotFound) as exc:
        log.warning("validating repository %s... failure: %s", config.repo, exc)
        return ValidationResult(
            ok=False, message=f"Repository {config.repo} is not readable: {exc}"
        )
    except RemoteUnavailable as exc:
        log.warning("validating repository %s... failure: %s", config.repo, exc)
        return ValidationResult(ok=False, message=f"Cannot reach the remote host: {exc}")
    log.info("validating repository %s... ok", config.repo)

    return ValidationResult(ok=True, message=f"Configuration for {config.repo} is valid")
