"""Module containing the GitHubRepositoryClient implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final
from urllib.parse import quote

import requests

from ..cache import UNKNOWN_AUTHOR
from ..config import Configuration
from ..errors import AuthFailure, NotFound, RemoteUnavailable

GITHUB_API_URL: Final[str] = "https://api.github.com"
KCL_SUFFIX: Final[str] = ".kcl"

_ACCEPT_JSON: Final[str] = "application/vnd.github.v3+json"
_ACCEPT_RAW: Final[str] = "application/vnd.github.v3.raw"

log = logging.getLogger("ghremote/client")


@dataclass(frozen=True, kw_only=True)
class RemoteFile:
    """Descriptor of a tracked file in the remote repository."""

    file_id: str
    name: str
    sha: str


@dataclass(frozen=True, kw_only=True)
class Revision:
    """
    Historical revision of a file.

    The sha is an opaque identifier that we only pass back to the
    remote host when fetching content or metadata for the revision.
    """

    sha: str
    date: str
    author: str


def _commit_author(commit: Any) -> str:
    """Extract the author name from a commit object or return UNKNOWN_AUTHOR."""
    if not isinstance(commit, dict):
        return UNKNOWN_AUTHOR
    author = (commit.get("commit") or {}).get("author") or {}
    return author.get("name") or UNKNOWN_AUTHOR


class GitHubRepositoryClient:
    """
    Client for the GitHub repository containing the KCL files.

    This class implements the config.RepositoryChecker protocol.

    Any non-success status fails the call without retrying:

    - 401 and 403 raise AuthFailure (unless we hit the rate limit)
    - 404 raises NotFound where the caller asked for a specific object
    - everything else raises RemoteUnavailable
    """

    def __init__(
        self,
        config: Configuration,
        *,
        session: requests.Session | None = None,
        base_url: str = GITHUB_API_URL,
    ) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")

    def _repo_path(self, suffix: str = "") -> str:
        return f"/repos/{self.config.owner}/{self.config.name}{suffix}"

    def _get(
        self,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        raw: bool = False,
        lookup: bool = False,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = {
            "Accept": _ACCEPT_RAW if raw else _ACCEPT_JSON,
            "Authorization": f"Bearer {self.config.token}",
        }
        log.debug("GET %s %s", path, params or {})
        try:
            resp = self.session.get(url, headers=headers, params=params)
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"GET {path}: {exc}") from exc
        _check_status(resp, path, lookup=lookup)
        return resp

    def _get_json(self, path: str, **kwargs: Any) -> Any:
        resp = self._get(path, **kwargs)
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteUnavailable(f"GET {path}: invalid JSON response: {exc}") from exc

    def check_credential(self) -> None:
        """Raise AuthFailure unless the access token authenticates."""
        self._get("/user")

    def check_repository(self) -> None:
        """Raise NotFound unless the configured repository is readable."""
        self._get(self._repo_path(), lookup=True)

    def list_files(self) -> list[RemoteFile]:
        """List the KCL files at the root of the configured branch."""
        log.info("listing %s@%s... start", self.config.repo, self.config.branch)
        path = self._repo_path("/contents")
        entries = self._get_json(path, params={"ref": self.config.branch})
        if not isinstance(entries, list):
            raise RemoteUnavailable(f"GET {path}: expected a directory listing")
        files = [
            RemoteFile(
                file_id=entry["name"][: -len(KCL_SUFFIX)],
                name=entry["name"],
                sha=entry["sha"],
            )
            for entry in entries
            if entry.get("type", "file") == "file" and entry.get("name", "").endswith(KCL_SUFFIX)
        ]
        log.info("listing %s@%s... ok (%d files)", self.config.repo, self.config.branch, len(files))
        return files

    def latest_author(self, file_id: str) -> str:
        """
        Return the author of the most recent revision touching file_id.

        An empty history is a valid result and yields UNKNOWN_AUTHOR.
        """
        commits = self._get_json(
            self._repo_path("/commits"),
            params={
                "path": f"{file_id}{KCL_SUFFIX}",
                "sha": self.config.branch,
                "per_page": 1,
            },
        )
        if not commits:
            return UNKNOWN_AUTHOR
        return _commit_author(commits[0])

    def fetch_content(self, file_id: str, revision: str | None = None) -> str:
        """
        Return the raw content of file_id at the branch tip or at revision.

        Raises:
            NotFound: if the file or the revision does not exist.
        """
        ref = revision if revision is not None else self.config.branch
        path = self._repo_path(f"/contents/{quote(file_id + KCL_SUFFIX)}")
        return self._get(path, params={"ref": ref}, raw=True, lookup=True).text

    def list_revisions(self, file_id: str) -> list[Revision]:
        """Return the revisions touching file_id, most recent first."""
        commits = self._get_json(
            self._repo_path("/commits"),
            params={"path": f"{file_id}{KCL_SUFFIX}", "sha": self.config.branch},
        )
        return [
            Revision(
                sha=commit["sha"],
                date=((commit.get("commit") or {}).get("author") or {}).get("date", ""),
                author=_commit_author(commit),
            )
            for commit in commits
        ]

    def fetch_revision_author(self, revision: str) -> str:
        """
        Return the author of an arbitrary revision.

        Raises:
            NotFound: if the revision does not exist.
        """
        commit = self._get_json(self._repo_path(f"/commits/{quote(revision)}"), lookup=True)
        return _commit_author(commit)


def _check_status(resp: requests.Response, path: str, *, lookup: bool) -> None:
    """Map a non-success response to the matching kclcat error."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    reason = f"GET {path}: remote host returned status {status}"
    if status == 403 and resp.headers.get("X-RateLimit-Remaining") == "0":
        raise RemoteUnavailable(f"{reason} (rate limit exceeded)")
    if status in (401, 403):
        raise AuthFailure(reason)
    if status == 404 and lookup:
        raise NotFound(reason)
    raise RemoteUnavailable(reason)
