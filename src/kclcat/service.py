"""Operations consumed by the kclcat front ends.

A CatalogService binds together an explicit configuration, the local
cache, the GitHub client, and a mass calculator. Front ends (the CLI,
or a GUI) call its methods and render the results or the errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .cache import CacheState, LocalCache
from .config import (
    Configuration,
    ValidationResult,
    load_config,
    save_config,
    validate_config,
)
from .datadir import (
    SCREENSHOT_SUFFIX,
    config_path_for_data_dir,
    data_dir_or_default,
    screenshots_dir_for_data_dir,
)
from .errors import CalculationError, ConfigMissing, NotFound
from .ghremote import GitHubRepositoryClient, Revision
from .mass import MassCalculator, MassResult, extract_material_parameters
from .sync import synchronize

ClientFactory = Callable[[Configuration], GitHubRepositoryClient]

log = logging.getLogger("service")


class CatalogService:
    """
    Catalog of the KCL files stored in a GitHub repository.

    Operations talking to the remote host raise ConfigMissing when the
    service has no configuration yet. Use `save_configuration` to run
    the setup flow.
    """

    def __init__(
        self,
        *,
        data_dir: str | Path | None = None,
        config: Configuration | None = None,
        calculator: MassCalculator | None = None,
        client_factory: ClientFactory = GitHubRepositoryClient,
    ) -> None:
        self.data_dir = data_dir_or_default(data_dir)
        self.cache = LocalCache(data_dir=self.data_dir)
        self.calculator = calculator
        self.client_factory = client_factory
        self.config: Configuration | None = None
        self.client: GitHubRepositoryClient | None = None
        if config is not None:
            self._bind(config)

    @classmethod
    def from_data_dir(
        cls,
        data_dir: str | Path | None = None,
        *,
        calculator: MassCalculator | None = None,
        client_factory: ClientFactory = GitHubRepositoryClient,
    ) -> CatalogService:
        """
        Create a service reading the configuration saved in data_dir.

        A missing configuration is not an error: the service starts
        in setup mode and `needs_setup()` returns True.
        """
        resolved = data_dir_or_default(data_dir)
        try:
            config = load_config(config_path_for_data_dir(resolved))
        except ConfigMissing as exc:
            log.info("setup needed: %s", exc)
            config = None
        return cls(
            data_dir=resolved,
            config=config,
            calculator=calculator,
            client_factory=client_factory,
        )

    def _bind(self, config: Configuration) -> None:
        self.config = config
        self.client = self.client_factory(config)

    def _require_client(self) -> GitHubRepositoryClient:
        if self.client is None:
            raise ConfigMissing("no configuration: run `kclcat setup`")
        return self.client

    def needs_setup(self) -> bool:
        """Return whether we need to run the setup flow first."""
        return self.config is None

    def save_configuration(self, config: Configuration) -> ValidationResult:
        """Validate config against the remote host and save it if valid."""
        result = validate_config(config, self.client_factory(config))
        if not result.ok:
            return result
        save_config(config, config_path_for_data_dir(self.data_dir))
        self._bind(config)
        return result

    def trigger_sync(self, *, progress: bool = False) -> CacheState:
        """Run the synchronization routine and return the updated cache."""
        client = self._require_client()
        return synchronize(self.config, self.cache, client, progress=progress)

    def list_preview_ids(self) -> list[str]:
        """Return the identifiers of the files having a cached preview image."""
        screenshots_dir = screenshots_dir_for_data_dir(self.data_dir)
        if not screenshots_dir.exists():
            return []
        return sorted(
            path.stem
            for path in screenshots_dir.iterdir()
            if path.is_file() and path.suffix == SCREENSHOT_SUFFIX
        )

    def preview_path(self, file_id: str) -> Path:
        """Return the path of the preview image of file_id (may not exist)."""
        return screenshots_dir_for_data_dir(self.data_dir) / f"{file_id}{SCREENSHOT_SUFFIX}"

    def get_full_cache(self) -> CacheState:
        return self.cache.load()

    def get_file_content(self, file_id: str) -> str:
        return self._require_client().fetch_content(file_id)

    def get_file_content_at_revision(self, file_id: str, revision: str) -> str:
        return self._require_client().fetch_content(file_id, revision)

    def list_revisions(self, file_id: str) -> list[Revision]:
        return self._require_client().list_revisions(file_id)

    def get_revision_author(self, revision: str) -> str:
        return self._require_client().fetch_revision_author(revision)

    def get_latest_author(self, file_id: str) -> str:
        return self._require_client().latest_author(file_id)

    def refresh_mass(self, file_id: str) -> MassResult:
        """
        Recompute the mass of file_id from its current content.

        Raises:
            NotFound: if file_id is not in the cache yet.
            CalculationError: if the calculation fails.
        """
        if self.calculator is None:
            raise CalculationError("no mass calculator configured")
        state = self.cache.load()
        if file_id not in state.entries:
            raise NotFound(f"{file_id} is not in the cache: run `kclcat sync` first")

        content = self._require_client().fetch_content(file_id)
        params = extract_material_parameters(content)
        result = self.calculator.compute_mass(
            content, params.density, params.density_unit, file_id
        )

        state.set_mass(file_id, result.mass, result.unit)
        self.cache.save(state)
        return result
