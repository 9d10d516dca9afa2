"""kclcat: a catalog of KCL files stored in a GitHub repository.

This library keeps a local cache of the files tracked by a remote
repository (fingerprint, latest author, computed mass), and provides
access to their content and revision history.
"""

from importlib.metadata import PackageNotFoundError, version

from .cache import CacheEntry, CacheState, LocalCache
from .config import Configuration, ValidationResult
from .errors import (
    AuthFailure,
    CacheCorrupt,
    CalculationError,
    ConfigMissing,
    KclcatError,
    NotFound,
    RemoteUnavailable,
)
from .ghremote import GitHubRepositoryClient, RemoteFile, Revision
from .mass import MassCalculator, ScratchArea, ZooMassCalculator
from .service import CatalogService
from .sync import synchronize

try:
    __version__ = version("kclcat")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    __version__ = "0.0.0"

__all__ = [
    "AuthFailure",
    "CacheCorrupt",
    "CacheEntry",
    "CacheState",
    "CalculationError",
    "CatalogService",
    "ConfigMissing",
    "Configuration",
    "GitHubRepositoryClient",
    "KclcatError",
    "LocalCache",
    "MassCalculator",
    "NotFound",
    "RemoteFile",
    "RemoteUnavailable",
    "Revision",
    "ScratchArea",
    "ValidationResult",
    "ZooMassCalculator",
    "synchronize",
    "__version__",
]
