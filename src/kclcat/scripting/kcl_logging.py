"""Optional scripting extensions to configure logging.

Log records go to the standard error through rich, so that the
standard output only carries what a command prints (tables, masses,
identifiers) and stays usable in pipelines.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CHATTY_LOGGERS = ("urllib3", "filelock")
"""Third-party loggers that log every connection or lock at DEBUG level."""


def configure(verbose: bool, *, console: Console | None = None) -> RichHandler:
    """
    Route logging through a RichHandler writing to the standard error.

    Without verbose we only show warnings and errors. With verbose we
    show everything logged by kclcat, along with the source location,
    while the third-party loggers in _CHATTY_LOGGERS stay at INFO.

    Returns the installed handler.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=console if console is not None else Console(stderr=True),
        show_time=verbose,
        show_level=True,
        show_path=verbose,
        markup=False,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    logging.basicConfig(
        level=level,
        format="<%(name)s> %(message)s",
        handlers=[handler],
        force=True,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    return handler


log = logging.getLogger("scripting")
"""Logger that the scripting package should use."""
