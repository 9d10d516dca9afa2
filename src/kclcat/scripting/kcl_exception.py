"""Optional scripting helpers to collect per-file failures and exit codes."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import KclcatError
from .kcl_logging import log


@dataclass(frozen=True, kw_only=True)
class Failure:
    """An operation on subject that raised with the given reason."""

    subject: str
    reason: str


class Interceptor:
    """
    Context manager collecting the failures of a batch of operations.

    Call the interceptor with the subject of each operation:

        interceptor = kcl_exception.Interceptor()
        for file_id in file_ids:
            with interceptor(file_id):
                service.refresh_mass(file_id)
        for failure in interceptor.failures:
            print(failure.subject, failure.reason)
        sys.exit(interceptor.exitcode())

    Exceptions are logged, recorded in failures, and suppressed, so
    the batch continues with the next subject. A KclcatError is an
    expected failure and is logged without its traceback. Any other
    exception is a bug and is logged with it. KeyboardInterrupt is
    never suppressed.
    """

    def __init__(self) -> None:
        self.failures: list[Failure] = []
        self.succeeded = 0
        self._subject = ""

    def __call__(self, subject: str) -> Interceptor:
        self._subject = subject
        return self

    def __enter__(self) -> Interceptor:
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        subject, self._subject = self._subject, ""
        if exc_type is None:
            self.succeeded += 1
            return False
        if issubclass(exc_type, KeyboardInterrupt):
            return False
        if issubclass(exc_type, KclcatError):
            log.error("%s: %s", subject or "operation failed", exc_value)
        else:
            log.error(
                "%s: unexpected %s",
                subject or "operation failed",
                exc_type.__name__,
                exc_info=(exc_type, exc_value, traceback),
            )
        self.failures.append(Failure(subject=subject, reason=str(exc_value)))
        return True

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def exitcode(self) -> int:
        """Return 0 when every operation succeeded and 1 otherwise."""
        return int(self.failed)
