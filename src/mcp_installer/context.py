# Cancellation and timeout context threaded through adapter calls
import time

from mcp_installer.errors import OperationCancelledError

# ABOUTME: Upper bound for a single subprocess probe (pgrep, tasklist, docker ps)
DEFAULT_PROBE_TIMEOUT = 5.0


class OperationContext:
    """Deadline and cancel flag for one command.

    ABOUTME: Orchestrator calls check() between workflow steps
    ABOUTME: Adapters running subprocesses use probe_timeout() so a hung probe
    ABOUTME: cannot outlive the command deadline
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise OperationCancelledError if cancelled or past the deadline."""
        if self._cancelled:
            raise OperationCancelledError("operation cancelled")
        if self.expired:
            raise OperationCancelledError("operation timed out")

    def probe_timeout(self, default: float = DEFAULT_PROBE_TIMEOUT) -> float:
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)
