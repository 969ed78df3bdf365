# Best-effort detection of running client processes
# ABOUTME: pgrep -f on Linux/macOS, tasklist on Windows
# ABOUTME: Never raises; detection failure is reported as RunState.UNKNOWN
# ABOUTME: The installer's own process and its parent never count as a match
import logging
import os
import subprocess
import sys

from mcp_installer.context import OperationContext
from mcp_installer.models import RunState

logger = logging.getLogger(__name__)


def program_pattern(name: str) -> str:
    """pgrep -f pattern matching name as the executable, not as an argument.

    Examples:
        "/usr/local/bin/codex --full-auto" and "codex" match program_pattern("codex");
        "mcp-installer install --client codex" does not.
    """
    return f"(^|/){name}( |$)"


def run_probe(args: list[str], ctx: OperationContext) -> subprocess.CompletedProcess[str] | None:
    """Run a short read-only command, bounded by the context deadline.

    Returns:
        The completed process, or None if it could not be run or timed out
    """
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=ctx.probe_timeout(),
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Probe timed out: {' '.join(args)}")
    except OSError as e:
        logger.debug(f"Probe could not run {args[0]}: {e}")
    return None


def _pgrep(pattern: str, ctx: OperationContext, exact: bool = False) -> RunState:
    result = run_probe(["pgrep", "-x" if exact else "-f", pattern], ctx)
    if result is None:
        return RunState.UNKNOWN
    # pgrep: 0 = matched, 1 = no match, anything else = error
    if result.returncode == 0:
        return RunState.RUNNING if _foreign_pids(result.stdout) else RunState.NOT_RUNNING
    if result.returncode == 1:
        return RunState.NOT_RUNNING
    return RunState.UNKNOWN


def _foreign_pids(output: str) -> list[int]:
    """PIDs printed by pgrep, minus this process and the shell or wrapper that started it."""
    own = {os.getpid(), os.getppid()}
    pids = [int(token) for token in output.split() if token.isdigit()]
    return [pid for pid in pids if pid not in own]


def _tasklist(image: str, ctx: OperationContext, exact: bool = False) -> RunState:
    result = run_probe(["tasklist", "/FI", f"IMAGENAME eq {image}", "/NH"], ctx)
    if result is None or result.returncode != 0:
        return RunState.UNKNOWN
    if image.lower() in result.stdout.lower():
        return RunState.RUNNING
    return RunState.NOT_RUNNING


def probe_process(
    patterns: list[str],
    windows_images: list[str],
    ctx: OperationContext,
    platform: str | None = None,
    exact: bool = False,
) -> RunState:
    """Report whether any of the given processes is running.

    ABOUTME: RUNNING wins as soon as one probe matches
    ABOUTME: UNKNOWN only if no probe matched and at least one failed

    Args:
        patterns: Command-line patterns for pgrep -f (Linux/macOS)
        windows_images: Image names for tasklist (Windows)
        ctx: Operation context bounding each probe
        platform: Override for sys.platform (tests)
        exact: Match process names exactly (pgrep -x) instead of full command lines

    Returns:
        Tri-state RunState
    """
    platform = platform or sys.platform

    if platform == "win32":
        probes = [(_tasklist, image) for image in windows_images]
    elif platform == "darwin" or platform.startswith("linux"):
        probes = [(_pgrep, pattern) for pattern in patterns]
    else:
        logger.debug(f"No process probe for platform {platform}")
        return RunState.UNKNOWN

    if not probes:
        return RunState.UNKNOWN

    saw_unknown = False
    for probe, target in probes:
        state = probe(target, ctx, exact)
        if state is RunState.RUNNING:
            logger.debug(f"Process probe matched {target}")
            return RunState.RUNNING
        if state is RunState.UNKNOWN:
            saw_unknown = True

    return RunState.UNKNOWN if saw_unknown else RunState.NOT_RUNNING
