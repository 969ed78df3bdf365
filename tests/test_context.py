# Tests for the operation context
import pytest

from mcp_installer.context import DEFAULT_PROBE_TIMEOUT, OperationContext
from mcp_installer.errors import OperationCancelledError


def test_unbounded_context():
    ctx = OperationContext()
    assert ctx.remaining() is None
    assert not ctx.expired
    ctx.check()
    assert ctx.probe_timeout() == DEFAULT_PROBE_TIMEOUT


def test_cancel():
    ctx = OperationContext()
    ctx.cancel()

    assert ctx.cancelled
    with pytest.raises(OperationCancelledError, match="cancelled"):
        ctx.check()


def test_expired_deadline():
    ctx = OperationContext(timeout=0)

    assert ctx.expired
    with pytest.raises(OperationCancelledError, match="timed out"):
        ctx.check()


def test_probe_timeout_bounded_by_deadline():
    ctx = OperationContext(timeout=1.0)
    assert ctx.probe_timeout() <= 1.0
    assert OperationContext(timeout=60).probe_timeout() == DEFAULT_PROBE_TIMEOUT
