# ABOUTME: Shared fixtures for mcp-installer tests.
# ABOUTME: Process probes are stubbed so results never depend on what runs on the host.
import pytest

from mcp_installer.models import ServerSettings


@pytest.fixture(autouse=True)
def no_process_probes(monkeypatch):
    """Make every pgrep/tasklist/docker probe report 'could not run'."""
    monkeypatch.setattr("mcp_installer.utils.process.run_probe", lambda args, ctx: None)
    monkeypatch.setattr("mcp_installer.platforms.docker.run_probe", lambda args, ctx: None)


@pytest.fixture
def settings() -> ServerSettings:
    return ServerSettings()


@pytest.fixture
def api_key() -> str:
    return "abcd1234efgh"
