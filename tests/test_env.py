# Tests for environment variable expansion
import logging

from mcp_installer.utils.env import ENV_VAR_PATTERN, expand_env_in, expand_env_vars


def test_expand_single_env_var(monkeypatch):
    """Test expanding a single environment variable."""
    monkeypatch.setenv("HOME", "/home/user")

    result = expand_env_vars("${HOME}/projects")
    assert result == "/home/user/projects"


def test_expand_multiple_vars(monkeypatch):
    """Test expanding multiple variables in one string."""
    monkeypatch.setenv("HOME", "/home/user")
    monkeypatch.setenv("PROJECT", "myproject")

    result = expand_env_vars("${HOME}/${PROJECT}")
    assert result == "/home/user/myproject"


def test_default_used_when_unset(monkeypatch):
    monkeypatch.delenv("KIRHA_MCP_URL", raising=False)

    result = expand_env_vars("${KIRHA_MCP_URL:-https://mcp.kirha.com}")
    assert result == "https://mcp.kirha.com"


def test_default_used_when_empty(monkeypatch):
    monkeypatch.setenv("KIRHA_MCP_URL", "")

    result = expand_env_vars("${KIRHA_MCP_URL:-https://fallback}")
    assert result == "https://fallback"


def test_set_var_wins_over_default(monkeypatch):
    monkeypatch.setenv("KIRHA_MCP_URL", "https://staging.kirha.com")

    result = expand_env_vars("${KIRHA_MCP_URL:-https://mcp.kirha.com}")
    assert result == "https://staging.kirha.com"


def test_missing_var_returns_original(monkeypatch, caplog):
    """Test that missing variables are preserved and logged."""
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with caplog.at_level(logging.WARNING):
        result = expand_env_vars("command ${MISSING_VAR} arg")

    assert result == "command ${MISSING_VAR} arg"
    assert "MISSING_VAR" in caplog.text


def test_no_vars_in_string():
    """Test string without variables passes through unchanged."""
    assert expand_env_vars("npx -y server-name") == "npx -y server-name"


def test_pattern_rejects_invalid_vars():
    """Test regex pattern doesn't match lowercase or dashed names."""
    for case in ["${lowercase}", "${123NUM}", "${WITH-DASH}"]:
        assert ENV_VAR_PATTERN.fullmatch(case) is None


def test_expand_env_in_nested(monkeypatch):
    monkeypatch.setenv("PKG", "@kirha/mcp-gateway")

    data = {"package": "${PKG}", "ids": {"crypto": "${UNSET_X:-c1}"}, "list": ["${PKG}", 3]}
    assert expand_env_in(data) == {
        "package": "@kirha/mcp-gateway",
        "ids": {"crypto": "c1"},
        "list": ["@kirha/mcp-gateway", 3],
    }
