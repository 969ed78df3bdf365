# Tests for credential masking
from mcp_installer.utils.masking import mask_api_key, mask_secret


def test_mask_long_key():
    assert mask_api_key("abcd1234efgh") == "abcd****efgh"


def test_mask_keeps_length():
    key = "kirha_live_0123456789"
    masked = mask_api_key(key)
    assert len(masked) == len(key)
    assert masked.startswith("kirh")
    assert masked.endswith("6789")


def test_mask_short_key():
    assert mask_api_key("short") == "****"
    assert mask_api_key("12345678") == "****"
    assert mask_api_key("") == "****"


def test_mask_bearer_header():
    assert mask_secret("Bearer abcd1234efgh") == "Bearer abcd****efgh"


def test_mask_plain_secret():
    assert mask_secret("abcd1234efgh") == "abcd****efgh"
