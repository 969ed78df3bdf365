# Secret masking for human-readable config listings

BEARER_PREFIX = "Bearer "


def mask_api_key(key: str) -> str:
    """Show only the first and last 4 characters of a key.

    Examples:
        >>> mask_api_key("abcd1234efgh")
        'abcd****efgh'
        >>> mask_api_key("short")
        '****'
    """
    if len(key) <= 8:
        return "****"
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


def mask_secret(value: str) -> str:
    """Mask a credential value, keeping a leading 'Bearer ' scheme readable."""
    if value.startswith(BEARER_PREFIX):
        return BEARER_PREFIX + mask_api_key(value[len(BEARER_PREFIX):])
    return mask_api_key(value)
