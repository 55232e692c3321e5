"""
API key resolution utilities.

Resolves API keys from multiple sources:
1. Explicit value
2. ``ANTHROPIC_API_KEY`` environment variable
3. System keyring (optional ``keyring`` extra)
"""

from __future__ import annotations

import os

from anthropic_lib_python import _features
from anthropic_lib_python.errors import ErrorContext, ValidationError

API_KEY_ENV = "ANTHROPIC_API_KEY"
API_KEY_PREFIX = "sk-ant-"
KEYRING_SERVICE = "anthropic"
KEYRING_USERNAME = "api_key"


def resolve_api_key(explicit_key: str | None = None) -> str | None:
    """Resolve the API key.

    Args:
        explicit_key: Explicitly provided API key

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key:
        return explicit_key

    key = os.getenv(API_KEY_ENV)
    if key:
        return key

    return _try_keyring()


def _try_keyring() -> str | None:
    """Try to get the API key from the system keyring."""
    if not _features.HAS_KEYRING:
        return None

    import keyring
    from keyring.errors import KeyringError

    try:
        return keyring.get_password(KEYRING_SERVICE, KEYRING_USERNAME)
    except KeyringError:
        # No usable backend (containers, headless sessions)
        return None


def store_api_key(api_key: str) -> None:
    """Save an API key to the system keyring.

    Raises:
        ImportError: If the ``keyring`` extra is not installed
        ValidationError: If the key is malformed
    """
    _features.require_extra("keyring", "keyring")
    import keyring

    keyring.set_password(KEYRING_SERVICE, KEYRING_USERNAME, validate_api_key(api_key))


def validate_api_key(key: str | None) -> str:
    """Check that an API key is present and well-formed.

    Raises:
        ValidationError: If the key is missing or malformed
    """
    if not key:
        raise ValidationError(
            f"No API key provided and {API_KEY_ENV} is not set",
            ErrorContext(source="validation", hint=f"export {API_KEY_ENV}=sk-ant-..."),
            field="api_key",
        )
    if not key.startswith(API_KEY_PREFIX):
        raise ValidationError(
            f"Invalid API key format, keys start with '{API_KEY_PREFIX}'", field="api_key"
        )
    return key


def get_auth_headers(api_key: str, api_version: str) -> dict[str, str]:
    """Build authentication and versioning headers."""
    return {
        "x-api-key": api_key,
        "anthropic-version": api_version,
    }
