"""
Payment destination settings.

A fixed set of keys the operator edits and clients read on the
settlement screen. Missing values are rendered as NOT_CONFIGURED.
"""

from typing import Mapping

from app.domain.settlement.errors import ValidationError

MPESA_NAME = "mpesa_name"
MPESA_NUMBER = "mpesa_number"
CRYPTO_NETWORK = "crypto_network"
CRYPTO_WALLET_ADDRESS = "crypto_wallet_address"

KNOWN_KEYS: tuple[str, ...] = (
    MPESA_NAME,
    MPESA_NUMBER,
    CRYPTO_NETWORK,
    CRYPTO_WALLET_ADDRESS,
)

NOT_CONFIGURED = "Not configured"

MAX_VALUE_LENGTH = 255


def resolve(settings: Mapping[str, str], key: str) -> str:
    """Return the stored value, or NOT_CONFIGURED when missing or blank."""
    value = settings.get(key)
    if value is None or not value.strip():
        return NOT_CONFIGURED
    return value


def resolve_all(settings: Mapping[str, str]) -> dict[str, str]:
    """Resolve every known key."""
    return {key: resolve(settings, key) for key in KNOWN_KEYS}


def diff_settings(
    current: Mapping[str, str], proposed: Mapping[str, str]
) -> dict[str, str]:
    """Return only the proposed entries whose value differs from storage.

    Values are trimmed before comparison.

    Raises:
        ValidationError: If a key is unknown or a value is too long.
    """
    errors: dict[str, str] = {}
    for key, value in proposed.items():
        if key not in KNOWN_KEYS:
            errors[key] = "Unknown setting"
        elif len(value.strip()) > MAX_VALUE_LENGTH:
            errors[key] = f"Must be at most {MAX_VALUE_LENGTH} characters"
    if errors:
        raise ValidationError(errors)

    changed: dict[str, str] = {}
    for key, value in proposed.items():
        cleaned = value.strip()
        if current.get(key, "") != cleaned:
            changed[key] = cleaned
    return changed
