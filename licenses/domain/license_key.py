"""
License key generation.

Keys have the format PREFIX-XXXXXXXX-XXXXXXXX-XXXXXXXX where every X is an
upper-case hex digit drawn from the operating system's secure random source.
"""

import re
import secrets
from typing import Callable

from core.domain.exceptions import KeyGenerationError
from core.domain.value_objects import KeyPrefix

RANDOM_BYTES = 16
SEGMENT_LENGTH = 8
SEGMENT_COUNT = 3

LICENSE_KEY_PATTERN = re.compile(r"^([A-Z0-9]{1,16})-([0-9A-F]{8})-([0-9A-F]{8})-([0-9A-F]{8})$")


def generate_license_key(
    prefix: str,
    token_bytes: Callable[[int], bytes] = secrets.token_bytes,
) -> str:
    """
    Generate a license key in format: PREFIX-XXXXXXXX-XXXXXXXX-XXXXXXXX.

    Args:
        prefix: Key prefix (e.g., 'TEST'); upper-cased and validated
        token_bytes: Secure random byte source

    Returns:
        Generated license key string

    Raises:
        ValueError: If the prefix is malformed
        KeyGenerationError: If the random source fails
    """
    key_prefix = KeyPrefix(prefix)
    try:
        random_hex = token_bytes(RANDOM_BYTES).hex().upper()
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(f"Secure random source unavailable: {e}") from e

    if len(random_hex) < SEGMENT_LENGTH * SEGMENT_COUNT:
        raise KeyGenerationError("Secure random source returned too few bytes")

    segments = [
        random_hex[i * SEGMENT_LENGTH : (i + 1) * SEGMENT_LENGTH] for i in range(SEGMENT_COUNT)
    ]
    return f"{key_prefix}-{'-'.join(segments)}"


def is_well_formed(license_key: str) -> bool:
    """Check whether a string has the license key shape."""
    return bool(license_key) and LICENSE_KEY_PATTERN.match(license_key) is not None
