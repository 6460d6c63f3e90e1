"""Utility functions for metric name handling and filesystem setup."""

import os
import re

# Longest metric name component the aggregator accepts
MAX_KEY_LENGTH = 254

# Anything outside ASCII alphanumerics is a separator; runs collapse to one
DISALLOWED_PATTERN = re.compile(r"[^A-Za-z0-9]+")


class SanitizeError(ValueError):
    """Exception raised when a key cannot be turned into a metric name."""

    pass


class DirectoryError(Exception):
    """Exception raised when directory operations fail."""

    pass


def ensure_dir(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Path to the directory to create

    Raises:
        DirectoryError: If directory creation fails
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except Exception as e:
        raise DirectoryError(f"Failed to create directory {directory}: {e}")


def sanitize_key(key: str) -> str:
    """
    Convert an arbitrary string into a metric name component.

    ASCII letters are lower cased and digits kept. Every other character,
    non-ASCII ones included, becomes a separator. A run of separators
    collapses into a single ``_`` and separators at either end are dropped,
    so ``"Foo  Bar!"`` becomes ``"foo_bar"``. Input made only of separators
    gives an empty string.

    Args:
        key: Raw field key, origin or record name

    Returns:
        str: Key made of ``[a-z0-9_]`` without doubled or edge underscores

    Raises:
        SanitizeError: If the result is longer than MAX_KEY_LENGTH
    """
    sanitized = DISALLOWED_PATTERN.sub("_", key).strip("_").lower()
    if len(sanitized) > MAX_KEY_LENGTH:
        raise SanitizeError(
            f"Key exceeds {MAX_KEY_LENGTH} characters after sanitizing: {key[:32]}..."
        )
    return sanitized
