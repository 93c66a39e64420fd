"""
Safe environment variable helpers with sanitization support.
"""
import os
from typing import Optional


def get_env_str(
    name: str,
    default: Optional[str] = None,
    required: bool = False,
    strip: bool = True
) -> Optional[str]:
    """
    Safely read an environment variable with optional stripping.

    Args:
        name: Environment variable name
        default: Default value if not set or empty after strip
        required: If True, raise ValueError when missing/empty
        strip: If True, strip leading/trailing whitespace (default: True)

    Returns:
        The value (stripped if requested), or default if not set/empty

    Raises:
        ValueError: If required=True and value is missing or empty after strip

    Examples:
        >>> get_env_str("SECRET_KEY")  # Returns None if not set
        >>> get_env_str("ARTWORK_RATE_LIMIT", default="30 per minute")
        >>> get_env_str("SECRET_KEY", required=True)  # Raises if not set
    """
    value = os.getenv(name)

    if value is None:
        if required:
            raise ValueError(
                f"Required environment variable '{name}' is not set. "
                f"Please add it to your .env file or environment."
            )
        return default

    if strip:
        value = value.strip()

    if not value:
        if required:
            raise ValueError(
                f"Required environment variable '{name}' is empty (or whitespace-only). "
                f"Please set a valid value in your .env file or environment."
            )
        return default

    return value


def get_env_bool(name: str, default: bool = False) -> bool:
    """
    Read a boolean environment variable.

    Truthy values: "1", "true", "yes", "on" (case-insensitive)
    Anything else that is set counts as False.
    """
    value = os.getenv(name, "").strip().lower()

    if not value:
        return default

    return value in ("1", "true", "yes", "on")


def get_env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    """
    Read an integer environment variable.

    Unparseable values fall back to the default rather than crashing boot;
    values below ``minimum`` raise, since they would make every upload fail.
    """
    raw = get_env_str(name)
    if raw is None:
        return default

    try:
        value = int(raw)
    except ValueError:
        return default

    if minimum is not None and value < minimum:
        raise ValueError(f"Environment variable '{name}' must be >= {minimum}, got {value}.")

    return value
