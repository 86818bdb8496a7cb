from __future__ import annotations

"""
Configuration Validator.

Ensures that the configuration dictionary handed to the engine contains
valid types and normalized values. Uses a declarative field list so new
settings only need to be registered once.
"""

import logging
from typing import Any, Dict, List, Tuple

from pkgshadow.domain.config import get_default_config

logger = logging.getLogger(__name__)

STRING_FIELDS = [
    "install_root", "package_root_rel", "descriptor_filename", "private_prefix",
    "ledger_filename", "backup_filename", "install_pattern",
]

BOOL_FIELDS = ["dry_run", "reconcile"]

# Fields naming a single file inside a directory
FILENAME_FIELDS = ["descriptor_filename", "ledger_filename", "backup_filename"]


def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the configuration dictionary.

    Converts strings to bools where unambiguous and fills missing or invalid
    values with defaults.

    Args:
        config: The raw configuration dictionary (or untrusted input).
        strict: If True, raises TypeError/ValueError on invalid data.

    Returns:
        Tuple[Dict, List[str]]: (Normalized Config, List of Warnings).
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in FILENAME_FIELDS:
        merged[field] = _as_filename(merged[field], defaults[field], field, warnings, strict)

    if merged["ledger_filename"] in (merged["descriptor_filename"], merged["backup_filename"]):
        msg = "Field 'ledger_filename' collides with a descriptor filename."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using default.")
        merged["ledger_filename"] = defaults["ledger_filename"]

    return merged, warnings


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure value is a non-empty string."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce value to boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    # Environment variables always arrive as strings
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y", "on"):
            return True
        if s in ("false", "0", "no", "n", "off", ""):
            return False

    if not strict and isinstance(value, (int, float)) and value in (0, 1):
        warnings.append(f"Field '{field}' converted from number {value} to bool.")
        return bool(value)

    msg = f"Invalid field '{field}': expected bool, received {value!r}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_filename(value: str, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Reject values that are paths rather than plain filenames."""
    if "/" not in value and "\\" not in value and value not in (".", ".."):
        return value
    msg = f"Invalid field '{field}': '{value}' is not a plain filename."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
