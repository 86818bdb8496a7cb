from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Path normalization, JSON descriptor I/O and the execution-context check.
Mutating operations live in ``pkgshadow.infra.executor`` so that they can be
planned without being performed.
"""

import json
import os
import re
from typing import Any, Dict, Optional

from pkgshadow.domain.errors import DescriptorLoadError

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Expands environment variables and ``~``. Empty input resolves to fallback.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_posix(path: str) -> str:
    """Return ``path`` with the platform separator replaced by ``/``."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def relative_posix(path: str, start: str) -> str:
    """Relative path from ``start`` to ``path`` using ``/`` separators ("" for same dir)."""
    rel = to_posix(os.path.relpath(path, start))
    return "" if rel == "." else rel


def is_install_location(path: str, pattern: str) -> bool:
    """
    Check whether ``path`` lies inside an installed-dependency directory.

    Args:
        path: Absolute directory path.
        pattern: Directory segment to look for (e.g. ``node_modules``).

    Returns:
        bool: True if ``pattern`` appears as a complete path segment.
    """
    rx = re.compile(r"(^|[\\/])" + re.escape(pattern) + r"([\\/]|$)")
    return bool(rx.search(path))


# -----------------------------------------------------------------------------
# DESCRIPTOR I/O API
# -----------------------------------------------------------------------------

def read_descriptor(path: str) -> Dict[str, Any]:
    """
    Load a JSON descriptor file.

    Args:
        path: Absolute path to the descriptor.

    Returns:
        Dict[str, Any]: Parsed descriptor.

    Raises:
        DescriptorLoadError: If the file is not valid UTF-8 JSON or not a JSON object.
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except UnicodeDecodeError as e:
            raise DescriptorLoadError(path, f"invalid UTF-8 ({e})") from e
        except json.JSONDecodeError as e:
            raise DescriptorLoadError(path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise DescriptorLoadError(path, f"expected an object, found {type(data).__name__}")
    return data


def dump_json(data: Any) -> str:
    """Serialize ``data`` the way every persisted artifact is written: 2-space indent, trailing newline."""
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"
