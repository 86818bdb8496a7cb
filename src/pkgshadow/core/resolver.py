from __future__ import annotations

"""
Shadow Path Resolution.

A shadow entry at ``<dest>/<relative_path>`` and the real package at
``<package_root>/<relative_path>`` are symmetric leaves under two roots. The
path from the former to the latter climbs one level per segment back to
``<dest>`` and descends through the package root offset into the real package.
"""

import posixpath
from typing import Callable, List


def split_segments(relative_path: str) -> List[str]:
    """Split a POSIX relative path into its non-empty segments."""
    return [s for s in relative_path.split("/") if s and s != "."]


def resolve_to_package(relative_path: str, package_root_offset: str) -> str:
    """
    Compute the relative path from a shadow directory to its real package.

    Args:
        relative_path: Package path relative to the internal package root
            (``math/base/special/sin``); empty for the root itself.
        package_root_offset: Internal package root relative to the
            destination root (``stdlib/lib/node_modules/@stdlib``).

    Returns:
        str: e.g. ``../../../../stdlib/lib/node_modules/@stdlib/math/base/special/sin``.
    """
    segments = split_segments(relative_path)
    parts = [".."] * len(segments) + split_segments(package_root_offset) + segments
    if not parts:
        return "."
    return posixpath.normpath("/".join(parts))


def make_resolver(relative_path: str, package_root_offset: str) -> Callable[[str], str]:
    """
    Build a function mapping an entry point of the real package to a path
    valid from the shadow directory.

    For ``utils/copy`` with offset ``stdlib/lib/node_modules/@stdlib``, the
    entry ``./lib`` maps to ``../../stdlib/lib/node_modules/@stdlib/utils/copy/lib``.
    """
    prefix = resolve_to_package(relative_path, package_root_offset)

    def resolve(entry: str) -> str:
        # Entry points are package-relative even when written with a leading slash
        return posixpath.normpath(posixpath.join(prefix, entry.lstrip("/")))

    return resolve
