from __future__ import annotations

"""
Shadow Directory Materialization.

Creates a nested directory path one level at a time so that every level the
run creates is recorded individually and can be removed again in reverse.
"""

import logging
import os
from typing import List

from pkgshadow.core.resolver import split_segments
from pkgshadow.domain.errors import PathConflictError
from pkgshadow.infra.executor import Executor

logger = logging.getLogger(__name__)


def materialize_directory(root: str, relative_path: str, executor: Executor) -> List[str]:
    """
    Ensure ``<root>/<relative_path>`` exists as a directory.

    Existing directories are left alone and not recorded. Every missing level
    is created through the executor, which records a ``create`` change.

    Args:
        root: Existing base directory.
        relative_path: POSIX path below ``root`` (may be multi-segment).
        executor: Performs or plans the creation.

    Returns:
        List[str]: Absolute paths of the directories created (or planned).

    Raises:
        PathConflictError: If a level exists but is not a directory.
        OSError: If the filesystem refuses the creation.
    """
    created: List[str] = []
    current = root

    for segment in split_segments(relative_path):
        current = os.path.join(current, segment)
        if executor.is_dir(current):
            continue
        if executor.exists(current):
            raise PathConflictError(current)
        executor.make_dir(current)
        created.append(current)

    if created:
        logger.debug(f"Materialized {len(created)} level(s) for '{relative_path}'")
    return created
