from __future__ import annotations

"""
Internal Package Discovery.

Provides the default discovery collaborator (a sorted walk of the internal
package root) and turns the absolute directories it returns into
PackageRecords. Any callable with the same signature can replace
``find_packages``.
"""

import logging
import os
from typing import Callable, Iterable, List, Sequence

from pkgshadow.core.descriptor import load_descriptor
from pkgshadow.domain.config import ShadowConfig
from pkgshadow.domain.constants import DESCRIPTOR_FILENAME
from pkgshadow.domain.errors import DiscoveryError
from pkgshadow.domain.models import PackageRecord
from pkgshadow.infra.fs import relative_posix

logger = logging.getLogger(__name__)

DiscoverFn = Callable[[str], Sequence[str]]

# Directories that never hold internal packages but may hold descriptor fixtures
DEFAULT_EXCLUDED_DIRS = frozenset({
    "node_modules", "build", "reports", "test", "benchmark", "examples", "docs",
})


def find_packages(
        package_root: str,
        descriptor_filename: str = DESCRIPTOR_FILENAME,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> List[str]:
    """
    Return every directory below ``package_root`` containing a descriptor.

    The root itself is not a package. The walk is sorted, so the order is
    stable across runs and parents come before their children.

    Args:
        package_root: Absolute internal package root.
        descriptor_filename: Name of the descriptor file marking a package.
        excluded_dirs: Directory names that are never descended into.

    Returns:
        List[str]: Absolute package directories in discovery order.
    """
    excluded = set(excluded_dirs)
    root_abs = os.path.abspath(package_root)
    found: List[str] = []

    for root, dirs, files in os.walk(root_abs):
        # In-place pruning keeps os.walk out of excluded and hidden directories
        dirs[:] = sorted(d for d in dirs if d not in excluded and not d.startswith("."))

        if root != root_abs and descriptor_filename in files:
            found.append(root)

    logger.debug(f"Discovered {len(found)} package(s) under {root_abs}")
    return found


def build_records(paths: Iterable[str], config: ShadowConfig) -> List[PackageRecord]:
    """
    Derive PackageRecords from discovered directories.

    Private packages keep an empty descriptor: they are never processed, so
    their descriptors are not read.

    Raises:
        DiscoveryError: If a path is the internal package root itself or lies outside it.
        DescriptorLoadError: If a public package's descriptor is not a JSON object.
        OSError: If a descriptor cannot be read.
    """
    records: List[PackageRecord] = []

    for path in paths:
        abs_path = os.path.abspath(path)
        rel = relative_posix(abs_path, config.package_root)
        if not rel or rel == ".." or rel.startswith("../"):
            raise DiscoveryError(abs_path, config.package_root)

        if config.private_prefix and rel.startswith(config.private_prefix):
            records.append(PackageRecord(abs_path, rel))
            continue

        descriptor = load_descriptor(abs_path, config.descriptor_filename)
        records.append(PackageRecord(abs_path, rel, descriptor))

    return records
