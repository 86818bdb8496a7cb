from __future__ import annotations

"""
Root Descriptor Reconciliation.

Some package managers prune every directory they did not install themselves.
Declaring each top-level internal namespace as a ``file:`` dependency of the
root descriptor makes the manager re-create those namespaces (as links) after
pruning, so the shadow entry points keep resolving.

The original descriptor is renamed aside before the reconciled one is written
under the original name: a reader of that name sees either the pristine or the
fully reconciled file, and the pristine bytes stay recoverable.
"""

import logging
import posixpath
from typing import Any, Dict, Iterable

from pkgshadow.core.descriptor import ABSENT, get_field
from pkgshadow.domain.config import ShadowConfig
from pkgshadow.domain.constants import FILE_SCHEME
from pkgshadow.domain.errors import DescriptorLoadError
from pkgshadow.domain.models import (
    ALREADY_RECONCILED,
    NO_NAMESPACES,
    RECONCILED,
    PackageRecord,
    ReconcileOutcome,
)
from pkgshadow.infra.executor import Executor
from pkgshadow.infra.fs import dump_json, read_descriptor

logger = logging.getLogger(__name__)


def namespace_identifier(record: PackageRecord, scope: str) -> str:
    """Public identifier of a top-level namespace: its descriptor name, else ``<scope>/<path>``."""
    name = get_field(record.descriptor, "name", str)
    if name.present and name.value.strip():
        return name.value.strip()
    return f"{scope}/{record.relative_path}"


def collect_namespace_dependencies(
        records: Iterable[PackageRecord],
        config: ShadowConfig,
) -> Dict[str, str]:
    """
    Map every public depth-1 namespace to its ``file:`` reference.

    Deeper packages never add entries on their own, even when their top-level
    namespace was not discovered.

    Returns:
        Dict[str, str]: e.g. ``{"@stdlib/math": "file:./lib/node_modules/@stdlib/math"}``.
    """
    deps: Dict[str, str] = {}

    for record in records:
        if record.depth != 1 or record.is_private(config.private_prefix):
            continue
        identifier = namespace_identifier(record, config.scope)
        target = FILE_SCHEME + "./" + posixpath.join(config.package_root_rel, record.relative_path)
        if identifier in deps and deps[identifier] != target:
            logger.warning(
                f"Namespace identifier '{identifier}' is declared twice; keeping {deps[identifier]}"
            )
            continue
        deps[identifier] = target

    return deps


def reconcile_root_descriptor(
        records: Iterable[PackageRecord],
        config: ShadowConfig,
        executor: Executor,
) -> ReconcileOutcome:
    """
    Declare top-level namespaces as local dependencies of the root descriptor.

    Args:
        records: The full discovery result.
        config: Resolved run configuration.
        executor: Performs (or plans) the rename and the write.

    Returns:
        ReconcileOutcome: status plus the dependencies that were declared.

    Raises:
        DescriptorLoadError: If the root descriptor or its ``dependencies`` is malformed.
        OSError: If the root descriptor cannot be read, renamed or written.
    """
    if executor.exists(config.backup_path):
        logger.info(f"Root descriptor already reconciled ({config.backup_path} exists)")
        return ReconcileOutcome(ALREADY_RECONCILED)

    namespaces = collect_namespace_dependencies(records, config)
    if not namespaces:
        logger.info("No top-level namespaces discovered; root descriptor left untouched")
        return ReconcileOutcome(NO_NAMESPACES)

    descriptor = read_descriptor(config.root_descriptor_path)

    current = get_field(descriptor, "dependencies", dict)
    if current.status == ABSENT:
        dependencies: Dict[str, Any] = {}
    elif current.present:
        dependencies = dict(current.value)
    else:
        raise DescriptorLoadError(
            config.root_descriptor_path,
            f"'dependencies' must be an object, found {type(current.value).__name__}",
        )

    dependencies.update(namespaces)
    reconciled = dict(descriptor)
    reconciled["dependencies"] = dependencies

    executor.rename(config.root_descriptor_path, config.backup_path)
    executor.create_file(config.root_descriptor_path, dump_json(reconciled))

    logger.info(f"Declared {len(namespaces)} namespace dependency(ies) in {config.root_descriptor_path}")
    return ReconcileOutcome(RECONCILED, namespaces)
