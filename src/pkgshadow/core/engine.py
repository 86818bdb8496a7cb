from __future__ import annotations

"""
Shadow Tree Orchestration.

Coordinates a complete run:
1. Checks the execution context (installed-dependency location).
2. Discovers internal packages and derives their records.
3. Builds the shadow tree.
4. Reconciles the root descriptor.
5. Flushes the change ledger.

Fatal conditions abort the run before the ledger is flushed; the persisted
ledger therefore only ever describes complete runs.
"""

import logging
import os
from typing import Optional

from pkgshadow.core.builder import ShadowTreeBuilder
from pkgshadow.core.discovery import DiscoverFn, build_records, find_packages
from pkgshadow.core.ledger import ChangeLedger, revert_changes
from pkgshadow.core.reconciler import reconcile_root_descriptor
from pkgshadow.domain.config import ShadowConfig
from pkgshadow.domain.errors import ShadowError
from pkgshadow.domain.models import (
    RECONCILE_DISABLED,
    ReconcileOutcome,
    ShadowResult,
    create_error_result,
    create_skipped_result,
    create_success_result,
)
from pkgshadow.infra.executor import create_executor
from pkgshadow.infra.fs import is_install_location

logger = logging.getLogger(__name__)


def run_shadow(
        config: ShadowConfig,
        *,
        discover: Optional[DiscoverFn] = None,
) -> ShadowResult:
    """
    Execute a full shadow-tree run.

    Args:
        config: Resolved run configuration.
        discover: Discovery collaborator ``(package_root) -> [abs dirs]``;
            defaults to ``find_packages``.

    Returns:
        ShadowResult: Status, per-package outcomes and the recorded changes.
    """
    mode = "dry-run" if config.dry_run else "live"
    logger.info(f"Shadow tree run started ({mode}) for {config.install_root}")

    # -------------------------------------------------------------------------
    # 1) Execution-context guard
    # -------------------------------------------------------------------------
    if not config.dry_run and not is_install_location(config.install_root, config.install_pattern):
        reason = f"not inside a '{config.install_pattern}' directory"
        logger.info(f"Nothing to do: {config.install_root} is {reason}")
        return create_skipped_result(config.install_root, reason)

    if not os.path.isdir(config.package_root):
        msg = f"Internal package root not found: {config.package_root}"
        logger.error(msg)
        return create_error_result(msg, config.install_root, config.destination_root, config.dry_run)

    ledger = ChangeLedger()
    executor = create_executor(config.dry_run, ledger)
    builder = ShadowTreeBuilder(config, executor)
    discover_fn = discover or (lambda root: find_packages(root, config.descriptor_filename))

    try:
        # ---------------------------------------------------------------------
        # 2) Discovery
        # ---------------------------------------------------------------------
        records = build_records(discover_fn(config.package_root), config)
        logger.info(f"Discovered {len(records)} internal package(s)")

        # ---------------------------------------------------------------------
        # 3) Shadow tree
        # ---------------------------------------------------------------------
        outcomes = builder.build(records)

        # ---------------------------------------------------------------------
        # 4) Root descriptor
        # ---------------------------------------------------------------------
        if config.reconcile:
            reconcile = reconcile_root_descriptor(records, config, executor)
        else:
            reconcile = ReconcileOutcome(RECONCILE_DISABLED)

        # ---------------------------------------------------------------------
        # 5) Ledger
        # ---------------------------------------------------------------------
        persisted = ledger.flush(config.ledger_path, executor)

    except (ShadowError, OSError) as e:
        msg = f"Shadow tree run aborted: {e}"
        logger.critical(msg)
        if len(ledger) and not config.dry_run:
            for record in ledger:
                logger.critical(f"Unrecorded change left on disk: {record.to_list()}")
        return create_error_result(msg, config.install_root, config.destination_root, config.dry_run)

    ledger_path = config.ledger_path if persisted is not None and not config.dry_run else ""
    result = create_success_result(
        install_root=config.install_root,
        destination_root=config.destination_root,
        dry_run=config.dry_run,
        packages=outcomes,
        changes=ledger.records,
        reconcile=reconcile,
        ledger_path=ledger_path,
    )
    logger.info(f"Shadow tree run finished: {result.summary}")
    return result


def run_revert(config: ShadowConfig) -> ShadowResult:
    """
    Undo the changes recorded in the persisted ledger.

    Args:
        config: Resolved run configuration (only the ledger location and the
            dry-run flag are used).

    Returns:
        ShadowResult: ``changes`` lists the undone records.
    """
    executor = create_executor(config.dry_run)
    try:
        undone = revert_changes(config.ledger_path, executor)
    except (ShadowError, OSError) as e:
        msg = f"Revert aborted: {e}"
        logger.critical(msg)
        return create_error_result(msg, config.install_root, config.destination_root, config.dry_run)

    return create_success_result(
        install_root=config.install_root,
        destination_root=config.destination_root,
        dry_run=config.dry_run,
        packages=[],
        changes=undone,
        reconcile=None,
        ledger_path=config.ledger_path,
    )
