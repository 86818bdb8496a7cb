from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, environment and CLI overrides), the shadow-tree run or its revert,
and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import List, Optional

from pkgshadow.core.engine import run_revert, run_shadow
from pkgshadow.domain.config import load_config
from pkgshadow.domain.models import ShadowResult
from pkgshadow.infra.logging import LoggingConfig, configure_logging, get_logger
from pkgshadow.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 fatal abort, 2 invalid configuration).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    try:
        config = load_config(cli_args.args_to_overrides(args), strict=True)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.dump_config:
        print(json.dumps(asdict(config), ensure_ascii=False, indent=2))
        return 0

    try:
        result = run_revert(config) if args.revert else run_shadow(config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result, reverted=args.revert)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: ShadowResult, reverted: bool = False) -> None:
    """
    Print the run result to standard output.

    Args:
        result: The result to render.
        reverted: Whether the result comes from a revert.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    if result.skipped:
        print(f"Nothing to do: {result.summary.get('reason', '')}")
        return

    prefix = "Would" if result.dry_run else "Did"

    if reverted:
        print(f"{prefix} revert {len(result.changes)} change(s).")
        for change in result.changes:
            print(f"  - {' '.join(change)}")
        return

    summary = result.summary
    print(f"Shadow tree at: {result.destination_root}")
    labels = {
        "written": "Proxy descriptors written",
        "skipped_existing": "Already shadowed",
        "skipped_private": "Private packages skipped",
    }
    for key, label in labels.items():
        print(f"{label}: {summary.get(key, 0)}")

    if result.reconcile is not None:
        print(f"Root descriptor: {result.reconcile.status}")
        for name, ref in sorted(result.reconcile.dependencies.items()):
            print(f"  - {name}: {ref}")

    print(f"{prefix} record {len(result.changes)} change(s).")
    if result.dry_run:
        for change in result.changes:
            print(f"  - {' '.join(change)}")
    elif result.ledger_path:
        print(f"Ledger: {result.ledger_path}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
