from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the argparse namespace into
configuration overrides understood by ``load_config``.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the pkgshadow CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="pkgshadow",
        description=(
            "Expose nested internal packages of an installed monorepo under "
            "short paths by generating a shadow tree of proxy descriptors."
        ),
    )

    # --- Layout ---
    p.add_argument(
        "-r", "--root",
        dest="install_root",
        default=None,
        help="Installation root of the monorepo package (default: current directory).",
    )
    p.add_argument(
        "--package-root",
        dest="package_root_rel",
        default=None,
        help="Internal package root, relative to the installation root.",
    )

    # --- Run mode ---
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the intended changes without touching the filesystem.",
    )
    p.add_argument(
        "--no-reconcile",
        action="store_true",
        help="Leave the root package descriptor untouched.",
    )
    p.add_argument(
        "--revert",
        action="store_true",
        help="Undo the changes recorded in the ledger of a previous run.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file (rotated).",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags left at their defaults map to None so that they do not mask values
    coming from the environment.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "install_root": args.install_root,
        "package_root_rel": args.package_root_rel,
        "dry_run": None,
        "reconcile": None,
    }

    if args.dry_run:
        overrides["dry_run"] = True
    if args.no_reconcile:
        overrides["reconcile"] = False

    return overrides
