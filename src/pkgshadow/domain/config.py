from __future__ import annotations

"""
Configuration Domain Management.

Builds the run configuration from defaults, environment variables and
explicit overrides. The result is a frozen ShadowConfig passed to every
component, so no component reads process state on its own.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from pkgshadow.domain.constants import (
    BACKUP_FILENAME,
    DESCRIPTOR_FILENAME,
    ENV_DRY_RUN,
    ENV_PACKAGE_ROOT,
    ENV_ROOT,
    INSTALL_PATTERN,
    LEDGER_FILENAME,
    PACKAGE_ROOT_REL,
    PRIVATE_PREFIX,
)
from pkgshadow.infra.fs import normalize_path, to_posix

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Layout
        "install_root": os.getcwd(),
        "package_root_rel": PACKAGE_ROOT_REL,
        "descriptor_filename": DESCRIPTOR_FILENAME,
        "private_prefix": PRIVATE_PREFIX,

        # Artifacts
        "ledger_filename": LEDGER_FILENAME,
        "backup_filename": BACKUP_FILENAME,

        # Execution context
        "install_pattern": INSTALL_PATTERN,
        "dry_run": False,
        "reconcile": True,
    }


def config_from_environ(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Collect configuration overrides from environment variables.

    Values are returned raw; the validator takes care of coercion.
    """
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    if env.get(ENV_ROOT):
        overrides["install_root"] = env[ENV_ROOT]
    if env.get(ENV_PACKAGE_ROOT):
        overrides["package_root_rel"] = env[ENV_PACKAGE_ROOT]
    if env.get(ENV_DRY_RUN):
        overrides["dry_run"] = env[ENV_DRY_RUN]

    if overrides:
        logger.debug(f"Environment overrides: {sorted(overrides)}")
    return overrides


# -----------------------------------------------------------------------------
# Resolved Configuration
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ShadowConfig:
    """
    Resolved, immutable run configuration.

    Attributes:
        install_root: Absolute directory of the installed monorepo package.
        package_root: Absolute internal package root.
        destination_root: Absolute base of the shadow tree (parent of install_root).
        package_root_rel: Internal package root relative to install_root (POSIX).
        package_root_offset: Internal package root relative to destination_root (POSIX).
        descriptor_filename: Name of package metadata files.
        private_prefix: Marker that excludes a relative path from the shadow tree.
        ledger_filename: Name of the change ledger inside install_root.
        backup_filename: Name of the preserved root descriptor inside install_root.
        install_pattern: Path segment required by the execution-context guard.
        dry_run: Plan and report mutations without performing them.
        reconcile: Whether to rewrite the root descriptor.
    """
    install_root: str
    package_root: str
    destination_root: str
    package_root_rel: str
    package_root_offset: str

    descriptor_filename: str = DESCRIPTOR_FILENAME
    private_prefix: str = PRIVATE_PREFIX
    ledger_filename: str = LEDGER_FILENAME
    backup_filename: str = BACKUP_FILENAME
    install_pattern: str = INSTALL_PATTERN

    dry_run: bool = False
    reconcile: bool = True

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> ShadowConfig:
        """Derive absolute roots from a validated configuration dict."""
        install_root = normalize_path(cfg["install_root"], os.getcwd())
        package_root_rel = to_posix(cfg["package_root_rel"]).strip("/")
        package_root = os.path.normpath(
            os.path.join(install_root, *package_root_rel.split("/"))
        )
        destination_root = os.path.dirname(install_root)
        offset = to_posix(os.path.relpath(package_root, destination_root))

        return cls(
            install_root=install_root,
            package_root=package_root,
            destination_root=destination_root,
            package_root_rel=package_root_rel,
            package_root_offset=offset,
            descriptor_filename=cfg["descriptor_filename"],
            private_prefix=cfg["private_prefix"],
            ledger_filename=cfg["ledger_filename"],
            backup_filename=cfg["backup_filename"],
            install_pattern=cfg["install_pattern"],
            dry_run=bool(cfg["dry_run"]),
            reconcile=bool(cfg["reconcile"]),
        )

    @property
    def scope(self) -> str:
        """Namespace scope of internal packages, e.g. ``@stdlib``."""
        return os.path.basename(self.package_root)

    @property
    def root_descriptor_path(self) -> str:
        return os.path.join(self.install_root, self.descriptor_filename)

    @property
    def backup_path(self) -> str:
        return os.path.join(self.install_root, self.backup_filename)

    @property
    def ledger_path(self) -> str:
        return os.path.join(self.install_root, self.ledger_filename)


def load_config(
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        *,
        strict: bool = False,
) -> ShadowConfig:
    """
    Resolve the run configuration: defaults < environment < explicit overrides.

    Args:
        overrides: Values taking precedence over everything else (None values ignored).
        environ: Environment mapping; defaults to ``os.environ``.
        strict: Raise on invalid values instead of falling back to defaults.

    Returns:
        ShadowConfig: The resolved configuration.
    """
    from pkgshadow.core.validator import validate_config

    raw = get_default_config()
    raw.update(config_from_environ(environ))
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    clean, warnings = validate_config(raw, strict=strict)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    return ShadowConfig.from_dict(clean)
