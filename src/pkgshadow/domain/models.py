from __future__ import annotations

"""
Shadow Tree Domain Data Models.

Defines the records flowing between discovery, the shadow-tree builder, the
root descriptor reconciler and the change ledger, plus the result object
returned to interface layers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from pkgshadow.domain.constants import CHANGE_CREATE, CHANGE_KINDS, CHANGE_RENAME

# Per-package builder states
STATE_SKIPPED_PRIVATE = "skipped_private"
STATE_SKIPPED_EXISTING = "skipped_existing"
STATE_WRITTEN = "written"

# Reconciler statuses
RECONCILED = "reconciled"
ALREADY_RECONCILED = "already_reconciled"
NO_NAMESPACES = "no_namespaces"
RECONCILE_DISABLED = "disabled"


# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PackageRecord:
    """
    A discovered internal package.

    Attributes:
        absolute_path: Absolute directory of the real package.
        relative_path: POSIX path relative to the internal package root.
        descriptor: Parsed package descriptor.
    """
    absolute_path: str
    relative_path: str
    descriptor: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def segments(self) -> List[str]:
        return [s for s in self.relative_path.split("/") if s]

    @property
    def depth(self) -> int:
        return len(self.segments)

    def is_private(self, marker: str) -> bool:
        return bool(marker) and self.relative_path.startswith(marker)


@dataclass(frozen=True)
class ChangeRecord:
    """
    One filesystem mutation, as consumed by the revert tooling.

    Serialized as ``[kind, path]`` or ``[kind, path, new_path]``.
    """
    kind: str
    path: str
    new_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in CHANGE_KINDS:
            raise ValueError(f"Unknown change kind: {self.kind!r}")
        if self.kind == CHANGE_RENAME and not self.new_path:
            raise ValueError("A rename record needs a new_path")

    @classmethod
    def create(cls, path: str) -> ChangeRecord:
        return cls(CHANGE_CREATE, path)

    @classmethod
    def rename(cls, path: str, new_path: str) -> ChangeRecord:
        return cls(CHANGE_RENAME, path, new_path)

    def to_list(self) -> List[str]:
        if self.new_path is None:
            return [self.kind, self.path]
        return [self.kind, self.path, self.new_path]

    @classmethod
    def from_list(cls, item: Sequence[Any]) -> ChangeRecord:
        if not isinstance(item, (list, tuple)) or len(item) not in (2, 3):
            raise ValueError(f"Malformed change record: {item!r}")
        if not all(isinstance(x, str) for x in item):
            raise ValueError(f"Malformed change record: {item!r}")
        return cls(*item)


@dataclass(frozen=True)
class PackageOutcome:
    """Final builder state of one package."""
    relative_path: str
    state: str
    proxy_path: str = ""


@dataclass(frozen=True)
class ReconcileOutcome:
    """Result of the root descriptor reconciliation."""
    status: str
    dependencies: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ShadowResult:
    """
    Unified result of a shadow-tree run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        dry_run: Whether mutations were only planned.
        skipped: True when the execution-context guard stopped the run.
        install_root: Installation root the run targeted.
        destination_root: Base directory of the shadow tree.
        packages: Per-package builder outcomes.
        changes: Serialized change records (performed, or intended in dry-run).
        reconcile: Root descriptor reconciliation outcome.
        ledger_path: Location of the persisted ledger ("" when not written).
        summary: Counters for reporting.
    """
    ok: bool
    error: str
    dry_run: bool
    skipped: bool

    install_root: str
    destination_root: str

    packages: List[PackageOutcome] = field(default_factory=list)
    changes: List[List[str]] = field(default_factory=list)
    reconcile: Optional[ReconcileOutcome] = None
    ledger_path: str = ""

    summary: Dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        install_root: str,
        destination_root: str = "",
        dry_run: bool = False,
        packages: Optional[List[PackageOutcome]] = None,
) -> ShadowResult:
    """
    Create a failed result.

    The in-memory changes of an aborted run are deliberately not carried:
    they were never persisted to the ledger.
    """
    return ShadowResult(
        ok=False,
        error=error,
        dry_run=dry_run,
        skipped=False,
        install_root=install_root,
        destination_root=destination_root,
        packages=packages or [],
    )


def create_skipped_result(install_root: str, reason: str) -> ShadowResult:
    """Create the no-op result returned when the context guard does not match."""
    return ShadowResult(
        ok=True,
        error="",
        dry_run=False,
        skipped=True,
        install_root=install_root,
        destination_root="",
        summary={"reason": reason},
    )


def create_success_result(
        install_root: str,
        destination_root: str,
        dry_run: bool,
        packages: List[PackageOutcome],
        changes: List[ChangeRecord],
        reconcile: Optional[ReconcileOutcome],
        ledger_path: str,
) -> ShadowResult:
    """Create a successful result and compute its summary counters."""
    counts: Dict[str, int] = {
        STATE_WRITTEN: 0,
        STATE_SKIPPED_EXISTING: 0,
        STATE_SKIPPED_PRIVATE: 0,
    }
    for outcome in packages:
        counts[outcome.state] = counts.get(outcome.state, 0) + 1

    return ShadowResult(
        ok=True,
        error="",
        dry_run=dry_run,
        skipped=False,
        install_root=install_root,
        destination_root=destination_root,
        packages=packages,
        changes=[c.to_list() for c in changes],
        reconcile=reconcile,
        ledger_path=ledger_path,
        summary={
            "discovered": len(packages),
            "written": counts[STATE_WRITTEN],
            "skipped_existing": counts[STATE_SKIPPED_EXISTING],
            "skipped_private": counts[STATE_SKIPPED_PRIVATE],
            "changes": len(changes),
        },
    )
