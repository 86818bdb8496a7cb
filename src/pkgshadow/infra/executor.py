from __future__ import annotations

"""
Filesystem Mutation Executors.

Every mutation of a run goes through an executor. ``FileSystemExecutor``
performs it; ``DryRunExecutor`` only plans it, keeping an overlay of planned
state so that later existence checks answer as if the mutation had happened.
Both append one ChangeRecord per mutation to the attached ledger, which makes
a dry run report exactly what a real run would do from the same pre-state.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, Set

from pkgshadow.domain.models import ChangeRecord

logger = logging.getLogger(__name__)


class ChangeSink(Protocol):
    def append(self, record: ChangeRecord) -> None: ...


class Executor(ABC):
    """
    Mutation capability shared by all components.

    Args:
        ledger: Receives a ChangeRecord for each recorded mutation. When None,
            mutations are performed without being recorded (used by revert).
    """

    dry_run: bool = False

    def __init__(self, ledger: Optional[ChangeSink] = None) -> None:
        self.ledger = ledger

    # --- queries ---
    @abstractmethod
    def exists(self, path: str) -> bool: ...

    @abstractmethod
    def is_dir(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool:
        return self.exists(path) and not self.is_dir(path)

    @abstractmethod
    def list_dir(self, path: str) -> List[str]: ...

    # --- recorded mutations ---
    def make_dir(self, path: str) -> None:
        """Create a single directory level."""
        self._make_dir(path)
        self._record(ChangeRecord.create(path))

    def create_file(self, path: str, content: str) -> None:
        """Write a new UTF-8 text file."""
        self._write_file(path, content)
        self._record(ChangeRecord.create(path))

    def rename(self, src: str, dst: str) -> None:
        self._rename(src, dst)
        self._record(ChangeRecord.rename(src, dst))

    # --- unrecorded mutations (ledger artifact, undo operations) ---
    def write_artifact(self, path: str, content: str) -> None:
        """Write or replace a file whose creation is recorded by the caller itself."""
        self._write_file(path, content)

    def remove_file(self, path: str) -> None:
        self._remove(path, is_dir=False)

    def remove_dir(self, path: str) -> None:
        self._remove(path, is_dir=True)

    def restore(self, src: str, dst: str) -> None:
        """Rename without recording, used to undo a recorded rename."""
        self._rename(src, dst)

    # --- implementation hooks ---
    @abstractmethod
    def _make_dir(self, path: str) -> None: ...

    @abstractmethod
    def _write_file(self, path: str, content: str) -> None: ...

    @abstractmethod
    def _rename(self, src: str, dst: str) -> None: ...

    @abstractmethod
    def _remove(self, path: str, is_dir: bool) -> None: ...

    def _record(self, record: ChangeRecord) -> None:
        if self.ledger is not None:
            self.ledger.append(record)


class FileSystemExecutor(Executor):
    """Performs mutations on the real filesystem. OS errors propagate."""

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_dir(self, path: str) -> List[str]:
        return sorted(os.listdir(path))

    def _make_dir(self, path: str) -> None:
        os.mkdir(path)
        logger.debug(f"Created directory {path}")

    def _write_file(self, path: str, content: str) -> None:
        # Write next to the target and move into place so readers never see a partial file
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp, path)
        except OSError:
            if os.path.lexists(tmp):
                os.remove(tmp)
            raise
        logger.debug(f"Wrote {path}")

    def _rename(self, src: str, dst: str) -> None:
        os.rename(src, dst)
        logger.debug(f"Renamed {src} -> {dst}")

    def _remove(self, path: str, is_dir: bool) -> None:
        if is_dir:
            os.rmdir(path)
        else:
            os.remove(path)
        logger.debug(f"Removed {path}")


class DryRunExecutor(Executor):
    """Plans mutations without touching the filesystem."""

    dry_run = True

    def __init__(self, ledger: Optional[ChangeSink] = None) -> None:
        super().__init__(ledger)
        self._planned_dirs: Set[str] = set()
        self._planned_files: Set[str] = set()
        self._planned_absent: Set[str] = set()

    def exists(self, path: str) -> bool:
        if path in self._planned_absent:
            return False
        if path in self._planned_dirs or path in self._planned_files:
            return True
        return os.path.lexists(path)

    def is_dir(self, path: str) -> bool:
        if path in self._planned_absent or path in self._planned_files:
            return False
        if path in self._planned_dirs:
            return True
        return os.path.isdir(path)

    def list_dir(self, path: str) -> List[str]:
        names: Set[str] = set()
        if path not in self._planned_absent and os.path.isdir(path):
            names.update(os.listdir(path))
        for planned in self._planned_dirs | self._planned_files:
            if os.path.dirname(planned) == path:
                names.add(os.path.basename(planned))
        return sorted(n for n in names if os.path.join(path, n) not in self._planned_absent)

    def _make_dir(self, path: str) -> None:
        logger.info(f"[dry-run] create {path}")
        self._planned_absent.discard(path)
        self._planned_dirs.add(path)

    def _write_file(self, path: str, content: str) -> None:
        logger.info(f"[dry-run] create {path}")
        logger.debug(f"[dry-run] content of {path}:\n{content.rstrip()}")
        self._planned_absent.discard(path)
        self._planned_files.add(path)

    def _rename(self, src: str, dst: str) -> None:
        logger.info(f"[dry-run] rename {src} -> {dst}")
        was_dir = self.is_dir(src)
        self._planned_files.discard(src)
        self._planned_dirs.discard(src)
        self._planned_absent.add(src)
        self._planned_absent.discard(dst)
        (self._planned_dirs if was_dir else self._planned_files).add(dst)

    def _remove(self, path: str, is_dir: bool) -> None:
        logger.info(f"[dry-run] remove {path}")
        self._planned_files.discard(path)
        self._planned_dirs.discard(path)
        self._planned_absent.add(path)


def create_executor(dry_run: bool, ledger: Optional[ChangeSink] = None) -> Executor:
    """Select the executor matching the run mode."""
    if dry_run:
        return DryRunExecutor(ledger)
    return FileSystemExecutor(ledger)
