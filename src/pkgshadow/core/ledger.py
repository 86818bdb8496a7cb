from __future__ import annotations

"""
Change Ledger Service.

Accumulates every mutation of a run and persists the sequence once, at the
end of a successful run, as a JSON array of ``[kind, path, ...]`` tuples. The
persisted ledger is the only input of the revert operation, which undoes the
entries in reverse order.
"""

import json
import logging
from typing import Iterator, List, Optional

from pkgshadow.domain.constants import CHANGE_CREATE, CHANGE_RENAME
from pkgshadow.domain.errors import LedgerError
from pkgshadow.domain.models import ChangeRecord
from pkgshadow.infra.executor import Executor
from pkgshadow.infra.fs import dump_json

logger = logging.getLogger(__name__)


class ChangeLedger:
    """Append-only, in-memory sequence of change records."""

    def __init__(self) -> None:
        self._records: List[ChangeRecord] = []

    def append(self, record: ChangeRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> List[ChangeRecord]:
        return list(self._records)

    def __iter__(self) -> Iterator[ChangeRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def flush(self, path: str, executor: Executor) -> Optional[List[ChangeRecord]]:
        """
        Persist the ledger at ``path``.

        Appends a final ``create`` record for the ledger file itself. Entries
        of a ledger left by an earlier run are kept in front, so their revert
        path survives a rerun.

        Args:
            path: Ledger location.
            executor: Performs (or, in dry-run, plans) the write.

        Returns:
            Optional[List[ChangeRecord]]: The full persisted sequence, or None
            when an earlier ledger exists and this run changed nothing.
        """
        previous: List[ChangeRecord] = []
        if executor.exists(path):
            previous = load_ledger(path)
            if not self._records:
                logger.info("No changes in this run; existing ledger left untouched")
                return None

        self_record = ChangeRecord.create(path)
        self.append(self_record)

        sequence = [r for r in previous if r != self_record] + self._records
        executor.write_artifact(path, dump_json([r.to_list() for r in sequence]))

        logger.info(f"Change ledger: {len(self._records)} new record(s) at {path}")
        return sequence


def load_ledger(path: str) -> List[ChangeRecord]:
    """
    Read a persisted ledger.

    Raises:
        LedgerError: If the file is missing or does not follow the ledger schema.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise LedgerError(f"Ledger not found: {path}") from e
    except UnicodeDecodeError as e:
        raise LedgerError(f"Ledger is not valid UTF-8: {path} ({e})") from e
    except json.JSONDecodeError as e:
        raise LedgerError(f"Ledger is not valid JSON: {path} ({e})") from e

    if not isinstance(data, list):
        raise LedgerError(f"Ledger must be a JSON array: {path}")

    try:
        return [ChangeRecord.from_list(item) for item in data]
    except ValueError as e:
        raise LedgerError(f"Corrupt ledger {path}: {e}") from e


def revert_changes(path: str, executor: Executor) -> List[ChangeRecord]:
    """
    Undo every change of a persisted ledger, last change first.

    ``create`` entries are deleted (directories only when empty), ``rename``
    entries are renamed back. Entries whose target is gone, or whose undo would
    clobber something, are reported and skipped.

    Args:
        path: Ledger location.
        executor: Performs (or plans) the undo operations; nothing is recorded.

    Returns:
        List[ChangeRecord]: The entries that were undone.

    Raises:
        LedgerError: If the ledger cannot be read.
        OSError: If an undo operation fails at the filesystem level.
    """
    records = load_ledger(path)
    undone: List[ChangeRecord] = []

    for record in reversed(records):
        if record.kind == CHANGE_CREATE and _undo_create(record, executor):
            undone.append(record)
        elif record.kind == CHANGE_RENAME and _undo_rename(record, executor):
            undone.append(record)

    logger.info(f"Reverted {len(undone)} of {len(records)} change(s) from {path}")
    return undone


def _undo_create(record: ChangeRecord, executor: Executor) -> bool:
    if not executor.exists(record.path):
        logger.warning(f"Cannot remove {record.path}: already gone")
        return False
    if executor.is_dir(record.path):
        if executor.list_dir(record.path):
            logger.warning(f"Keeping {record.path}: directory is not empty")
            return False
        executor.remove_dir(record.path)
    else:
        executor.remove_file(record.path)
    return True


def _undo_rename(record: ChangeRecord, executor: Executor) -> bool:
    assert record.new_path is not None
    if not executor.exists(record.new_path):
        logger.warning(f"Cannot restore {record.path}: {record.new_path} is gone")
        return False
    if executor.exists(record.path):
        logger.warning(f"Cannot restore {record.path}: the path is occupied")
        return False
    executor.restore(record.new_path, record.path)
    return True
