from __future__ import annotations

"""
Unit tests for the mutation executors.

Both executors must record the same changes; only the filesystem executor
may touch the disk.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from pkgshadow.core.ledger import ChangeLedger
from pkgshadow.domain.models import ChangeRecord
from pkgshadow.infra.executor import (
    DryRunExecutor,
    FileSystemExecutor,
    create_executor,
)


def test_factory_selects_by_mode() -> None:
    """TC-01: Dry-run mode selects the planning executor."""
    assert isinstance(create_executor(True), DryRunExecutor)
    assert isinstance(create_executor(False), FileSystemExecutor)
    assert create_executor(True).dry_run and not create_executor(False).dry_run


def test_filesystem_mutations_are_recorded(tmp_path: Path) -> None:
    """TC-02: Directory, file and rename each append one record."""
    ledger = ChangeLedger()
    ex = FileSystemExecutor(ledger)

    ex.make_dir(str(tmp_path / "d"))
    ex.create_file(str(tmp_path / "d" / "f.json"), "{}\n")
    ex.rename(str(tmp_path / "d" / "f.json"), str(tmp_path / "d" / "g.json"))

    assert (tmp_path / "d" / "g.json").read_text(encoding="utf-8") == "{}\n"
    assert not (tmp_path / "d" / "f.json.tmp").exists()
    assert ledger.records == [
        ChangeRecord.create(str(tmp_path / "d")),
        ChangeRecord.create(str(tmp_path / "d" / "f.json")),
        ChangeRecord.rename(str(tmp_path / "d" / "f.json"), str(tmp_path / "d" / "g.json")),
    ]


def test_unrecorded_operations(tmp_path: Path) -> None:
    """TC-03: Artifacts and undo operations leave the ledger alone."""
    ledger = ChangeLedger()
    ex = FileSystemExecutor(ledger)
    (tmp_path / "d").mkdir()
    (tmp_path / "a").write_text("x", encoding="utf-8")

    ex.write_artifact(str(tmp_path / "ledger.json"), "[]\n")
    ex.restore(str(tmp_path / "a"), str(tmp_path / "b"))
    ex.remove_file(str(tmp_path / "b"))
    ex.remove_dir(str(tmp_path / "d"))

    assert len(ledger) == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.json"]


def test_filesystem_errors_propagate(tmp_path: Path) -> None:
    """TC-04: OS errors are not swallowed."""
    ex = FileSystemExecutor()
    with pytest.raises(OSError):
        ex.make_dir(str(tmp_path / "missing" / "child"))


def test_dry_run_overlay(tmp_path: Path) -> None:
    """TC-05: Planned state answers queries without touching the disk."""
    ledger = ChangeLedger()
    ex = DryRunExecutor(ledger)
    d = str(tmp_path / "d")
    f = str(tmp_path / "d" / "f.json")

    ex.make_dir(d)
    ex.create_file(f, "{}\n")

    assert ex.is_dir(d) and ex.is_file(f)
    assert ex.list_dir(d) == ["f.json"]
    assert not (tmp_path / "d").exists()
    assert len(ledger) == 2


def test_dry_run_rename_and_remove(tmp_path: Path) -> None:
    """TC-06: Planned renames and removals hide the source path."""
    (tmp_path / "a.json").write_text("{}", encoding="utf-8")
    ex = DryRunExecutor(ChangeLedger())
    src, dst = str(tmp_path / "a.json"), str(tmp_path / "b.json")

    ex.rename(src, dst)
    assert not ex.exists(src) and ex.is_file(dst)
    assert ex.list_dir(str(tmp_path)) == ["b.json"]

    ex.remove_file(dst)
    assert not ex.exists(dst)
    assert (tmp_path / "a.json").exists()


def test_failed_write_leaves_no_temporary_file(tmp_path: Path) -> None:
    """TC-07: A write that fails midway is cleaned up and not recorded."""
    ledger = ChangeLedger()
    ex = FileSystemExecutor(ledger)
    target = tmp_path / "package.json"

    with patch("pkgshadow.infra.executor.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            ex.create_file(str(target), "{}\n")

    assert list(tmp_path.iterdir()) == []
    assert len(ledger) == 0
