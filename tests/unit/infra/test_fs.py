from __future__ import annotations

"""
Unit tests for the FileSystem infrastructure helpers.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pkgshadow.domain.errors import DescriptorLoadError
from pkgshadow.infra.fs import (
    dump_json,
    is_install_location,
    normalize_path,
    read_descriptor,
    relative_posix,
)


@pytest.mark.parametrize("path,expected", [
    ("/home/u/project/node_modules/@stdlib/stdlib", True),
    ("/home/u/node_modules", True),
    ("C:\\work\\node_modules\\pkg", True),
    ("/home/u/my_node_modules_backup/stdlib", False),
    ("/home/u/stdlib", False),
])
def test_install_location_needs_whole_segment(path: str, expected: bool) -> None:
    """TC-01: Only a complete path segment matches."""
    assert is_install_location(path, "node_modules") is expected


def test_normalize_path_expansion() -> None:
    """TC-02: Environment variables expand; empty input uses the fallback."""
    with patch.dict(os.environ, {"PKGSHADOW_TEST_VAR": "my_folder"}):
        path = normalize_path("$PKGSHADOW_TEST_VAR/sub", fallback=".")
    assert path.endswith(os.path.join("my_folder", "sub"))
    assert normalize_path("  ", fallback="/opt/x") == os.path.abspath("/opt/x")


def test_relative_posix(tmp_path: Path) -> None:
    """TC-03: Relative paths use forward slashes; same directory is empty."""
    assert relative_posix(str(tmp_path / "a" / "b"), str(tmp_path)) == "a/b"
    assert relative_posix(str(tmp_path), str(tmp_path)) == ""


def test_read_descriptor(tmp_path: Path) -> None:
    """TC-04: Objects load, everything else is a DescriptorLoadError."""
    good = tmp_path / "good.json"
    good.write_text('{"name": "x"}', encoding="utf-8")
    assert read_descriptor(str(good)) == {"name": "x"}

    for content in ("{broken", "[1, 2]"):
        bad = tmp_path / "bad.json"
        bad.write_text(content, encoding="utf-8")
        with pytest.raises(DescriptorLoadError):
            read_descriptor(str(bad))


def test_read_descriptor_missing(tmp_path: Path) -> None:
    """TC-05: Missing files surface as OSError."""
    with pytest.raises(OSError):
        read_descriptor(str(tmp_path / "missing.json"))


def test_dump_json_format() -> None:
    """TC-06: Two-space indent, unicode kept, trailing newline."""
    out = dump_json({"name": "ñ", "a": [1]})

    assert out.endswith("\n")
    assert '  "name": "ñ"' in out
    assert json.loads(out) == {"name": "ñ", "a": [1]}


def test_read_descriptor_invalid_utf8(tmp_path: Path) -> None:
    """TC-07: Undecodable bytes are a DescriptorLoadError, not a UnicodeDecodeError."""
    bad = tmp_path / "package.json"
    bad.write_bytes(b'{"main": "./lib", "description": "\xff"}')

    with pytest.raises(DescriptorLoadError, match="invalid UTF-8"):
        read_descriptor(str(bad))
