from __future__ import annotations

"""
Unit tests for configuration resolution (defaults, environment, overrides).
"""

import os
from pathlib import Path

import pytest

from pkgshadow.domain.config import (
    ShadowConfig,
    config_from_environ,
    get_default_config,
    load_config,
)


def test_default_config_values() -> None:
    """TC-01: Defaults describe the standard layout."""
    cfg = get_default_config()

    assert cfg["install_root"] == os.getcwd()
    assert cfg["package_root_rel"] == "lib/node_modules/@stdlib"
    assert cfg["ledger_filename"] == ".pkgshadow.json"
    assert cfg["dry_run"] is False
    assert cfg["reconcile"] is True


def test_derived_roots(tmp_path: Path) -> None:
    """TC-02: Destination is the parent of the install root; offset is relative to it."""
    cfg = get_default_config()
    cfg["install_root"] = str(tmp_path / "node_modules" / "@stdlib" / "stdlib")

    config = ShadowConfig.from_dict(cfg)

    assert config.destination_root == str(tmp_path / "node_modules" / "@stdlib")
    assert config.package_root == str(
        tmp_path / "node_modules" / "@stdlib" / "stdlib" / "lib" / "node_modules" / "@stdlib"
    )
    assert config.package_root_offset == "stdlib/lib/node_modules/@stdlib"
    assert config.scope == "@stdlib"
    assert config.ledger_path.endswith(os.path.join("stdlib", ".pkgshadow.json"))
    assert config.backup_path.endswith(os.path.join("stdlib", "package.json.orig"))


def test_environment_mapping() -> None:
    """TC-03: Only set, non-empty variables become overrides."""
    env = {"PKGSHADOW_ROOT": "/opt/x", "PKGSHADOW_DRY_RUN": "yes", "PKGSHADOW_PACKAGE_ROOT": ""}

    assert config_from_environ(env) == {"install_root": "/opt/x", "dry_run": "yes"}


def test_precedence(tmp_path: Path) -> None:
    """TC-04: Overrides beat the environment, which beats defaults."""
    env = {"PKGSHADOW_ROOT": str(tmp_path / "env"), "PKGSHADOW_DRY_RUN": "1"}

    config = load_config({"install_root": str(tmp_path / "cli"), "dry_run": None}, environ=env)

    assert config.install_root == str(tmp_path / "cli")
    assert config.dry_run is True


def test_invalid_environment_falls_back(tmp_path: Path) -> None:
    """TC-05: Non-strict loading replaces garbage with defaults."""
    config = load_config({"install_root": str(tmp_path)}, environ={"PKGSHADOW_DRY_RUN": "maybe"})

    assert config.dry_run is False


def test_invalid_environment_strict() -> None:
    """TC-06: Strict loading surfaces the error."""
    with pytest.raises(TypeError):
        load_config(environ={"PKGSHADOW_DRY_RUN": "maybe"}, strict=True)


def test_config_is_frozen(tmp_path: Path) -> None:
    """TC-07: The resolved configuration cannot be mutated by components."""
    config = load_config({"install_root": str(tmp_path)}, environ={})

    with pytest.raises(AttributeError):
        config.dry_run = True  # type: ignore[misc]
