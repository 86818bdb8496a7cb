from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Puts the 'src' directory on sys.path so the package imports uninstalled.
2. Provides a factory laying out a fake installed monorepo:

    <tmp>/project/node_modules/@stdlib/            destination root
        stdlib/                                    installation root
            package.json                           root descriptor
            lib/node_modules/@stdlib/<rel>/...     internal packages
"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from pkgshadow.domain.config import ShadowConfig, get_default_config  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Data
# -----------------------------------------------------------------------------
ROOT_DESCRIPTOR: Dict[str, Any] = {
    "name": "@stdlib/stdlib",
    "version": "0.0.96",
    "main": "./lib",
    "dependencies": {"debug": "^2.6.9"},
}

SAMPLE_PACKAGES: Dict[str, Dict[str, Any]] = {
    "math": {
        "name": "@stdlib/math",
        "version": "0.0.96",
        "main": "./lib",
    },
    "math/base/special/sin": {
        "name": "@stdlib/math/base/special/sin",
        "version": "0.0.96",
        "description": "Compute the sine of a number.",
        "license": "Apache-2.0",
        "main": "./lib",
        "browser": {"./lib/main.js": "./lib/browser.js", "fs": False},
        "types": "./docs/types",
        "keywords": ["sin", "trig"],
        "scripts": {"test": "make test"},
        "private": False,
    },
    "utils": {
        "name": "@stdlib/utils",
        "version": "0.0.96",
        "main": "./lib/index.js",
    },
    "utils/copy": {
        "name": "@stdlib/utils/copy",
        "version": "0.0.96",
        "main": "./lib/index.js",
        "browser": "./lib/browser.js",
    },
    "_tools/pkgs/find": {
        "name": "@stdlib/_tools/pkgs/find",
        "main": "./lib",
    },
}


@dataclass
class FakeInstall:
    destination_root: Path
    install_root: Path
    package_root: Path

    @property
    def root_descriptor(self) -> Path:
        return self.install_root / "package.json"

    def config(self, **overrides: Any) -> ShadowConfig:
        cfg = get_default_config()
        cfg["install_root"] = str(self.install_root)
        cfg.update(overrides)
        return ShadowConfig.from_dict(cfg)

    def add_package(self, rel: str, descriptor: Any) -> Path:
        pkg_dir = self.package_root.joinpath(*rel.split("/"))
        pkg_dir.mkdir(parents=True, exist_ok=True)
        text = descriptor if isinstance(descriptor, str) else json.dumps(descriptor, indent=2)
        (pkg_dir / "package.json").write_text(text, encoding="utf-8")
        return pkg_dir

    def package_dir(self, rel: str) -> str:
        return str(self.package_root.joinpath(*rel.split("/")))


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_install(tmp_path: Path) -> Callable[..., FakeInstall]:
    """Return a factory creating a fake installation below ``tmp_path``."""

    def _make(
            packages: Optional[Dict[str, Any]] = None,
            root_descriptor: Optional[Dict[str, Any]] = None,
            parent: str = "project/node_modules/@stdlib",
    ) -> FakeInstall:
        dest = tmp_path.joinpath(*parent.split("/"))
        install_root = dest / "stdlib"
        package_root = install_root / "lib" / "node_modules" / "@stdlib"
        package_root.mkdir(parents=True)

        fake = FakeInstall(dest, install_root, package_root)
        fake.root_descriptor.write_text(
            json.dumps(root_descriptor or ROOT_DESCRIPTOR, indent=2) + "\n", encoding="utf-8"
        )
        for rel, descriptor in (packages if packages is not None else SAMPLE_PACKAGES).items():
            fake.add_package(rel, descriptor)
        return fake

    return _make


@pytest.fixture
def install(make_install: Callable[..., FakeInstall]) -> FakeInstall:
    """A fake installation holding SAMPLE_PACKAGES."""
    return make_install()


def snapshot(root: Path) -> Dict[str, bytes]:
    """Map every path below ``root`` to its content (b"" for directories)."""
    out: Dict[str, bytes] = {}
    for path in sorted(root.rglob("*")):
        out[str(path)] = b"" if path.is_dir() else path.read_bytes()
    return out


@pytest.fixture
def take_snapshot() -> Callable[[Path], Dict[str, bytes]]:
    """Expose ``snapshot`` to tests."""
    return snapshot
