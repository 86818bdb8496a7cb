from __future__ import annotations

"""
Domain Constants.

Filenames, markers and field lists shared by the shadow-tree components.
"""

from typing import Tuple

DESCRIPTOR_FILENAME = "package.json"
LEDGER_FILENAME = ".pkgshadow.json"
BACKUP_FILENAME = "package.json.orig"

# Internal package root, relative to the installation root
PACKAGE_ROOT_REL = "lib/node_modules/@stdlib"

# Relative paths starting with this marker are private packages
PRIVATE_PREFIX = "_"

# Path segment identifying an installed-dependency location
INSTALL_PATTERN = "node_modules"

# Informational fields copied verbatim into proxy descriptors
PROXY_FIELDS: Tuple[str, ...] = (
    "name",
    "version",
    "description",
    "license",
    "author",
    "contributors",
    "homepage",
    "repository",
    "bugs",
    "engines",
    "os",
    "keywords",
)

FILE_SCHEME = "file:"

CHANGE_CREATE = "create"
CHANGE_RENAME = "rename"
CHANGE_KINDS: Tuple[str, ...] = (CHANGE_CREATE, CHANGE_RENAME)

ENV_ROOT = "PKGSHADOW_ROOT"
ENV_DRY_RUN = "PKGSHADOW_DRY_RUN"
ENV_PACKAGE_ROOT = "PKGSHADOW_PACKAGE_ROOT"
