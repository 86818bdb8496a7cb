from __future__ import annotations


class ShadowError(Exception):
    """Base class for fatal shadow-tree generation errors."""


class DescriptorLoadError(ShadowError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load descriptor {path}: {reason}")
        self.path = path
        self.reason = reason


class UnusableDescriptorError(ShadowError):
    def __init__(self, relative_path: str, reason: str) -> None:
        super().__init__(f"Unusable descriptor for '{relative_path}': {reason}")
        self.relative_path = relative_path
        self.reason = reason


class PathConflictError(ShadowError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Path exists and is not a directory: {path}")
        self.path = path


class LedgerError(ShadowError):
    pass


class DiscoveryError(ShadowError):
    def __init__(self, path: str, package_root: str) -> None:
        super().__init__(f"Discovered path {path} is not inside the package root {package_root}")
        self.path = path
        self.package_root = package_root
