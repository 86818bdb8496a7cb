from __future__ import annotations

"""
Proxy Descriptor Synthesis.

A proxy descriptor is the smallest descriptor that makes a shadow directory
behave like the real package: informational fields are copied, the name is
blanked and every entry point is redirected into the real package directory.
"""

import logging
from typing import Any, Callable, Dict, Mapping

from pkgshadow.core.descriptor import ABSENT, get_field, get_path_field
from pkgshadow.core.resolver import make_resolver
from pkgshadow.domain.constants import PROXY_FIELDS
from pkgshadow.domain.errors import UnusableDescriptorError

logger = logging.getLogger(__name__)


def synthesize_descriptor(
        package_path: str,
        relative_path: str,
        descriptor: Mapping[str, Any],
        package_root_offset: str,
) -> Dict[str, Any]:
    """
    Build the proxy descriptor for one package.

    Args:
        package_path: Absolute directory of the real package (diagnostics only).
        relative_path: Package path relative to the internal package root.
        descriptor: The real package's descriptor.
        package_root_offset: Internal package root relative to the destination root.

    Returns:
        Dict[str, Any]: The proxy descriptor.

    Raises:
        UnusableDescriptorError: If ``main`` is missing or not a usable path.
    """
    resolve = make_resolver(relative_path, package_root_offset)

    # An empty name keeps the proxy out of the real package namespace
    proxy: Dict[str, Any] = {"name": ""}
    proxy.update({k: descriptor[k] for k in PROXY_FIELDS if k != "name" and k in descriptor})

    main = get_path_field(descriptor, "main")
    if not main.present:
        reason = "missing 'main'" if main.status == ABSENT else f"invalid 'main' {main.value!r}"
        raise UnusableDescriptorError(relative_path, reason)
    proxy["main"] = resolve(main.value)

    browser = get_field(descriptor, "browser", (str, dict))
    if browser.present:
        proxy["browser"] = _resolve_browser(browser.value, resolve, package_path)
    elif browser.status != ABSENT:
        logger.warning(
            f"Skipping 'browser' of {package_path}: unsupported type "
            f"{type(browser.value).__name__}"
        )

    types = get_path_field(descriptor, "types")
    if types.present:
        proxy["types"] = resolve(types.value)
    elif types.status != ABSENT:
        logger.warning(f"Skipping 'types' of {package_path}: invalid value {types.value!r}")

    return proxy


def _resolve_browser(value: Any, resolve: Callable[[str], str], package_path: str) -> Any:
    """Resolve a ``browser`` string or every string value of a ``browser`` mapping."""
    if isinstance(value, str):
        return resolve(value)

    out: Dict[str, Any] = {}
    for key, replacement in value.items():
        if isinstance(replacement, str):
            out[key] = resolve(replacement)
        else:
            # `false` blocks a module in the browser; it is not a path
            logger.debug(f"Keeping non-path browser entry {key!r} of {package_path} as-is")
            out[key] = replacement
    return out
