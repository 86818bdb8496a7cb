from __future__ import annotations

"""
Package Descriptor Access.

Descriptors are plain JSON objects. Optional fields can be absent or present
with an unexpected shape; callers need to tell the two apart, so the accessors
return a FieldValue carrying the distinction.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Type, Union

from pkgshadow.infra.fs import read_descriptor

ABSENT = "absent"
WRONG_SHAPE = "wrong_shape"
PRESENT = "present"


@dataclass(frozen=True)
class FieldValue:
    status: str
    value: Any = None

    @property
    def present(self) -> bool:
        return self.status == PRESENT


def get_field(
        descriptor: Mapping[str, Any],
        name: str,
        types: Union[Type[Any], Tuple[Type[Any], ...]],
) -> FieldValue:
    """
    Read ``name`` from ``descriptor`` and check its type.

    Args:
        descriptor: Parsed descriptor.
        name: Field name.
        types: Accepted type or tuple of types.

    Returns:
        FieldValue: ABSENT, WRONG_SHAPE (value kept for diagnostics) or PRESENT.
    """
    if name not in descriptor:
        return FieldValue(ABSENT)
    value = descriptor[name]
    if not isinstance(value, types):
        return FieldValue(WRONG_SHAPE, value)
    return FieldValue(PRESENT, value)


def get_path_field(descriptor: Mapping[str, Any], name: str) -> FieldValue:
    """Read a field holding a non-empty relative path string."""
    field = get_field(descriptor, name, str)
    if field.present and not field.value.strip():
        return FieldValue(WRONG_SHAPE, field.value)
    return field


def load_descriptor(package_dir: str, filename: str) -> Dict[str, Any]:
    """Load ``<package_dir>/<filename>``."""
    return read_descriptor(os.path.join(package_dir, filename))
