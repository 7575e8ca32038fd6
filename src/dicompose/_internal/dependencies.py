from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from dicompose._internal.integrations.pydantic import is_pydantic_model, pydantic_model_as_mapping
from dicompose.exceptions import DIComposeInvalidArgumentError

EMPTY_DEPENDENCIES: Mapping[str, Any] = MappingProxyType({})
"""Dependency value passed to setups when ``create`` is called without one."""


def dependencies_as_mapping(value: object) -> Mapping[Any, Any]:
    """Return a key/value view of a dependency value.

    Dependency values are structural bags. Mappings are returned as-is;
    Pydantic models (including pydantic-settings objects), dataclass instances
    and plain attribute objects are converted to a new dict. ``None`` becomes
    an empty mapping.

    Args:
        value: Dependency value supplied to ``create`` or ``with_``.

    Raises:
        DIComposeInvalidArgumentError: If the value exposes no keys.

    """
    if value is None:
        return EMPTY_DEPENDENCIES
    if isinstance(value, Mapping):
        return value
    if is_pydantic_model(value):
        return pydantic_model_as_mapping(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    try:
        return dict(vars(value))
    except TypeError:
        msg = (
            f"Dependency value of type {type(value).__name__!r} is not a mapping and "
            "exposes no attributes to merge."
        )
        raise DIComposeInvalidArgumentError(msg) from None


def merge_dependencies(prefilled: Mapping[Any, Any], supplied: object) -> dict[Any, Any]:
    """Merge pre-filled values with caller-supplied ones; the caller wins on collision."""
    return {**prefilled, **dependencies_as_mapping(supplied)}


__all__ = ["EMPTY_DEPENDENCIES", "dependencies_as_mapping", "merge_dependencies"]
