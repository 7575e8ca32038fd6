from __future__ import annotations

import importlib
import warnings
from collections.abc import Mapping
from typing import Any, cast

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_base_model(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_model = getattr(module, "BaseModel", None)
    if isinstance(base_model, type):
        return base_model
    return None


def _load_pydantic_v1_base() -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        return _load_base_model("pydantic.v1")


def _build_model_bases() -> tuple[type[Any], ...]:
    seen_ids: set[int] = set()
    bases: list[type[Any]] = []

    for candidate in (_load_base_model("pydantic"), _load_pydantic_v1_base()):
        if candidate is None:
            continue
        candidate_id = id(candidate)
        if candidate_id in seen_ids:
            continue
        seen_ids.add(candidate_id)
        bases.append(candidate)

    return tuple(bases)


MODEL_BASES: tuple[type[Any], ...] = _build_model_bases()


def is_pydantic_model(candidate: object) -> bool:
    """Return whether a value is an instance of a supported Pydantic model.

    Both ``pydantic.BaseModel`` (v2) and legacy ``pydantic.v1.BaseModel`` are
    recognized when available. ``pydantic_settings.BaseSettings`` subclasses
    ``BaseModel`` and is covered as well. If Pydantic is not installed, this
    function returns ``False`` for every candidate.

    Args:
        candidate: Object to test.

    """
    return any(isinstance(candidate, base) for base in MODEL_BASES)


def pydantic_model_as_mapping(model: object) -> Mapping[str, Any]:
    """Return the field values of a Pydantic model without re-validating them.

    The conversion is shallow: nested models and other field values are kept
    as they are. Fields come from ``model_fields`` on Pydantic v2 models and
    ``__fields__`` on v1 models.

    Args:
        model: Pydantic model instance.

    """
    model_type = cast("Any", type(model))
    if hasattr(model_type, "model_fields"):
        fields = model_type.model_fields
    else:
        fields = model_type.__fields__
    return {name: getattr(model, name) for name in fields}


__all__ = [
    "MODEL_BASES",
    "is_pydantic_model",
    "pydantic_model_as_mapping",
]
