from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

InstanceT = TypeVar("InstanceT")

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


def accepts_dependencies(setup: Callable[..., Any]) -> bool:
    """Return whether a setup callable takes a positional dependency argument.

    Callables without an inspectable signature (some builtins and C
    extensions) are assumed to take the dependency value.

    Args:
        setup: Setup callable passed to ``design``.

    """
    try:
        signature = inspect.signature(setup)
    except (TypeError, ValueError):
        return True
    return any(parameter.kind in _POSITIONAL_KINDS for parameter in signature.parameters.values())


def normalize_setup(setup: Callable[..., InstanceT]) -> Callable[[Any], InstanceT]:
    """Return a one-argument setup, adapting zero-argument callables."""
    if accepts_dependencies(setup):
        return setup

    def _call_without_dependencies(_deps: Any) -> InstanceT:
        return setup()

    return _call_without_dependencies


__all__ = ["accepts_dependencies", "normalize_setup"]
