from __future__ import annotations

from typing import Any

import pytest

from dicompose._internal.setup import accepts_dependencies, normalize_setup


class _WithDependencies:
    def __init__(self, deps: Any) -> None:
        self.deps = deps


class _WithoutDependencies:
    def __init__(self) -> None:
        self.created = True


def _keyword_only(*, deps: Any = None) -> Any:
    return deps


@pytest.mark.parametrize(
    ("setup", "expected"),
    [
        (lambda: None, False),
        (lambda deps: deps, True),
        (lambda *args: args, True),
        (_WithDependencies, True),
        (_WithoutDependencies, False),
        (_keyword_only, False),
        ([].append, True),
    ],
)
def test_accepts_dependencies(setup: Any, expected: bool) -> None:
    assert accepts_dependencies(setup) is expected


def test_callables_without_signature_are_assumed_to_take_dependencies() -> None:
    class _Opaque:
        __signature__ = 42

        def __call__(self, deps: Any) -> Any:
            return deps

    assert accepts_dependencies(_Opaque()) is True


def test_normalize_setup_keeps_one_argument_callables() -> None:
    def _setup(deps: Any) -> Any:
        return deps

    assert normalize_setup(_setup) is _setup


def test_normalize_setup_adapts_zero_argument_callables() -> None:
    normalized = normalize_setup(lambda: "value")

    assert normalized({"ignored": True}) == "value"
