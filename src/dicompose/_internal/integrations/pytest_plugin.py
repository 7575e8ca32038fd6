from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

import pytest

from dicompose._internal.dependencies import dependencies_as_mapping, merge_dependencies
from dicompose._internal.design import Design

InstanceT = TypeVar("InstanceT")

_DEPENDENCIES_MARKER = "dicompose_dependencies"


class DesignFactory(Protocol):
    """Callable returned by the ``dicompose_create`` fixture."""

    def __call__(self, design: Design[Any, InstanceT], /, **overrides: Any) -> InstanceT: ...


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``dicompose_dependencies`` marker."""
    config.addinivalue_line(
        "markers",
        f"{_DEPENDENCIES_MARKER}(**values): dependency values merged over the "
        "dicompose_dependencies fixture for this test",
    )


@pytest.fixture()
def dicompose_dependencies() -> Mapping[str, Any]:
    """Fixture hook for the dependency value shared by a test.

    Override this fixture in your own test suite to provide settings or test
    doubles. The default is an empty mapping.

    """
    return {}


@pytest.fixture()
def dicompose_create(
    request: pytest.FixtureRequest,
    dicompose_dependencies: Mapping[str, Any],
) -> DesignFactory:
    """Return a callable creating designs with the test's dependency value.

    Values from the closest ``@pytest.mark.dicompose_dependencies(...)`` marker
    are merged over ``dicompose_dependencies``; keyword overrides passed to the
    returned callable are merged last.

    """
    dependencies: Mapping[str, Any] = dicompose_dependencies
    marker = request.node.get_closest_marker(_DEPENDENCIES_MARKER)
    if marker is not None:
        dependencies = merge_dependencies(dependencies_as_mapping(dependencies), marker.kwargs)

    def _create(design: Design[Any, InstanceT], /, **overrides: Any) -> InstanceT:
        return design.create(dependencies, **overrides)

    return _create


__all__ = [
    "DesignFactory",
    "dicompose_create",
    "dicompose_dependencies",
    "pytest_configure",
]
