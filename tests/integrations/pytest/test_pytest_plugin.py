from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from dicompose import Design, design
from dicompose.integrations.pytest_plugin import DesignFactory

pytest_plugins = ["dicompose.integrations.pytest_plugin"]

_Connection: Design[Any, str] = design(lambda deps: f"{deps['host']}:{deps['port']}")


@pytest.fixture()
def dicompose_dependencies() -> Mapping[str, Any]:
    return {"host": "localhost", "port": 5432}


def test_designs_are_created_with_the_dependency_fixture(dicompose_create: DesignFactory) -> None:
    assert dicompose_create(_Connection) == "localhost:5432"


def test_keyword_overrides_are_merged_last(dicompose_create: DesignFactory) -> None:
    assert dicompose_create(_Connection, port=6543) == "localhost:6543"


@pytest.mark.dicompose_dependencies(host="db.test")
def test_marker_values_are_merged_over_the_fixture(dicompose_create: DesignFactory) -> None:
    assert dicompose_create(_Connection) == "db.test:5432"


@pytest.mark.dicompose_dependencies(host="db.test")
def test_overrides_win_over_marker_values(dicompose_create: DesignFactory) -> None:
    assert dicompose_create(_Connection, host="override") == "override:5432"


def test_fixture_value_is_passed_unchanged_without_marker_or_overrides(
    dicompose_create: DesignFactory,
    dicompose_dependencies: Mapping[str, Any],
) -> None:
    Received = design(lambda deps: deps)

    assert dicompose_create(Received) is dicompose_dependencies


@pytest.mark.dicompose_dependencies(port=1)
class TestClassLevelMarker:
    def test_marker_applies_to_methods(self, dicompose_create: DesignFactory) -> None:
        assert dicompose_create(_Connection) == "localhost:1"


def test_marker_is_registered(pytestconfig: pytest.Config) -> None:
    markers = pytestconfig.getini("markers")

    assert any(line.startswith("dicompose_dependencies") for line in markers)
