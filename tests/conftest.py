"""Shared pytest fixtures for dicompose tests."""

from collections.abc import Iterator

import pytest

from dicompose._internal.plan import CompositionPlan


class PlanBuildCounter:
    """Count ``CompositionPlan.build`` calls while delegating to the real builder."""

    def __init__(self) -> None:
        self.calls = 0


@pytest.fixture()
def plan_builds(monkeypatch: pytest.MonkeyPatch) -> Iterator[PlanBuildCounter]:
    """Instrument plan construction for the duration of a test."""
    counter = PlanBuildCounter()
    original_build = CompositionPlan.build.__func__  # type: ignore[attr-defined]

    def _counting_build(cls: type[CompositionPlan], instances: object) -> CompositionPlan:
        counter.calls += 1
        return original_build(cls, instances)  # type: ignore[no-any-return]

    monkeypatch.setattr(CompositionPlan, "build", classmethod(_counting_build))
    yield counter
