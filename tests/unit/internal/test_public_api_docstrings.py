from __future__ import annotations

import inspect

import pytest

import dicompose
from dicompose import Design, compose, design
from dicompose.exceptions import (
    DIComposeError,
    DIComposeInvalidArgumentError,
    DIComposeReadOnlyPropertyError,
)


@pytest.mark.parametrize(
    "documented",
    [
        design,
        compose,
        Design,
        Design.create,
        Design.with_,
        Design.extend,
        dicompose.ComposedInstance,
        dicompose.as_dict,
        dicompose.is_design,
        DIComposeError,
        DIComposeInvalidArgumentError,
        DIComposeReadOnlyPropertyError,
    ],
    ids=lambda obj: obj.__qualname__,
)
def test_public_api_is_documented(documented: object) -> None:
    assert inspect.getdoc(documented)


@pytest.mark.parametrize("combinator", [design, compose, Design.with_])
def test_combinators_document_their_errors(combinator: object) -> None:
    docstring = inspect.getdoc(combinator) or ""

    assert "Raises:" in docstring
    assert "DIComposeInvalidArgumentError" in docstring


def test_every_export_is_in_the_documented_surface() -> None:
    assert sorted(dicompose.__all__) == [
        "ComposedInstance",
        "DIComposeError",
        "DIComposeInvalidArgumentError",
        "DIComposeReadOnlyPropertyError",
        "Design",
        "as_dict",
        "compose",
        "design",
        "is_design",
    ]


def test_composed_instance_defines_no_public_attributes() -> None:
    public_names = [name for name in vars(dicompose.ComposedInstance) if not name.startswith("_")]

    assert public_names == []
