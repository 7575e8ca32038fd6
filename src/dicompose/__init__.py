from dicompose._internal.compose import compose
from dicompose._internal.composition import ComposedInstance, as_dict
from dicompose._internal.design import Design, design, is_design
from dicompose.exceptions import (
    DIComposeError,
    DIComposeInvalidArgumentError,
    DIComposeReadOnlyPropertyError,
)

__all__ = [
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
