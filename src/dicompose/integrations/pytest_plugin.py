"""Pytest plugin exposing design fixtures.

Enable it from a ``conftest.py``::

    pytest_plugins = ["dicompose.integrations.pytest_plugin"]

"""

from dicompose._internal.integrations.pytest_plugin import (
    DesignFactory,
    dicompose_create,
    dicompose_dependencies,
    pytest_configure,
)

__all__ = [
    "DesignFactory",
    "dicompose_create",
    "dicompose_dependencies",
    "pytest_configure",
]
