from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, overload

from dicompose._internal.dependencies import (
    EMPTY_DEPENDENCIES,
    dependencies_as_mapping,
    merge_dependencies,
)
from dicompose._internal.setup import normalize_setup
from dicompose.exceptions import DIComposeInvalidArgumentError

DepsT = TypeVar("DepsT")
InstanceT = TypeVar("InstanceT")
ParentT = TypeVar("ParentT")

_MISSING_CHILD: Any = object()
_MISSING_DEPENDENCIES: Any = object()


@dataclass(frozen=True, slots=True)
class Design(Generic[DepsT, InstanceT]):
    """Describe how to build an instance from a dependency value.

    A design is an immutable, reusable factory. It holds a single setup
    callable and derives three operations from it: ``create`` builds an
    instance, ``with_`` pre-fills part of the dependencies and ``extend``
    widens the declared dependency type. Designs are combined with ``design``
    and ``compose``; they are never compared or inspected by the engine.

    Build designs with ``design`` rather than instantiating this class
    directly so zero-argument setups are adapted.

    Examples:
        .. code-block:: python

            Logger = design(lambda deps: {"log": lambda m: f"[{deps['prefix']}] {m}"})
            logger = Logger.create({"prefix": "INFO"})
            logger["log"]("Hello")  # "[INFO] Hello"

    """

    setup: Callable[[DepsT], InstanceT]

    def create(self, deps: DepsT = _MISSING_DEPENDENCIES, /, **overrides: Any) -> InstanceT:
        """Create a new instance from the given dependencies.

        Every call runs the setup again; instances are never cached or shared.

        Args:
            deps: Dependency value handed to the setup unchanged. May be omitted
                when the design needs no dependencies, in which case an empty
                read-only mapping is passed. An explicit ``None`` is passed
                through like any other value.
            **overrides: Keyword dependencies merged over ``deps``. When given,
                the setup receives a new dict instead of ``deps`` itself.

        Returns:
            The instance returned by the setup.

        """
        dependencies: Any = EMPTY_DEPENDENCIES if deps is _MISSING_DEPENDENCIES else deps
        if overrides:
            dependencies = merge_dependencies(dependencies_as_mapping(dependencies), overrides)
        return self.setup(dependencies)
        return self.setup(dependencies)

    def with_(
        self,
        values: Mapping[str, Any] | object | None = None,
        /,
        **kwargs: Any,
    ) -> Design[Any, InstanceT]:
        """Return a design with some dependency values pre-filled.

        The pre-filled values are snapshotted now. At ``create`` time they are
        merged first and the caller-supplied dependencies second, so a caller
        that still passes a pre-filled key overrides it. Chained calls behave
        like a single call with the later values winning.

        Args:
            values: Mapping, Pydantic model or dataclass instance with the
                values to pre-fill.
            **kwargs: Additional values merged over ``values``.

        Returns:
            A new design requiring only the remaining dependencies.

        Raises:
            DIComposeInvalidArgumentError: If ``values`` exposes no keys.

        Examples:
            .. code-block:: python

                Database = design(lambda deps: f"{deps['host']}:{deps['port']}")
                Local = Database.with_(host="localhost")
                Local.create({"port": 5432})  # "localhost:5432"

        """
        prefilled = dict(dependencies_as_mapping(values))
        prefilled.update(kwargs)
        setup = self.setup

        def _setup_with_prefilled(deps: Any) -> InstanceT:
            return setup(merge_dependencies(prefilled, deps))

        return Design(_setup_with_prefilled)

    def extend(self) -> Design[Any, InstanceT]:
        """Return a design declaring a wider dependency type.

        The runtime behaviour is unchanged and extra keys are neither validated
        nor consumed. Annotate the result to tell callers and child designs
        which additional keys are expected:

        .. code-block:: python

            StampedLoggerDeps = TypedDict("StampedLoggerDeps", {"prefix": str, "stamp": bool})
            Base: Design[StampedLoggerDeps, Logger] = Logger.extend()

        """
        setup = self.setup

        def _setup_ignoring_extra(deps: Any) -> InstanceT:
            return setup(deps)

        return Design(_setup_ignoring_extra)


def is_design(candidate: object) -> bool:
    """Return whether a value is a ``Design``."""
    return isinstance(candidate, Design)


@overload
def design(setup: Callable[[DepsT], InstanceT], /) -> Design[DepsT, InstanceT]: ...


@overload
def design(setup: Callable[[], InstanceT], /) -> Design[Any, InstanceT]: ...


@overload
def design(
    parent: Design[DepsT, ParentT],
    child: Callable[[ParentT], InstanceT],
    /,
) -> Design[DepsT, InstanceT]: ...


@overload
def design(
    parent: Design[DepsT, ParentT],
    child: Design[Any, InstanceT],
    /,
) -> Design[DepsT, InstanceT]: ...


def design(setup_or_parent: Any, child: Any = _MISSING_CHILD, /) -> Design[Any, Any]:
    """Define a design from a setup function, or from a parent design and a child.

    ``design(setup)`` wraps a setup callable. The setup receives the dependency
    value; zero-argument callables are called without it. Usable as a
    decorator.

    ``design(parent, child)`` first creates the parent with the same
    dependency value. A callable ``child`` receives the parent instance and its
    result becomes the instance; a zero-argument child is called after the
    parent is created. A ``Design`` child ignores the parent instance and is
    created with the same dependency value; the parent is still created for
    its side effects.

    Args:
        setup_or_parent: Setup callable, or the parent design.
        child: Child setup receiving the parent instance, or a child design.

    Returns:
        A new immutable design.

    Raises:
        DIComposeInvalidArgumentError: If the arguments do not match one of the
            two forms. Raised immediately, not at ``create`` time.

    Examples:
        .. code-block:: python

            Cache = design(lambda: {})
            Documents = design(Cache, lambda store: DocumentStore(store, prefix="doc:"))

    """
    if child is _MISSING_CHILD:
        if is_design(setup_or_parent):
            msg = "design() got a Design without a child; pass a setup callable or a parent and a child."
            raise DIComposeInvalidArgumentError(msg)
        if not callable(setup_or_parent):
            msg = f"design() expects a setup callable, got {type(setup_or_parent).__name__!r}."
            raise DIComposeInvalidArgumentError(msg)
        return Design(normalize_setup(setup_or_parent))

    if not is_design(setup_or_parent):
        msg = (
            "design(parent, child) expects a Design as parent, "
            f"got {type(setup_or_parent).__name__!r}."
        )
        raise DIComposeInvalidArgumentError(msg)
    parent: Design[Any, Any] = setup_or_parent

    if is_design(child):
        child_design: Design[Any, Any] = child

        def _setup_sequenced(deps: Any) -> Any:
            parent.create(deps)
            return child_design.create(deps)

        return Design(_setup_sequenced)

    if callable(child):
        child_setup = normalize_setup(child)

        def _setup_from_parent(deps: Any) -> Any:
            return child_setup(parent.create(deps))

        return Design(_setup_from_parent)

    msg = f"Invalid child argument to design(): expected a callable or a Design, got {type(child).__name__!r}."
    raise DIComposeInvalidArgumentError(msg)


__all__ = ["Design", "design", "is_design"]
