from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar, overload

from dicompose._internal.composition import ComposedInstance, ListComposition
from dicompose._internal.design import Design, is_design
from dicompose._internal.plan import DesignList, design_lists
from dicompose.exceptions import DIComposeInvalidArgumentError

DepsT = TypeVar("DepsT")


def create_list_composed_instance(design_list: DesignList, deps: Any) -> ComposedInstance:
    """Create every design in order and merge the instances behind one facade.

    The plan is taken from ``design_list`` and only built on its first use.
    A failing setup aborts the whole call; earlier instances are dropped.

    Args:
        design_list: Interned design list of the composed design.
        deps: Dependency value shared by all designs.

    """
    instances = [item.create(deps) for item in design_list.designs]
    plan = design_list.plan_for(instances)
    return ComposedInstance(ListComposition(instances, plan))


def create_map_composed_instance(
    designs: Mapping[str, Design[Any, Any]],
    deps: Any,
) -> dict[str, Any]:
    """Create every design in mapping order and nest the instances under their names."""
    return {name: item.create(deps) for name, item in designs.items()}


def _check_designs(values: Any, *, where: str) -> None:
    for value in values:
        if not is_design(value):
            msg = (
                f"compose() expects designs, got {type(value).__name__!r} in the {where}; "
                "wrap setup callables with design() first."
            )
            raise DIComposeInvalidArgumentError(msg)


@overload
def compose(designs: Sequence[Design[DepsT, Any]], /) -> Design[DepsT, ComposedInstance]: ...


@overload
def compose(designs: Mapping[str, Design[DepsT, Any]], /) -> Design[DepsT, dict[str, Any]]: ...


def compose(designs: Any, /) -> Design[Any, Any]:
    """Compose a list or a mapping of designs into a single design.

    A list (or any non-string sequence) is merged: every design is created with
    the same dependencies and the result is a ``ComposedInstance`` exposing the
    union of their keys. On collisions the last design in the list that defines
    a key wins. Reads and writes go through to the winning instance, so
    properties stay live. The merge plan is computed once per list object and
    shared by every ``create`` call and by every ``compose`` of that same list.

    A mapping is nested: the result is a dict with the same keys holding each
    created instance unchanged.

    Args:
        designs: Sequence of designs to merge, or mapping of names to designs.

    Returns:
        A design whose ``create`` builds the merged or nested instance.

    Raises:
        DIComposeInvalidArgumentError: If ``designs`` is neither a sequence nor
            a mapping, or contains something other than a ``Design``.

    Examples:
        .. code-block:: python

            Utilities = compose([Logger, Timer])
            util = Utilities.create({"prefix": "INFO"})

            Servers = compose({"http": Http, "ws": Ws})
            servers = Servers.create({"port": 3000})
            servers["http"]

    """
    if isinstance(designs, Mapping):
        _check_designs(designs.values(), where="mapping")
        nested = dict(designs)

        def _setup_map(deps: Any) -> dict[str, Any]:
            return create_map_composed_instance(nested, deps)

        return Design(_setup_map)

    if isinstance(designs, Sequence) and not isinstance(designs, (str, bytes, bytearray)):
        _check_designs(designs, where="sequence")
        design_list = design_lists.intern(designs)

        def _setup_list(deps: Any) -> ComposedInstance:
            return create_list_composed_instance(design_list, deps)

        return Design(_setup_list)

    msg = f"Invalid designs argument to compose(): expected a sequence or a mapping, got {type(designs).__name__!r}."
    raise DIComposeInvalidArgumentError(msg)


__all__ = ["compose", "create_list_composed_instance", "create_map_composed_instance"]
