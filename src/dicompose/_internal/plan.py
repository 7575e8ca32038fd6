"""Composition plans for list-mode ``compose``.

A plan maps every key exposed by a list-composed instance to the instance
that owns it. Plans are structural: they are derived once per design list from
the first batch of instances and reused for every later ``create``; accessors
are still evaluated on each read.
"""

from __future__ import annotations

import logging
import types
import weakref
from abc import ABC
from collections import namedtuple
from collections.abc import Hashable, Iterator, Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dicompose._internal.design import Design

logger = logging.getLogger(__name__)

# Classes from these modules are the base prototype and contribute no keys.
_BASE_CLASS_MODULES = frozenset(
    {"builtins", "abc", "typing", "collections", "collections.abc", "_collections_abc"},
)

# Set on user classes by ABCMeta, Protocol and runtime_checkable.
_CLASS_BOOKKEEPING = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})

# namedtuple fields define __set__ but always reject writes.
_TUPLE_FIELD_TYPE: type[Any] = type(namedtuple("_Pair", ["first"]).first)  # noqa: PYI024


class KeyedInstance(ABC):  # noqa: B024
    """Virtual base class for non-mapping instances that expose their keys as items.

    Registered classes are reflected like mutable mappings: iteration yields the
    keys and reads and writes use item access.
    """


class PropertyKind(Enum):
    """Classify how a planned key is read from and written to its owner."""

    ITEM = "item"
    """Item of a mapping or keyed instance; read and written with item access."""

    DATA = "data"
    """Plain value: instance attribute, slot or class attribute."""

    ACCESSOR = "accessor"
    """Data descriptor such as ``property``; reads call its getter every time."""

    METHOD = "method"
    """Non-data descriptor such as a function; reads bind it to the owner."""


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """Owner and access rules for one key of a composed instance."""

    index: int
    kind: PropertyKind
    descriptor: Any = None
    owner_class: type[Any] | None = None
    writable: bool = True


@dataclass(frozen=True, slots=True)
class CompositionPlan:
    """Ordered key to owner mapping for a list of instances."""

    entries: Mapping[Hashable, PlanEntry]

    @classmethod
    def build(cls, instances: Sequence[Any]) -> CompositionPlan:
        """Derive a plan from instances given in composition order.

        Later instances win on collisions. Within a single instance Python's
        attribute precedence applies: class data descriptors shadow instance
        attributes, which shadow the rest of the class hierarchy.

        Args:
            instances: Instances created from the design list, in list order.

        """
        entries: dict[Hashable, PlanEntry] = {}
        for index, instance in enumerate(instances):
            for key, entry in _iter_instance_entries(index, instance):
                entries[key] = entry
        logger.debug(
            "Built composition plan for %d instance(s) with %d key(s)",
            len(instances),
            len(entries),
        )
        return cls(entries=entries)


def _iter_instance_entries(index: int, instance: Any) -> Iterator[tuple[Hashable, PlanEntry]]:
    assignable = accepts_attribute_assignment(instance)

    if is_keyed(instance):
        writable = accepts_item_assignment(instance)
        items = list(instance)
        for key in items:
            yield key, PlanEntry(index=index, kind=PropertyKind.ITEM, writable=writable)
        if not isinstance(instance, Mapping):
            return
        # Methods of user-defined mapping classes; items win on collision.
        item_keys = set(items)
        for key, entry in _iter_class_entries(index, instance, assignable=assignable):
            if key not in item_keys:
                yield key, entry
        return

    class_entries = dict(_iter_class_entries(index, instance, assignable=assignable))

    for key in _instance_dict(instance):
        if not isinstance(key, str) or _is_dunder(key):
            continue
        class_entry = class_entries.get(key)
        if class_entry is not None and class_entry.kind is PropertyKind.ACCESSOR:
            yield key, class_entry
        else:
            yield key, PlanEntry(index=index, kind=PropertyKind.DATA, writable=assignable)
        class_entries.pop(key, None)

    yield from class_entries.items()


def _iter_class_entries(
    index: int,
    instance: Any,
    *,
    assignable: bool,
) -> Iterator[tuple[str, PlanEntry]]:
    seen: set[str] = set()
    for owner_class in type(instance).__mro__:
        if _is_base_class(owner_class):
            continue
        for key, attribute in vars(owner_class).items():
            if key in seen or _is_dunder(key) or key in _CLASS_BOOKKEEPING:
                continue
            seen.add(key)
            entry = _classify_class_attribute(
                index,
                instance,
                key,
                attribute,
                owner_class,
                assignable=assignable,
            )
            if entry is not None:
                yield key, entry


def _classify_class_attribute(
    index: int,
    instance: Any,
    key: str,
    attribute: Any,
    owner_class: type[Any],
    *,
    assignable: bool,
) -> PlanEntry | None:
    if isinstance(attribute, types.MemberDescriptorType):
        if not hasattr(instance, key):
            return None
        return PlanEntry(
            index=index,
            kind=PropertyKind.DATA,
            owner_class=owner_class,
            writable=not _is_frozen_dataclass(instance),
        )
    if isinstance(attribute, property):
        return PlanEntry(
            index=index,
            kind=PropertyKind.ACCESSOR,
            descriptor=attribute,
            owner_class=owner_class,
            writable=attribute.fset is not None,
        )
    attribute_type = type(attribute)
    if not hasattr(attribute_type, "__get__"):
        return PlanEntry(
            index=index,
            kind=PropertyKind.DATA,
            owner_class=owner_class,
            writable=assignable,
        )
    if hasattr(attribute_type, "__set__") or hasattr(attribute_type, "__delete__"):
        return PlanEntry(
            index=index,
            kind=PropertyKind.ACCESSOR,
            descriptor=attribute,
            owner_class=owner_class,
            writable=(
                hasattr(attribute_type, "__set__")
                and not isinstance(attribute, _TUPLE_FIELD_TYPE)
            ),
        )
    return PlanEntry(
        index=index,
        kind=PropertyKind.METHOD,
        descriptor=attribute,
        owner_class=owner_class,
        writable=assignable,
    )


def is_keyed(instance: Any) -> bool:
    """Return whether an instance exposes its keys through iteration and item access."""
    return isinstance(instance, (Mapping, KeyedInstance))


def accepts_item_assignment(instance: Any) -> bool:
    """Return whether items can be assigned on a keyed instance."""
    return isinstance(instance, (MutableMapping, KeyedInstance))


def accepts_attribute_assignment(instance: Any) -> bool:
    """Return whether new instance attributes can be set on an object."""
    return hasattr(instance, "__dict__") and not _is_frozen_dataclass(instance)


def _instance_dict(instance: Any) -> Mapping[str, Any]:
    try:
        return vars(instance)
    except TypeError:
        return {}


def _is_frozen_dataclass(instance: Any) -> bool:
    params = getattr(type(instance), "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def _is_base_class(owner_class: type[Any]) -> bool:
    return owner_class.__module__ in _BASE_CLASS_MODULES


def _is_dunder(key: str) -> bool:
    return key.startswith("__") and key.endswith("__")


class DesignList:
    """Immutable snapshot of a composed design list that owns its plan.

    ``plan`` stays ``None`` until the first ``create``. Writes are idempotent:
    two racing threads compute the same plan and either result may be kept.
    """

    __slots__ = ("__weakref__", "designs", "plan")

    def __init__(self, designs: Sequence[Design[Any, Any]]) -> None:
        self.designs: tuple[Design[Any, Any], ...] = tuple(designs)
        self.plan: CompositionPlan | None = None

    def plan_for(self, instances: Sequence[Any]) -> CompositionPlan:
        """Return the cached plan, building it from ``instances`` on first use."""
        plan = self.plan
        if plan is None:
            plan = CompositionPlan.build(instances)
            self.plan = plan
        return plan

    def matches(self, designs: Sequence[Design[Any, Any]]) -> bool:
        """Return whether ``designs`` holds the same design objects in the same order."""
        return len(self.designs) == len(designs) and all(
            own is other for own, other in zip(self.designs, designs)
        )

    def __len__(self) -> int:
        return len(self.designs)

    def __repr__(self) -> str:
        return f"DesignList(designs={len(self.designs)}, planned={self.plan is not None})"


class DesignListRegistry:
    """Weak, identity-keyed table from caller sequences to ``DesignList`` objects.

    Entries disappear once every composed design using a ``DesignList`` is
    garbage-collected. Because Python lists cannot be weakly referenced, the
    caller's sequence is identified by ``id`` and the match is confirmed by
    element identity, which guards against recycled ids.
    """

    def __init__(self) -> None:
        self._design_lists: weakref.WeakValueDictionary[int, DesignList] = (
            weakref.WeakValueDictionary()
        )

    def intern(self, designs: Sequence[Design[Any, Any]]) -> DesignList:
        """Return the ``DesignList`` for ``designs``, creating it when missing."""
        key = id(designs)
        design_list = self._design_lists.get(key)
        if design_list is not None and design_list.matches(designs):
            return design_list
        design_list = DesignList(designs)
        self._design_lists[key] = design_list
        return design_list

    def __len__(self) -> int:
        return len(self._design_lists)


design_lists = DesignListRegistry()
"""Process-wide registry used by ``compose``."""


__all__ = [
    "CompositionPlan",
    "DesignList",
    "DesignListRegistry",
    "KeyedInstance",
    "PlanEntry",
    "PropertyKind",
    "accepts_attribute_assignment",
    "accepts_item_assignment",
    "design_lists",
    "is_keyed",
]
