from __future__ import annotations

from collections.abc import Hashable, Iterator, Sequence
from typing import Any

from dicompose._internal.plan import (
    CompositionPlan,
    KeyedInstance,
    PlanEntry,
    PropertyKind,
    accepts_attribute_assignment,
    accepts_item_assignment,
    is_keyed,
)
from dicompose.exceptions import DIComposeReadOnlyPropertyError


class ListComposition:
    """Route key reads and writes to the instance that owns each key.

    Holds the instances of one list-mode ``create`` call together with the
    shared plan. Nothing is copied: every read goes to the owning instance, so
    properties stay live and external mutations are observed.
    """

    __slots__ = ("instances", "plan")

    def __init__(self, instances: Sequence[Any], plan: CompositionPlan) -> None:
        self.instances = tuple(instances)
        self.plan = plan

    def get(self, key: Hashable) -> Any:
        """Return the current value of ``key`` from its owning instance.

        Raises:
            KeyError: If the plan does not contain ``key``.

        """
        entry = self.plan.entries[key]
        owner = self.instances[entry.index]
        if entry.kind is PropertyKind.ACCESSOR:
            return entry.descriptor.__get__(owner, type(owner))
        if entry.kind is PropertyKind.ITEM:
            return owner[key]
        return getattr(owner, key)  # type: ignore[arg-type]

    def set(self, key: Hashable, value: Any) -> bool:
        """Assign ``value`` through the owning instance.

        Unknown keys are assigned on the last instance. Returns ``False`` when
        the owner cannot accept the write; nothing is changed in that case.
        """
        entry = self.plan.entries.get(key)
        if entry is None:
            if not self.instances:
                return False
            return _assign_new(self.instances[-1], key, value)

        if not entry.writable:
            return False
        owner = self.instances[entry.index]
        if entry.kind is PropertyKind.ACCESSOR:
            entry.descriptor.__set__(owner, value)
        elif entry.kind is PropertyKind.ITEM:
            owner[key] = value
        else:
            setattr(owner, key, value)  # type: ignore[arg-type]
        return True

    def has(self, key: Hashable) -> bool:
        """Return whether ``key`` is exposed by the composition."""
        return key in self.plan.entries

    def keys(self) -> list[Hashable]:
        """Return the exposed keys in first-seen order."""
        return list(self.plan.entries)

    def entry(self, key: Hashable) -> PlanEntry | None:
        """Return the plan entry for ``key``, if any."""
        return self.plan.entries.get(key)


def _assign_new(owner: Any, key: Hashable, value: Any) -> bool:
    if is_keyed(owner):
        if not accepts_item_assignment(owner):
            return False
        owner[key] = value
        return True
    if not isinstance(key, str) or not accepts_attribute_assignment(owner):
        return False
    setattr(owner, key, value)
    return True


class ComposedInstance:
    """Expose several instances as one object with last-writer-wins keys.

    Instances returned by list-mode ``compose`` are ``ComposedInstance``
    objects. Keys are available both as attributes and as items; iteration,
    ``len`` and ``in`` cover exactly the composed keys. Reads and writes are
    forwarded to the instance that owns the key, so getters and setters keep
    working on the original objects.

    The class defines no public attributes of its own, which keeps composed
    keys such as ``get`` or ``keys`` from being shadowed.

    Examples:
        .. code-block:: python

            Counter = design(lambda: CounterState())
            Labels = design(lambda: {"label": "requests"})
            metrics = compose([Counter, Labels]).create()
            metrics.increment()
            metrics.label  # "requests"

    """

    __slots__ = ("_ComposedInstance__composition",)

    def __init__(self, composition: ListComposition) -> None:
        object.__setattr__(self, "_ComposedInstance__composition", composition)

    def __getattr__(self, name: str) -> Any:
        composition = composition_of(self)
        if not composition.has(name):
            msg = f"{type(self).__name__!r} object has no attribute {name!r}"
            raise AttributeError(msg, name=name, obj=self)
        return composition.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if not composition_of(self).set(name, value):
            msg = f"Cannot set {name!r} on composed instance: the owning instance rejects the write"
            raise DIComposeReadOnlyPropertyError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"Cannot delete {name!r}: composed instances do not support deletion"
        raise DIComposeReadOnlyPropertyError(msg)

    def __getitem__(self, key: Hashable) -> Any:
        return composition_of(self).get(key)

    def __setitem__(self, key: Hashable, value: Any) -> None:
        if not composition_of(self).set(key, value):
            msg = f"Cannot set {key!r} on composed instance: the owning instance rejects the write"
            raise DIComposeReadOnlyPropertyError(msg)

    def __delitem__(self, key: Hashable) -> None:
        msg = f"Cannot delete {key!r}: composed instances do not support deletion"
        raise DIComposeReadOnlyPropertyError(msg)

    def __contains__(self, key: object) -> bool:
        try:
            return composition_of(self).has(key)  # type: ignore[arg-type]
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Hashable]:
        return iter(composition_of(self).keys())

    def __len__(self) -> int:
        return len(composition_of(self).plan.entries)

    def __dir__(self) -> list[str]:
        return [key for key in composition_of(self).keys() if isinstance(key, str)]

    def __repr__(self) -> str:
        keys = ", ".join(repr(key) for key in composition_of(self).keys())
        return f"{type(self).__name__}({keys})"


KeyedInstance.register(ComposedInstance)


def composition_of(instance: ComposedInstance) -> ListComposition:
    """Return the ``ListComposition`` behind a composed instance."""
    return object.__getattribute__(instance, "_ComposedInstance__composition")  # type: ignore[no-any-return]


def as_dict(instance: ComposedInstance) -> dict[Hashable, Any]:
    """Return a snapshot dict of the current values of a composed instance."""
    composition = composition_of(instance)
    return {key: composition.get(key) for key in composition.keys()}


__all__ = ["ComposedInstance", "ListComposition", "as_dict", "composition_of"]
