class DIComposeError(Exception):
    """Represent a base class for all dicompose-specific failures.

    Catch this type when you want to handle any dicompose error path without
    matching each concrete exception class individually. Exceptions raised by
    setup functions are never wrapped and do not derive from this class.
    """


class DIComposeInvalidArgumentError(DIComposeError):
    """Signal a malformed ``design``, ``compose`` or ``with_`` call.

    Raised at construction time, never deferred to ``create``. Typical
    triggers are ``design(parent, child)`` where ``child`` is neither a
    callable nor a ``Design``, ``design`` called with a ``Design`` and no child,
    and ``compose`` given something other than a sequence or a mapping of
    designs.

    Typical fixes include wrapping plain setup functions with ``design`` before
    composing them and passing a list or dict of designs to ``compose``.
    """


class DIComposeReadOnlyPropertyError(DIComposeError, AttributeError):
    """Signal a write through a composed instance that cannot be routed.

    Raised when the winning instance exposes the key as a property without a
    setter, when the owning object rejects attribute assignment (for example a
    frozen dataclass or a read-only mapping), when an unknown key is assigned
    on a composition with no instances, and when a key is deleted.

    Subclasses ``AttributeError`` so ``setattr`` callers see the same failure
    shape as for a plain read-only property.
    """
