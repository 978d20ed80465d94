"""
Reference tracking for one inspect() call.

A Ref is the per-identity bookkeeping slot (active visits, lazily assigned
display id, circular latch) and doubles as the `[circular *N]`
placeholder node. RefTracker maps object identities to slots.

The tracker lives exactly as long as one top-level call: ids restart at 1 for
every call and nothing is cached across calls.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import weakref

from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .nodes import INDENT, Node, _pad

CIRCULAR_TEMPLATE = "[circular *]"


# Classes --------------------------------------------------------------------------------------------------------------

class Ref(Node):
    """
    Reference slot of one object identity, rendered as `[circular *N]`.

    `count` is the number of active (not yet finished) visits of the object on
    the current traversal path. `circular` is set once the object is re-entered
    while `count > 0` and never reset. `closed` tells whether a cycle closed on
    the innermost active visit, so only that visit's rendering gets the
    `<ref *N>` prefix.
    """
    __slots__ = ("tracker", "circular", "stylize", "_id", "_visits")

    def __init__(self, tracker: "RefTracker", depth: int, opts: Any) -> None:
        super().__init__(depth, len(CIRCULAR_TEMPLATE), opts)
        self.tracker = tracker
        self.circular = False
        self.stylize = opts.stylize
        self._id: int | None = None
        self._visits: list[bool] = []

    @property
    def id(self) -> int:
        """Display id, assigned by the tracker the first time it is needed."""
        return self.tracker.id_of(self)

    @property
    def count(self) -> int:
        return len(self._visits)

    @property
    def closed(self) -> bool:
        """True if a cycle closed on the innermost active visit; the latch when none is active."""
        return self._visits[-1] if self._visits else self.circular

    def increment(self) -> int:
        self._visits.append(False)
        return self.count

    def decrement(self) -> int:
        self._visits.pop()
        return self.count

    def mark_circular(self) -> None:
        self.circular = True
        if self._visits:
            self._visits[-1] = True

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        text = f"[circular *{self.id}]"
        value = _pad(self.stylize(text, "special"), len(text), pad)
        return value if offset else INDENT * indent + value


class RefTracker:
    """
    Identity-keyed registry of reference slots for a single call.

    Keys are id() values. Objects that support weak references are held weakly,
    so tracking never keeps them alive and a recycled id() of a dead object is
    detected on lookup. Objects that cannot be weakly referenced (list, dict,
    tuple...) are pinned until the tracker is discarded at the end of the call,
    which keeps their id() from being recycled mid-call.

    Examples:
        >>> tracker = RefTracker(opts)
        >>> ref = tracker.ensure(obj)
        >>> tracker.get(obj) is ref
        True
    """

    def __init__(self, opts: Any) -> None:
        self.opts = opts
        self._refs: dict[int, tuple[Any, Ref]] = {}
        self._next_id = 1

    def get(self, obj: Any) -> Ref | None:
        """Return the slot of obj, or None if obj has not been seen in this call."""
        key = id(obj)
        entry = self._refs.get(key)
        if entry is None:
            return None

        holder, ref = entry
        target = holder() if isinstance(holder, weakref.ref) else holder
        if target is not obj:
            # id() recycled after the original object died
            del self._refs[key]
            return None
        return ref

    def ensure(self, obj: Any, depth: int = 0) -> Ref:
        """Return the slot of obj, creating it on first sight."""
        ref = self.get(obj)
        if ref is None:
            ref = Ref(self, depth, self.opts)
            self.set(obj, ref)
        return ref

    def set(self, obj: Any, ref: Ref) -> None:
        """Bind obj to ref, e.g. a substitute value to the slot of the original."""
        try:
            holder = weakref.ref(obj)
        except TypeError:
            holder = obj
        self._refs[id(obj)] = (holder, ref)

    def id_of(self, ref: Ref) -> int:
        """Return the display id of ref, assigning the next free one on first use."""
        if ref._id is None:
            ref._id = self._next_id
            self._next_id += 1
        return ref._id
