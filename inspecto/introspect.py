"""
Runtime introspection helpers.

Facts that ordinary iteration does not expose: future settlement state and
result, raw addresses of opaque native handles, and the named attributes
attached to instances (including subclasses of indexed collections).
"""

# Standard library -----------------------------------------------------------------------------------------------------
import ctypes

from enum import Enum, unique
from typing import Any


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class FutureState(str, Enum):
    """Settlement state of a future."""
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Futures --------------------------------------------------------------------------------------------------------------

def future_state(future: Any) -> FutureState:
    """
    Read the settlement state of an asyncio or concurrent.futures Future.

    Uses the private `_state` / `_exception` fields both implementations share,
    so asking does not mark an asyncio exception as retrieved. Falls back to the
    public API for other future-likes.
    """
    state = getattr(future, "_state", None)
    if isinstance(state, str):
        if state.startswith("CANCELLED"):
            return FutureState.CANCELLED
        if state == "FINISHED":
            if getattr(future, "_exception", None) is not None:
                return FutureState.REJECTED
            return FutureState.FULFILLED
        return FutureState.PENDING

    if future.cancelled():
        return FutureState.CANCELLED
    if not future.done():
        return FutureState.PENDING
    return FutureState.REJECTED if future.exception() is not None else FutureState.FULFILLED


def future_result(future: Any) -> Any:
    """
    Return the value a settled future holds: its exception when rejected,
    its result when fulfilled, None otherwise.
    """
    state = future_state(future)
    if state is FutureState.REJECTED:
        if hasattr(future, "_exception"):
            return future._exception
        return future.exception()
    if state is FutureState.FULFILLED:
        if hasattr(future, "_result"):
            return future._result
        return future.result()
    return None


# External handles -----------------------------------------------------------------------------------------------------

def _capsule_api():
    pythonapi = getattr(ctypes, "pythonapi", None)
    if pythonapi is None:
        return None, None
    get_name = ctypes.PYFUNCTYPE(ctypes.c_char_p, ctypes.py_object)(("PyCapsule_GetName", pythonapi))
    get_pointer = ctypes.PYFUNCTYPE(ctypes.c_void_p, ctypes.py_object, ctypes.c_char_p)(
        ("PyCapsule_GetPointer", pythonapi)
    )
    return get_name, get_pointer


_CAPSULE_GET_NAME, _CAPSULE_GET_POINTER = _capsule_api()


def external_address(value: Any) -> int | None:
    """
    Return the raw address wrapped by a capsule or ctypes pointer.

    NULL pointers yield 0. Returns None when the address cannot be read.

    Examples:
        >>> external_address(ctypes.c_void_p(0x1000))
        4096
    """
    if isinstance(value, ctypes.c_void_p):
        return value.value or 0
    if isinstance(value, ctypes._Pointer):
        return ctypes.cast(value, ctypes.c_void_p).value or 0
    if _CAPSULE_GET_POINTER is None:
        return None
    try:
        name = _CAPSULE_GET_NAME(value)
        return _CAPSULE_GET_POINTER(value, name) or 0
    except (ctypes.ArgumentError, TypeError, ValueError):
        return None


# Attributes -----------------------------------------------------------------------------------------------------------

def instance_dict(value: Any) -> dict | None:
    """
    Return the instance __dict__ without going through a custom __getattribute__
    or __getattr__, or None if the instance has none.
    """
    try:
        d = object.__getattribute__(value, "__dict__")
    except (AttributeError, TypeError):
        return None
    return d if isinstance(d, dict) else None


def slot_names(value: Any) -> list[str]:
    """Collect __slots__ names declared across the MRO, in definition order."""
    names: list[str] = []
    for cls in reversed(type(value).__mro__):
        slots = vars(cls).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return names


def own_attr_names(value: Any, include_private: bool = True) -> list[str]:
    """
    List the names of attributes stored on the instance itself.

    Instance __dict__ entries come first in insertion order, followed by set
    or unset __slots__ names. Dunder names are never listed. For builtin
    collections (list, bytes, array...) this is empty; for their subclasses it
    yields the extra non-index attributes.

    Examples:
        >>> class Tagged(list): pass
        >>> t = Tagged([1, 2]); t.label = "x"
        >>> own_attr_names(t)
        ['label']
    """
    names: list[str] = []
    d = instance_dict(value)
    if d is not None:
        names.extend(k for k in d if isinstance(k, str))
    for name in slot_names(value):
        if name not in names:
            names.append(name)

    return [
        n for n in names
        if not (n.startswith("__") and n.endswith("__"))
        and (include_private or not n.startswith("_"))
    ]


def read_attr(value: Any, name: str) -> Any:
    """
    Read one own attribute.

    __dict__ entries are read directly from the dict; slots go through their
    descriptor. Raises AttributeError for an unset slot, and whatever a raising
    descriptor raises.
    """
    d = instance_dict(value)
    if d is not None and name in d:
        return d[name]
    return getattr(value, name)
