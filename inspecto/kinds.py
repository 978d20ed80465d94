"""
Closed value classifier.

Answers "what kind of value is this?" with exactly one member of Kind, so the
walker can dispatch exhaustively instead of probing types ad hoc.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import array
import asyncio
import collections
import collections.abc as abc
import concurrent.futures
import ctypes
import datetime
import inspect
import mmap
import re
import types
import weakref

from decimal import Decimal
from enum import Enum, unique
from fractions import Fraction
from typing import Any

try:
    from multiprocessing.shared_memory import SharedMemory
except ImportError:  # platforms without POSIX/Windows shared memory
    SharedMemory = None

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNSET


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(str, Enum):
    """
    Value categories understood by the walker.

    Terminal kinds become a single leaf. Composite kinds go through reference
    tracking, depth limiting and the override protocol before their builder runs.
    """
    # Terminal
    NONE = "none"
    UNDEFINED = "undefined"
    BOOLEAN = "boolean"
    NUMBER = "number"
    BIGINT = "bigint"
    STRING = "string"
    SYMBOL = "symbol"
    EXTERNAL = "external"
    FUNCTION = "function"
    CLASS = "class"
    MODULE = "module"

    # Composite
    ARRAY = "array"
    DATE = "date"
    REGEXP = "regexp"
    ERROR = "error"
    PROMISE = "promise"
    DICT = "dict"
    MAP = "map"
    SET = "set"
    WEAK_MAP = "weak-map"
    WEAK_SET = "weak-set"
    WEAK_REF = "weak-ref"
    ARRAY_BUFFER = "array-buffer"
    SHARED_ARRAY_BUFFER = "shared-array-buffer"
    TYPED_ARRAY = "typed-array"
    BUFFER = "buffer"
    DATA_VIEW = "data-view"
    OBJECT = "object"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_KINDS


_TERMINAL_KINDS = frozenset({
    Kind.NONE,
    Kind.UNDEFINED,
    Kind.BOOLEAN,
    Kind.NUMBER,
    Kind.BIGINT,
    Kind.STRING,
    Kind.SYMBOL,
    Kind.EXTERNAL,
    Kind.FUNCTION,
    Kind.CLASS,
    Kind.MODULE,
})

_UNDEFINED_VALUES = (Ellipsis, NotImplemented, UNSET)

_DATE_TYPES = (datetime.date, datetime.time, datetime.timedelta)
_FUTURE_TYPES = (asyncio.Future, concurrent.futures.Future)
_POINTER_TYPES = (ctypes.c_void_p, ctypes._Pointer)


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any) -> Kind:
    """
    Classify value into exactly one Kind.

    Order matters: weak proxies are checked by exact type first, since any
    isinstance() check on a dead proxy raises ReferenceError; Enum members come
    before numbers so IntEnum members are symbols; the plain-object fallback
    catches everything else.

    Examples:
        >>> classify(None)
        <Kind.NONE: 'none'>
        >>> classify([1, 2])
        <Kind.ARRAY: 'array'>
        >>> classify({"a": 1})
        <Kind.DICT: 'dict'>
    """
    if type(value) in weakref.ProxyTypes:
        return Kind.WEAK_REF

    if value is None:
        return Kind.NONE
    if any(value is v for v in _UNDEFINED_VALUES):
        return Kind.UNDEFINED
    if isinstance(value, Enum):
        return Kind.SYMBOL
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, (int, float, complex)):
        return Kind.NUMBER
    if isinstance(value, (Decimal, Fraction)):
        return Kind.BIGINT
    if isinstance(value, str):
        return Kind.STRING
    if is_external(value):
        return Kind.EXTERNAL
    if isinstance(value, type):
        return Kind.CLASS
    if isinstance(value, types.ModuleType):
        return Kind.MODULE
    if inspect.isroutine(value):
        return Kind.FUNCTION

    if isinstance(value, (bytes, bytearray)):
        return Kind.BUFFER
    if isinstance(value, (list, tuple, collections.deque)):
        return Kind.ARRAY
    if isinstance(value, _DATE_TYPES):
        return Kind.DATE
    if isinstance(value, re.Pattern):
        return Kind.REGEXP
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, _FUTURE_TYPES):
        return Kind.PROMISE
    if isinstance(value, (weakref.WeakKeyDictionary, weakref.WeakValueDictionary)):
        return Kind.WEAK_MAP
    if isinstance(value, weakref.WeakSet):
        return Kind.WEAK_SET
    if isinstance(value, weakref.ref):
        return Kind.WEAK_REF
    if isinstance(value, mmap.mmap):
        return Kind.ARRAY_BUFFER
    if SharedMemory is not None and isinstance(value, SharedMemory):
        return Kind.SHARED_ARRAY_BUFFER
    if isinstance(value, array.array):
        return Kind.TYPED_ARRAY
    if isinstance(value, memoryview):
        return Kind.DATA_VIEW
    if type(value) is dict:
        return Kind.DICT
    if isinstance(value, abc.Mapping):
        return Kind.MAP
    if isinstance(value, abc.Set):
        return Kind.SET

    return Kind.OBJECT


def is_external(value: Any) -> bool:
    """Check for opaque native handles: capsules and ctypes pointers."""
    if type(value).__name__ == "PyCapsule" and type(value).__module__ == "builtins":
        return True
    return isinstance(value, _POINTER_TYPES)
