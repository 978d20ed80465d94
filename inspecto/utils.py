"""
Name and repr helpers shared by the walker, the options and the style resolver.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Name of the class of obj, or of obj itself when it is a class.

    Used for collection headers (`OrderedDict(1) { ... }`), depth-collapse leaves
    (`[dict]`) and, fully qualified, in exception messages.

    Args:
        obj: An instance or a class.
        fully_qualified: Prefix non-builtin names with their module.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(10, fully_qualified=True)
        'int'
    """
    cls = obj if isinstance(obj, type) else type(obj)

    name = getattr(cls, "__name__", None) or "object"
    module = getattr(cls, "__module__", None)

    if fully_qualified and module and module != "builtins":
        return f"{module}.{name}"
    return name


def fmt_type(obj: Any) -> str:
    """Format the type of obj for exception messages, e.g. '<int>'."""
    return f"<{class_name(obj, fully_qualified=True)}>"


def safe_repr(obj: Any) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        return repr(obj)
    except RecursionError:
        raise
    except Exception as e:
        return f"<{class_name(obj)} object (repr failed: {type(e).__name__})>"


def has_own_repr(obj: Any) -> bool:
    """Check whether the type of obj overrides object.__repr__."""
    return getattr(type(obj), "__repr__", object.__repr__) is not object.__repr__
