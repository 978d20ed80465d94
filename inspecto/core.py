"""
Public entry point: convert any value into readable, line-wrapped text.

Examples:
    >>> inspect({"a": [1, 2, 3]})
    "{ 'a': [ 1, 2, 3 ] }"
    >>> a = []; a.append(a)
    >>> inspect(a)
    '<ref *1> [ [circular *1] ]'
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .options import InspectOptions, get_options
from .utils import fmt_type
from .walker import Substitute, Walker

__all__ = [
    "InspectOptions",
    "Substitute",
    "inspect",
]


# Methods --------------------------------------------------------------------------------------------------------------

def inspect(value: Any, opts: InspectOptions | None = None, **overrides: Any) -> str:
    """
    Render value as text.

    Every call starts with a fresh reference tracker, so `<ref *N>` ids restart
    at 1 and nothing is remembered between calls.

    Args:
        value: Any Python value, possibly self-referencing.
        opts: Options for this call; None uses the module defaults (see configure()).
        **overrides: InspectOptions fields replaced for this call only.

    Returns:
        str: The rendering. Never empty.

    Raises:
        TypeError: If opts is not an InspectOptions or an override has the wrong type.
        ValueError: If an override is out of range.
        RecursionError: If nesting is deeper than the interpreter stack allows.
    """
    if opts is None:
        opts = get_options()
    elif not isinstance(opts, InspectOptions):
        raise TypeError(f"opts must be InspectOptions or None, but got {fmt_type(opts)}")

    if overrides:
        opts = opts.merge(**overrides)

    return Walker(opts).walk(value).to_string()
