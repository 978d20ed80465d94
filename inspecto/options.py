"""
Inspect options: validated, immutable configuration plus module-level defaults.

InspectOptions is a frozen dataclass. Derive variants with merge() and presets
with the compact(), debug() and logging() class methods. configure() swaps the
process-wide default used by inspect() when no options are passed.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math

from dataclasses import dataclass, replace
from typing import Any, Literal

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNSET, UnsetType, ifunset
from .styles import Stylize
from .utils import fmt_type

OnError = Literal["mark", "warn", "raise"]

_ON_ERROR = ("mark", "warn", "raise")
_PER_KIND_LIMITS = ("max_map_length", "max_set_length", "max_typed_array_length", "max_buffer_length")


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int or None, but got {fmt_type(value)}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, but got {value}")


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class InspectOptions:
    """
    Options controlling how inspect() walks and lays out a value.

    Attributes:
        colors: Decorate styled leaves with ANSI colors (ignored if stylize is set).
        depth: Nesting levels shown below the root before collapsing to
            `[ClassName]`. None means unlimited.
        break_length: Line-width budget used for split decisions. May be math.inf
            to keep everything on one line.
        stylize: Custom (text, style_tag) -> text resolver, used verbatim.
        max_array_length: Items shown for list/tuple/deque before "... K more".
            None means unlimited.
        max_map_length: Items shown for mappings, UNSET inherits max_array_length.
        max_set_length: Items shown for sets, UNSET inherits max_array_length.
        max_typed_array_length: Items shown for array.array, UNSET inherits max_array_length.
        max_buffer_length: Bytes shown for bytes/bytearray, UNSET inherits max_array_length.
        include_private: List instance attributes whose names start with "_".
        on_error: Policy for attribute reads and hooks that raise:
            "mark" substitutes an error marker, "warn" also emits a RuntimeWarning,
            "raise" propagates the exception.

    Examples:
        >>> InspectOptions().merge(depth=None).depth is None
        True
        >>> InspectOptions(max_array_length=10).limit("max_set_length")
        10
    """

    colors: bool = False
    depth: int | None = 2
    break_length: int | float = 80
    stylize: Stylize | None = None
    max_array_length: int | None = 40
    max_map_length: int | None | UnsetType = UNSET
    max_set_length: int | None | UnsetType = UNSET
    max_typed_array_length: int | None | UnsetType = UNSET
    max_buffer_length: int | None | UnsetType = UNSET
    include_private: bool = True
    on_error: OnError = "mark"

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", bool(self.colors))
        object.__setattr__(self, "include_private", bool(self.include_private))

        if self.depth is not None:
            _check_count("depth", self.depth)

        if isinstance(self.break_length, bool) or not isinstance(self.break_length, (int, float)):
            raise TypeError(f"break_length must be a number, but got {fmt_type(self.break_length)}")
        if math.isnan(self.break_length) or self.break_length <= 0:
            raise ValueError(f"break_length must be positive, but got {self.break_length!r}")

        if self.stylize is not None and not callable(self.stylize):
            raise TypeError(f"stylize must be callable or None, but got {fmt_type(self.stylize)}")

        if self.max_array_length is not None:
            _check_count("max_array_length", self.max_array_length)
        for name in _PER_KIND_LIMITS:
            value = getattr(self, name)
            if value is not None and value is not UNSET:
                _check_count(name, value)

        if self.on_error not in _ON_ERROR:
            raise ValueError(f"on_error must be one of {_ON_ERROR}, but got {self.on_error!r}")

    # Class Methods ------------------------------------

    @classmethod
    def compact(cls) -> "InspectOptions":
        """Shallow, short output for one-line log fields."""
        return cls(depth=1, break_length=math.inf, max_array_length=8)

    @classmethod
    def debug(cls) -> "InspectOptions":
        """Deep, verbose output for interactive debugging."""
        return cls(colors=True, depth=6, max_array_length=100)

    @classmethod
    def logging(cls) -> "InspectOptions":
        """Colorless, moderately deep output for log files."""
        return cls(colors=False, depth=3, break_length=120, max_array_length=20)

    # Methods and Properties ---------------------------

    def merge(self, **kwargs: Any) -> "InspectOptions":
        """
        Return a validated copy with the given fields replaced.

        Raises:
            TypeError: On unknown option names or wrong value types.
            ValueError: On out-of-range values.
        """
        return replace(self, **kwargs)

    def limit(self, name: str) -> int | None:
        """Resolve a truncation threshold, inheriting max_array_length for UNSET per-kind limits."""
        return ifunset(getattr(self, name), default=self.max_array_length)


# Module Defaults ------------------------------------------------------------------------------------------------------

_PRESETS = {
    "compact": InspectOptions.compact,
    "debug": InspectOptions.debug,
    "default": InspectOptions,
    "logging": InspectOptions.logging,
}

_options = InspectOptions()


def configure(preset: Literal["compact", "debug", "default", "logging"] | None = None,
              **kwargs: Any) -> InspectOptions:
    """
    Set the module defaults used by inspect() when called without options.

    Args:
        preset: Start from a named preset; None starts from the current defaults.
        **kwargs: InspectOptions fields to override on top of the preset.

    Returns:
        The new default options.

    Examples:
        >>> configure(preset="logging", depth=5).depth
        5
    """
    global _options

    if preset is None:
        base = _options
    elif preset in _PRESETS:
        base = _PRESETS[preset]()
    else:
        raise ValueError(f"preset must be one of {tuple(_PRESETS)} or None, but got {preset!r}")

    _options = base.merge(**kwargs) if kwargs else base
    return _options


def get_options() -> InspectOptions:
    """Return the current module default options."""
    return _options

