"""
UNSET sentinel for per-kind truncation limits.

The limits accept None for "unlimited", so "not given, inherit max_array_length"
needs a marker of its own. Compare with `is`.

Example:
    >>> limit = ifunset(opts.max_set_length, default=opts.max_array_length)
"""

from typing import Any, Final

__all__ = [
    'UNSET',
    'UnsetType',
    'ifunset',
]


# Sentinel Types -------------------------------------------------------------------------------------------------------

class UnsetType:
    """Type of the UNSET singleton; calling it returns the one instance."""
    __slots__ = ()

    def __new__(cls) -> 'UnsetType':
        try:
            return UNSET
        except NameError:
            # First call, while the module is being imported
            return super().__new__(cls)

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> 'UnsetType':
        return self

    def __deepcopy__(self, memo: dict) -> 'UnsetType':
        return self

    def __reduce__(self) -> str:
        # Pickle by reference to the module global
        return 'UNSET'


UNSET: Final[UnsetType] = UnsetType()


# Helpers --------------------------------------------------------------------------------------------------------------

def ifunset(value: Any, *, default: Any) -> Any:
    """
    Return default if value is UNSET, otherwise return value.

    Examples:
        >>> ifunset(UNSET, default=40)
        40
        >>> ifunset(None, default=40) is None
        True
    """
    return default if value is UNSET else value
