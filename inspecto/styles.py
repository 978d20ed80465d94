"""
Style resolver: maps a semantic style tag to decorated text.

The default resolver is the identity. With colors enabled, text is wrapped in the
ANSI escape pair registered for its tag in STYLES.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from enum import StrEnum, unique
from typing import Callable, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from colorama import Fore, Style

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class StyleTag(StrEnum):
    """Semantic style tags attached to rendered leaves."""

    BIGINT = "bigint"
    BOOLEAN = "boolean"
    DATE = "date"
    MODULE = "module"
    NAME = "name"
    NULL = "null"
    NUMBER = "number"
    REGEXP = "regexp"
    SPECIAL = "special"
    STRING = "string"
    SYMBOL = "symbol"
    UNDEFINED = "undefined"


Stylize = Callable[[str, str], str]

# @formatter:off
STYLES: Mapping[str, str] = {
    StyleTag.BIGINT:    Fore.YELLOW,
    StyleTag.BOOLEAN:   Fore.YELLOW,
    StyleTag.DATE:      Fore.MAGENTA,
    StyleTag.MODULE:    Style.BRIGHT,
    StyleTag.NAME:      "",
    StyleTag.NULL:      Style.BRIGHT,
    StyleTag.NUMBER:    Fore.YELLOW,
    StyleTag.REGEXP:    Fore.RED,
    StyleTag.SPECIAL:   Fore.CYAN,
    StyleTag.STRING:    Fore.GREEN,
    StyleTag.SYMBOL:    Fore.GREEN,
    StyleTag.UNDEFINED: Fore.LIGHTBLACK_EX,
}
# @formatter:on

RESET = Style.RESET_ALL


# Methods --------------------------------------------------------------------------------------------------------------

def stylize_plain(text: str, style: str) -> str:
    """Identity resolver used when colors are disabled."""
    return text


def stylize_ansi(text: str, style: str) -> str:
    """
    Wrap text in the ANSI start/reset pair registered for style.

    Unknown tags and tags mapped to an empty code leave the text untouched.

    Examples:
        >>> stylize_ansi("42", "number") == Fore.YELLOW + "42" + Style.RESET_ALL
        True
        >>> stylize_ansi("x", "name")
        'x'
    """
    start = STYLES.get(style, "")
    if not start:
        return text
    return f"{start}{text}{RESET}"


def resolve_stylize(colors: bool, stylize: Stylize | None = None) -> Stylize:
    """
    Pick the resolver for a call.

    A custom stylize callable always wins and is used verbatim; otherwise the
    colors flag selects between ANSI decoration and the identity.
    """
    if stylize is not None:
        if not callable(stylize):
            raise TypeError(f"stylize must be callable or None, but got {fmt_type(stylize)}")
        return stylize
    return stylize_ansi if colors else stylize_plain
