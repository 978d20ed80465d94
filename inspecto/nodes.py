"""
Document model and renderer.

A document is a tree of nodes built from a value before any layout happens.
Every node knows the exact width of its single-line rendering (`length`),
computed once from its already-built children, so the renderer can decide
between single-line and multi-line layout without rendering twice.

Rendering is a pure function of (offset, indent, pad):
    offset: column the node starts at; 0 means "at the start of a line", in
            which case the node prefixes its own indentation.
    indent: nesting level; one level is two spaces.
    pad:    minimum width, used by tabulated sequences to right-align cells.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Sequence as SequenceType

INDENT = "  "
REF_PREFIX_RESERVE = len("<ref *>") + 1


# Classes --------------------------------------------------------------------------------------------------------------

class Node:
    """
    Abstract document node.

    Attributes:
        depth: Nesting level at creation.
        length: Width of the single-line rendering, excluding style decoration.
        break_length: Line-width budget inherited from the options.
        break_always: Start this node on its own row inside a split sequence.
    """
    __slots__ = ("depth", "length", "break_length", "break_always")

    def __init__(self, depth: int, length: int, opts: Any, break_always: bool = False) -> None:
        self.depth = depth
        self.length = length
        self.break_length = opts.break_length
        self.break_always = break_always

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} depth={self.depth} length={self.length}>"


class Leaf(Node):
    """An already formatted text fragment with an optional style tag."""
    __slots__ = ("text", "style", "stylize")

    def __init__(self, text: str, style: str | None, depth: int, opts: Any, break_always: bool = False) -> None:
        super().__init__(depth, len(text), opts, break_always)
        self.text = text
        self.style = style
        self.stylize = opts.stylize

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        text = self.text
        if indent and "\n" in text:
            # Continuation lines of multi-line text (tracebacks) follow the nesting
            text = text.replace("\n", "\n" + INDENT * indent)
        if self.style is not None:
            text = self.stylize(text, self.style)
        text = _pad(text, self.length, pad)
        return text if offset else INDENT * indent + text


class Pair(Node):
    """A key node and a value node joined by a delimiter such as ': ' or ' => '."""
    __slots__ = ("delim", "left", "right")

    def __init__(self, delim: str, left: Node, right: Node, depth: int, opts: Any,
                 break_always: bool = False) -> None:
        super().__init__(depth, left.length + len(delim) + right.length, opts, break_always)
        self.delim = delim
        self.left = left
        self.right = right

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        start = offset if offset else len(INDENT) * indent
        left = self.left.to_string(offset=offset, indent=indent)
        right = self.right.to_string(offset=start + self.left.length + len(self.delim), indent=indent)
        return left + self.delim + right


class Suspension(Node):
    """Marks omitted trailing items of a truncated collection."""
    __slots__ = ("remaining", "text")

    def __init__(self, remaining: int, depth: int, opts: Any) -> None:
        text = f"... {remaining} more"
        super().__init__(depth, len(text), opts, break_always=True)
        self.remaining = remaining
        self.text = text

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        return self.text if offset else INDENT * indent + self.text


class Sequence(Node):
    """
    A bracketed, delimited list of child nodes.

    The optional `ref` is the reference slot of the value this sequence was built
    from; when a cycle closed on the slot while this sequence was being built,
    the rendering is prefixed with `<ref *N>`. `trailing` follows the last child
    in both layouts, as the comma of a one-item tuple.
    With `tabulate` set, a multi-line rendering lays children out in a grid of
    right-aligned columns.
    """
    __slots__ = ("header", "footer", "delim", "trailing", "values", "ref", "circular", "tabulate", "stylize")

    def __init__(
        self,
        header: str,
        footer: str,
        delim: str,
        values: SequenceType[Node],
        depth: int,
        opts: Any,
        *,
        ref: Any = None,
        tabulate: bool = False,
        break_always: bool = False,
        trailing: str = "",
    ) -> None:
        circular = ref is not None and ref.closed
        trailing = trailing if values else ""
        length = (
            (REF_PREFIX_RESERVE if circular else 0)
            + len(header)
            + sum(v.length for v in values)
            + len(delim) * max(0, len(values) - 1)
            + len(trailing)
            + len(footer)
        )
        super().__init__(depth, length, opts, break_always)
        self.header = header
        self.footer = footer
        self.delim = delim
        self.trailing = trailing
        self.values = tuple(values)
        self.ref = ref
        self.circular = circular
        self.tabulate = tabulate
        self.stylize = opts.stylize

    def to_string(self, offset: int = 0, indent: int = 0, pad: int = 0) -> str:
        values = self.values
        split = bool(values) and (
            offset + self.length > self.break_length
            or len(INDENT) * indent + self.length > self.break_length
        )

        header = self.header if values else self.header.rstrip()
        width = len(header)
        if indent and "\n" in header:
            header = header.replace("\n", "\n" + INDENT * indent)
        if self.circular:
            ref_text = f"<ref *{self.ref.id}>"
            header = self.stylize(ref_text, "special") + " " + header
            width += len(ref_text) + 1

        string = header if offset else INDENT * indent + header

        if split:
            string = string.rstrip() + "\n" + self._render_rows(indent) + self.trailing
            return string + "\n" + INDENT * indent + self.footer.lstrip()

        column = (offset if offset else len(INDENT) * indent) + width
        for i, value in enumerate(values):
            if i:
                string += self.delim
                column += len(self.delim)
            string += value.to_string(offset=column)
            column += value.length

        footer = self.footer if values else self.footer.lstrip()
        return string + self.trailing + footer

    def _render_rows(self, indent: int) -> str:
        """Lay out children one row after another, as a grid when tabulated."""
        values = self.values
        columns, width = self._grid(indent)
        row_start = len(INDENT) * (indent + 1)
        string = ""
        column = 0

        for i, value in enumerate(values):
            if i:
                if column >= columns or value.break_always or values[i - 1].break_always:
                    string += self.delim.rstrip() + "\n"
                    column = 0
                else:
                    string += self.delim

            if column == 0:
                string += value.to_string(indent=indent + 1, pad=width)
            else:
                offset = row_start + column * (width + len(self.delim))
                string += value.to_string(offset=offset, pad=width)
            column += 1

        return string

    def _grid(self, indent: int) -> tuple[int, int]:
        """Return (columns, cell width) for the multi-line layout."""
        if not self.tabulate:
            return 1, 0
        widest = max((v.length for v in self.values if not v.break_always), default=0)
        if not widest:
            return 1, 0
        columns = max(1, int((self.break_length - len(INDENT) * indent) // (widest + len(self.delim))))
        return (columns, widest) if columns > 1 else (1, 0)


# Private Methods ------------------------------------------------------------------------------------------------------

def _pad(text: str, length: int, pad: int) -> str:
    """Left-pad text to pad visible columns, where length is its undecorated width."""
    return " " * (pad - length) + text if pad > length else text
