"""
Value walker: classifies a value and builds its document tree.

Terminal kinds become one Leaf. Composite kinds go through the same steps:

    1. Look up the reference slot; re-entering an active slot marks it circular
       and yields the slot itself as a `[circular *N]` placeholder.
    2. Beyond the depth limit, collapse to `[ClassName]`.
    3. Run the override hook (`__inspect__`, then `__rich_repr__`), which may
       return the final text or a substitute value. A substitute shares the
       original's slot; one already active on the path is circular.
    4. Dispatch to the builder of the concrete kind, with the slot's visit
       counter incremented for the duration of the build.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import inspect
import itertools
import logging
import re
import traceback
import warnings
import weakref

from typing import Any, Callable, Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .introspect import FutureState, external_address, future_result, future_state, own_attr_names, read_attr
from .kinds import Kind, classify
from .nodes import Leaf, Node, Pair, Sequence, Suspension
from .options import InspectOptions
from .refs import Ref, RefTracker
from .styles import StyleTag, resolve_stylize
from .utils import class_name, has_own_repr, safe_repr

logger = logging.getLogger(__name__)

PLAIN_KEY = re.compile(r"^[a-zA-Z_][a-zA-Z_0-9]*$")

NATIVE_HOOK = "__inspect__"
RICH_HOOK = "__rich_repr__"

_STRING_ESCAPES = {
    "'": "\\'",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_STRING_SPECIALS = re.compile(r"['\x00-\x1f\x7f]")

# Classes --------------------------------------------------------------------------------------------------------------

class Substitute:
    """
    A named stand-in value for override hooks.

    Renders like an instance of a class called `name` with positional `args`
    followed by `kwargs` as named attributes.

    Examples:
        >>> class Foo:
        ...     def __inspect__(self, depth, opts, inspect):
        ...         return Substitute("Foo", bar=False)
        >>> inspect(Foo())
        'Foo { bar: False }'
    """
    __slots__ = ("name", "args", "kwargs", "__weakref__")

    def __init__(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.name = name
        self.args = args
        self.kwargs = kwargs

    def __repr__(self) -> str:
        return f"Substitute({self.name!r}, args={self.args!r}, kwargs={self.kwargs!r})"


class Walker:
    """
    Builds document trees for one inspect() call.

    All nodes built by a walker share its options and its RefTracker. Nested
    walkers created for override hooks share the tracker too, so cycles that pass
    through a hook are still detected.
    """

    def __init__(self, opts: InspectOptions, tracker: RefTracker | None = None) -> None:
        if opts.stylize is None:
            opts = opts.merge(stylize=resolve_stylize(opts.colors))
        self.opts = opts
        self.refs = tracker if tracker is not None else RefTracker(opts)

        self._terminals: dict[Kind, Callable[[Any, int], Node]] = {
            Kind.NONE: self._inspect_none,
            Kind.UNDEFINED: self._inspect_undefined,
            Kind.BOOLEAN: self._inspect_boolean,
            Kind.NUMBER: self._inspect_number,
            Kind.BIGINT: self._inspect_bigint,
            Kind.STRING: self._inspect_string,
            Kind.SYMBOL: self._inspect_symbol,
            Kind.EXTERNAL: self._inspect_external,
            Kind.FUNCTION: self._inspect_function,
            Kind.CLASS: self._inspect_class,
            Kind.MODULE: self._inspect_module,
        }
        self._builders: dict[Kind, Callable[[Any, int, Ref], Node]] = {
            Kind.ARRAY: self._inspect_array,
            Kind.DATE: self._inspect_date,
            Kind.REGEXP: self._inspect_regexp,
            Kind.ERROR: self._inspect_error,
            Kind.PROMISE: self._inspect_promise,
            Kind.DICT: self._inspect_dict,
            Kind.MAP: self._inspect_map,
            Kind.SET: self._inspect_set,
            Kind.WEAK_MAP: self._inspect_weak_collection,
            Kind.WEAK_SET: self._inspect_weak_collection,
            Kind.WEAK_REF: self._inspect_weak_ref,
            Kind.ARRAY_BUFFER: self._inspect_array_buffer,
            Kind.SHARED_ARRAY_BUFFER: self._inspect_shared_array_buffer,
            Kind.TYPED_ARRAY: self._inspect_typed_array,
            Kind.BUFFER: self._inspect_buffer,
            Kind.DATA_VIEW: self._inspect_data_view,
            Kind.OBJECT: self._inspect_object,
        }

    # Entry ------------------------------------------------

    def walk(self, value: Any, depth: int = 0) -> Node:
        """Build the document node of value at the given nesting depth."""
        kind = classify(value)
        if kind.is_terminal:
            return self._terminals[kind](value, depth)
        return self._inspect_composite(value, kind, depth)

    def _inspect_composite(self, value: Any, kind: Kind, depth: int) -> Node:
        ref = self.refs.ensure(value, depth)
        if ref.count:
            ref.mark_circular()
            return ref

        if self.opts.depth is not None and depth > self.opts.depth:
            return self._leaf(f"[{_display_name(value)}]", StyleTag.SPECIAL, depth)

        hook = find_hook(value)
        if hook is not None:
            ref.increment()
            try:
                result = self._call_hook(hook, value, depth)
            finally:
                ref.decrement()

            if isinstance(result, Node):
                return result
            if isinstance(result, str):
                return self._leaf(result, None, depth)
            if result is not value:
                logger.debug("%s hook of %s returned a substitute %s",
                             hook.__name__, class_name(value), class_name(result))
                kind = classify(result)
                if kind.is_terminal:
                    return self._terminals[kind](result, depth)

                existing = self.refs.get(result)
                if existing is None:
                    self.refs.set(result, ref)
                elif existing.count:
                    # The substitute is an ancestor on the current path
                    existing.mark_circular()
                    return existing
                elif existing is not ref:
                    # Seen earlier in this call; the original joins the substitute's slot
                    self.refs.set(value, existing)
                    ref = existing
                value = result

        return self._build(kind, value, depth, ref)

    def _build(self, kind: Kind, value: Any, depth: int, ref: Ref) -> Node:
        ref.increment()
        try:
            return self._builders[kind](value, depth, ref)
        finally:
            ref.decrement()

    # Override protocol ------------------------------------

    def _call_hook(self, hook: Callable, value: Any, depth: int) -> Any:
        remaining = None if self.opts.depth is None else self.opts.depth - depth

        def inspect_nested(nested: Any, **overrides: Any) -> str:
            if not overrides:
                return self.walk(nested, depth + 1).to_string()
            if "colors" in overrides:
                # Re-resolve the style function for the new colors flag
                overrides.setdefault("stylize", None)
            walker = Walker(self.opts.merge(**overrides), self.refs)
            return walker.walk(nested, depth + 1).to_string()

        try:
            return hook(remaining, self.opts, inspect_nested)
        except RecursionError:
            raise
        except Exception as exc:
            return self._error_marker(exc, f"{hook.__name__} of {class_name(value)}", depth)

    # Terminal kinds ---------------------------------------

    def _inspect_none(self, value: None, depth: int) -> Node:
        return self._leaf("None", StyleTag.NULL, depth)

    def _inspect_undefined(self, value: Any, depth: int) -> Node:
        return self._leaf(safe_repr(value), StyleTag.UNDEFINED, depth)

    def _inspect_boolean(self, value: bool, depth: int) -> Node:
        return self._leaf("True" if value else "False", StyleTag.BOOLEAN, depth)

    def _inspect_number(self, value: int | float | complex, depth: int) -> Node:
        if isinstance(value, int):
            try:
                text = int.__repr__(value)
            except ValueError:
                # Exceeds sys.get_int_max_str_digits()
                text = f"<int with {value.bit_length()} bits>"
        elif isinstance(value, float):
            text = float.__repr__(value)
        else:
            text = complex.__repr__(value)
        return self._leaf(text, StyleTag.NUMBER, depth)

    def _inspect_bigint(self, value: Any, depth: int) -> Node:
        return self._leaf(safe_repr(value), StyleTag.BIGINT, depth)

    def _inspect_string(self, value: str, depth: int) -> Node:
        return self._leaf(f"'{escape_string(value)}'", StyleTag.STRING, depth)

    def _inspect_symbol(self, value: Any, depth: int) -> Node:
        name = getattr(value, "_name_", None)
        text = f"{type(value).__name__}.{name}" if name else safe_repr(value)
        return self._leaf(text, StyleTag.SYMBOL, depth)

    def _inspect_external(self, value: Any, depth: int) -> Node:
        address = external_address(value)
        text = "[external]" if address is None else f"[external 0x{address:x}]"
        return self._leaf(text, StyleTag.SPECIAL, depth)

    def _inspect_function(self, value: Any, depth: int) -> Node:
        qualifiers = []
        if inspect.iscoroutinefunction(value) or inspect.isasyncgenfunction(value):
            qualifiers.append("async")
        if inspect.isgeneratorfunction(value) or inspect.isasyncgenfunction(value):
            qualifiers.append("generator")
        text = "[" + " ".join([*qualifiers, "function", _function_name(value)]) + "]"
        return self._leaf(text, StyleTag.SPECIAL, depth)

    def _inspect_class(self, value: type, depth: int) -> Node:
        return self._leaf(f"[class {_function_name(value)}]", StyleTag.SPECIAL, depth)

    def _inspect_module(self, value: Any, depth: int) -> Node:
        name = getattr(value, "__name__", None) or "(anonymous)"
        return self._leaf(f"[module {name}]", StyleTag.MODULE, depth)

    # Composite kinds --------------------------------------

    def _inspect_array(self, value: Any, depth: int, ref: Ref) -> Node:
        name = class_name(value)
        items = list(value) if not isinstance(value, (list, tuple)) else value
        fields = getattr(type(value), "_fields", None) if isinstance(value, tuple) else None

        if isinstance(value, tuple):
            open_, close = "(", ")"
        else:
            open_, close = "[", "]"

        if fields is not None:
            limit = self.opts.max_array_length
            shown = len(items) if limit is None else min(len(items), limit)
            values: list[Node] = [
                Pair(": ", self._inspect_key(field, depth + 1), self.walk(item, depth + 1), depth + 1, self.opts)
                for field, item in zip(fields, items[:shown])
            ]
            truncated = self._suspend(values, len(items), shown, depth)
        else:
            values, truncated = self._collect(items, len(items), self.opts.max_array_length, depth)

        values.extend(self._extra_attrs(value, depth, truncated))

        trailing = "," if isinstance(value, tuple) and fields is None and len(items) == 1 else ""

        header = f"{open_} " if type(value) in (list, tuple) else f"{name} {open_} "
        return Sequence(header, f" {close}", ", ", values, depth, self.opts,
                        ref=ref, tabulate=fields is None and _is_numeric(items), trailing=trailing)

    def _inspect_date(self, value: Any, depth: int, ref: Ref) -> Node:
        isoformat = getattr(value, "isoformat", None)
        text = isoformat() if callable(isoformat) else str(value)
        return self._leaf(text, StyleTag.DATE, depth)

    def _inspect_regexp(self, value: re.Pattern, depth: int, ref: Ref) -> Node:
        return self._leaf(safe_repr(value), StyleTag.REGEXP, depth)

    def _inspect_error(self, value: BaseException, depth: int, ref: Ref) -> Node:
        text = format_error(value)

        values = self._extra_attrs(value, depth, truncated=False)

        cause = value.__cause__
        if cause is not None:
            values.append(Pair(": ", self._leaf("[cause]", None, depth + 1), self.walk(cause, depth + 1),
                               depth + 1, self.opts))

        errors = getattr(value, "exceptions", None) if isinstance(value, BaseExceptionGroup) else None
        if errors:
            values.append(Pair(": ", self._leaf("[errors]", None, depth + 1), self.walk(list(errors), depth + 1),
                               depth + 1, self.opts))

        if not values:
            return self._leaf(text, None, depth)
        return Sequence(f"{text} {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_promise(self, value: Any, depth: int, ref: Ref) -> Node:
        state = future_state(value)
        if state is FutureState.PENDING:
            values = [self._leaf("<pending>", StyleTag.SPECIAL, depth + 1)]
        elif state is FutureState.CANCELLED:
            values = [self._leaf("<cancelled>", StyleTag.SPECIAL, depth + 1)]
        elif state is FutureState.REJECTED:
            values = [
                self._leaf("<rejected>", StyleTag.SPECIAL, depth + 1),
                self.walk(future_result(value), depth + 1),
            ]
        else:
            values = [self.walk(future_result(value), depth + 1)]
        return Sequence(f"{class_name(value)} {{ ", " }", " ", values, depth, self.opts, ref=ref)

    def _inspect_dict(self, value: dict, depth: int, ref: Ref) -> Node:
        values, _ = self._collect(
            value.items(), len(value), self.opts.limit("max_map_length"), depth,
            lambda item: Pair(": ", self.walk(item[0], depth + 1), self.walk(item[1], depth + 1),
                              depth + 1, self.opts),
        )
        return Sequence("{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_map(self, value: Any, depth: int, ref: Ref) -> Node:
        size = _safe_len(value)
        values, truncated = self._collect(
            value.items(), size, self.opts.limit("max_map_length"), depth,
            lambda item: Pair(" => ", self.walk(item[0], depth + 1), self.walk(item[1], depth + 1),
                              depth + 1, self.opts),
        )
        values.extend(self._extra_attrs(value, depth, truncated))
        return Sequence(f"{class_name(value)}({size}) {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_set(self, value: Any, depth: int, ref: Ref) -> Node:
        size = _safe_len(value)
        values, truncated = self._collect(value, size, self.opts.limit("max_set_length"), depth)
        values.extend(self._extra_attrs(value, depth, truncated))
        return Sequence(f"{class_name(value)}({size}) {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_weak_collection(self, value: Any, depth: int, ref: Ref) -> Node:
        values = [self._leaf("<items unknown>", StyleTag.SPECIAL, depth + 1)]
        return Sequence(f"{class_name(value)} {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_weak_ref(self, value: Any, depth: int, ref: Ref) -> Node:
        if type(value) in weakref.ProxyTypes:
            header = "weakproxy { "
            try:
                value.__class__
            except ReferenceError:
                child = self._leaf("<dead>", StyleTag.SPECIAL, depth + 1)
            else:
                child = self._leaf("<alive>", StyleTag.SPECIAL, depth + 1)
        else:
            header = "weakref { " if type(value) is weakref.ref else f"{class_name(value)} {{ "
            target = value()
            if target is None:
                child = self._leaf("<dead>", StyleTag.SPECIAL, depth + 1)
            else:
                child = self.walk(target, depth + 1)
        return Sequence(header, " }", ", ", [child], depth, self.opts, ref=ref)

    def _inspect_array_buffer(self, value: Any, depth: int, ref: Ref) -> Node:
        if value.closed:
            values = [self._field("closed", True, depth)]
        else:
            values = [self._field("size", len(value), depth)]
        return Sequence(f"{class_name(value)} {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_shared_array_buffer(self, value: Any, depth: int, ref: Ref) -> Node:
        values = [self._field("name", value.name, depth), self._field("size", value.size, depth)]
        return Sequence(f"{class_name(value)} {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_typed_array(self, value: Any, depth: int, ref: Ref) -> Node:
        values, truncated = self._collect(value, len(value), self.opts.limit("max_typed_array_length"), depth)
        values.extend(self._extra_attrs(value, depth, truncated))
        header = f"{class_name(value)}('{value.typecode}')({len(value)}) [ "
        return Sequence(header, " ]", ", ", values, depth, self.opts, ref=ref, tabulate=True)

    def _inspect_buffer(self, value: bytes | bytearray, depth: int, ref: Ref) -> Node:
        values, truncated = self._collect(
            value, len(value), self.opts.limit("max_buffer_length"), depth,
            lambda byte: self._leaf(f"{byte:02x}", None, depth + 1),
        )
        values.extend(self._extra_attrs(value, depth, truncated))
        return Sequence(f"<{class_name(value)} ", ">", " ", values, depth, self.opts, ref=ref, tabulate=True)

    def _inspect_data_view(self, value: memoryview, depth: int, ref: Ref) -> Node:
        try:
            fields = [
                ("nbytes", value.nbytes),
                ("format", value.format),
                ("readonly", value.readonly),
                ("obj", value.obj),
            ]
        except ValueError:
            values = [self._leaf("<released>", StyleTag.SPECIAL, depth + 1)]
        else:
            values = [self._field(name, field, depth) for name, field in fields]
        return Sequence(f"{class_name(value)} {{ ", " }", ", ", values, depth, self.opts, ref=ref)

    def _inspect_object(self, value: Any, depth: int, ref: Ref) -> Node:
        if isinstance(value, Substitute):
            name = value.name
            values = [self.walk(arg, depth + 1) for arg in value.args]
            values.extend(self._field(key, field, depth) for key, field in value.kwargs.items())
        else:
            name = class_name(value)
            names = own_attr_names(value, self.opts.include_private)
            if not names and has_own_repr(value):
                return self._leaf(safe_repr(value), None, depth)
            values = [self._attr_pair(value, attr, depth) for attr in names]
            values = [v for v in values if v is not None]

        header = "{ " if type(value) is object else f"{name} {{ "
        return Sequence(header, " }", ", ", values, depth, self.opts, ref=ref)

    # Helpers ----------------------------------------------

    def _leaf(self, text: str, style: str | None, depth: int, break_always: bool = False) -> Leaf:
        return Leaf(text, style, depth, self.opts, break_always)

    def _inspect_key(self, key: str, depth: int) -> Node:
        if PLAIN_KEY.match(key):
            return self._leaf(key, None, depth)
        return self.walk(key, depth)

    def _field(self, key: str, value: Any, depth: int, break_always: bool = False) -> Pair:
        """Pair of a named field at depth + 1."""
        return Pair(": ", self._inspect_key(key, depth + 1), self.walk(value, depth + 1), depth + 1,
                    self.opts, break_always)

    def _attr_pair(self, value: Any, name: str, depth: int, break_always: bool = False) -> Pair | None:
        """Pair for one own attribute; None for an unset slot."""
        try:
            attr = read_attr(value, name)
        except AttributeError:
            return None
        except RecursionError:
            raise
        except Exception as exc:
            marker = self._error_marker(exc, f"attribute {name!r} of {class_name(value)}", depth + 1)
            return Pair(": ", self._inspect_key(name, depth + 1), marker, depth + 1, self.opts, break_always)
        return self._field(name, attr, depth, break_always)

    def _extra_attrs(self, value: Any, depth: int, truncated: bool) -> list[Node]:
        """Named attributes of collection subclasses, on their own rows after a truncation."""
        pairs = (
            self._attr_pair(value, name, depth, break_always=truncated)
            for name in own_attr_names(value, self.opts.include_private)
        )
        return [p for p in pairs if p is not None]

    def _collect(
        self,
        items: Iterable[Any],
        size: int,
        limit: int | None,
        depth: int,
        build: Callable[[Any], Node] | None = None,
    ) -> tuple[list[Node], bool]:
        """Build child nodes for up to limit items, then a Suspension for the rest."""
        build = build or (lambda item: self.walk(item, depth + 1))
        shown = size if limit is None else min(size, limit)
        values = [build(item) for item in itertools.islice(items, shown)]
        truncated = self._suspend(values, size, len(values), depth)
        return values, truncated

    def _suspend(self, values: list[Node], size: int, shown: int, depth: int) -> bool:
        if size <= shown:
            return False
        values.append(Suspension(size - shown, depth + 1, self.opts))
        return True

    def _error_marker(self, exc: Exception, where: str, depth: int) -> Leaf:
        """Apply the on_error policy to an exception raised while reading a value."""
        if self.opts.on_error == "raise":
            raise exc
        message = f"{type(exc).__name__} raised by {where}: {exc}"
        if self.opts.on_error == "warn":
            warnings.warn(message, RuntimeWarning, stacklevel=2)
        logger.debug(message)
        return self._leaf(f"[{type(exc).__name__}: {escape_string(str(exc))}]", StyleTag.SPECIAL, depth)


# Methods --------------------------------------------------------------------------------------------------------------

def find_hook(value: Any) -> Callable[[int | None, InspectOptions, Callable[..., str]], Any] | None:
    """
    Find the override hook of value.

    Strategy sources are checked in order: the native `__inspect__(depth, opts,
    inspect)` method, then the `__rich_repr__()` protocol of the rich library,
    adapted to return a Substitute. Hooks are looked up on the type, so
    instance-level __getattr__ magic (mocks, proxies) is never mistaken for one.
    """
    cls = type(value)
    if callable(getattr(cls, NATIVE_HOOK, None)):
        return getattr(value, NATIVE_HOOK)

    if callable(getattr(cls, RICH_HOOK, None)):
        rich_repr = getattr(value, RICH_HOOK)

        def __rich_repr__(depth, opts, inspect_nested):
            return rich_repr_substitute(value, rich_repr())

        return __rich_repr__

    return None


def rich_repr_substitute(value: Any, fields: Iterable[Any]) -> Substitute:
    """
    Convert the items yielded by a `__rich_repr__` method into a Substitute.

    Items are positional values, `(name, value)` pairs, or `(name, value, default)`
    triples which are left out when value equals default. A None name or a
    1-tuple is positional.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for field in fields:
        if isinstance(field, tuple):
            if len(field) == 1:
                args.append(field[0])
                continue
            if len(field) == 3:
                key, item, default = field
                if item == default:
                    continue
            else:
                key, item = field[0], field[1]
            if key is None:
                args.append(item)
            else:
                kwargs[str(key)] = item
        else:
            args.append(field)
    return Substitute(class_name(value), *args, **kwargs)


def escape_string(value: str) -> str:
    """
    Escape the quote delimiter and control characters of a string.

    Examples:
        >>> escape_string("f'oo\\n")
        "f\\\\'oo\\\\n"
    """
    return _STRING_SPECIALS.sub(_escape_char, value)


def format_error(exc: BaseException) -> str:
    """
    Format an exception as its traceback (when it has one) followed by the
    `Type: message` line, without chained exceptions.
    """
    lines = []
    if exc.__traceback__ is not None:
        lines.append("Traceback (most recent call last):\n")
        lines.extend(traceback.format_tb(exc.__traceback__))
    lines.extend(traceback.format_exception_only(type(exc), exc))
    return "".join(lines).rstrip("\n")


# Private Methods ------------------------------------------------------------------------------------------------------

def _escape_char(match: re.Match) -> str:
    char = match.group()
    return _STRING_ESCAPES.get(char) or f"\\x{ord(char):02x}"


def _display_name(value: Any) -> str:
    if isinstance(value, Substitute):
        return value.name
    if type(value) in weakref.ProxyTypes:
        return "weakproxy"
    return class_name(value)


def _function_name(value: Any) -> str:
    name = getattr(value, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return "(anonymous)"
    return name


def _is_numeric(items: Iterable[Any]) -> bool:
    """True for a non-empty run of plain ints and floats, the shape worth a grid."""
    items = list(items)
    return bool(items) and all(type(item) in (int, float) for item in items)


def _safe_len(value: Any) -> int:
    try:
        return len(value)
    except TypeError:
        return sum(1 for _ in value)
