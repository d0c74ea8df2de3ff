from __future__ import annotations

import collections
import copy
import ctypes
import heapq
import queue
import weakref
from typing import Any, Callable

from .capabilities import COMPOSITE, Category, classify, is_streamable
from .logging import logger

MAX_DEPTH = 32
UNPRINTABLE = "[unprintable type]"
NULLPTR = "nullptr"
TRUNCATED = "..."


def format_value(val: Any, *, max_depth: int = MAX_DEPTH) -> str:
    """
    Format any value for a debug line.

    The rendering is chosen by the category of the value's type (see
    capabilities.classify) and nested values are formatted recursively.
    Never raises and never modifies the value: stacks and queues are drained
    on a copy.

    Args:
        val: The value to format.
        max_depth: Composite values nested deeper than this render as "...".

    Returns:
        The rendering, never empty.
    """
    return _format(val, max_depth)


def _category(cls: type) -> Category:
    try:
        return classify(cls)
    except TypeError:  # Unhashable metaclass, skip the cache
        return classify.__wrapped__(cls)


def _format(val: Any, depth: int) -> str:
    category = _category(type(val))
    if depth <= 0 and category in COMPOSITE:
        return TRUNCATED
    try:
        return _renderers[category](val, depth - 1)
    except Exception:
        logger.debug(
            "Rendering %s as %s failed",
            type(val).__name__,
            category.value,
            exc_info=True,
        )
        return _fallback_text(val)


def _direct_text(val: Any) -> str:
    try:
        ret = str(val)
        # Using repr is better for objects with an empty str()
        if not ret:
            ret = repr(val)
    except Exception:
        return UNPRINTABLE
    return ret or UNPRINTABLE


def _fallback_text(val: Any) -> str:
    """Text of a value whose renderer failed, if its type defines any."""
    try:
        streamable = is_streamable(type(val))
    except Exception:
        streamable = False
    return _direct_text(val) if streamable else UNPRINTABLE


def _join(items: Any, depth: int) -> str:
    return ", ".join(_format(v, depth) for v in items)


def _render_boolean(val: Any, depth: int) -> str:
    return "true" if val else "false"


def _render_character(val: Any, depth: int) -> str:
    char = val.value
    if isinstance(char, bytes):
        code = char[0]
        printable = 0x20 <= code < 0x7F
        char = chr(code)
    else:
        code = ord(char)
        printable = char.isprintable()
    if printable:
        return f"'{char}'"
    return f"'\\x{code:02x}'"


def _render_text(val: Any, depth: int) -> str:
    if isinstance(val, (ctypes.c_char_p, ctypes.c_wchar_p)):
        val = val.value
        if val is None:
            return NULLPTR
    if isinstance(val, (bytes, bytearray)):
        val = bytes(val).decode("utf-8", "backslashreplace")
    return f'"{str.__str__(val)}"'


def _render_pointer(val: Any, depth: int) -> str:
    if isinstance(val, weakref.ref):
        target = val()
        return NULLPTR if target is None else hex(id(target))
    if isinstance(val, ctypes.c_void_p):
        address = val.value
    else:
        address = ctypes.cast(val, ctypes.c_void_p).value
    return hex(address) if address else NULLPTR


def _render_pair(val: Any, depth: int) -> str:
    return f"({_format(val.first, depth)}, {_format(val.second, depth)})"


def _render_tuple(val: Any, depth: int) -> str:
    return f"({_join(val, depth)})"


def _is_empty(adapter: Any) -> bool:
    empty = getattr(adapter, "empty", None)
    if callable(empty):
        return bool(empty())
    return len(adapter) == 0


def _copy_adapter(val: Any) -> Any:
    try:
        return copy.deepcopy(val)
    except Exception:
        logger.debug("Deep copy of %s failed", type(val).__name__, exc_info=True)
    # Locks, sockets and the like are shared, but not the containers
    pending = copy.copy(val)
    state = getattr(pending, "__dict__", None)
    if state is None:
        raise TypeError(f"cannot copy {type(val).__name__} for draining")
    containers: tuple[type, ...] = (list, collections.deque, dict, set)
    declared = getattr(val, "container_type", None)
    if isinstance(declared, type):
        containers += (declared,)
    for name, attr in state.items():
        if isinstance(attr, containers):
            state[name] = copy.copy(attr)
    return pending


def drain(val: Any, category: Category) -> list[Any]:
    """
    List the elements of a stack, queue or priority queue in pop order.

    The standard library queues are snapshotted under their own lock. Other
    adapters are copied (deeply, or else with fresh copies of their
    containers) and the copy is popped until empty, so the caller's
    instance is never touched.
    """
    if isinstance(val, queue.Queue):
        with val.mutex:
            items = list(val.queue)
        if category is Category.STACK:
            return items[::-1]
        if category is Category.PRIORITY_QUEUE:
            return [heapq.heappop(items) for _ in range(len(items))]
        return items
    pending = _copy_adapter(val)
    peek = pending.front if category is Category.QUEUE else pending.top
    items = []
    while not _is_empty(pending):
        items.append(peek())
        pending.pop()
    return items


def _render_adapter(category: Category) -> Callable[[Any, int], str]:
    def render(val: Any, depth: int) -> str:
        return f"[{_join(drain(val, category), depth)}]"

    return render


def _render_map(val: Any, depth: int) -> str:
    pairs = (f"{_format(k, depth)}: {_format(v, depth)}" for k, v in val.items())
    return "{" + ", ".join(pairs) + "}"


def _render_iterable(val: Any, depth: int) -> str:
    return f"[{_join(val, depth)}]"


def _render_streamable(val: Any, depth: int) -> str:
    return _direct_text(val)


def _render_unprintable(val: Any, depth: int) -> str:
    return UNPRINTABLE


_renderers: dict[Category, Callable[[Any, int], str]] = {
    Category.BOOLEAN: _render_boolean,
    Category.CHARACTER: _render_character,
    Category.TEXT: _render_text,
    Category.POINTER: _render_pointer,
    Category.PAIR: _render_pair,
    Category.TUPLE: _render_tuple,
    Category.STACK: _render_adapter(Category.STACK),
    Category.PRIORITY_QUEUE: _render_adapter(Category.PRIORITY_QUEUE),
    Category.QUEUE: _render_adapter(Category.QUEUE),
    Category.MAP: _render_map,
    Category.ITERABLE: _render_iterable,
    Category.STREAMABLE: _render_streamable,
    Category.UNPRINTABLE: _render_unprintable,
}
