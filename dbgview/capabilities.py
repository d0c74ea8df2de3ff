from __future__ import annotations

import collections.abc as abc
import ctypes
import dataclasses
import enum
import inspect
import queue
import weakref
from functools import lru_cache
from typing import Callable


class Category(enum.Enum):
    """Rendering category of a type, in classification order."""

    BOOLEAN = "boolean"
    CHARACTER = "character"
    TEXT = "text"
    POINTER = "pointer"
    PAIR = "pair"
    TUPLE = "tuple"
    STACK = "stack"
    PRIORITY_QUEUE = "priority_queue"
    QUEUE = "queue"
    MAP = "map"
    ITERABLE = "iterable"
    STREAMABLE = "streamable"
    UNPRINTABLE = "unprintable"


COMPOSITE = frozenset(
    {
        Category.PAIR,
        Category.TUPLE,
        Category.STACK,
        Category.PRIORITY_QUEUE,
        Category.QUEUE,
        Category.MAP,
        Category.ITERABLE,
    }
)

text_types = (str, bytes, bytearray, ctypes.c_char_p, ctypes.c_wchar_p)
character_types = (ctypes.c_char, ctypes.c_wchar)
pointer_types = (ctypes._Pointer, ctypes.c_void_p, weakref.ref)


def _has(cls: type, *names: str) -> bool:
    return all(getattr(cls, name, None) is not None for name in names)


def declared_fields(cls: type) -> tuple[str, ...] | None:
    """Field names a class declares statically, or None if it declares none.

    Looks at namedtuples, dataclasses, ctypes structures, msgspec Structs and
    Pydantic models (without importing either), slots and annotations.
    """
    if isinstance(fields := getattr(cls, "_fields", None), tuple):
        return fields
    if dataclasses.is_dataclass(cls):
        return tuple(f.name for f in dataclasses.fields(cls))
    if isinstance(fields := getattr(cls, "_fields_", None), (list, tuple)):
        try:
            return tuple(f[0] for f in fields)
        except (TypeError, IndexError):
            return None
    if isinstance(fields := getattr(cls, "__struct_fields__", None), tuple):
        return fields
    if isinstance(fields := getattr(cls, "model_fields", None), dict):
        return tuple(fields)
    slots = cls.__dict__.get("__slots__")
    if isinstance(slots, str):
        return (slots,)
    if isinstance(slots, (list, tuple)):
        return tuple(slots)
    try:
        annotations = inspect.get_annotations(cls)
    except Exception:
        return None
    return tuple(annotations) or None


def is_boolean(cls: type) -> bool:
    if issubclass(cls, bool):
        return True
    # NumPy booleans, detected without importing numpy
    return cls.__module__ == "numpy" and cls.__name__ in ("bool_", "bool")


def is_character(cls: type) -> bool:
    return issubclass(cls, character_types)


def is_text(cls: type) -> bool:
    return issubclass(cls, text_types)


def is_pointer(cls: type) -> bool:
    return issubclass(cls, pointer_types)


def is_pair(cls: type) -> bool:
    fields = declared_fields(cls)
    if fields is None or len(fields) != 2:
        return False
    return set(fields) == {"first", "second"}


def is_tuple(cls: type) -> bool:
    return issubclass(cls, tuple)


def is_priority_queue(cls: type) -> bool:
    if issubclass(cls, queue.PriorityQueue):
        return True
    return _has(cls, "top", "pop", "container_type", "value_compare")


def is_stack(cls: type) -> bool:
    if issubclass(cls, queue.LifoQueue):
        return True
    if issubclass(cls, queue.Queue):
        return False
    return _has(cls, "top", "pop", "container_type") and not _has(
        cls, "value_compare"
    )


def is_queue(cls: type) -> bool:
    if issubclass(cls, queue.Queue):
        return not issubclass(cls, (queue.LifoQueue, queue.PriorityQueue))
    return _has(cls, "front", "pop", "container_type") and not is_stack(cls)


def is_map(cls: type) -> bool:
    if issubclass(cls, abc.Mapping):
        return True
    return all(
        callable(getattr(cls, name, None)) for name in ("keys", "items", "__getitem__")
    )


def is_iterable(cls: type) -> bool:
    if issubclass(cls, ctypes.Array):
        return True
    # One-shot iterators would be consumed by formatting
    return issubclass(cls, abc.Iterable) and not issubclass(cls, abc.Iterator)


def is_streamable(cls: type) -> bool:
    return cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__


def is_unprintable(cls: type) -> bool:
    return True


CAPABILITIES: tuple[tuple[Category, Callable[[type], bool]], ...] = (
    (Category.BOOLEAN, is_boolean),
    (Category.CHARACTER, is_character),
    (Category.TEXT, is_text),
    (Category.POINTER, is_pointer),
    (Category.PAIR, is_pair),
    (Category.TUPLE, is_tuple),
    (Category.STACK, is_stack),
    (Category.PRIORITY_QUEUE, is_priority_queue),
    (Category.QUEUE, is_queue),
    (Category.MAP, is_map),
    (Category.ITERABLE, is_iterable),
    (Category.STREAMABLE, is_streamable),
    (Category.UNPRINTABLE, is_unprintable),
)


@lru_cache(maxsize=1024)
def classify(cls: type) -> Category:
    """Select the rendering category of a type. First matching capability wins."""
    for category, predicate in CAPABILITIES:
        try:
            if predicate(cls):
                return category
        except Exception:  # Metaclasses with unusual attribute access
            continue
    return Category.UNPRINTABLE
