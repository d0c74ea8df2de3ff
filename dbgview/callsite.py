from __future__ import annotations

import ast
import itertools
import linecache
from collections import namedtuple
from functools import lru_cache
from types import FrameType
from typing import Any, Iterable, Mapping

from .inspector import MAX_DEPTH, format_value
from .logging import logger

# One output line: the expression as written and the rendering of its value
PrintRecord = namedtuple("PrintRecord", ["name", "rendering"])


@lru_cache(maxsize=64)
def _parse(source: str) -> ast.Module | None:
    try:
        return ast.parse(source)
    except (SyntaxError, ValueError):
        return None


def _get_code_position(frame: FrameType) -> tuple[int, int, int, int] | None:
    """Source span of the instruction the frame is executing (Python 3.11+)."""
    code = frame.f_code
    if frame.f_lasti < 0 or not hasattr(code, "co_positions"):
        return None
    positions = next(
        itertools.islice(code.co_positions(), frame.f_lasti // 2, None), None
    )
    if positions is None or None in positions:
        return None
    return positions


def _callee_name(node: ast.Call) -> str | None:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def find_call(
    frame: FrameType, funcname: str, count: int | None = None
) -> tuple[ast.Call, str] | None:
    """Locate the call expression currently executing in frame.

    Prefers an exact match on the instruction's source span, and falls back
    to the first call of funcname on the current line (with count positional
    arguments, if given).

    Returns:
        (call node, full source of the file) or None if there is no source.
    """
    lines = linecache.getlines(frame.f_code.co_filename, frame.f_globals)
    if not lines:
        return None
    source = "".join(lines)
    tree = _parse(source)
    if tree is None:
        return None
    calls = [node for node in ast.walk(tree) if isinstance(node, ast.Call)]
    span = _get_code_position(frame)
    if span is not None:
        for node in calls:
            node_span = (
                node.lineno,
                node.end_lineno,
                node.col_offset,
                node.end_col_offset,
            )
            if node_span == span:
                return node, source
    lineno = frame.f_lineno
    for node in calls:
        end_lineno = node.end_lineno or node.lineno
        if not node.lineno <= lineno <= end_lineno:
            continue
        if _callee_name(node) != funcname:
            continue
        if count is None or len(node.args) == count:
            return node, source
    return None


def _single_line(text: str) -> str:
    if "\n" not in text:
        return text
    return " ".join(line.strip() for line in text.split("\n") if line.strip())


def argument_names(
    frame: FrameType | None, count: int, funcname: str
) -> list[str] | None:
    """Source text of the positional arguments of the call running in frame.

    Returns None when the source is unavailable or does not match count
    (e.g. starred arguments).
    """
    if frame is None:
        return None
    found = find_call(frame, funcname, count)
    if found is None:
        logger.debug(
            "Source of %s() call at %s:%d not available",
            funcname,
            frame.f_code.co_filename,
            frame.f_lineno,
        )
        return None
    node, source = found
    args = node.args
    if len(args) != count or any(isinstance(a, ast.Starred) for a in args):
        return None
    names = [ast.get_source_segment(source, a) for a in args]
    if not all(names):
        return None
    return [_single_line(name) for name in names]  # type: ignore[arg-type]


def positional_names(count: int) -> list[str]:
    return [f"arg{i}" for i in range(count)]


def collect_records(
    names: Iterable[str],
    values: Iterable[Any],
    named: Mapping[str, Any] | None = None,
    *,
    max_depth: int = MAX_DEPTH,
) -> list[PrintRecord]:
    """Pair names with formatted values by position, then append keywords.

    Pairing stops at the shorter of names and values.
    """
    records = [
        PrintRecord(name, format_value(value, max_depth=max_depth))
        for name, value in zip(names, values)
    ]
    if named:
        records += [
            PrintRecord(name, format_value(value, max_depth=max_depth))
            for name, value in named.items()
        ]
    return records


def capture(
    frame: FrameType | None,
    values: tuple[Any, ...],
    named: Mapping[str, Any],
    funcname: str,
) -> list[PrintRecord]:
    """Records for a debug call made from frame, naming values by their source."""
    names: list[str] | None = []
    if values:
        names = argument_names(frame, len(values), funcname)
        if names is None:
            names = positional_names(len(values))
    return collect_records(names, values, named)
