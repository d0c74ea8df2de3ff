from __future__ import annotations

OPENING = "<([{"
CLOSING = ">)]}"

# Default cap on expressions per call, for callers that want one
MAX_NAMES = 32


def split_names(text: str, limit: int | None = None) -> list[str]:
    """Split an argument list as written in source into its expressions.

    Commas only separate expressions outside of brackets, so nested calls,
    subscripts, generic arguments and literals stay whole. Each expression is
    stripped of surrounding whitespace and an empty final expression is
    dropped.

    Args:
        text: Source text of the arguments, e.g. ``"x, f(a, b), {1: 2}"``.
        limit: Keep at most this many names, silently dropping the rest.

    Usage:
        >>> split_names("f(a,b), c")
        ['f(a,b)', 'c']
    """
    names: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char in OPENING:
            depth += 1
        elif char in CLOSING:
            depth -= 1
        elif char == "," and depth == 0:
            names.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        names.append(tail)
    return names if limit is None else names[:limit]
