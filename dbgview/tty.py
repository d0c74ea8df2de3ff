from __future__ import annotations

import builtins
import inspect
import re
import sys
from pathlib import Path
from typing import Any, Iterable, TextIO

from .callsite import PrintRecord, argument_names, capture, collect_records
from .inspector import format_value
from .names import split_names

# ANSI escape codes for terminal colors (can be monkeypatched for styling)
ESC = "\x1b["
RESET = f"{ESC}0m"
TAG = f"{ESC}36m"  # Cyan for the [debug] tag
NAME = f"{ESC}33m"  # Yellow for the expression
VALUE = f"{ESC}32m"  # Green for the rendering
TRACE_TAG = f"{ESC}34m"  # Blue for the [trace] tag
ASSERT = f"{ESC}31m"  # Red for failed assertions

DEBUG_TAG = "[debug]"
TRACE = "[trace]"
ASSERT_FAILED = "[ASSERT FAILED]"

# debug_n shows at most this many elements
DEBUG_N_LIMIT = 20

# Regex pattern to strip ANSI escape sequences
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def _write(output: str, file: TextIO | None = None) -> None:
    if file is None:
        file = sys.stderr
    is_tty = file.isatty() if hasattr(file, "isatty") else False
    if not is_tty:
        # Strip all ANSI escape sequences for non-TTY output
        output = ANSI_ESCAPE_RE.sub("", output)
    file.write(output)


def format_record(record: PrintRecord) -> str:
    """One decorated output line (with newline) for a record."""
    name, rendering = record
    return (
        f"{TAG}{DEBUG_TAG}{RESET} {NAME}{name}{RESET} = {VALUE}{rendering}{RESET}\n"
    )


def emit(records: Iterable[PrintRecord], *, file: TextIO | None = None) -> None:
    """Write records to file (stderr by default), one line each.

    Colors are only kept when the file is a terminal.
    """
    _write("".join(format_record(r) for r in records), file)


def format_location(filename: str, lineno: int) -> str:
    """filename:lineno, relative to the working directory when inside it."""
    path = Path(filename)
    if path.is_file():
        fn = path.resolve()
        cwd = Path.cwd()
        if cwd in fn.parents:
            fn = fn.relative_to(cwd)
        filename = fn.as_posix()
    return f"{filename}:{lineno}"


def debug(*values: Any, **named: Any) -> Any:
    """Print each argument beside the expression that produced it.

    Writes ``[debug] <expression> = <rendering>`` to stderr for every
    positional argument, then for every keyword argument (named by its
    keyword). Expressions are read from the caller's source; when no source
    is available they are shown as arg0, arg1, ...

    Returns the argument when called with one positional argument, otherwise
    the tuple of positional arguments, so calls can wrap expressions inline.

    Usage:
        from dbgview import debug
        debug(x, items[1:], total=sum(items))
    """
    if values or named:
        frame = inspect.currentframe()
        caller = frame.f_back if frame else None
        try:
            records = capture(caller, values, named, "debug")
        finally:
            del frame, caller
        emit(records)
    if len(values) == 1:
        return values[0]
    return values


def debug_names(names: str, *values: Any) -> None:
    """Print values named by an explicit, comma-separated expression list.

    A single value takes names as is; several values take the top-level
    comma-separated parts of names in order. Extra names or values are
    ignored.

    Usage:
        debug_names("x, f(a, b)", x, f(a, b))
    """
    tokens = [names] if len(values) == 1 else split_names(names)
    emit(collect_records(tokens, values))


def _caller_name(funcname: str) -> str:
    frame = inspect.currentframe()
    # Skip this helper and the public printer calling it
    caller = frame.f_back.f_back if frame and frame.f_back else None
    try:
        names = argument_names(caller, _arity[funcname], funcname)
    finally:
        del frame, caller
    return names[0] if names else "arg0"


_arity = {"debug_array": 1, "debug_n": 2, "debug_assert": 1}


def debug_array(arr: Any) -> Any:
    """Print every element of a sized sequence, with its length in the name.

    Usage:
        debug_array(samples)  # [debug] samples[3] = [1, 2, 3]
    """
    name = _caller_name("debug_array")
    rendering = ", ".join(format_value(v) for v in arr)
    emit([PrintRecord(f"{name}[{len(arr)}]", f"[{rendering}]")])
    return arr


def debug_n(arr: Any, n: int) -> Any:
    """Print the first n elements of anything indexable, such as a ctypes pointer.

    At most DEBUG_N_LIMIT elements are shown, followed by "..." when n is
    larger. Sequences shorter than n stop at their last element.
    """
    name = _caller_name("debug_n")
    items = []
    for i in range(min(n, DEBUG_N_LIMIT)):
        try:
            item = arr[i]
        except IndexError:
            break
        items.append(format_value(item))
    if n > DEBUG_N_LIMIT:
        items.append("...")
    emit([PrintRecord(f"{name}[{n}]", f"[{', '.join(items)}]")])
    return arr


def debug_assert(cond: Any) -> None:
    """Print the failed condition with its location and exit with status 1.

    Raises:
        SystemExit: If cond is falsy.
    """
    if cond:
        return
    text = _caller_name("debug_assert")
    frame = inspect.currentframe()
    caller = frame.f_back if frame else None
    try:
        location = (
            format_location(caller.f_code.co_filename, caller.f_lineno)
            if caller
            else "<unknown>"
        )
    finally:
        del frame, caller
    _write(f"{ASSERT}{ASSERT_FAILED}{RESET} {location} - {text}\n")
    sys.stderr.flush()
    raise SystemExit(1)


def trace() -> None:
    """Print the calling function and its location."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame else None
    try:
        if caller is None:
            return
        code = caller.f_code
        function = code.co_name
        location = format_location(code.co_filename, caller.f_lineno)
    finally:
        del frame, caller
    _write(f"{TRACE_TAG}{TRACE}{RESET} {function}() at {location}\n")


# Printers installed as builtins by load()
BUILTINS = ("debug", "debug_names", "debug_array", "debug_n", "debug_assert", "trace")

_MISSING = object()
_original_builtins: dict[str, Any] = {}


def load() -> None:
    """Make the printers available everywhere without importing them.

    Call unload() to restore the original builtins.

    Usage:
        import dbgview
        dbgview.load()
    """
    for name in BUILTINS:
        if name not in _original_builtins:
            _original_builtins[name] = getattr(builtins, name, _MISSING)
        setattr(builtins, name, globals()[name])


def unload() -> None:
    """Remove the printers installed by load()."""
    for name, original in _original_builtins.items():
        if original is _MISSING:
            if hasattr(builtins, name):
                delattr(builtins, name)
        else:
            setattr(builtins, name, original)
    _original_builtins.clear()
