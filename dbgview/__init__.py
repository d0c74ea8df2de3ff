from .capabilities import Category, classify
from .html import html_debug, html_records
from .inspector import format_value
from .names import split_names
from .notebook import load_ipython_extension, unload_ipython_extension
from .tty import (
    debug,
    debug_array,
    debug_assert,
    debug_n,
    debug_names,
    emit,
    load,
    trace,
    unload,
)

__all__ = [
    "debug",
    "debug_names",
    "debug_array",
    "debug_n",
    "debug_assert",
    "trace",
    "emit",
    "load",
    "unload",
    "format_value",
    "classify",
    "Category",
    "split_names",
    "html_debug",
    "html_records",
    "load_ipython_extension",
    "unload_ipython_extension",
]
