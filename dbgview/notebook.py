from __future__ import annotations

import inspect
import sys
from typing import Any

from .callsite import capture
from .html import html_records
from .logging import logger
from .tty import emit


def _can_display_html() -> bool:
    # Spyder runs IPython ZMQInteractiveShell but lacks HTML support. Using
    # argv seems like the most portable way to autodetect HTML capability.
    #
    # "ipykernel_launcher.py" in Jupyter Notebook/Lab
    # "ipykernel/__main__.py" in Azure Notebooks
    # "colab_kernel_launcher.py" in Google Colab
    return any(name in sys.argv[0] for name in ["ipykernel", "colab_kernel_launcher"])


def debug(*values: Any, **named: Any) -> Any:
    """debug() for notebooks: shown as HTML in Jupyter, printed elsewhere."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame else None
    try:
        records = capture(caller, values, named, "debug")
    finally:
        del frame, caller
    if records:
        if _can_display_html():
            from IPython.display import display  # type: ignore[import]

            display(html_records(records, autodark=False))
        else:
            emit(records)
    if len(values) == 1:
        return values[0]
    return values


def load_ipython_extension(ipython: Any) -> None:
    """Provide debug() in the notebook namespace (%load_ext dbgview)."""
    try:
        ipython.push({"debug": debug})
    except Exception:
        logger.error("Unable to load dbgview (please report a bug!)")
        raise


def unload_ipython_extension(ipython: Any) -> None:
    if ipython.user_ns.get("debug") is debug:
        del ipython.user_ns["debug"]
