from __future__ import annotations

import inspect
from importlib.resources import files
from typing import Any, Iterable, cast

from html5tagger import E  # type: ignore[import]

from .callsite import PrintRecord, capture
from .tty import DEBUG_TAG

style = files(cast(str, __package__)).joinpath("style.css").read_text(encoding="UTF-8")


def html_records(
    records: Iterable[PrintRecord],
    *,
    include_css: bool = True,
    autodark: bool = True,
) -> Any:
    """Render print records as an HTML definition list (html5tagger Builder)."""
    classes = "dbgview autodark" if autodark else "dbgview"
    with E.div(class_=classes) as doc:
        if include_css:
            doc._style(style)
        with doc.dl(class_="lines"):
            for name, rendering in records:
                doc.dt.span(DEBUG_TAG, class_="tag")
                doc(" ").span(name, class_="var")
                doc("\u00a0").span("=\u00a0", class_="eq")
                doc.dd(rendering, class_="val")
    return doc


def html_debug(*values: Any, include_css: bool = True, **named: Any) -> Any:
    """Like debug(), but return the lines as HTML instead of printing them.

    Usage:
        from IPython.display import display
        display(html_debug(x, y))
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame else None
    try:
        records = capture(caller, values, named, "html_debug")
    finally:
        del frame, caller
    return html_records(records, include_css=include_css)
