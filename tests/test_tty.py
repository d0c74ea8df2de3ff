"""Tests for the tty module - printing debug lines to stderr."""

import builtins
import ctypes
import io
import sys

import pytest

from dbgview import tty
from dbgview.callsite import PrintRecord
from dbgview.tty import (
    ANSI_ESCAPE_RE,
    NAME,
    RESET,
    TAG,
    VALUE,
    debug,
    debug_array,
    debug_assert,
    debug_n,
    debug_names,
    emit,
    format_record,
    load,
    trace,
    unload,
)


class TestDebug:
    """Tests for debug()."""

    def test_single_value(self, capsys):
        x = 5
        debug(x)
        assert capsys.readouterr().err == "[debug] x = 5\n"

    def test_several_values(self, capsys):
        x, items = 5, [1, 2]
        debug(x, len(items), items[0:1])
        assert capsys.readouterr().err == (
            "[debug] x = 5\n[debug] len(items) = 2\n[debug] items[0:1] = [1]\n"
        )

    def test_keywords(self, capsys):
        debug(total=3, label="a")
        assert capsys.readouterr().err == '[debug] total = 3\n[debug] label = "a"\n'

    def test_returns_value(self, capsys):
        value = debug(2 + 3) * 2
        assert value == 10
        pair = debug(1, 2)
        assert pair == (1, 2)
        assert "[debug] 2 + 3 = 5" in capsys.readouterr().err

    def test_no_arguments(self, capsys):
        result = debug()
        assert result == ()
        assert capsys.readouterr().err == ""

    def test_without_source(self, capsys):
        namespace = {"debug": debug}
        exec("debug(5, 'x')", namespace)
        assert capsys.readouterr().err == '[debug] arg0 = 5\n[debug] arg1 = "x"\n'

    def test_attribute_call(self, capsys):
        pair = (1, "a")
        tty.debug(pair)
        assert capsys.readouterr().err == '[debug] pair = (1, "a")\n'

    def test_colors_on_tty(self, capsys, monkeypatch):
        monkeypatch.setattr(sys.stderr, "isatty", lambda: True)
        x = 5
        debug(x)
        err = capsys.readouterr().err
        assert err == f"{TAG}[debug]{RESET} {NAME}x{RESET} = {VALUE}5{RESET}\n"
        assert ANSI_ESCAPE_RE.sub("", err) == "[debug] x = 5\n"


class TestDebugNames:
    """Tests for debug_names() and the explicit name list."""

    def test_single_value_not_split(self, capsys):
        debug_names("f(a, b)", 3)
        assert capsys.readouterr().err == "[debug] f(a, b) = 3\n"

    def test_split_names(self, capsys):
        debug_names(" x , f(a, b) ", 1, 2)
        assert capsys.readouterr().err == "[debug] x = 1\n[debug] f(a, b) = 2\n"

    def test_more_values_than_names(self, capsys):
        debug_names("a, b", 1, 2, 3)
        assert capsys.readouterr().err == "[debug] a = 1\n[debug] b = 2\n"

    def test_more_names_than_values(self, capsys):
        debug_names("a, b, c", 1, 2)
        assert capsys.readouterr().err == "[debug] a = 1\n[debug] b = 2\n"


class TestEmit:
    """Tests for emit() and format_record()."""

    def test_emit_to_file(self):
        out = io.StringIO()
        emit([PrintRecord("a", "1"), PrintRecord("b", "[]")], file=out)
        assert out.getvalue() == "[debug] a = 1\n[debug] b = []\n"

    def test_file_without_isatty(self):
        class Sink:
            def __init__(self):
                self.data = ""

            def write(self, text):
                self.data += text

        sink = Sink()
        emit([PrintRecord("a", "1")], file=sink)
        assert sink.data == "[debug] a = 1\n"

    def test_format_record_colors(self):
        line = format_record(PrintRecord("n", "v"))
        assert line.startswith(TAG)
        assert line.endswith(f"{RESET}\n")

    def test_styling_can_be_monkeypatched(self, monkeypatch):
        monkeypatch.setattr(tty, "TAG", "<")
        monkeypatch.setattr(tty, "RESET", ">")
        assert format_record(PrintRecord("n", "v")).startswith("<[debug]>")


class TestPeripheralPrinters:
    """Tests for debug_array, debug_n, debug_assert and trace."""

    def test_debug_array(self, capsys):
        samples = [1, 2, 3]
        debug_array(samples)
        assert capsys.readouterr().err == "[debug] samples[3] = [1, 2, 3]\n"

    def test_debug_array_nested(self, capsys):
        grid = ((1, 2), (3, 4))
        debug_array(grid)
        assert capsys.readouterr().err == "[debug] grid[2] = [(1, 2), (3, 4)]\n"

    def test_debug_n(self, capsys):
        values = [10, 20, 30, 40]
        debug_n(values, 2)
        assert capsys.readouterr().err == "[debug] values[2] = [10, 20]\n"

    def test_debug_n_truncates(self, capsys):
        values = list(range(30))
        debug_n(values, 25)
        expected = ", ".join(str(i) for i in range(20))
        assert capsys.readouterr().err == f"[debug] values[25] = [{expected}, ...]\n"

    def test_debug_n_shorter_sequence(self, capsys):
        values = [1, 2]
        result = debug_n(values, 4)
        assert result is values
        assert capsys.readouterr().err == "[debug] values[4] = [1, 2]\n"

    def test_debug_n_exact_limit(self, capsys):
        values = list(range(20))
        debug_n(values, 20)
        assert "..." not in capsys.readouterr().err

    def test_debug_n_ctypes_pointer(self, capsys):
        buf = (ctypes.c_int * 3)(7, 8, 9)
        ptr = ctypes.cast(buf, ctypes.POINTER(ctypes.c_int))
        debug_n(ptr, 3)
        assert capsys.readouterr().err == "[debug] ptr[3] = [7, 8, 9]\n"

    def test_debug_assert_passes(self, capsys):
        debug_assert(1 + 1 == 2)
        assert capsys.readouterr().err == ""

    def test_debug_assert_fails(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            debug_assert(1 + 1 == 3)
        assert excinfo.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("[ASSERT FAILED] ")
        assert "test_tty.py:" in err
        assert err.endswith(" - 1 + 1 == 3\n")

    def test_trace(self, capsys):
        def helper():
            trace()

        helper()
        err = capsys.readouterr().err
        assert err.startswith("[trace] helper() at ")
        assert "test_tty.py:" in err


class TestLoadUnload:
    """Tests for installing the printers as builtins."""

    def test_load_installs_builtins(self):
        load()
        try:
            assert builtins.debug is debug
            assert builtins.trace is trace
        finally:
            unload()
        assert not hasattr(builtins, "debug")

    def test_double_load_preserves_original(self, monkeypatch):
        sentinel = object()
        monkeypatch.setattr(builtins, "debug_n", sentinel, raising=False)
        load()
        load()
        unload()
        assert builtins.debug_n is sentinel

    def test_builtin_debug_names_values(self, capsys):
        load()
        try:
            x = 7
            namespace = {"x": x}
            exec("debug(x)", namespace)
        finally:
            unload()
        assert capsys.readouterr().err == "[debug] arg0 = 7\n"
