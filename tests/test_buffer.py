import pytest

from pfuncs.application.buffer import OutputBuffer


def test_nested_buffers_flush_in_order():
    out = OutputBuffer()
    with out.buffer():
        out.write("<h>")
        with out.buffer():
            out.echo("body ", 1)
            assert out.depth == 2
        out.write(b"</h>")
    assert out.depth == 0
    assert out.getvalue() == b"<h>body 1</h>"


def test_failed_level_is_discarded():
    out = OutputBuffer()
    with out.buffer():
        out.write("head|")
        with pytest.raises(RuntimeError):
            with out.buffer():
                out.write("partial body")
                raise RuntimeError("boom")
        out.write("error page")
    assert out.getvalue() == b"head|error page"


def test_outer_failure_discards_everything_inside():
    out = OutputBuffer()
    with pytest.raises(ValueError):
        with out.buffer():
            out.write("head")
            with out.buffer():
                out.write("body")
            raise ValueError("footer failed")
    assert out.getvalue() == b""
    assert out.depth == 0


def test_system_exit_keeps_output():
    out = OutputBuffer()
    with pytest.raises(SystemExit):
        with out.buffer():
            out.write("a")
            with out.buffer():
                out.write("b")
                raise SystemExit(0)
    assert out.getvalue() == b"ab"
    assert out.depth == 0


def test_write_ignores_none_and_stringifies():
    out = OutputBuffer()
    out.write(None)
    out.write(42)
    assert out.getvalue() == b"42"
