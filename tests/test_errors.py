import inspect
import os

import pytest

from pfuncs.application.loader import include, new_scope
from pfuncs.common.errors import (
    BadRequestError,
    NotFoundError,
    PfuncsError,
    TraceFrame,
    error,
    install_warning_hook,
    trace_root,
)

HERE = os.path.basename(__file__)


def test_error_with_message_defaults_to_500_and_call_site():
    with pytest.raises(PfuncsError) as info:
        line = inspect.currentframe().f_lineno + 1
        error("boom")

    err = info.value
    assert err.message == "boom"
    assert str(err) == "boom"
    assert err.status == 500
    assert err.code == 500
    assert os.path.basename(err.file) == HERE
    assert err.line == line
    assert err.trace[0].function == "test_error_with_message_defaults_to_500_and_call_site"


def test_error_with_status_argument():
    with pytest.raises(PfuncsError) as info:
        error("Not Found", 404)
    assert (info.value.status, info.value.code) == (404, 404)


def test_error_with_record():
    with pytest.raises(PfuncsError) as info:
        error({"message": "bad input", "file": "/srv/app/form.py", "line": 7, "status": 422, "code": 9})

    err = info.value
    assert (err.message, err.file, err.line, err.status, err.code) == ("bad input", "/srv/app/form.py", 7, 422, 9)


def test_error_record_defaults():
    with pytest.raises(PfuncsError) as info:
        error({"status": 403})

    err = info.value
    assert err.message == "Unknown error."
    assert err.code == 403
    assert os.path.basename(err.file) == HERE


def test_subclasses_keep_call_site():
    line = inspect.currentframe().f_lineno + 1
    err = NotFoundError()
    assert (err.message, err.status, err.code) == ("Not Found", 404, 404)
    assert os.path.basename(err.file) == HERE
    assert err.line == line
    assert BadRequestError("nope").status == 400


def test_from_exception_keeps_throw_site():
    def explode(value):
        return value / 0

    try:
        explode(3)
    except ZeroDivisionError as exc:
        err = PfuncsError.from_exception(exc)
    else:
        pytest.fail("expected ZeroDivisionError")

    assert err.message.startswith("ZeroDivisionError: ")
    assert err.status == 500
    assert os.path.basename(err.file) == HERE
    assert err.trace[0].function == "explode"
    assert err.trace[0].args == (3,)
    assert isinstance(err.__cause__, ZeroDivisionError)


def test_from_exception_returns_pfuncs_error_unchanged():
    err = PfuncsError(message="x", status=418)
    assert PfuncsError.from_exception(err) is err


def test_trace_frame_format():
    frame = TraceFrame(file="/a/b/page.py", line=3, function="render", args=(1, "x", [1, 2], {"k": 1}))
    assert frame.format() == "page.py:3 render(1, x, list, dict)"
    assert TraceFrame(file="", line=0, function="").format() == "?:0 ?()"


def test_site_warning_is_promoted(tmp_path):
    install_warning_hook([tmp_path])
    script = tmp_path / "warns.py"
    script.write_text("import warnings\nwarnings.warn('careful')\n", encoding="utf-8")

    with pytest.raises(PfuncsError) as info:
        include(script, new_scope())

    err = info.value
    assert err.message == "UserWarning: careful"
    assert (err.status, err.code) == (500, 500)
    assert err.file == str(script)
    assert err.line == 2


def test_trace_stops_at_marked_root():
    def inner():
        error("deep")

    @trace_root
    def root():
        inner()

    def outer():
        root()

    with pytest.raises(PfuncsError) as info:
        outer()

    assert [f.function for f in info.value.trace] == ["inner", "root"]


def test_traceback_frames_stop_at_marked_root():
    def inner():
        return 1 / 0

    @trace_root
    def root():
        inner()

    try:
        root()
    except ZeroDivisionError as exc:
        err = PfuncsError.from_exception(exc)

    assert [f.function for f in err.trace] == ["inner", "root"]
