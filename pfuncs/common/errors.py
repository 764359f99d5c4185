# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""错误统一

显式错误（error()）、站点代码的 warning、未捕获异常都归一为 PfuncsError，
携带 message/file/line/status/code/trace，供顶层统一渲染。
"""

from __future__ import annotations

import inspect
import os
import sys
import threading
import traceback
import warnings
from dataclasses import dataclass, field
from types import CodeType, FrameType, TracebackType
from typing import Any, Callable, Iterable, List, Mapping, NoReturn, Optional, Set, Tuple, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])

SITE_MODULE = "pfuncs.site"

_THIS_FILE = os.path.normcase(os.path.abspath(__file__))

# 调用栈收集到这些函数为止（含），更外层的框架栈不计入
_TRACE_ROOTS: Set[CodeType] = set()


@dataclass(frozen=True)
class TraceFrame:
    file: str
    line: int
    function: str
    args: Tuple[Any, ...] = ()

    def format(self) -> str:
        file = os.path.basename(self.file) if self.file else "?"
        args = ", ".join(str(a) if _is_scalar(a) else type(a).__name__ for a in self.args)
        return f"{file}:{self.line} {self.function or '?'}({args})"


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, bytes, int, float, bool))


def _frame_args(frame: FrameType) -> Tuple[Any, ...]:
    info = inspect.getargvalues(frame)
    values: List[Any] = [info.locals.get(name) for name in info.args]
    if info.varargs:
        values.extend(info.locals.get(info.varargs) or ())
    return tuple(values)


def _to_trace_frame(frame: FrameType, lineno: Optional[int] = None) -> TraceFrame:
    return TraceFrame(
        file=frame.f_code.co_filename,
        line=lineno if lineno is not None else frame.f_lineno,
        function=frame.f_code.co_name,
        args=_frame_args(frame),
    )


def _is_internal(frame: FrameType) -> bool:
    filename = frame.f_code.co_filename
    return filename == "<string>" or os.path.normcase(os.path.abspath(filename)) == _THIS_FILE


def _outside_frame(frame: Optional[FrameType]) -> Optional[FrameType]:
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    return frame


def trace_root(fn: F) -> F:
    """标记调用栈的最外层：trace 收集到该函数为止"""
    _TRACE_ROOTS.add(fn.__code__)
    return fn


def capture_stack(frame: Optional[FrameType]) -> List[TraceFrame]:
    """从 frame 开始向外收集调用栈（最内层在前）"""
    out: List[TraceFrame] = []
    while frame is not None:
        out.append(_to_trace_frame(frame))
        if frame.f_code in _TRACE_ROOTS:
            break
        frame = frame.f_back
    return out


def frames_from_traceback(tb: Optional[TracebackType]) -> List[TraceFrame]:
    entries = list(traceback.walk_tb(tb))
    entries.reverse()
    frames: List[TraceFrame] = []
    for f, lineno in entries:
        frames.append(_to_trace_frame(f, lineno))
        if f.f_code in _TRACE_ROOTS:
            break
    return frames


@dataclass(eq=False)
class PfuncsError(Exception):
    """异常统一"""
    message: str
    status: int = 500
    code: Optional[int] = None
    file: str = ""
    line: int = 0
    trace: List[TraceFrame] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.args = (self.message,)
        if self.code is None:
            self.code = self.status
        if not self.file or not self.trace:
            origin = _outside_frame(sys._getframe(1))
            if origin is not None:
                if not self.file:
                    self.file = origin.f_code.co_filename
                    self.line = self.line or origin.f_lineno
                if not self.trace:
                    self.trace = capture_stack(origin)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_exception(cls, exc: BaseException) -> "PfuncsError":
        """取最完整的错误记录：PfuncsError 原样返回，其他异常保留原始抛出点"""
        if isinstance(exc, PfuncsError):
            return exc

        frames = frames_from_traceback(exc.__traceback__)
        text = str(exc)
        message = f"{type(exc).__name__}: {text}" if text else type(exc).__name__
        innermost = frames[0] if frames else TraceFrame(file="?", line=0, function="?")
        err = cls(
            message=message,
            status=500,
            file=innermost.file,
            line=innermost.line,
            trace=frames or [innermost],
        )
        err.__cause__ = exc
        return err


class BadRequestError(PfuncsError):
    def __init__(self, message: str = "Bad Request", code: Optional[int] = None) -> None:
        super().__init__(message=message, status=400, code=code)


class NotFoundError(PfuncsError):
    def __init__(self, message: str = "Not Found", code: Optional[int] = None) -> None:
        super().__init__(message=message, status=404, code=code)


def error(error: Union[str, Mapping[str, Any]], status: int = 500) -> NoReturn:
    """抛出 PfuncsError

    error 可以是纯文本（status 默认 500），也可以是包含
    message/file/line/status/code 的 dict，缺省字段取调用点。
    """
    caller = sys._getframe(1)

    if isinstance(error, Mapping):
        message = error.get("message") or "Unknown error."
        status = error.get("status", status)
        raise PfuncsError(
            message=str(message),
            status=status,
            code=error.get("code", status),
            file=error.get("file") or caller.f_code.co_filename,
            line=error.get("line") or caller.f_lineno,
            trace=capture_stack(caller),
        )

    raise PfuncsError(
        message=str(error),
        status=status,
        file=caller.f_code.co_filename,
        line=caller.f_lineno,
        trace=capture_stack(caller),
    )


# ---------- warning -> PfuncsError ----------

_hook_lock = threading.Lock()
_site_roots: Set[str] = set()
_previous_showwarning = None


def _is_site_file(filename: str) -> bool:
    path = os.path.realpath(filename)
    return any(path == root or path.startswith(root + os.sep) for root in _site_roots)


def _promote_warning(message, category, filename, lineno, file=None, line=None):  # noqa: ANN001
    if not _is_site_file(filename):
        if _previous_showwarning is not None:
            return _previous_showwarning(message, category, filename, lineno, file, line)
        return None

    frame = sys._getframe(1)
    while frame is not None and frame.f_code.co_filename != filename:
        frame = frame.f_back

    raise PfuncsError(
        message=f"{category.__name__}: {message}",
        status=500,
        code=500,
        file=filename,
        line=lineno,
        trace=capture_stack(frame) if frame is not None else [TraceFrame(filename, lineno, "?")],
    )


def install_warning_hook(site_roots: Iterable[Union[str, os.PathLike]]) -> None:
    """站点代码里的 warning 一律提升为 PfuncsError，其余 warning 行为不变"""
    global _previous_showwarning

    with _hook_lock:
        for root in site_roots:
            _site_roots.add(os.path.realpath(os.fspath(root)))

        if warnings.showwarning is not _promote_warning:
            _previous_showwarning = warnings.showwarning
            warnings.showwarning = _promote_warning
            warnings.filterwarnings("always", module=SITE_MODULE.replace(".", r"\."))
