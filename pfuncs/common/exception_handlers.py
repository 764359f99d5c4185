# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import html
import json
import logging
import os
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape as xml_escape

from fastapi import Request
from starlette.responses import Response

from pfuncs.common.errors import PfuncsError
from pfuncs.common.logging import ERROR_LOGGER
from pfuncs.common.middlewares import get_uid
from pfuncs.domain.context import MEDIA_TYPES, parse_extension

logger = logging.getLogger(ERROR_LOGGER)


def _report(uid: str, err: PfuncsError) -> Dict[str, Any]:
    file = os.path.basename(err.file) if err.file else "?"
    trace: List[str] = [frame.format() for frame in err.trace]
    output = f"{uid} {file}:{err.line} {err.code} {err.message}\n\t" + "\n\t".join(trace) + "\n"
    return {
        "uid": uid,
        "file": file,
        "line": err.line,
        "code": err.code,
        "message": err.message,
        "trace": trace,
        "error": output,
    }


def format_error_body(report: Dict[str, Any], extension: str) -> str:
    """按内容类型输出错误"""
    output = report["error"]

    if extension == "json":
        return json.dumps(report, indent=4)
    if extension == "xml":
        return '<?xml version="1.0" encoding="UTF-8"?><error>' + xml_escape(output, {'"': "&quot;", "'": "&apos;"}) + "</error>"
    if extension == "txt":
        return output
    if extension == "js":
        return 'if(typeof console.log != "undefined")console.log(' + json.dumps(output) + ");"
    if extension == "css":
        return "/*\n" + output.replace("*/", "* /") + "\n*/"
    return "<html><body><pre>" + html.escape(output) + "</pre></body></html>"


def render_error(exc: BaseException, extension: str, uid: Optional[str] = None) -> Response:
    """顶层错误响应：记录诊断日志，设置状态码，按扩展名输出"""
    err = PfuncsError.from_exception(exc)
    report = _report(uid or get_uid(), err)

    logger.error(report["error"].rstrip("\n"))

    return Response(
        content=format_error_body(report, extension),
        status_code=err.status,
        media_type=MEDIA_TYPES.get(extension, MEDIA_TYPES["html"]),
    )


async def pfuncs_error_handler(request: Request, exc: PfuncsError) -> Response:
    """dispatcher 之外抛出的 PfuncsError（例如中间件、body 读取）"""
    settings = getattr(request.app.state, "settings", None)
    extension = parse_extension(request.url.path, settings.DEFAULT_EXTENSION if settings else "html")
    uid = getattr(request.state, "uid", None)
    return render_error(exc, extension, uid)
