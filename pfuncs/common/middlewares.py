# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""请求 uid

每个请求一个 uid：优先沿用上游的 X-Request-Id，否则新生成；
写入 ContextVar 供日志 / 错误输出使用，并回写到响应头。
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

UID_HEADER = "X-Request-Id"

_uid_ctx: ContextVar[str] = ContextVar("pfuncs_uid", default="-")


def new_uid() -> str:
    # 与 uniqid() 同长度的 13 位 hex
    return uuid.uuid4().hex[:13]


def get_uid() -> str:
    return _uid_ctx.get()


class RequestUidMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        uid = request.headers.get(UID_HEADER) or new_uid()
        _uid_ctx.set(uid)
        request.state.uid = uid
        response: Response = await call_next(request)
        response.headers[UID_HEADER] = uid
        return response
