# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""前端控制器主流程

1. 解析上下文（uid / 扩展名 / controller / action / 参数 / cookie）
2. 非动态扩展名：直接输出静态文件
3. 执行 configs.py 与三级站点代码
4. header + body + footer 分层缓冲输出，body 失败走 controller/action 级 error 模板，
   仍失败走站点级 error 模板，最后交给 render_error
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, MutableMapping, Optional
from urllib.parse import parse_qsl

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import FileResponse, Response

from pfuncs.application.buffer import OutputBuffer
from pfuncs.application.cookies import CookieBag
from pfuncs.application.loader import CodeLoader, Scope, include, new_scope
from pfuncs.application.registry import HandlerRegistry
from pfuncs.application.resolver import (
    SCRIPT_SUFFIX,
    body_candidates,
    body_error_candidates,
    first_existing,
    footer_candidates,
    global_error_candidates,
    header_candidates,
    static_candidates,
)
from pfuncs.common.errors import BadRequestError, NotFoundError, PfuncsError, error, trace_root
from pfuncs.common.exception_handlers import render_error
from pfuncs.common.middlewares import get_uid
from pfuncs.domain.context import RequestContext, parse_extension
from pfuncs.infra.config import Settings

logger = logging.getLogger(__name__)

_SITE_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


@dataclass
class ResponseState:
    """模板可修改的响应状态"""
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    def redirect(self, url: str, status_code: int = 302) -> None:
        self.status_code = status_code
        self.headers["location"] = url


async def read_params(request: Request) -> Dict[str, Any]:
    """query 参数 + body 字段（urlencoded / json）合并，body 覆盖 query"""
    params: Dict[str, Any] = dict(request.query_params)

    body = await request.body()
    if not body:
        return params

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == "application/json":
        try:
            data = json.loads(body)
        except ValueError as e:
            raise BadRequestError("Invalid JSON body") from e
        if isinstance(data, dict):
            params.update(data)
    elif not content_type.startswith("multipart/"):
        params.update(parse_qsl(body.decode("utf-8", "replace"), keep_blank_values=True))
    return params


class FrontController:
    def __init__(self, settings: Settings, registry: Optional[HandlerRegistry] = None) -> None:
        self._settings = settings
        self._sites_root = Path(settings.SITES_ROOT)
        self._loader = CodeLoader(registry)

    def site_name(self, request: Request) -> str:
        if self._settings.SERVER_NAME:
            return self._settings.SERVER_NAME
        host = request.url.hostname
        # IPv6 等非目录名形式的 host 归到默认站点
        if host and _SITE_RE.match(host):
            return host
        return self._settings.DEFAULT_SITE

    def site_root(self, site: str) -> Path:
        return self._sites_root / site

    async def handle(self, request: Request) -> Response:
        uid = getattr(request.state, "uid", None) or get_uid()
        extension = parse_extension(request.url.path, self._settings.DEFAULT_EXTENSION)
        site: Optional[str] = None
        cookies = CookieBag()

        try:
            site = self.site_name(request)
            cookies = CookieBag.load(request.cookies.get(site))
            ctx = RequestContext.build(
                uid=uid,
                method=request.method,
                path=request.url.path,
                site=site,
                params=await read_params(request),
                default_extension=self._settings.DEFAULT_EXTENSION,
                dynamic_extensions=self._settings.DYNAMIC_EXTENSIONS,
                tz=self._settings.TIMEZONE,
            )
            session = request.session if "session" in request.scope else {}
            response = await run_in_threadpool(self.dispatch, ctx, cookies, session)
        except Exception as exc:  # noqa: BLE001
            response = render_error(exc, extension, uid)

        # cookie 袋在请求结束时无条件写回
        if site is not None:
            response.set_cookie(site, cookies.dumps(), httponly=True, samesite="lax")
        return response

    @trace_root
    def dispatch(
        self,
        ctx: RequestContext,
        cookies: CookieBag,
        session: Optional[MutableMapping[str, Any]] = None,
    ) -> Response:
        site_root = self.site_root(ctx.site)
        content = site_root / ctx.extension

        if not ctx.dynamic:
            # 站点代码目录不是内容目录
            if ctx.extension in (self._settings.CODE_DIR, SCRIPT_SUFFIX.lstrip(".")):
                raise NotFoundError()
            return self._static(content, ctx)

        out = OutputBuffer()
        state = ResponseState()
        scope = new_scope()
        scope.update(
            ctx=ctx,
            params=ctx.params,
            cookies=cookies,
            session=session if session is not None else {},
            response=state,
            echo=out.echo,
            error=error,
            die=_die(out),
        )

        try:
            self._loader.load_config(site_root / self._settings.CONFIG_FILE, scope)
            self._loader.load(site_root / self._settings.CODE_DIR, ctx, scope)
            self._compose(content, ctx, scope, out, state)
        except SystemExit:
            logger.debug("request halted by site code")

        return Response(
            content=out.getvalue(),
            status_code=state.status_code,
            headers=state.headers,
            media_type=ctx.media_type,
        )

    def _static(self, content: Path, ctx: RequestContext) -> Response:
        path = first_existing(static_candidates(content, ctx))
        if path is None:
            raise NotFoundError()
        return FileResponse(path, media_type=ctx.media_type)

    def _compose(
        self,
        content: Path,
        ctx: RequestContext,
        scope: Scope,
        out: OutputBuffer,
        state: ResponseState,
    ) -> None:
        try:
            with out.buffer():
                self._include_first(header_candidates(content, ctx), scope, out)

                try:
                    with out.buffer():
                        if not self._include_first(body_candidates(content, ctx), scope, out):
                            raise NotFoundError()
                except Exception as exc:  # noqa: BLE001
                    handler = first_existing(body_error_candidates(content, ctx))
                    if handler is None:
                        raise
                    self._include_error(handler, exc, scope, out, state)

                self._include_first(footer_candidates(content, ctx), scope, out)
        except Exception as exc:  # noqa: BLE001
            handler = first_existing(global_error_candidates(content, ctx))
            if handler is None:
                raise
            self._include_error(handler, exc, scope, out, state)

    def _include_first(self, candidates: List[Path], scope: Scope, out: OutputBuffer) -> bool:
        path = first_existing(candidates)
        if path is None:
            return False
        _emit(path, scope, out)
        return True

    def _include_error(
        self,
        path: Path,
        exc: Exception,
        scope: Scope,
        out: OutputBuffer,
        state: ResponseState,
    ) -> None:
        err = PfuncsError.from_exception(exc)
        logger.info("error %s %s handled by %s", err.status, err.message, path.name)
        state.status_code = err.status
        scope["exception"] = err
        _emit(path, scope, out)


def _emit(path: Path, scope: Scope, out: OutputBuffer) -> None:
    """.py 模板在共享 scope 中执行，其余文件原样输出"""
    if path.name.endswith(SCRIPT_SUFFIX):
        include(path, scope)
    else:
        out.write(path.read_bytes())


def _die(out: OutputBuffer) -> Callable[..., None]:
    def die(message: Any = "") -> None:
        if message:
            out.echo(message)
        raise SystemExit(0)

    return die
