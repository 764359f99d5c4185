# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from pfuncs import __version__
from pfuncs.application.dispatcher import FrontController
from pfuncs.application.registry import HandlerRegistry
from pfuncs.common.errors import PfuncsError, install_warning_hook
from pfuncs.common.exception_handlers import pfuncs_error_handler
from pfuncs.common.logging import setup_logging
from pfuncs.common.middlewares import RequestUidMiddleware
from pfuncs.infra.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, registry: Optional[HandlerRegistry] = None) -> FastAPI:
    settings = settings or default_settings

    setup_logging(settings.LOG_LEVEL, settings.ERROR_LOG_FILE)
    install_warning_hook([settings.SITES_ROOT])

    app = FastAPI(
        title="pfuncs",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    controller = FrontController(settings, registry)
    app.state.settings = settings
    app.state.controller = controller
    logger.info("pfuncs ready: sites_root=%s env=%s", settings.SITES_ROOT, settings.ENV)

    # ---------- middlewares / handlers ----------

    app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET, session_cookie="pfuncs_session")
    app.add_middleware(RequestUidMiddleware)

    app.add_exception_handler(PfuncsError, pfuncs_error_handler)

    # 所有请求都交给前端控制器
    @app.api_route("/{path:path}", methods=["GET", "POST"], include_in_schema=False)
    async def front(request: Request) -> Response:
        return await controller.handle(request)

    return app


app = create_app()
