# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pfuncs.common.middlewares import get_uid

ERROR_LOGGER = "pfuncs.errors"


class UidFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        setattr(record, "uid", get_uid())
        return True


def _formatter() -> logging.Formatter:
    return logging.Formatter(
        "[%(asctime)s - %(levelname)s - uid=%(uid)s - %(name)s - %(message)s]",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _ensure_filter(handler: logging.Handler) -> None:
    has_filter = any(isinstance(f, UidFilter) for f in getattr(handler, "filters", []))
    if not has_filter:
        handler.addFilter(UidFilter())


def setup_logging(level: Union[int, str] = logging.INFO, error_log_file: Optional[str] = None) -> None:
    """初始化全局日志

    error_log_file 非空时，诊断错误（pfuncs.errors）额外写入该文件。
    """

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_formatter())
        root.addHandler(handler)

    # 给现有 handler 全部加 filter
    for h in root.handlers:
        _ensure_filter(h)

    if error_log_file:
        errors = logging.getLogger(ERROR_LOGGER)
        exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(error_log_file)
            for h in errors.handlers
        )
        if not exists:
            fh = logging.FileHandler(error_log_file, encoding="utf-8")
            fh.setFormatter(_formatter())
            _ensure_filter(fh)
            errors.addHandler(fh)
