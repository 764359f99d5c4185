# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""模板候选路径

每个阶段（header / body / footer / error）都是一组有序候选路径，
每个候选先是内容扩展名文件本身，其次是同名加 `.py` 的可执行模板。
first_existing() 返回第一个存在的候选。
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from pfuncs.domain.context import RequestContext

SCRIPT_SUFFIX = ".py"


def _with_script(paths: Iterable[Path]) -> List[Path]:
    out: List[Path] = []
    for p in paths:
        out.append(p)
        out.append(p.with_name(p.name + SCRIPT_SUFFIX))
    return out


def header_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    return _with_script([content / ctx.controller / f".header.{ctx.extension}"])


def footer_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    return _with_script([content / ctx.controller / f".footer.{ctx.extension}"])


def body_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    ext = ctx.extension
    paths: List[Path] = []
    if ctx.action is not None:
        paths.append(content / ctx.controller / f"{ctx.action}.{ext}")
    paths += [
        content / ctx.controller / f".body.{ext}",
        content / f"{ctx.controller}.{ext}",
        content / f".body.{ext}",
    ]
    return _with_script(paths)


def body_error_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    ext = ctx.extension
    paths: List[Path] = []
    if ctx.action is not None:
        paths.append(content / ctx.controller / ctx.action / f".error.{ext}")
    paths.append(content / ctx.controller / f".error.{ext}")
    return _with_script(paths)


def global_error_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    return _with_script([content / f".error.{ctx.extension}"])


def static_candidates(content: Path, ctx: RequestContext) -> List[Path]:
    # 静态文件不接受 .py 兄弟文件
    paths = [content / f"{ctx.controller}.{ctx.extension}"]
    if ctx.action is not None:
        paths.append(content / ctx.controller / f"{ctx.action}.{ctx.extension}")
    return paths


def first_existing(
    candidates: Iterable[Path],
    exists: Callable[[Path], bool] = Path.is_file,
) -> Optional[Path]:
    for candidate in candidates:
        if exists(candidate):
            return candidate
    return None
