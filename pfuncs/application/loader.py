# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""站点代码加载

所有站点脚本（configs.py / py/ 下的代码 / .py 模板）都在同一个 scope 字典里执行，
后加载的定义可以覆盖先加载的。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from pfuncs.application.registry import HandlerRegistry
from pfuncs.common.errors import SITE_MODULE
from pfuncs.domain.context import RequestContext

logger = logging.getLogger(__name__)

Scope = Dict[str, Any]


def new_scope() -> Scope:
    return {"__name__": SITE_MODULE}


def include(path: Path, scope: Scope) -> None:
    """在共享 scope 中执行一个站点脚本"""
    code = compile(path.read_bytes(), str(path), "exec")
    scope["__file__"] = str(path)
    exec(code, scope)  # noqa: S102


class CodeLoader:
    def __init__(self, registry: Optional[HandlerRegistry] = None) -> None:
        self._registry = registry or HandlerRegistry()

    def load_config(self, config_file: Path, scope: Scope) -> bool:
        if not config_file.is_file():
            return False
        include(config_file, scope)
        return True

    @staticmethod
    def levels(code_root: Path, ctx: RequestContext) -> List[Tuple[Path, Tuple[Optional[str], Optional[str]]]]:
        """global -> controller -> action，action 为 None 时没有第三级"""
        out = [
            (code_root, (None, None)),
            (code_root / ctx.controller, (ctx.controller, None)),
        ]
        if ctx.action is not None:
            out.append((code_root / ctx.controller / ctx.action, (ctx.controller, ctx.action)))
        return out

    def load(self, code_root: Path, ctx: RequestContext, scope: Scope) -> List[Path]:
        """按固定顺序执行三级目录下的 *.py（不递归），每个文件只执行一次"""
        included: Set[Path] = set()
        loaded: List[Path] = []

        for directory, key in self.levels(code_root, ctx):
            if directory.is_dir():
                for path in sorted(directory.glob("*.py")):
                    if not path.is_file():
                        continue
                    real = path.resolve()
                    if real in included:
                        continue
                    included.add(real)
                    include(path, scope)
                    loaded.append(path)

            for hook in self._registry.get(*key):
                hook(scope, ctx)

        if loaded:
            logger.debug("loaded %d site code files for %s/%s", len(loaded), ctx.controller, ctx.action)
        return loaded
