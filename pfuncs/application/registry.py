# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from pfuncs.domain.context import RequestContext

Scope = Dict[str, Any]
Hook = Callable[[Scope, RequestContext], None]
HookKey = Tuple[Optional[str], Optional[str]]


class HandlerRegistry:
    """显式注册的站点代码

    key 为 (controller, action)，None 表示不限：
    - (None, None): 所有请求
    - ("foo", None): controller foo
    - ("foo", "bar"): foo/bar
    """

    def __init__(self) -> None:
        self._hooks: Dict[HookKey, List[Hook]] = {}

    def register(self, hook: Hook, controller: Optional[str] = None, action: Optional[str] = None) -> Hook:
        if action is not None and controller is None:
            raise ValueError("action hook requires a controller")
        self._hooks.setdefault((controller, action), []).append(hook)
        return hook

    def hook(self, controller: Optional[str] = None, action: Optional[str] = None) -> Callable[[Hook], Hook]:
        def decorator(fn: Hook) -> Hook:
            return self.register(fn, controller, action)

        return decorator

    def get(self, controller: Optional[str] = None, action: Optional[str] = None) -> List[Hook]:
        return list(self._hooks.get((controller, action), ()))
