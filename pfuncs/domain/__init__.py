# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
领域层：

- context: 单次请求的只读上下文（uid / 扩展名 / controller / action / 参数）
- route: URL -> (controller, action, extension) 的解析
"""

from pfuncs.domain.context import RequestContext, media_type_for, parse_extension, route

__all__ = ["RequestContext", "media_type_for", "parse_extension", "route"]
