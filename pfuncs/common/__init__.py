# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""通用基础设施（错误/日志/uid 等）

约定：
- 所有失败统一为 PfuncsError，由顶层 render_error 转为按扩展名协商的响应
- uid 通过 middleware 注入，并写入日志，便于线上排障
"""

from __future__ import annotations
