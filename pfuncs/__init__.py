# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""pfuncs: 基于目录约定的前端控制器

URL `/<controller>[/<action>][.<ext>]` 映射到站点目录下的模板文件，
header/body/footer 分层缓冲输出，所有错误统一转为按扩展名协商的响应。
"""

from __future__ import annotations

__version__ = "1.0.0"
