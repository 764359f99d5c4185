# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
应用层：

- resolver: 各阶段模板候选路径
- buffer: 分层输出缓冲
- cookies: JSON cookie 袋
- registry / loader: 站点代码加载与执行
- dispatcher: 前端控制器主流程
"""
