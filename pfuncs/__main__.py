# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import argparse
import os

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="pfuncs 前端控制器")
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="监听地址（默认：127.0.0.1）",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="监听端口（默认：8000）",
    )
    parser.add_argument(
        "--sites-root",
        type=str,
        default=None,
        help="站点根目录（默认取 SITES_ROOT 配置）",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="开发模式：代码变更自动重启",
    )
    args = parser.parse_args()

    # 配置在 import pfuncs.main 时读取，这里通过环境变量传入
    if args.sites_root:
        os.environ["SITES_ROOT"] = args.sites_root

    uvicorn.run("pfuncs.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
