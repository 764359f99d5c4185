# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置，从 .env / 环境变量读取"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 运行环境
    ENV: str = Field("dev", description="运行环境: dev / prod")

    # 站点目录
    SITES_ROOT: str = Field(
        "./src",
        description="站点根目录，每个站点一个子目录（目录名即 host）",
        validation_alias=AliasChoices("SITES_ROOT", "PFUNCS_SITES_ROOT", "sites_root"),
    )
    SERVER_NAME: Optional[str] = Field(
        None,
        description="固定站点名（可选），未设置时取请求的 host",
        validation_alias=AliasChoices("SERVER_NAME", "server_name"),
    )
    DEFAULT_SITE: str = Field(
        "localhost",
        description="无法从请求得出 host 时使用的站点名",
        validation_alias=AliasChoices("DEFAULT_SITE", "default_site"),
    )

    # 内容类型
    DEFAULT_EXTENSION: str = Field(
        "html",
        description="URL 无扩展名时的内容类型",
        validation_alias=AliasChoices("DEFAULT_EXTENSION", "default_extension"),
    )
    DYNAMIC_EXTENSIONS: List[str] = Field(
        default_factory=lambda: ["html", "txt", "json", "xml", "js", "css"],
        description="动态内容扩展名，其余扩展名按静态文件处理",
        validation_alias=AliasChoices("DYNAMIC_EXTENSIONS", "dynamic_extensions"),
    )

    # 站点代码
    CODE_DIR: str = Field(
        "py",
        description="站点代码目录名（global / controller / action 三级）",
        validation_alias=AliasChoices("CODE_DIR", "code_dir"),
    )
    CONFIG_FILE: str = Field(
        "configs.py",
        description="站点配置脚本文件名（可选）",
        validation_alias=AliasChoices("CONFIG_FILE", "config_file"),
    )

    TIMEZONE: str = Field(
        "UTC",
        description="请求时间戳使用的时区",
        validation_alias=AliasChoices("TIMEZONE", "TZ_NAME", "timezone"),
    )

    # Session
    SESSION_SECRET: str = Field(
        "dev-secret-change-me",
        description="session cookie 签名密钥（生产务必更换）",
        validation_alias=AliasChoices("SESSION_SECRET", "session_secret"),
    )

    # 日志
    LOG_LEVEL: str = Field(
        "INFO",
        description="日志级别",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )
    ERROR_LOG_FILE: Optional[str] = Field(
        None,
        description="诊断错误日志文件（可选）",
        validation_alias=AliasChoices("ERROR_LOG_FILE", "error_log_file"),
    )


settings = Settings()
