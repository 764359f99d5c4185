# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import mimetypes
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from pfuncs.common.errors import NotFoundError

DEFAULT_DYNAMIC_EXTENSIONS: Tuple[str, ...] = ("html", "txt", "json", "xml", "js", "css")

MEDIA_TYPES = {
    "html": "text/html",
    "txt": "text/plain",
    "json": "application/json",
    "xml": "application/xml",
    "js": "application/javascript",
    "css": "text/css",
}

_EXTENSION_RE = re.compile(r"\.(?P<ext>\w+)$")
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


def parse_extension(path: str, default: str = "html") -> str:
    match = _EXTENSION_RE.search(path.strip("/"))
    return match.group("ext") if match else default


def media_type_for(extension: str) -> str:
    if extension in MEDIA_TYPES:
        return MEDIA_TYPES[extension]
    guessed, _ = mimetypes.guess_type(f"file.{extension}")
    return guessed or "application/octet-stream"


def _token(segment: str) -> str:
    token = _EXTENSION_RE.sub("", segment)
    if token and not _TOKEN_RE.match(token):
        raise NotFoundError()
    return token


def route(path: str) -> Tuple[str, Optional[str]]:
    """URL path -> (controller, action)

    - controller: 第一段，去掉 .ext，默认 index
    - action: 第二段，去掉 .ext；controller 为 index 或只有一段时为 None
    """
    segments = path.strip("/").split("/")

    controller = _token(segments[0]) or "index"
    if controller == "index" or len(segments) < 2:
        return controller, None

    return controller, _token(segments[1]) or "index"


@dataclass(frozen=True)
class RequestContext:
    """单次请求的只读上下文，贯穿整个处理流程"""

    uid: str
    method: str
    path: str
    site: str
    extension: str
    controller: str
    action: Optional[str]
    dynamic: bool = True
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(
        cls,
        *,
        uid: str,
        method: str,
        path: str,
        site: str,
        params: Optional[Mapping[str, Any]] = None,
        default_extension: str = "html",
        dynamic_extensions: Iterable[str] = DEFAULT_DYNAMIC_EXTENSIONS,
        tz: str = "UTC",
    ) -> "RequestContext":
        extension = parse_extension(path, default_extension)
        controller, action = route(path)
        return cls(
            uid=uid,
            method=method.upper(),
            path=path,
            site=site,
            extension=extension,
            controller=controller,
            action=action,
            dynamic=extension in set(dynamic_extensions),
            params=MappingProxyType(dict(params or {})),
            started_at=datetime.now(ZoneInfo(tz)),
        )

    @property
    def media_type(self) -> str:
        return media_type_for(self.extension)
