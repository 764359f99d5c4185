# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, MutableMapping, Optional

logger = logging.getLogger(__name__)


class CookieBag(MutableMapping[str, Any]):
    """以单个 cookie 存放的 JSON 字典，用法类似 session

    请求开始时 load()，请求结束时无条件 dumps() 写回。
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(data or {})

    @classmethod
    def load(cls, raw: Optional[str]) -> "CookieBag":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("cookie bag is not valid json, starting empty")
            return cls()
        if not isinstance(data, dict):
            logger.warning("cookie bag is not a json object, starting empty")
            return cls()
        return cls({str(k): v for k, v in data.items()})

    def dumps(self) -> str:
        return json.dumps(self._data, separators=(",", ":"))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[str(key)] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"CookieBag({self._data!r})"
