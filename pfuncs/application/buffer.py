# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Union

Chunk = Union[str, bytes]


class OutputBuffer:
    """分层输出缓冲

    buffer() 开一层：正常退出时并入上一层，异常退出时整层丢弃后继续抛出。
    write() 总是写入最内层。
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._levels: List[List[bytes]] = [[]]

    @property
    def depth(self) -> int:
        return len(self._levels) - 1

    def write(self, chunk: Chunk) -> None:
        if chunk is None:
            return
        if isinstance(chunk, str):
            chunk = chunk.encode(self._encoding)
        elif not isinstance(chunk, (bytes, bytearray)):
            chunk = str(chunk).encode(self._encoding)
        self._levels[-1].append(bytes(chunk))

    def echo(self, *values: object, sep: str = "") -> None:
        self.write(sep.join(v if isinstance(v, str) else str(v) for v in values))

    @contextmanager
    def buffer(self) -> Iterator["OutputBuffer"]:
        self._levels.append([])
        level = len(self._levels)
        try:
            yield self
        except SystemExit:
            # die(): 已输出的内容保留
            self._merge_from(level)
            raise
        except BaseException:
            del self._levels[level - 1:]
            raise
        self._merge_from(level)

    def _merge_from(self, level: int) -> None:
        while len(self._levels) >= level:
            top = self._levels.pop()
            self._levels[-1].extend(top)

    def getvalue(self) -> bytes:
        return b"".join(self._levels[0])
