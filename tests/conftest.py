# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable, Optional, Union

# Ensure project root is on path when running without an editable install
_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

import pytest
from fastapi.testclient import TestClient

from pfuncs.application.registry import HandlerRegistry
from pfuncs.infra.config import Settings
from pfuncs.main import create_app

SITE = "testserver"


class SiteTree:
    """在 tmp_path 下搭建一个站点目录"""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, rel: str, content: Union[str, bytes] = "") -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path


@pytest.fixture
def sites_root(tmp_path: Path) -> Path:
    root = tmp_path / "sites"
    root.mkdir()
    return root


@pytest.fixture
def site(sites_root: Path) -> SiteTree:
    return SiteTree(sites_root / SITE)


@pytest.fixture
def make_client(sites_root: Path) -> Callable[..., TestClient]:
    def _make(registry: Optional[HandlerRegistry] = None, **overrides) -> TestClient:
        settings = Settings(SITES_ROOT=str(sites_root), **overrides)
        return TestClient(create_app(settings, registry))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
