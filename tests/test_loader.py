import pytest

from pfuncs.application.loader import CodeLoader, new_scope
from pfuncs.application.registry import HandlerRegistry
from pfuncs.domain.context import RequestContext


def _ctx(path: str) -> RequestContext:
    return RequestContext.build(uid="u1", method="GET", path=path, site="testserver")


def test_levels_run_in_order_and_override(site):
    site.write("py/a.py", "ORDER = ['global']\nNAME = 'global'\n")
    site.write("py/foo/b.py", "ORDER.append('foo')\nNAME = 'foo'\n")
    site.write("py/foo/bar/c.py", "ORDER.append('bar')\nNAME = 'bar'\n")
    site.write("py/other/d.py", "ORDER.append('other')\n")

    scope = new_scope()
    loaded = CodeLoader().load(site.root / "py", _ctx("/foo/bar"), scope)

    assert [p.name for p in loaded] == ["a.py", "b.py", "c.py"]
    assert scope["ORDER"] == ["global", "foo", "bar"]
    assert scope["NAME"] == "bar"


def test_functions_share_one_scope(site):
    site.write("py/a.py", "def greet():\n    return 'hi ' + who()\n")
    site.write("py/foo/b.py", "def who():\n    return 'foo'\n")

    scope = new_scope()
    CodeLoader().load(site.root / "py", _ctx("/foo"), scope)
    assert scope["greet"]() == "hi foo"


def test_files_in_a_directory_run_sorted_and_not_recursive(site):
    site.write("py/b.py", "SEEN.append('b')\n")
    site.write("py/a.py", "SEEN = ['a']\n")
    site.write("py/notes.txt", "not code")
    site.write("py/index/x.py", "SEEN.append('index')\n")

    scope = new_scope()
    CodeLoader().load(site.root / "py", _ctx("/other"), scope)
    assert scope["SEEN"] == ["a", "b"]


def test_missing_directories_are_skipped(site):
    scope = new_scope()
    assert CodeLoader().load(site.root / "py", _ctx("/foo/bar"), scope) == []


def test_registry_hooks_follow_level_order(site):
    site.write("py/foo/b.py", "CALLS.append('file:foo')\n")
    registry = HandlerRegistry()

    @registry.hook()
    def everywhere(scope, ctx):
        scope["CALLS"] = ["global"]

    @registry.hook("foo")
    def foo_only(scope, ctx):
        scope["CALLS"].append("foo")

    @registry.hook("foo", "bar")
    def bar_only(scope, ctx):
        scope["CALLS"].append(ctx.action)

    @registry.hook("zzz")
    def never(scope, ctx):
        scope["CALLS"].append("never")

    scope = new_scope()
    CodeLoader(registry).load(site.root / "py", _ctx("/foo/bar"), scope)
    assert scope["CALLS"] == ["global", "file:foo", "foo", "bar"]


def test_registry_rejects_action_without_controller():
    registry = HandlerRegistry()
    with pytest.raises(ValueError):
        registry.register(lambda scope, ctx: None, action="bar")
    assert registry.get(None, "bar") == []


def test_load_config(site):
    loader = CodeLoader()
    scope = new_scope()
    assert loader.load_config(site.root / "configs.py", scope) is False

    site.write("configs.py", "TITLE = 'my site'\n")
    assert loader.load_config(site.root / "configs.py", scope) is True
    assert scope["TITLE"] == "my site"
