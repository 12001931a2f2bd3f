"""Tests for homing.cli._resolve — loading routes from an import target."""

import sys
import types
from collections.abc import Iterator

import pytest

from homing.cli._resolve import resolve_router
from homing.router import Router
from homing.routing.record import RouteConfig


@pytest.fixture
def routing_module(monkeypatch: pytest.MonkeyPatch) -> Iterator[types.ModuleType]:
    """Register a fake routing module on sys.modules."""
    mod = types.ModuleType("_fake_homing_routing")
    monkeypatch.setitem(sys.modules, "_fake_homing_routing", mod)
    yield mod


class TestRouterTargets:
    def test_explicit_attribute(self, routing_module: types.ModuleType) -> None:
        routing_module.main = Router([{"path": "/"}])  # type: ignore[attr-defined]
        assert resolve_router("_fake_homing_routing:main") is routing_module.main  # type: ignore[attr-defined]

    def test_defaults_to_router(self, routing_module: types.ModuleType) -> None:
        routing_module.router = Router([{"path": "/"}])  # type: ignore[attr-defined]
        routing_module.routes = [{"path": "/other"}]  # type: ignore[attr-defined]
        assert resolve_router("_fake_homing_routing") is routing_module.router  # type: ignore[attr-defined]

    def test_falls_back_to_routes(self, routing_module: types.ModuleType) -> None:
        routing_module.routes = [{"path": "/a"}, {"path": "/b"}]  # type: ignore[attr-defined]
        router = resolve_router("_fake_homing_routing")
        assert [record.path for record in router.get_routes()] == ["/a", "/b"]

    def test_no_default_attribute(self, routing_module: types.ModuleType) -> None:
        with pytest.raises(AttributeError, match="defines none of router, routes"):
            resolve_router("_fake_homing_routing")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_router("_nonexistent_module_xyz:router")

    def test_missing_attribute(self, routing_module: types.ModuleType) -> None:
        with pytest.raises(AttributeError):
            resolve_router("_fake_homing_routing:nonexistent")


class TestRouteListTargets:
    def test_mappings(self, routing_module: types.ModuleType) -> None:
        routing_module.ROUTES = [{"path": "/users/:id", "name": "user"}]  # type: ignore[attr-defined]
        router = resolve_router("_fake_homing_routing:ROUTES")
        assert router.match("/users/3").name == "user"

    def test_route_configs(self, routing_module: types.ModuleType) -> None:
        routing_module.ROUTES = (RouteConfig("/about", name="about"),)  # type: ignore[attr-defined]
        router = resolve_router("_fake_homing_routing:ROUTES")
        assert router.match("/about").name == "about"

    def test_empty_list(self, routing_module: types.ModuleType) -> None:
        routing_module.ROUTES = []  # type: ignore[attr-defined]
        assert resolve_router("_fake_homing_routing:ROUTES").get_routes() == []

    def test_string_is_rejected(self, routing_module: types.ModuleType) -> None:
        routing_module.ROUTES = "/about"  # type: ignore[attr-defined]
        with pytest.raises(TypeError, match="is a str"):
            resolve_router("_fake_homing_routing:ROUTES")

    def test_mixed_list_is_rejected(self, routing_module: types.ModuleType) -> None:
        routing_module.ROUTES = [{"path": "/"}, 42]  # type: ignore[attr-defined]
        with pytest.raises(TypeError, match="list of route configurations"):
            resolve_router("_fake_homing_routing:ROUTES")


class TestFactoryTargets:
    def test_factory_returning_router(self, routing_module: types.ModuleType) -> None:
        routing_module.build = lambda: Router([{"path": "/"}])  # type: ignore[attr-defined]
        assert isinstance(resolve_router("_fake_homing_routing:build"), Router)

    def test_factory_returning_routes(self, routing_module: types.ModuleType) -> None:
        routing_module.build = lambda: [{"path": "/", "name": "home"}]  # type: ignore[attr-defined]
        assert resolve_router("_fake_homing_routing:build").match("/").name == "home"

    def test_factory_raising(self, routing_module: types.ModuleType) -> None:
        def build() -> Router:
            raise RuntimeError("db not configured")

        routing_module.build = build  # type: ignore[attr-defined]
        with pytest.raises(TypeError, match="failed: db not configured"):
            resolve_router("_fake_homing_routing:build")

    def test_factory_returning_wrong_type(self, routing_module: types.ModuleType) -> None:
        routing_module.build = lambda: {"path": "/"}  # type: ignore[attr-defined]
        with pytest.raises(TypeError, match="is a dict"):
            resolve_router("_fake_homing_routing:build")
