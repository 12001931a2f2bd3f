"""Tests for homing.testing — guard recorder and assertion helpers."""

import pytest

from homing.errors import NavigationAborted, NavigationFailureType
from homing.router import Router
from homing.routing.route import START
from homing.testing import GuardCall, GuardRecorder, assert_navigation_failure, assert_route


def _router() -> Router:
    return Router(
        [
            {"path": "/", "name": "home"},
            {"path": "/users/:id", "name": "user", "children": [{"path": "posts"}]},
        ]
    )


class TestAssertRoute:
    def test_passes(self) -> None:
        route = _router().match("/users/1/posts?x=1")
        assert_route(
            route,
            full_path="/users/1/posts?x=1",
            params={"id": "1"},
            matched=["/users/:id", "/users/:id/posts"],
        )

    def test_fails_on_none(self) -> None:
        with pytest.raises(AssertionError, match="got None"):
            assert_route(None)

    def test_fails_on_full_path(self) -> None:
        route = _router().match("/users/1")
        with pytest.raises(AssertionError, match="Expected full path '/users/2'"):
            assert_route(route, full_path="/users/2")

    def test_fails_on_name(self) -> None:
        route = _router().match("/")
        with pytest.raises(AssertionError, match="Expected route name 'user'"):
            assert_route(route, name="user")

    def test_fails_on_params(self) -> None:
        route = _router().match("/users/1")
        with pytest.raises(AssertionError, match="Expected params"):
            assert_route(route, params={"id": "2"})

    def test_fails_on_matched(self) -> None:
        route = _router().match("/users/1")
        with pytest.raises(AssertionError, match="Expected matched chain"):
            assert_route(route, matched=[])


class TestAssertNavigationFailure:
    def test_returns_failure(self) -> None:
        err = NavigationAborted(START, START)
        assert assert_navigation_failure(err) is err
        assert assert_navigation_failure(err, NavigationFailureType.ABORTED) is err

    def test_wrong_type(self) -> None:
        err = NavigationAborted(START, START)
        with pytest.raises(AssertionError, match="Expected a CANCELLED failure, got ABORTED"):
            assert_navigation_failure(err, NavigationFailureType.CANCELLED)

    def test_not_a_failure(self) -> None:
        with pytest.raises(AssertionError, match="Expected a NavigationFailure"):
            assert_navigation_failure(ValueError("boom"))

    def test_none(self) -> None:
        with pytest.raises(AssertionError):
            assert_navigation_failure(None)


class TestGuardRecorder:
    @pytest.mark.anyio
    async def test_records_calls_in_order(self) -> None:
        router = _router()
        recorder = GuardRecorder()
        router.before_each(recorder.guard("first"))
        router.before_resolve(recorder.guard("second"))
        await router.init()

        assert recorder.labels == ["first", "second"]
        call = recorder.calls[0]
        assert isinstance(call, GuardCall)
        assert call.to.path == "/"
        assert call.from_ is START

    @pytest.mark.anyio
    async def test_verdict(self) -> None:
        router = _router()
        await router.init()
        recorder = GuardRecorder()
        router.before_each(recorder.guard("veto", verdict=False))

        with pytest.raises(NavigationAborted):
            await router.push("/users/1")

        assert recorder.count == 1

    def test_view_guard_receives_instance(self) -> None:
        recorder = GuardRecorder()
        guard = recorder.view_guard("leave")
        verdicts: list[object] = []
        route = _router().match("/")

        guard("instance", route, START, verdicts.append)

        assert recorder.labels == ["leave"]
        assert verdicts == [None]

    def test_guard_names(self) -> None:
        recorder = GuardRecorder()
        assert recorder.guard("auth").__name__ == "guard_auth"
        assert recorder.view_guard("form").__name__ == "view_guard_form"

    def test_reset(self) -> None:
        recorder = GuardRecorder()
        recorder.guard("x")(START, START, lambda value=None: None)
        assert recorder.count == 1
        recorder.reset()
        assert recorder.count == 0
        assert recorder.labels == []
