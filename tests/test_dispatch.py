"""Tests for the dispatch loop — ordering, continuation, termination, errors."""

import asyncio

import pytest

from waypoint.errors import PatternError, UnhandledError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.outcome import CONTINUE, HANDLED, Failed
from waypoint.routing.router import Router
from waypoint.testing import dispatch


class TestOrdering:
    @pytest.mark.asyncio
    async def test_continue_then_terminate(self) -> None:
        r = Router()
        calls: list[str] = []

        def h1(request, response, next):
            calls.append("h1")
            next()

        def h2(request, response, next):
            calls.append("h2")
            response.end("from h2")

        def h3(request, response, next):
            calls.append("h3")

        r.get("/a", h1)
        r.get("/a", h2)
        r.get("/a", h3)

        _, response, outcome = await dispatch(r, "GET", "/a")
        assert calls == ["h1", "h2"]
        assert outcome == HANDLED
        assert response.body_bytes == b"from h2"

    @pytest.mark.asyncio
    async def test_use_and_verb_interleave_in_registration_order(self) -> None:
        r = Router()
        calls: list[str] = []

        def record(name: str, *, stop: bool = False):
            def handler(request, response, next):
                calls.append(name)
                if not stop:
                    next()

            return handler

        r.get("/a", record("get-1"))
        r.use(record("use"))
        r.get("/a", record("get-2", stop=True))

        await dispatch(r, "GET", "/a")
        assert calls == ["get-1", "use", "get-2"]

    @pytest.mark.asyncio
    async def test_no_specificity_reordering(self) -> None:
        r = Router()
        calls: list[str] = []

        @r.get("/users/:id")
        def by_id(request, response, next):
            calls.append("param")

        @r.get("/users/me")
        def me(request, response, next):
            calls.append("static")

        await dispatch(r, "GET", "/users/me")
        assert calls == ["param"]

    @pytest.mark.asyncio
    async def test_async_handlers_run_sequentially(self) -> None:
        r = Router()
        events: list[str] = []

        async def slow(request, response, next):
            events.append("slow:start")
            await asyncio.sleep(0.01)
            events.append("slow:end")
            next()

        async def fast(request, response, next):
            events.append("fast")

        r.use(slow)
        r.get("/", fast)

        await dispatch(r, "GET", "/")
        assert events == ["slow:start", "slow:end", "fast"]

    @pytest.mark.asyncio
    async def test_same_request_twice_is_deterministic(self) -> None:
        r = Router()

        def first(request, response, next):
            request.state.setdefault("seen", []).append("first")
            next()

        def second(request, response, next):
            request.state.setdefault("seen", []).append("second")
            response.end("ok")

        r.use(first)
        r.get("/x", second)

        results = []
        for _ in range(2):
            request, response, outcome = await dispatch(r, "GET", "/x")
            results.append((request.state["seen"], response.body_bytes, outcome))

        assert results[0] == results[1]
        assert results[0] == (["first", "second"], b"ok", HANDLED)


class TestTermination:
    @pytest.mark.asyncio
    async def test_handler_without_next_terminates_even_without_writing(self) -> None:
        r = Router()
        calls: list[str] = []

        r.get("/a", lambda request, response, next: calls.append("silent"))
        r.get("/a", lambda request, response, next: calls.append("never"))

        _, response, outcome = await dispatch(r, "GET", "/a")
        assert calls == ["silent"]
        assert outcome == HANDLED
        assert not response.committed

    @pytest.mark.asyncio
    async def test_no_match_completes_without_response(self) -> None:
        r = Router()
        r.get("/a", lambda request, response, next: response.end("a"))

        _, response, outcome = await dispatch(r, "GET", "/b")
        assert outcome == CONTINUE
        assert not response.committed
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_method_does_not_match(self) -> None:
        r = Router()
        r.post("/a", lambda request, response, next: response.end("a"))

        _, _, outcome = await dispatch(r, "GET", "/a")
        assert outcome == CONTINUE

    @pytest.mark.asyncio
    async def test_exhausted_calls_parent_next(self) -> None:
        r = Router()
        r.use(lambda request, response, next: next())
        parent_calls: list[tuple] = []

        request = Request.build("GET", "/x")
        request.path = "/x"
        outcome = await r.dispatch(request, Response(), lambda *args: parent_calls.append(args))

        assert outcome == CONTINUE
        assert parent_calls == [()]

    @pytest.mark.asyncio
    async def test_parent_next_not_called_when_handled(self) -> None:
        r = Router()
        r.use(lambda request, response, next: None)
        parent_calls: list[int] = []

        request = Request.build("GET", "/x")
        request.path = "/x"
        await r.dispatch(request, Response(), lambda: parent_calls.append(1))

        assert parent_calls == []


class TestParams:
    @pytest.mark.asyncio
    async def test_params_bound(self) -> None:
        r = Router()
        seen: list[dict[str, str]] = []

        @r.get("/hello/:name")
        def hello(request, response, next):
            seen.append(dict(request.params))

        await dispatch(r, "GET", "/hello/world")
        assert seen == [{"name": "world"}]

    @pytest.mark.asyncio
    async def test_params_replaced_per_match(self) -> None:
        r = Router()
        seen: list[dict[str, str]] = []

        @r.get("/users/:id")
        def first(request, response, next):
            seen.append(dict(request.params))
            next()

        @r.get("/users/:user_id")
        def second(request, response, next):
            seen.append(dict(request.params))

        await dispatch(r, "GET", "/users/7")
        assert seen == [{"id": "7"}, {"user_id": "7"}]

    @pytest.mark.asyncio
    async def test_path_normalised_once_without_query(self) -> None:
        r = Router()
        seen: list[str] = []

        @r.get("/search")
        def search(request, response, next):
            seen.append(request.path)
            seen.append(request.query_string)

        await dispatch(r, "GET", "/search?q=router")
        assert seen == ["/search", "q=router"]

    @pytest.mark.asyncio
    async def test_trailing_slash_request(self) -> None:
        r = Router()
        r.get("/a", lambda request, response, next: response.end("a"))

        _, response, _ = await dispatch(r, "GET", "/a/")
        assert response.body_bytes == b"a"


class TestErrors:
    @pytest.mark.asyncio
    async def test_next_error_goes_to_error_handler(self) -> None:
        r = Router()
        err = ValueError("bad")
        received: list[tuple] = []

        r.get("/a", lambda request, response, next: next(err))
        r.get("/a", lambda request, response, next: received.append(("never",)))
        r.set_error_handler(lambda error, request, response: received.append((error, request, response)))

        request, response, outcome = await dispatch(r, "GET", "/a")
        assert outcome == HANDLED
        assert received == [(err, request, response)]

    @pytest.mark.asyncio
    async def test_raise_goes_to_error_handler(self) -> None:
        r = Router()
        received: list[BaseException] = []

        @r.get("/a")
        async def boom(request, response, next):
            raise KeyError("missing")

        @r.set_error_handler
        async def on_error(error, request, response):
            received.append(error)
            response.status(500).end("failed")

        _, response, _ = await dispatch(r, "GET", "/a")
        assert isinstance(received[0], KeyError)
        assert response.status_code == 500
        assert response.body_bytes == b"failed"

    @pytest.mark.asyncio
    async def test_error_without_handler_escapes(self) -> None:
        r = Router()
        err = RuntimeError("escape")
        r.get("/a", lambda request, response, next: next(err))

        with pytest.raises(RuntimeError) as exc_info:
            await dispatch(r, "GET", "/a")
        assert exc_info.value is err

    @pytest.mark.asyncio
    async def test_non_exception_error_escapes_wrapped(self) -> None:
        r = Router()
        r.get("/a", lambda request, response, next: next("plain string"))

        with pytest.raises(UnhandledError) as exc_info:
            await dispatch(r, "GET", "/a")
        assert exc_info.value.value == "plain string"

    @pytest.mark.asyncio
    async def test_dispatch_returns_failed_without_handler(self) -> None:
        r = Router()
        err = RuntimeError("escape")
        r.get("/a", lambda request, response, next: next(err))

        request = Request.build("GET", "/a")
        request.path = "/a"
        assert await r.dispatch(request, Response()) == Failed(err)

    @pytest.mark.asyncio
    async def test_error_handler_runs_once(self) -> None:
        r = Router()
        calls: list[int] = []

        r.use(lambda request, response, next: next(ValueError("1")))
        r.use(lambda request, response, next: next(ValueError("2")))
        r.set_error_handler(lambda error, request, response: calls.append(1))

        await dispatch(r, "GET", "/")
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_error_handler_raising_escapes(self) -> None:
        r = Router()
        r.get("/a", lambda request, response, next: next(ValueError("original")))

        def on_error(error, request, response):
            raise LookupError("from handler")

        r.set_error_handler(on_error)

        with pytest.raises(LookupError, match="from handler"):
            await dispatch(r, "GET", "/a")

    @pytest.mark.asyncio
    async def test_malformed_pattern_surfaces_at_match_time(self) -> None:
        r = Router()
        r.get("/users/:", lambda request, response, next: None)

        with pytest.raises(PatternError):
            await dispatch(r, "GET", "/users/1")


class TestRouterAsHandler:
    @pytest.mark.asyncio
    async def test_call_forwards_next_when_exhausted(self) -> None:
        r = Router()
        calls: list[int] = []

        request = Request.build("GET", "/x")
        request.path = "/x"
        await r(request, Response(), lambda: calls.append(1))
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_call_raises_escaped_error(self) -> None:
        r = Router()
        r.use(lambda request, response, next: next(ValueError("x")))

        request = Request.build("GET", "/x")
        request.path = "/x"
        with pytest.raises(ValueError):
            await r(request, Response(), lambda: None)
