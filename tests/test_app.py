"""Tests for haws.app — registration, validation and the serve loop."""

import socket
import time
from unittest.mock import AsyncMock, MagicMock, patch

import anyio
import pytest

from haws.app import App
from haws.config import AppConfig
from haws.errors import BindError, MissingFallbackRoute
from haws.testing import TestClient
from haws.testing.client import read_all


def index(request: bytes) -> str:
    return "<h1>Hello world</h1>"


def err_page(request: bytes) -> str:
    return "<h1>404 page not found</h1>"


def _app() -> App:
    app = App()
    app.route("/", index)
    app.route(".", err_page)
    return app


class TestConstruction:
    def test_defaults_from_config(self) -> None:
        app = App()
        assert app.config.host == "127.0.0.1"
        assert app.config.port == 8000

    def test_host_and_port_override_config(self) -> None:
        app = App("localhost", 3000, config=AppConfig(host="0.0.0.0", port=1, backlog=5))
        assert app.config.host == "localhost"
        assert app.config.port == 3000
        assert app.config.backlog == 5


class TestRegistration:
    def test_direct_call_returns_handler(self) -> None:
        app = App()
        assert app.route("/", index) is index

    def test_decorator(self) -> None:
        app = App()

        @app.route("/about")
        def about(request: bytes) -> str:
            return "about"

        assert about(b"") == "about"
        assert [r.path for r in app.routes] == ["/about"]

    def test_lambda_handler(self) -> None:
        app = App()
        app.route(".", lambda request: "fallback")
        assert app.routes[0].handler(b"") == "fallback"

    def test_routes_before_freeze(self) -> None:
        app = _app()
        assert [r.path for r in app.routes] == ["/", "."]

    def test_reregistering_overwrites(self) -> None:
        app = _app()
        app.route("/", err_page)
        assert len(app.routes) == 2
        assert app.routes[0].handler is err_page

    def test_route_after_freeze_raises(self) -> None:
        app = _app()
        app.check()
        with pytest.raises(RuntimeError, match="after it has started serving"):
            app.route("/late", index)


class TestCheck:
    def test_valid_app(self) -> None:
        _app().check()

    def test_missing_fallback_prints_guidance(self, capsys: pytest.CaptureFixture[str]) -> None:
        app = App()
        app.route("/", index)
        with pytest.raises(SystemExit) as exc_info:
            app.check()
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "web server has no error page" in err
        assert 'app.route(".", err_page)' in err
        assert "def err_page(request: bytes) -> str" in err

    def test_can_recover_after_failed_check(self) -> None:
        app = App()
        with pytest.raises(SystemExit):
            app.check()
        app.route(".", err_page)
        app.check()


class TestServe:
    @patch("anyio.run")
    def test_missing_fallback_exits_before_running(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        app = App()
        app.route("/", index)
        with pytest.raises(SystemExit) as exc_info:
            app.serve()
        assert exc_info.value.code == 1
        mock_run.assert_not_called()
        assert "Configuration Error" in capsys.readouterr().err

    @patch("anyio.run")
    def test_runs_async_loop(self, mock_run: MagicMock) -> None:
        app = _app()
        app.serve(port=0)
        mock_run.assert_called_once_with(app.serve_async, None, 0)

    @patch("anyio.run", side_effect=BindError("127.0.0.1", 8000, "Address already in use"))
    def test_bind_failure_exits(
        self, mock_run: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _app().serve()
        assert exc_info.value.code == 1
        assert "Error: Cannot bind 127.0.0.1:8000" in capsys.readouterr().err


@pytest.mark.anyio
class TestServeAsync:
    async def test_missing_fallback_fails_before_binding(self) -> None:
        app = App()
        app.route("/", index)
        with patch("haws.app._bind", new=AsyncMock()) as mock_bind:
            with pytest.raises(MissingFallbackRoute):
                await app.serve_async("127.0.0.1", 0)
        mock_bind.assert_not_awaited()

    async def test_bind_failure(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen()
            port = taken.getsockname()[1]
            with pytest.raises(BindError) as exc_info:
                await _app().serve_async("127.0.0.1", port)
        assert exc_info.value.port == port

    async def test_reports_bound_port(self) -> None:
        app = _app()
        async with anyio.create_task_group() as tg:
            host, port = await tg.start(app.serve_async, "127.0.0.1", 0)
            assert host == "127.0.0.1"
            assert port > 0
            tg.cancel_scope.cancel()

    async def test_scenario(self) -> None:
        async with TestClient(_app()) as client:
            found = await client.send_raw(b"GET / HTTP/1.1\r\n\r\n")
            missing = await client.send_raw(b"GET /nope HTTP/1.1\r\n\r\n")
        assert found.raw == b"HTTP/1.1 200 OK\r\nContent-Length: 20\r\n\r\n<h1>Hello world</h1>"
        assert missing.raw == (
            b"HTTP/1.1 200 OK\r\nContent-Length: 27\r\n\r\n<h1>404 page not found</h1>"
        )

    async def test_only_status_and_content_length_headers(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/")
        assert response.status == 200
        assert response.headers == [("content-length", "20")]
        assert response.header("Content-Length") == "20"
        assert response.header("Content-Type") is None

    async def test_post_falls_through_to_fallback(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.request("POST", "/", body=b"data")
        assert response.text == "<h1>404 page not found</h1>"

    async def test_handler_sees_body_and_large_heads(self) -> None:
        app = _app()

        @app.route("/upload")
        def upload(request: bytes) -> str:
            _, _, body = request.partition(b"\r\n\r\n")
            return f"{len(request)}:{body.decode()}"

        pad = "a" * 3000
        async with TestClient(app) as client:
            response = await client.request(
                "GET", "/upload", headers={"X-Pad": pad}, body=b"hello"
            )
        size, _, body = response.text.partition(":")
        assert int(size) > 3000
        assert body == "hello"

    async def test_handler_error_does_not_stop_the_server(self) -> None:
        app = _app()

        @app.route("/broken")
        def broken(request: bytes) -> str:
            msg = "boom"
            raise RuntimeError(msg)

        async with TestClient(app) as client:
            dropped = await client.get("/broken")
            after = await client.get("/")
        assert dropped.raw == b""
        assert after.text == "<h1>Hello world</h1>"

    async def test_unencodable_body_does_not_stop_the_server(self) -> None:
        app = _app()

        @app.route("/echo")
        def echo(request: bytes) -> str:
            return request.decode("utf-8", "surrogateescape")

        async with TestClient(app) as client:
            dropped = await client.send_raw(b"GET /echo HTTP/1.1\r\nX-Raw: \xff\r\n\r\n")
            after = await client.get("/")
        assert dropped.raw == b""
        assert after.text == "<h1>Hello world</h1>"

    async def test_silent_client_is_skipped(self) -> None:
        async with TestClient(_app()) as client:
            stream = await client.connect()
            await stream.send_eof()
            assert await read_all(stream) == b""
            await stream.aclose()
            response = await client.get("/")
        assert response.text == "<h1>Hello world</h1>"

    async def test_connections_are_served_one_at_a_time(self) -> None:
        events: list[str] = []
        app = App()

        @app.route("/slow")
        def slow(request: bytes) -> str:
            events.append("slow:start")
            time.sleep(0.2)
            events.append("slow:end")
            return "slow"

        @app.route("/fast")
        def fast(request: bytes) -> str:
            events.append("fast")
            return "fast"

        app.route(".", err_page)

        async with TestClient(app) as client:
            first = await client.connect()
            await first.send(b"GET /slow HTTP/1.1\r\n\r\n")
            second = await client.connect()
            await second.send(b"GET /fast HTTP/1.1\r\n\r\n")

            fast_raw = await read_all(second)
            slow_raw = await read_all(first)
            await first.aclose()
            await second.aclose()

        assert events == ["slow:start", "slow:end", "fast"]
        assert slow_raw.endswith(b"\r\n\r\nslow")
        assert fast_raw.endswith(b"\r\n\r\nfast")
