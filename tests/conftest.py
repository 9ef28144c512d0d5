"""Test fixtures for groupfinder tests."""

import json
import os
import socket
import threading
from collections.abc import Callable, Generator
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from unittest.mock import MagicMock

import pytest

from groupfinder.api.client import GroupFinderClient
from groupfinder.core.sync import GroupSync
from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing
from groupfinder.models.mode import ManagementMode

# Run Qt without a display (CI, containers)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_listing(**overrides: Any) -> GroupListing:
    """Return a fully populated listing as the server would return it."""
    values: dict[str, Any] = {
        "id": "test-id",
        "player_name": "Alice",
        "friends_chat_name": "AliceFC",
        "activity": Activity.CHAMBERS_OF_XERIC,
        "current_size": 1,
        "max_size": 3,
        "description": "Test description",
    }
    values.update(overrides)
    return GroupListing(**values)


def make_draft(**overrides: Any) -> GroupListing:
    """Return a draft listing as the create dialog would build it."""
    values: dict[str, Any] = {"activity": Activity.OTHER, "current_size": 1, "max_size": 4}
    values.update(overrides)
    return GroupListing(**values)


@pytest.fixture
def listing() -> GroupListing:
    """Return a sample server listing."""
    return make_listing()


# -- Background / UI context stand-ins ---------------------------------------


class FakeScheduledTask:
    """Repeating task recorded by InlineScheduler."""

    def __init__(self, fn: Callable[[], None], initial_delay: float, delay: float) -> None:
        self.fn = fn
        self.initial_delay = initial_delay
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class InlineScheduler:
    """Scheduler that runs submitted work immediately on the calling thread.

    Repeating tasks are only recorded; tests run them by calling task.fn().
    """

    def __init__(self) -> None:
        self.executed = 0
        self.scheduled: list[FakeScheduledTask] = []
        self.shut_down = False

    def execute(self, fn: Callable[[], None]) -> None:
        self.executed += 1
        fn()

    def schedule_with_fixed_delay(
        self, fn: Callable[[], None], initial_delay: float, delay: float
    ) -> FakeScheduledTask:
        task = FakeScheduledTask(fn, initial_delay, delay)
        self.scheduled.append(task)
        return task

    def shutdown(self) -> None:
        self.shut_down = True


class InlineDispatcher:
    """Dispatcher that records posted callbacks and runs them immediately."""

    def __init__(self) -> None:
        self.posted: list[Callable[[], None]] = []

    def post(self, fn: Callable[[], None]) -> None:
        self.posted.append(fn)
        fn()


class FakeHost:
    """Scriptable game session."""

    def __init__(
        self,
        player_name: str | None = "Alice",
        fc_owner: str | None = None,
        fc_members: int = 0,
    ) -> None:
        self.player_name = player_name
        self.fc_owner = fc_owner
        self.fc_members = fc_members

    def local_player_name(self) -> str | None:
        return self.player_name

    def friends_chat_owner(self) -> str | None:
        return self.fc_owner

    def friends_chat_member_count(self) -> int:
        return self.fc_members if self.fc_owner is not None else 0


class FakeConfig:
    """In-memory config with the same getters as ConfigManager."""

    def __init__(
        self,
        mode: ManagementMode = ManagementMode.FRIENDS_CHAT,
        poll_interval: int = 10,
        server_url: str = "http://localhost:8080",
    ) -> None:
        self.mode = mode
        self.poll_interval = poll_interval
        self.server_url = server_url

    def get_management_mode(self) -> ManagementMode:
        return self.mode

    def get_poll_interval(self) -> int:
        return self.poll_interval

    def get_server_url(self) -> str:
        return self.server_url


@pytest.fixture
def scheduler() -> InlineScheduler:
    """Return an inline scheduler."""
    return InlineScheduler()


@pytest.fixture
def dispatcher() -> InlineDispatcher:
    """Return an inline dispatcher."""
    return InlineDispatcher()


@pytest.fixture
def host() -> FakeHost:
    """Return a logged-in host session that is not in a Friends Chat."""
    return FakeHost()


@pytest.fixture
def config() -> FakeConfig:
    """Return a config in FRIENDS_CHAT mode."""
    return FakeConfig()


@pytest.fixture
def api() -> MagicMock:
    """Return a mocked API client that succeeds with empty results."""
    mock = MagicMock(spec=GroupFinderClient)
    mock.get_groups.return_value = []
    mock.create_group.return_value = make_listing()
    mock.delete_group.return_value = True
    mock.update_group.return_value = make_listing()
    return mock


@pytest.fixture
def view() -> MagicMock:
    """Return a mocked display sink."""
    return MagicMock(spec=["update_listings", "show_error"])


@pytest.fixture
def sync(
    api: MagicMock,
    view: MagicMock,
    config: FakeConfig,
    host: FakeHost,
    scheduler: InlineScheduler,
    dispatcher: InlineDispatcher,
) -> GroupSync:
    """Return a GroupSync whose background work runs inline."""
    return GroupSync(api, view, config, host, scheduler=scheduler, dispatcher=dispatcher)


# -- Local HTTP backend -------------------------------------------------------


class RecordedRequest:
    """A request received by the mock backend."""

    def __init__(self, method: str, path: str, headers: Message, body: bytes) -> None:
        self.method = method
        self.path = path
        self.headers = headers
        self.body = body

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))


class MockBackend:
    """Local HTTP server answering with queued canned responses."""

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self._responses: list[tuple[int, bytes]] = []
        self._lock = threading.Lock()
        backend = self

        class Handler(BaseHTTPRequestHandler):
            def _handle(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                with backend._lock:
                    backend.requests.append(
                        RecordedRequest(self.command, self.path, self.headers, body)
                    )
                    status, payload = (
                        backend._responses.pop(0) if backend._responses else (200, b"[]")
                    )
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                if payload:
                    self.wfile.write(payload)

            do_GET = _handle
            do_POST = _handle
            do_DELETE = _handle
            do_PATCH = _handle

            def log_message(self, format: str, *args: Any) -> None:
                pass

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def enqueue(self, status: int = 200, body: bytes | str | Any = b"") -> None:
        """Queue a response. Non-bytes/str bodies are JSON-encoded."""
        if isinstance(body, str):
            payload = body.encode("utf-8")
        elif isinstance(body, bytes):
            payload = body
        else:
            payload = json.dumps(body).encode("utf-8")
        with self._lock:
            self._responses.append((status, payload))

    def take_request(self) -> RecordedRequest:
        with self._lock:
            return self.requests.pop(0)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def backend() -> Generator[MockBackend, None, None]:
    """Fixture providing a running mock backend."""
    server = MockBackend()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closed_url() -> str:
    """Return a base URL on which nothing is listening."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
