"""Shared pytest fixtures."""

import logging
from typing import Any, Callable, Optional

import httpx
import pytest

from utils.config import Settings, get_settings
from utils.logging import _ConsoleHandler

BASE_URL = "https://planit.test/sandbox"
TOKEN = "tok-123"


class FakeAccessPlanIt:
    """
    httpx.MockTransport handler emulating the AccessPlanIt API.

    Routes are keyed by path relative to BASE_URL. Every request is recorded.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, tuple[int, Any]] = {
            "/api/v2/token": (200, {"access_token": TOKEN, "token_type": "bearer", "expires_in": 3600}),
            "/api/v2/coursetemplate": (200, {"results": [{"Name": "A"}, {"Name": "B"}, {"Name": "C"}]}),
            "/api/v2/coursedate": (200, {"results": [{"Id": 1}, {"Id": 2}, {"Id": 3}]}),
            "/apihelp/v2/modules/courseDate": (200, {"module": "courseDate", "fields": []}),
            "/apihelp/v2/modules/courseTemplate": (200, {"module": "courseTemplate", "fields": []}),
        }

    def respond(self, path: str, status: int, body: Any) -> None:
        self.routes[path] = (status, body)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if self._relative(r) == path]

    @staticmethod
    def _relative(request: httpx.Request) -> str:
        return request.url.path.removeprefix(httpx.URL(BASE_URL).path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(self._relative(request), (404, {"message": "not found"}))
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in an empty directory with no credential variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("ACCESS_PLANIT_USER", "ACCESS_PLANIT_PASS", "RUN_ONCE", "LOG_FORMAT", "OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, _ConsoleHandler):
            root.removeHandler(handler)


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., Settings]:
    def factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "ACCESS_PLANIT_USER": "user",
            "ACCESS_PLANIT_PASS": "secret",
            "ACCESS_PLANIT_BASE_URL": BASE_URL,
            "OUTPUT_DIR": str(tmp_path / "output"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def fake_api() -> FakeAccessPlanIt:
    return FakeAccessPlanIt()


@pytest.fixture
def env_credentials(monkeypatch, tmp_path) -> None:
    """Configure get_settings() through the environment, as the entry points read it."""
    monkeypatch.setenv("ACCESS_PLANIT_USER", "user")
    monkeypatch.setenv("ACCESS_PLANIT_PASS", "secret")
    monkeypatch.setenv("ACCESS_PLANIT_BASE_URL", BASE_URL)
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "output"))


@pytest.fixture
def patch_transport(monkeypatch) -> Callable[[FakeAccessPlanIt], None]:
    """Route the runner's HTTP client through a fake API."""

    def apply(fake: FakeAccessPlanIt) -> None:
        def build(settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None):
            return httpx.AsyncClient(transport=fake.transport)

        monkeypatch.setattr("apps.fetcher.runner.build_async_client", build)

    return apply


def output_files(directory) -> list[str]:
    return sorted(p.name for p in directory.glob("*.json")) if directory.exists() else []
