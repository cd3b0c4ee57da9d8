"""Shared pytest fixtures."""

import shutil
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.utils.config import reset_settings

SETTINGS_ENV_VARS = (
    "APP_NAME",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "HN_API_BASE_URL",
    "API_TIMEOUT",
    "HN_MAX_CONCURRENCY",
)


@pytest.fixture(scope="session", autouse=True)
def backup_env_file():
    """Backup .env file during test session to prevent pollution."""
    env_file = Path(".env")
    backup_file = Path(".env.test_backup")

    if env_file.exists():
        shutil.copy(env_file, backup_file)
        env_file.unlink()

    yield

    if backup_file.exists():
        shutil.move(backup_file, env_file)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Start every test from default settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def make_response(data: Any = None, status_code: int = 200, url: str = "") -> MagicMock:
    """Build a stand-in for httpx.Response carrying a decoded JSON body."""
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=data)
    if status_code >= 400:
        request = httpx.Request("GET", url or "https://example.invalid/")
        real = httpx.Response(status_code, request=request)
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                f"{status_code} error", request=request, response=real
            )
        )
    else:
        response.raise_for_status = MagicMock(return_value=None)
    return response


@pytest.fixture
def fake_api() -> Callable[[dict[str, Any]], AsyncMock]:
    """Build a mocked httpx.AsyncClient that routes GETs by URL suffix.

    Values in ``routes`` are either a decoded JSON body, a ready response
    from ``make_response``, or an exception instance to raise.
    """

    def build(routes: dict[str, Any]) -> AsyncMock:
        async def get(url: str, **kwargs: Any) -> MagicMock:
            for suffix, value in routes.items():
                if url.endswith(suffix):
                    if isinstance(value, Exception):
                        raise value
                    if isinstance(value, MagicMock):
                        return value
                    return make_response(value, url=url)
            return make_response(None, url=url)

        client = AsyncMock(spec=httpx.AsyncClient)
        client.get = AsyncMock(side_effect=get)
        return client

    return build


@pytest.fixture
def api_response() -> Callable[..., MagicMock]:
    """Expose make_response to tests."""
    return make_response
