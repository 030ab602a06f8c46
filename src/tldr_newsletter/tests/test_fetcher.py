import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
import pytest_asyncio

from ..exceptions import HttpFailure, TransportError
from ..fetcher import DefaultNewsletterFetcher, build_url


def mock_session(status: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    session = MagicMock()
    session.get.return_value.__aenter__.return_value = response
    return session


@pytest_asyncio.fixture
async def fetcher():
    async with DefaultNewsletterFetcher() as f:
        yield f


def test_build_url():
    assert build_url("ai", date(2024, 4, 11)) == "https://tldr.tech/ai/2024-04-11"


def test_build_url_custom_base_url():
    url = build_url("tech", date(2023, 1, 5), "http://localhost:8000/")
    assert url == "http://localhost:8000/tech/2023-01-05"


@pytest.mark.asyncio
async def test_fetch_success(fetcher):
    session = mock_session(200, "<html></html>")
    with patch.object(fetcher, "_session", session):
        html = await fetcher.fetch("ai", date(2024, 4, 11))

    assert html == "<html></html>"
    session.get.assert_called_once_with("https://tldr.tech/ai/2024-04-11")


@pytest.mark.asyncio
async def test_fetch_http_failure(fetcher):
    session = mock_session(404)
    with patch.object(fetcher, "_session", session):
        with pytest.raises(HttpFailure) as excinfo:
            await fetcher.fetch("ai", date(2024, 4, 11))

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://tldr.tech/ai/2024-04-11"


@pytest.mark.asyncio
async def test_fetch_redirect_status_is_failure(fetcher):
    session = mock_session(304)
    with patch.object(fetcher, "_session", session):
        with pytest.raises(HttpFailure) as excinfo:
            await fetcher.fetch("ai", date(2024, 4, 11))
    assert excinfo.value.status_code == 304


@pytest.mark.asyncio
async def test_fetch_transport_error(fetcher):
    session = MagicMock()
    session.get.side_effect = aiohttp.ClientConnectionError("connection refused")
    with patch.object(fetcher, "_session", session):
        with pytest.raises(TransportError) as excinfo:
            await fetcher.fetch("ai", date(2024, 4, 11))

    assert isinstance(excinfo.value.__cause__, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_fetch_without_session():
    with pytest.raises(RuntimeError):
        await DefaultNewsletterFetcher().fetch("ai", date(2024, 4, 11))


@pytest.mark.asyncio
async def test_session_closed_on_exit():
    f = DefaultNewsletterFetcher(base_url="http://localhost:8000")
    async with f:
        assert f._session is not None
    assert f._session is None


@pytest.mark.asyncio
async def test_fetch_timeout(fetcher):
    session = MagicMock()
    session.get.side_effect = asyncio.TimeoutError()
    with patch.object(fetcher, "_session", session):
        with pytest.raises(TransportError) as excinfo:
            await fetcher.fetch("ai", date(2024, 4, 11))

    assert excinfo.value.url == "https://tldr.tech/ai/2024-04-11"
    assert isinstance(excinfo.value.__cause__, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_fetch_undecodable_body(fetcher):
    session = mock_session(200)
    response = session.get.return_value.__aenter__.return_value
    response.text.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    with patch.object(fetcher, "_session", session):
        with pytest.raises(TransportError) as excinfo:
            await fetcher.fetch("ai", date(2024, 4, 11))

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
