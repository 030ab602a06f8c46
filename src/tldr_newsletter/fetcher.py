import asyncio
import logging
from datetime import date
from typing import Any, Protocol

import aiohttp

from .exceptions import HttpFailure, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://tldr.tech"


def build_url(category: str, newsletter_date: date, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    ニュースレターページのURLを生成

    Args:
        category: ニュースレターのカテゴリ（例: "ai", "tech"）
        newsletter_date: ニュースレターの日付
        base_url: サイトのベースURL

    Returns:
        `{base_url}/{category}/{YYYY-MM-DD}` 形式のURL
    """
    return f"{base_url.rstrip('/')}/{category}/{newsletter_date.isoformat()}"


class NewsletterFetcher(Protocol):
    """ニュースレターページ取得のインターフェース"""

    async def __aenter__(self) -> "NewsletterFetcher":
        """非同期コンテキストマネージャのエントリーポイント"""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,  # noqa: ANN401
    ) -> None:
        """非同期コンテキストマネージャの終了処理"""
        ...

    async def fetch(self, category: str, newsletter_date: date) -> str:
        """
        ニュースレターページのHTMLを取得

        Args:
            category: ニュースレターのカテゴリ
            newsletter_date: ニュースレターの日付

        Returns:
            ページのHTML文字列
        """
        ...


class DefaultNewsletterFetcher:
    """aiohttpを使ったデフォルトのページ取得実装"""

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = base_url
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "DefaultNewsletterFetcher":
        self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,  # noqa: ANN401
    ) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch(self, category: str, newsletter_date: date) -> str:
        """
        ニュースレターページのHTMLを取得

        Args:
            category: ニュースレターのカテゴリ
            newsletter_date: ニュースレターの日付

        Returns:
            ページのHTML文字列

        Raises:
            RuntimeError: セッションが初期化されていない場合
            HttpFailure: 2xx以外のレスポンスが返された場合
            TransportError: 通信に失敗した場合、タイムアウトした場合、
                本文をデコードできなかった場合
        """
        if not self._session:
            raise RuntimeError("セッションが初期化されていません")

        url = build_url(category, newsletter_date, self.base_url)
        logger.info(f"ページを取得します: {url}")

        try:
            async with self._session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise HttpFailure(response.status, url)
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise TransportError(url) from e
