import asyncio
import logging
from datetime import date
from typing import Callable, Iterable

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError as SoupSelectorSyntaxError

from .exceptions import ElementNotFound, MissingAttribute, SelectorSyntaxError
from .fetcher import DefaultNewsletterFetcher, NewsletterFetcher
from .models import Article, Newsletter

logger = logging.getLogger(__name__)

CONTENT_SELECTOR = ".content-center"
TITLE_SELECTOR = "h1"
SUBTITLE_SELECTOR = "h2"
SECTION_SELECTOR = ":scope > div"
ITEM_SELECTOR = ":scope > div"
ARTICLE_TITLE_SELECTOR = ":scope > a > h3"
ARTICLE_DESCRIPTION_SELECTOR = ":scope > div"
ARTICLE_LINK_SELECTOR = ":scope > a"


def select_elements(element: Tag, selector: str) -> list[Tag]:
    """
    セレクタに一致する要素をすべて取得

    Args:
        element: 検索の起点となる要素
        selector: CSSセレクタ

    Returns:
        一致した要素のリスト（文書順）

    Raises:
        SelectorSyntaxError: セレクタの構文が不正な場合
    """
    try:
        return element.select(selector)
    except SoupSelectorSyntaxError as e:
        raise SelectorSyntaxError(selector) from e


def select_single_element(element: Tag, selector: str) -> Tag:
    """
    セレクタに一致する最初の要素を取得

    Args:
        element: 検索の起点となる要素
        selector: CSSセレクタ

    Returns:
        文書順で最初に一致した要素

    Raises:
        ElementNotFound: 一致する要素がない場合
        SelectorSyntaxError: セレクタの構文が不正な場合
    """
    try:
        found = element.select_one(selector)
    except SoupSelectorSyntaxError as e:
        raise SelectorSyntaxError(selector) from e
    if found is None:
        raise ElementNotFound(selector)
    return found


def has_child(element: Tag, selector: str) -> bool:
    try:
        return element.select_one(selector) is not None
    except SoupSelectorSyntaxError as e:
        raise SelectorSyntaxError(selector) from e


def extract_text(element: Tag, selector: str) -> str:
    """一致した要素の子孫テキストを文書順に連結して返す（空白はそのまま）"""
    return select_single_element(element, selector).get_text()


def extract_attribute(element: Tag, selector: str, name: str) -> str:
    """
    一致した要素の属性値を取得

    Raises:
        ElementNotFound: 一致する要素がない場合
        MissingAttribute: 要素に属性がない場合
    """
    found = select_single_element(element, selector)
    value = found.get(name)
    if value is None:
        raise MissingAttribute(name, selector)
    return value


def scrape_article(element: Tag) -> Article:
    """
    記事要素から記事情報を抽出

    Args:
        element: `a > h3` を直下に持つ記事要素

    Returns:
        抽出した記事

    Raises:
        ElementNotFound: タイトル・説明・リンクのいずれかがない場合
        MissingAttribute: リンクに href がない場合
    """
    title = extract_text(element, ARTICLE_TITLE_SELECTOR)
    description = extract_text(element, ARTICLE_DESCRIPTION_SELECTOR)
    url = extract_attribute(element, ARTICLE_LINK_SELECTOR, "href")
    return Article(title=title, description=description, url=url)


def scrape_articles(content: Tag) -> list[Article]:
    """
    コンテンツ領域から記事をすべて抽出

    コンテンツ領域直下の div がセクション、セクション直下の div が記事候補。
    記事候補のうち `a > h3` を直下に持つものだけを記事として扱い、
    それ以外（見出しや広告など）は読み飛ばす。

    Args:
        content: コンテンツ領域の要素

    Returns:
        文書順に並んだ記事のリスト

    Raises:
        ParseError: 記事と判定した要素から情報を抽出できなかった場合
    """
    articles: list[Article] = []

    for section in select_elements(content, SECTION_SELECTOR):
        for item in select_elements(section, ITEM_SELECTOR):
            if not has_child(item, ARTICLE_TITLE_SELECTOR):
                logger.debug("記事ではない要素をスキップします")
                continue
            articles.append(scrape_article(item))

    return articles


def extract(html: str, category: str, newsletter_date: date) -> Newsletter:
    """
    HTMLからニュースレターを抽出

    Args:
        html: ニュースレターページのHTML文字列
        category: ニュースレターのカテゴリ（HTMLからは取得しない）
        newsletter_date: ニュースレターの日付（HTMLからは取得しない）

    Returns:
        抽出したNewsletter

    Raises:
        ElementNotFound: 必要な要素が見つからない場合
        MissingAttribute: 記事リンクに href がない場合
    """
    soup = BeautifulSoup(html, "html.parser")
    content = select_single_element(soup, CONTENT_SELECTOR)
    title = extract_text(content, TITLE_SELECTOR)
    subtitle = extract_text(content, SUBTITLE_SELECTOR)
    articles = scrape_articles(content)

    logger.debug(f"{len(articles)}件の記事を抽出しました: {category} {newsletter_date}")

    return Newsletter(
        title=title,
        subtitle=subtitle,
        category=category,
        date=newsletter_date,
        articles=tuple(articles),
    )


async def load(
    category: str,
    newsletter_date: date,
    fetcher: NewsletterFetcher | None = None,
) -> Newsletter:
    """
    ニュースレターを取得して抽出

    Args:
        category: ニュースレターのカテゴリ
        newsletter_date: ニュースレターの日付
        fetcher: ページ取得に使用するフェッチャー。
                Noneの場合はDefaultNewsletterFetcherを使用

    Returns:
        抽出したNewsletter

    Raises:
        HttpFailure: ページ取得でエラーレスポンスが返された場合
        TransportError: 通信に失敗した場合
        ParseError: HTMLの抽出に失敗した場合
    """
    fetcher = fetcher or DefaultNewsletterFetcher()
    async with fetcher:
        html = await fetcher.fetch(category, newsletter_date)
    return extract(html, category, newsletter_date)


async def load_many(
    categories: Iterable[str],
    newsletter_date: date,
    fetcher_factory: Callable[[], NewsletterFetcher] | None = None,
) -> list[Newsletter]:
    """
    複数カテゴリのニュースレターを並行して取得

    カテゴリごとに独立したフェッチャーを使うため、呼び出し間で状態は共有しない。

    Returns:
        categories と同じ順序のNewsletterのリスト
    """
    factory = fetcher_factory or DefaultNewsletterFetcher
    return list(
        await asyncio.gather(
            *(load(category, newsletter_date, factory()) for category in categories)
        )
    )
