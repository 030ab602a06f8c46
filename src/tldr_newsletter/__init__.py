from .exceptions import (
    ElementNotFound,
    HttpFailure,
    MissingAttribute,
    NewsletterError,
    ParseError,
    SelectorSyntaxError,
    TransportError,
)
from .fetcher import DefaultNewsletterFetcher, NewsletterFetcher, build_url
from .models import Article, Newsletter
from .scraper import extract, load, load_many

__all__ = [
    "Article",
    "DefaultNewsletterFetcher",
    "ElementNotFound",
    "HttpFailure",
    "MissingAttribute",
    "Newsletter",
    "NewsletterError",
    "NewsletterFetcher",
    "ParseError",
    "SelectorSyntaxError",
    "TransportError",
    "build_url",
    "extract",
    "load",
    "load_many",
]
