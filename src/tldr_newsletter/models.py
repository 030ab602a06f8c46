import json
from dataclasses import dataclass
from datetime import date
from typing import Any, TypeAlias

JsonDict: TypeAlias = dict[str, Any]


def _require(data: JsonDict, key: str) -> Any:  # noqa: ANN401
    if not isinstance(data, dict):
        raise ValueError(f"辞書ではありません: {type(data).__name__}")
    if key not in data:
        raise ValueError(f"必須フィールドがありません: {key}")
    return data[key]


@dataclass(frozen=True)
class Article:
    title: str
    description: str
    url: str

    def to_dict(self) -> JsonDict:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: JsonDict) -> "Article":
        return cls(
            title=_require(data, "title"),
            description=_require(data, "description"),
            url=_require(data, "url"),
        )


@dataclass(frozen=True)
class Newsletter:
    """
    1日分のニュースレター

    category と date は呼び出し側が指定した値で、HTMLからは取得しない。
    title, subtitle, articles はコンテンツ領域から抽出した値。
    """

    title: str
    subtitle: str
    category: str
    date: date
    articles: tuple[Article, ...]

    def __post_init__(self) -> None:
        # list で渡された場合もハッシュ可能・不変にそろえる
        object.__setattr__(self, "articles", tuple(self.articles))

    def to_dict(self) -> JsonDict:
        """
        シリアライズ用の辞書に変換

        Returns:
            フィールド名をキーとする辞書。date は YYYY-MM-DD 形式の文字列
        """
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "category": self.category,
            "date": self.date.isoformat(),
            "articles": [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: JsonDict) -> "Newsletter":
        """
        辞書からNewsletterを復元

        Args:
            data: to_dict() と同じ形式の辞書

        Returns:
            復元したNewsletter

        Raises:
            ValueError: 必須フィールドが欠けている場合、日付が不正な場合、
                articles がリストでない場合、または記事が辞書でない場合
        """
        raw_date = _require(data, "date")
        if isinstance(raw_date, date):
            newsletter_date = raw_date
        elif isinstance(raw_date, str):
            newsletter_date = date.fromisoformat(raw_date)
        else:
            raise ValueError(f"日付が不正です: {raw_date!r}")

        raw_articles = _require(data, "articles")
        if not isinstance(raw_articles, list):
            raise ValueError("articles はリストである必要があります")

        return cls(
            title=_require(data, "title"),
            subtitle=_require(data, "subtitle"),
            category=_require(data, "category"),
            date=newsletter_date,
            articles=tuple(Article.from_dict(article) for article in raw_articles),
        )

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "Newsletter":
        return cls.from_dict(json.loads(text))
