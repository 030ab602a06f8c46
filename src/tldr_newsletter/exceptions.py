class NewsletterError(Exception):
    """ニュースレター処理で発生するエラーの基底クラス"""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class HttpFailure(NewsletterError):
    """ニュースレターの取得でHTTPエラーレスポンスが返された場合のエラー"""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        message = f"HTTPエラー: {status_code}"
        if url:
            message += f" - {url}"
        super().__init__(message)


class TransportError(NewsletterError):
    """ネットワーク接続レベルで通信に失敗した場合のエラー"""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"ページの取得に失敗しました: {url}")


class ParseError(NewsletterError):
    """HTMLからニュースレターを抽出できなかった場合のエラー"""


class ElementNotFound(ParseError):
    """セレクタに一致する要素が見つからなかった場合のエラー"""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"要素が見つかりませんでした: {selector}")


class MissingAttribute(ParseError):
    """要素に必要な属性が存在しない場合のエラー"""

    def __init__(self, name: str, selector: str | None = None) -> None:
        self.name = name
        self.selector = selector
        message = f"属性が見つかりませんでした: {name}"
        if selector:
            message += f" ({selector})"
        super().__init__(message)


class SelectorSyntaxError(ParseError):
    """セレクタの構文が不正な場合のエラー"""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"セレクタの構文が不正です: {selector}")
