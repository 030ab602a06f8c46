import csv
from typing import Iterable, TextIO

from .models import Newsletter


class CSVWriter:
    HEADERS = ["category", "date", "newsletter_title", "title", "description", "url"]

    @staticmethod
    def write_newsletters(newsletters: Iterable[Newsletter], output: TextIO) -> None:
        """ニュースレターの記事を1行1記事でCSVに出力"""
        writer = csv.DictWriter(output, fieldnames=CSVWriter.HEADERS)
        writer.writeheader()
        for newsletter in newsletters:
            for article in newsletter.articles:
                writer.writerow({
                    "category": newsletter.category,
                    "date": newsletter.date.isoformat(),
                    "newsletter_title": newsletter.title,
                    "title": article.title,
                    "description": article.description,
                    "url": article.url,
                })
