import asyncio
import json
import logging
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .csv_writer import CSVWriter
from .exceptions import NewsletterError
from .fetcher import DEFAULT_BASE_URL, DefaultNewsletterFetcher
from .models import Newsletter
from .scraper import load_many

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def collect_newsletters(
    categories: list[str], newsletter_date: date, base_url: str
) -> list[Newsletter]:
    """
    指定日のニュースレターをカテゴリごとに取得

    Args:
        categories: 取得対象のカテゴリ
        newsletter_date: 取得対象の日付
        base_url: サイトのベースURL

    Returns:
        カテゴリ順に並んだNewsletterのリスト
    """
    # 出力先が標準出力でも崩れないよう進捗表示は標準エラーに出す
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        progress.add_task(description="ニュースレターを取得中...", total=None)
        return await load_many(
            categories,
            newsletter_date,
            lambda: DefaultNewsletterFetcher(base_url=base_url),
        )


def write_output(newsletters: list[Newsletter], output: str, output_format: str) -> None:
    """
    ニュースレターを指定形式で出力

    Args:
        newsletters: 出力対象のニュースレター
        output: 出力先のパス。"-" の場合は標準出力
        output_format: "json" または "csv"
    """
    if output != "-":
        Path(output).parent.mkdir(parents=True, exist_ok=True)

    with click.open_file(output, "w", encoding="utf-8") as f:
        if output_format == "csv":
            CSVWriter.write_newsletters(newsletters, f)
            return

        data = [newsletter.to_dict() for newsletter in newsletters]
        payload = data[0] if len(data) == 1 else data
        f.write(json.dumps(payload, ensure_ascii=False, indent=2))
        f.write("\n")


@click.command()
@click.argument("newsletter_date", metavar="DATE", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("categories", metavar="CATEGORY...", nargs=-1, required=True)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "csv"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option("--output", "-o", default="-", help="Output path (default: stdout)")
@click.option(
    "--base-url",
    envvar="TLDR_BASE_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Base URL of the newsletter site",
)
def main(
    newsletter_date: datetime,
    categories: tuple[str, ...],
    output_format: str,
    output: str,
    base_url: str,
) -> None:
    """
    指定日のTLDRニュースレターを取得してJSONまたはCSVで出力

    Args:
        newsletter_date: ニュースレターの日付
        categories: ニュースレターのカテゴリ
        output_format: 出力形式
        output: 出力先のパス
        base_url: サイトのベースURL
    """
    try:
        newsletters = asyncio.run(
            collect_newsletters(list(categories), newsletter_date.date(), base_url)
        )
    except NewsletterError as e:
        logger.error(f"ニュースレターの取得に失敗しました: {e}")
        raise click.ClickException(str(e))

    write_output(newsletters, output, output_format)
    logger.info(f"{len(newsletters)}件のニュースレターを出力しました")


if __name__ == "__main__":
    main()
