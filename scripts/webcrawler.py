#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from webcrawlerapi.application import WebCrawlerAPI
from webcrawlerapi.core.errors import WebCrawlerAPIError
from webcrawlerapi.core.settings import load_settings, mask_api_key
from webcrawlerapi.exporters.crawl_items_csv import export_crawl_items

logger = logging.getLogger("webcrawler")

SCRAPE_TYPES = ["html", "cleaned", "markdown"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Submit crawl and scrape jobs to WebCrawlerAPI")
    parser.add_argument("--config", type=Path, help="YAML settings file (API_KEY / API_BASE_URL override it)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every poll")

    commands = parser.add_subparsers(dest="command", required=True)

    crawl = commands.add_parser("crawl", help="Crawl a website and list discovered pages")
    crawl.add_argument("url")
    crawl.add_argument("--scrape-type", choices=SCRAPE_TYPES, default="markdown")
    crawl.add_argument("--items-limit", type=int, default=10)
    crawl.add_argument("--max-polls", type=int, default=None)
    crawl.add_argument("--output", type=Path, help="Write the crawled items to this CSV file")

    scrape = commands.add_parser("scrape", help="Scrape one page and print its content")
    scrape.add_argument("url")
    scrape.add_argument("--scrape-type", choices=SCRAPE_TYPES, default="markdown")
    scrape.add_argument("--max-polls", type=int, default=None)

    scrape_async = commands.add_parser("scrape-async", help="Start a scrape and print its id")
    scrape_async.add_argument("url")
    scrape_async.add_argument("--scrape-type", choices=SCRAPE_TYPES, default="markdown")

    get_scrape = commands.add_parser("get-scrape", help="Show the state of a scrape")
    get_scrape.add_argument("scrape_id")

    return parser


def run(args: argparse.Namespace, client: WebCrawlerAPI, max_polls: int) -> None:
    if getattr(args, "max_polls", None) is not None:
        max_polls = args.max_polls
    if args.command == "crawl":
        result = client.crawl(
            args.url,
            args.scrape_type,
            args.items_limit,
            max_polls,
        )
        print(f"Job {result.id}: {result.status} ({len(result.items)} items)")
        for item in result.items:
            print(f"  [{item.status}] {item.url} -> {item.content_url(args.scrape_type)}")
        if args.output:
            export_crawl_items(args.output, result, args.scrape_type)
            print(f"Items written to {args.output}")
    elif args.command == "scrape":
        result = client.scrape(args.url, args.scrape_type, max_polls)
        print(f"Status: {result.status} (page status {result.page_status_code})")
        if result.content:
            print(result.content)
    elif args.command == "scrape-async":
        print(client.scrape_async(args.url, args.scrape_type))
    elif args.command == "get-scrape":
        result = client.get_scrape(args.scrape_id)
        print(f"Status: {result.status}")
        if result.content:
            print(result.content)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 1
    logger.info("Using %s with key %s", settings.base_url, mask_api_key(settings.api_key))

    with WebCrawlerAPI.from_settings(settings) as client:
        try:
            run(args, client, settings.max_polls)
        except WebCrawlerAPIError as exc:
            print(f"Error [{exc.error_code}]: {exc.message}", file=sys.stderr)
            return 1
        except ValueError as exc:
            print(f"Invalid arguments: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
