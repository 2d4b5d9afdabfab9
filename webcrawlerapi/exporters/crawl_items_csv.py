from __future__ import annotations

from pathlib import Path

import pandas as pd

from webcrawlerapi.domain import CrawlResult

COLUMNS = ["url", "status", "content_url"]


def export_crawl_items(path: Path, result: CrawlResult, scrape_type: str | None) -> Path:
    records = [
        {
            "url": item.url,
            "status": item.status,
            "content_url": item.content_url(scrape_type),
        }
        for item in result.items
    ]
    df = pd.DataFrame(records, columns=COLUMNS)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
