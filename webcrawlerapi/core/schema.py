from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ScrapeType = Literal["html", "cleaned", "markdown"]


class ScrapeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str
    scrape_type: ScrapeType | None = "markdown"

    def to_body(self) -> str:
        """Serialise to the compact JSON body expected by the service."""

        return self.model_dump_json(exclude_none=True)


class CrawlRequest(ScrapeRequest):
    items_limit: int = Field(default=10, ge=0)
