from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Article(BaseModel):
    """A normalized news item as returned by the news endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    source: str
    summary: str
    topic: str
    image: Optional[str] = None
    link: str = ""
    pub_date: str = Field(default="", alias="pubDate")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
