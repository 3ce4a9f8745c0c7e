import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Author(BaseModel):
    """An author record; anything beyond ``name`` is passed through untouched."""

    model_config = ConfigDict(extra="allow")

    name: str


class PostSummary(BaseModel):
    path: str
    slug: str
    title: str
    description: Optional[str] = None
    date: datetime.datetime
    updated: Optional[datetime.datetime] = None
    draft: bool = False
    authors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    template: Optional[str] = None
    weight: Optional[int] = None
    front_matter_format: Literal["toml", "yaml"]
    word_count: int = 0
    reading_time: Optional[str] = None


class ValidatedPost(PostSummary):
    extra: Dict[str, Any] = Field(default_factory=dict)
    content: str = ""

    def summary(self) -> PostSummary:
        return PostSummary(**self.model_dump(exclude={"extra", "content"}))
