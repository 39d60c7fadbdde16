"""Data models for normalized stories."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.upstream.models import HackerNewsItem


class NormalizedStory(BaseModel):
    """A story as returned to callers.

    Text fields are never null: absent upstream values become empty strings.
    Serializes with camelCase keys (``postedBy``, ``commentCount``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: str = Field(default="", description="Story title")
    uri: str = Field(default="", description="Link target of the story")
    posted_by: str = Field(default="", description="Author username")
    time: datetime = Field(description="Submission time (UTC)")
    score: int = Field(description="Upstream score, unclamped")
    comment_count: int = Field(description="Total comment count, unclamped")

    @classmethod
    def from_item(cls, item: HackerNewsItem) -> "NormalizedStory":
        """Normalize a raw upstream item.

        Args:
            item: Validated upstream payload.

        Returns:
            NormalizedStory instance.

        Raises:
            OverflowError: If the timestamp is out of the platform's range.
            OSError: If the platform cannot convert the timestamp.
        """
        return cls(
            title=item.title or "",
            uri=item.url or "",
            posted_by=item.by or "",
            time=datetime.fromtimestamp(item.time, tz=UTC),
            score=item.score,
            comment_count=item.descendants,
        )
