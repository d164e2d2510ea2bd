"""API response schemas."""

from pydantic import BaseModel, Field

from weighted_search.models import SearchResult


class SearchResultItem(BaseModel):
    id: int
    title: str
    url: str | None = Field(
        default=None, description="Address of the record page, if it has one"
    )
    excerpt: str = Field(description="HTML; needle occurrences are wrapped in <mark>")
    score: int = Field(ge=0)

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultItem":
        return cls(
            id=result.record.id,
            title=result.record.title,
            url=result.record.url,
            excerpt=result.excerpt,
            score=result.score,
        )


class SearchResponse(BaseModel):
    query: str
    locale: str
    total: int
    results: list[SearchResultItem]
