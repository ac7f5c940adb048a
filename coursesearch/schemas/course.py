"""Course document and search response schemas - REST API contract and index source."""

from datetime import datetime

from pydantic import BaseModel, Field


class CompletionPayload(BaseModel):
    """Input strings for the Elasticsearch completion suggester."""

    input: list[str] = Field(default_factory=list)


class CourseDocument(BaseModel):
    id: str | None = None
    title: str
    description: str | None = None
    category: str | None = None
    type: str | None = None  # ONE_TIME, COURSE, CLUB
    grade_range: str | None = Field(default=None, alias="gradeRange")  # e.g. "1st-3rd"
    min_age: int = Field(default=0, alias="minAge")
    max_age: int = Field(default=0, alias="maxAge")
    price: float = 0.0
    next_session_date: datetime | None = Field(default=None, alias="nextSessionDate")
    suggest: CompletionPayload | None = None

    model_config = {"populate_by_name": True}

    def initialize_suggest(self) -> None:
        """Use the title as completion input when none was supplied."""
        if self.suggest is None or not self.suggest.input:
            self.suggest = CompletionPayload(input=[self.title])

    def to_source(self) -> dict:
        """Document body for indexing (camelCase field names, no id)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)

    def to_bulk_action(self, index: str) -> dict:
        """Bulk index action; without an id Elasticsearch assigns one."""
        action = {"_index": index, "_source": self.to_source()}
        if self.id:
            action["_id"] = self.id
        return action


class SearchResponse(BaseModel):
    total: int
    courses: list[CourseDocument]
