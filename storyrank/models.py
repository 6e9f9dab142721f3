"""Story data model shared by the source, cache and ranking layers"""

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Optional


@dataclass
class Story:
    """Hacker News item plus the relevance score written by the ranker"""
    id: int
    title: str
    by: str = ""
    time: int = 0                       # Seconds since epoch
    score: int = 0                      # HN points (popularity)
    type: str = "story"
    url: Optional[str] = None
    text: Optional[str] = None          # May contain HTML
    kids: Optional[List[int]] = None
    descendants: Optional[int] = None
    relevance_score: float = field(default=0.0)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Story":
        """
        Build a Story from a raw HN item payload.

        Unknown keys are ignored; missing optional keys take defaults.

        Example:
            >>> Story.from_api({"id": 1, "title": "Show HN", "by": "pg", "extra": 1})
            Story(id=1, title='Show HN', by='pg', ...)
        """
        known = {f.name for f in fields(cls)} - {"relevance_score"}
        data = {key: value for key, value in item.items() if key in known}
        if data.get("title") is None:
            data["title"] = ""
        return cls(**data)

    @property
    def content(self) -> str:
        """Combined title + body used for scoring"""
        return f"{self.title} {self.text or ''}"

    def with_score(self, relevance_score: float) -> "Story":
        """Copy of this story carrying the given relevance score"""
        return replace(self, relevance_score=relevance_score)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
