"""
Trending video data model.

Represents one parsed row of a country's trending-videos CSV.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, Optional

from config import settings


@dataclass(frozen=True)
class TrendingVideo:
    """
    One trending-video observation for one country.
    Immutable once parsed.
    """
    country: str  # One of settings.COUNTRIES
    video_id: str
    title: str
    channel_title: str
    category_id: int  # 0 when the source value is not numeric
    category_name: str  # Resolved display name, "Unknown" if unresolved
    publish_time: str  # Raw ISO timestamp, parsed lazily by the timing aggregation
    trending_date: Optional[date]  # None when the YY.DD.MM value is malformed
    tags: str  # Raw pipe-delimited tag string
    views: int = 0
    likes: int = 0
    dislikes: int = 0
    comment_count: int = 0

    def __post_init__(self):
        if self.country not in settings.COUNTRIES:
            raise ValueError(
                f"Invalid country: {self.country}. Must be one of {', '.join(settings.COUNTRIES)}"
            )

        for name in ("views", "likes", "dislikes", "comment_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"Invalid {name}: {getattr(self, name)}. Must be >= 0")

        if not self.category_name:
            raise ValueError("category_name must be set (use 'Unknown' when unresolved)")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dict (trending_date as ISO string)."""
        data = asdict(self)
        data["trending_date"] = self.trending_date.isoformat() if self.trending_date else None
        return data
