"""
Chart view models.

One dataclass per chart. Each is built fresh by the aggregation engine and
handed to the rendering collaborator through to_dict(), which emits the
field names the charts consume.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


def _json_number(value: float) -> Optional[float]:
    """NaN has no JSON form; emit null instead."""
    return None if math.isnan(value) else value


@dataclass
class CountryViews:
    """Views summary for one country. avg_views is NaN for an empty country."""
    total_views: int
    avg_views: float
    video_count: int

    def to_dict(self) -> dict:
        return {
            "totalViews": self.total_views,
            "avgViews": _json_number(self.avg_views),
            "videoCount": self.video_count,
        }


@dataclass
class ScatterPoint:
    views: int
    likes: int
    title: str
    country: str
    category: str

    def to_dict(self) -> dict:
        return {
            "views": self.views,
            "likes": self.likes,
            "title": self.title,
            "country": self.country,
            "category": self.category,
        }


@dataclass
class ScatterFilters:
    """
    Inclusive bounds for the views-vs-likes scatter.
    None means unbounded on that side; a min above its max matches nothing.
    """
    min_views: Optional[float] = None
    max_views: Optional[float] = None
    min_likes: Optional[float] = None
    max_likes: Optional[float] = None


@dataclass
class TimelinePoint:
    date: date
    count: int
    total_views: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "count": self.count,
            "totalViews": self.total_views,
        }


@dataclass
class EngagementMetrics:
    likes: int = 0
    dislikes: int = 0
    comments: int = 0

    def to_dict(self) -> dict:
        return {"Likes": self.likes, "Dislikes": self.dislikes, "Comments": self.comments}


@dataclass
class ChannelSummary:
    name: str
    video_count: int
    total_views: int
    countries: List[str] = field(default_factory=list)  # In order of first appearance

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "videoCount": self.video_count,
            "totalViews": self.total_views,
            "countries": list(self.countries),
        }


@dataclass
class ChannelEngagement:
    """Like rate of one channel: 100 * total likes / total views."""
    name: str
    engagement_score: float
    total_views: int
    total_likes: int
    total_comments: int
    video_count: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "engagementScore": self.engagement_score,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
            "totalComments": self.total_comments,
            "videoCount": self.video_count,
        }


@dataclass
class HeatmapCell:
    country: str
    category: str
    value: float  # Percentage of the country's videos in this category
    count: int
    total_videos: int

    def to_dict(self) -> dict:
        return {
            "country": self.country,
            "category": self.category,
            "value": self.value,
            "count": self.count,
            "totalVideos": self.total_videos,
        }


@dataclass
class HeatmapData:
    data: List[HeatmapCell] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    countries: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "data": [cell.to_dict() for cell in self.data],
            "categories": list(self.categories),
            "countries": list(self.countries),
        }


@dataclass
class VideoRef:
    """Lightweight reference to a video, used in tooltips."""
    title: str
    views: int
    country: str

    def to_dict(self) -> dict:
        return {"title": self.title, "views": self.views, "country": self.country}


@dataclass
class TimingCell:
    day: int  # 0 = Sunday ... 6 = Saturday
    day_name: str
    hour: int
    count: int = 0
    avg_views: float = 0.0
    avg_likes: float = 0.0
    avg_comments: float = 0.0
    total_views: int = 0
    success_rate: float = 0.0  # Capped at 100
    videos: List[VideoRef] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "dayName": self.day_name,
            "hour": self.hour,
            "count": self.count,
            "avgViews": self.avg_views,
            "avgLikes": self.avg_likes,
            "avgComments": self.avg_comments,
            "totalViews": self.total_views,
            "successRate": self.success_rate,
            "videos": [video.to_dict() for video in self.videos],
        }


@dataclass
class PublishingTimingData:
    data: List[TimingCell] = field(default_factory=list)
    days: List[str] = field(default_factory=list)
    max_success: float = 0.0
    selected_country: str = "global"
    country_name: str = "Global"

    def to_dict(self) -> dict:
        return {
            "data": [cell.to_dict() for cell in self.data],
            "days": list(self.days),
            "maxSuccess": self.max_success,
            "selectedCountry": self.selected_country,
            "countryName": self.country_name,
        }


@dataclass
class TagPeriodCount:
    tag: str
    count: int
    total_views: int
    total_likes: int

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "count": self.count,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
        }


@dataclass
class RacingFrame:
    """All selected tags for one ISO week, most frequent first."""
    period: str
    tags: List[TagPeriodCount] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"period": self.period, "tags": [t.to_dict() for t in self.tags]}


@dataclass
class TagRacingData:
    racing_data: List[RacingFrame] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    periods: List[str] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "racingData": [frame.to_dict() for frame in self.racing_data],
            "tags": list(self.tags),
            "periods": list(self.periods),
            "stats": dict(self.stats),
        }


@dataclass
class TagDayCount:
    date_key: str  # YYYY-MM-DD
    count: int
    total_views: int
    total_likes: int
    avg_views: float

    def to_dict(self) -> dict:
        return {
            "dateKey": self.date_key,
            "count": self.count,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
            "avgViews": self.avg_views,
        }


@dataclass
class TagTimeline:
    tag: str
    timeline: List[TagDayCount] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"tag": self.tag, "timeline": [day.to_dict() for day in self.timeline]}


@dataclass
class TagEvolutionData:
    timeline_data: List[TagTimeline] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timelineData": [t.to_dict() for t in self.timeline_data],
            "tags": list(self.tags),
            "dates": list(self.dates),
            "stats": dict(self.stats),
        }


@dataclass
class FlowNode:
    id: str  # tag_<i> or category_<i>
    name: str
    type: str  # "tag" or "category"
    count: int
    total_views: int
    avg_views: int
    degree: int  # Distinct categories for a tag, distinct tags for a category

    def __post_init__(self):
        if self.type not in ("tag", "category"):
            raise ValueError(f"Invalid node type: {self.type}. Must be 'tag' or 'category'")

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "count": self.count,
            "totalViews": self.total_views,
            "avgViews": self.avg_views,
        }
        data["categories" if self.type == "tag" else "tags"] = self.degree
        return data


@dataclass
class FlowLink:
    source: int
    target: int
    value: int
    tag: str
    category: str
    total_views: int
    total_likes: int
    avg_views: int
    avg_likes: int

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "value": self.value,
            "tag": self.tag,
            "category": self.category,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
            "avgViews": self.avg_views,
            "avgLikes": self.avg_likes,
        }


@dataclass
class TagFlowData:
    nodes: List[FlowNode] = field(default_factory=list)
    links: List[FlowLink] = field(default_factory=list)
    selected_country: str = "global"
    country_name: str = "Global"
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
            "selectedCountry": self.selected_country,
            "countryName": self.country_name,
            "stats": dict(self.stats),
        }


@dataclass
class OverviewStats:
    total_videos: int = 0
    total_views: int = 0
    total_likes: int = 0
    countries_count: int = 0
    categories_count: int = 0
    avg_views_per_video: float = float("nan")
    avg_likes_per_video: float = float("nan")

    def to_dict(self) -> dict:
        return {
            "totalVideos": self.total_videos,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
            "countriesCount": self.countries_count,
            "categoriesCount": self.categories_count,
            "avgViewsPerVideo": _json_number(self.avg_views_per_video),
            "avgLikesPerVideo": _json_number(self.avg_likes_per_video),
        }


@dataclass
class TopVideo:
    id: str
    title: str
    views: int
    likes: int
    comments: int
    country: str
    category: str
    ratio: float  # likes / views

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "views": self.views,
            "likes": self.likes,
            "comments": self.comments,
            "country": self.country,
            "category": self.category,
            "ratio": self.ratio,
        }


@dataclass
class PerformanceSummary:
    """Totals for one category or one country."""
    key: str
    total_views: int
    total_likes: int
    total_comments: int
    video_count: int
    avg_views: float

    def to_dict(self, key_name: str = "key") -> dict:
        return {
            key_name: self.key,
            "totalViews": self.total_views,
            "totalLikes": self.total_likes,
            "totalComments": self.total_comments,
            "videoCount": self.video_count,
            "avgViews": self.avg_views,
        }
