"""
Video Store - the loaded row collection.

Holds every parsed TrendingVideo partitioned by country. A store is never
mutated after construction; reloading builds a new store.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from trendscope.models.video import TrendingVideo
from config import settings

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "country",
    "video_id",
    "title",
    "channel_title",
    "category_id",
    "category_name",
    "publish_time",
    "trending_date",
    "tags",
    "views",
    "likes",
    "dislikes",
    "comment_count",
]


class VideoStore:
    """
    Immutable per-country collection of trending videos.

    Also keeps a pandas snapshot of all rows (one row per video, in country
    order) for the aggregation engine to group over. Callers must treat the
    snapshot as read-only.
    """

    def __init__(self, videos_by_country: Mapping[str, Sequence[TrendingVideo]]):
        """
        Initialize store.

        Args:
            videos_by_country: Country code -> rows for that country. Countries
                outside settings.COUNTRIES are rejected.
        """
        unknown = set(videos_by_country) - set(settings.COUNTRIES)
        if unknown:
            raise ValueError(f"Unknown countries in store: {sorted(unknown)}")

        # Keep the fixed country order regardless of load completion order
        self._videos: Dict[str, Tuple[TrendingVideo, ...]] = {
            country: tuple(videos_by_country[country])
            for country in settings.COUNTRIES
            if country in videos_by_country
        }
        self._frame = self._build_frame()

        logger.debug(
            f"Built VideoStore with {len(self._frame)} rows across {len(self._videos)} countries"
        )

    @classmethod
    def empty(cls) -> "VideoStore":
        return cls({})

    @property
    def countries(self) -> List[str]:
        """Loaded countries, including those with no rows."""
        return list(self._videos)

    def has_country(self, country: str) -> bool:
        return country in self._videos

    def videos(self, country: str) -> Tuple[TrendingVideo, ...]:
        """Rows for one country (empty tuple if not loaded)."""
        return self._videos.get(country, ())

    def all_videos(self) -> Iterable[TrendingVideo]:
        for rows in self._videos.values():
            yield from rows

    def frame(self) -> pd.DataFrame:
        """Snapshot of every row. Do not mutate."""
        return self._frame

    def __len__(self) -> int:
        return len(self._frame)

    def _build_frame(self) -> pd.DataFrame:
        records = [
            {
                "country": v.country,
                "video_id": v.video_id,
                "title": v.title,
                "channel_title": v.channel_title,
                "category_id": v.category_id,
                "category_name": v.category_name,
                "publish_time": v.publish_time,
                "trending_date": v.trending_date,
                "tags": v.tags,
                "views": v.views,
                "likes": v.likes,
                "dislikes": v.dislikes,
                "comment_count": v.comment_count,
            }
            for v in self.all_videos()
        ]
        df = pd.DataFrame(records, columns=FRAME_COLUMNS)
        df["trending_date"] = pd.to_datetime(df["trending_date"], errors="coerce")
        for col in ("views", "likes", "dislikes", "comment_count", "category_id"):
            df[col] = df[col].astype("int64")
        return df
