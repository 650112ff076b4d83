"""
Shared fixtures for the TrendScope test suite.
"""

from datetime import date

import pytest

from trendscope.models.video import TrendingVideo
from trendscope.registry.video_store import VideoStore


@pytest.fixture
def make_video():
    """Factory for TrendingVideo rows with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> TrendingVideo:
        counter["n"] += 1
        fields = dict(
            country="US",
            video_id=f"vid{counter['n']}",
            title=f"Video {counter['n']}",
            channel_title="Channel",
            category_id=10,
            category_name="Music",
            publish_time="2017-11-13T17:13:01.000Z",
            trending_date=date(2017, 11, 14),
            tags='"music"|"video"',
            views=100,
            likes=10,
            dislikes=1,
            comment_count=5,
        )
        fields.update(overrides)
        return TrendingVideo(**fields)

    return _make


@pytest.fixture
def make_store(make_video):
    """Build a VideoStore from {country: [field overrides, ...]}."""
    def _make(rows_by_country) -> VideoStore:
        return VideoStore({
            country: [make_video(country=country, **row) for row in rows]
            for country, rows in rows_by_country.items()
        })

    return _make
