"""
Tag trend aggregations.

Tag racing (per ISO week), tag evolution (per trending day) and the
tag -> category pairs behind the flow graph. All three share the tag
cleaning rules in trendscope.utils.tags.
"""

import logging
from typing import Optional

import pandas as pd

from trendscope.models.view_models import (
    RacingFrame,
    TagDayCount,
    TagEvolutionData,
    TagPeriodCount,
    TagRacingData,
    TagTimeline,
)
from trendscope.aggregation.flow_graph import PAIR_COLUMNS
from trendscope.utils.tags import extract_tags

logger = logging.getLogger(__name__)


def explode_tags(
    df: pd.DataFrame,
    max_length: int,
    per_row_limit: Optional[int] = None
) -> pd.DataFrame:
    """
    One output row per (video, cleaned tag).

    Videos whose tags are all filtered out disappear from the result.
    """
    tags = df["tags"].map(lambda raw: extract_tags(raw, max_length, per_row_limit))
    exploded = df.assign(tag=tags).explode("tag")
    return exploded.dropna(subset=["tag"])


def rank_tags(counts: pd.Series, tag_limit: int, min_occurrences: int) -> list:
    """
    Select the tags to chart.

    Args:
        counts: Total occurrences indexed by tag
        tag_limit: Maximum number of tags returned
        min_occurrences: Tags below this total are dropped entirely

    Returns:
        Tags by descending total, ties alphabetical
    """
    counts = counts[counts >= min_occurrences].sort_index()
    ranked = counts.sort_values(ascending=False, kind="mergesort")
    return list(ranked.index[:tag_limit])


def _count_by(exploded: pd.DataFrame, bucket: str) -> pd.DataFrame:
    """Occurrences, views and likes per (tag, bucket)."""
    if exploded.empty:
        return pd.DataFrame()
    return exploded.groupby(["tag", bucket]).agg(
        count=("tag", "size"),
        total_views=("views", "sum"),
        total_likes=("likes", "sum"),
    )


def _select_tags(grouped: pd.DataFrame, tag_limit: int, min_occurrences: int) -> list:
    if grouped.empty:
        return []
    totals = grouped.groupby(level="tag")["count"].sum()
    return rank_tags(totals, tag_limit, min_occurrences)


def _dated_with_tags(df: pd.DataFrame) -> pd.DataFrame:
    has_tags = df["tags"].fillna("").str.len() > 0
    return df[df["trending_date"].notna() & has_tags]


def tag_racing(
    df: pd.DataFrame,
    tag_limit: int,
    min_occurrences: int,
    max_length: int,
    per_row_limit: int
) -> TagRacingData:
    """Weekly tag counts for the racing bar chart."""
    videos = _dated_with_tags(df)
    if videos.empty:
        return TagRacingData(stats={"totalTags": 0, "totalPeriods": 0})

    iso = videos["trending_date"].dt.isocalendar()
    period = iso["year"].astype(str) + "-W" + iso["week"].astype(int).map("{:02d}".format)
    videos = videos.assign(period=period)
    periods = sorted(videos["period"].unique())

    grouped = _count_by(explode_tags(videos, max_length, per_row_limit), "period")
    tags = _select_tags(grouped, tag_limit, min_occurrences)

    frames = []
    for p in periods:
        entries = []
        for tag in tags:
            if (tag, p) in grouped.index:
                row = grouped.loc[(tag, p)]
                entries.append(TagPeriodCount(
                    tag, int(row["count"]), int(row["total_views"]), int(row["total_likes"])
                ))
            else:
                entries.append(TagPeriodCount(tag, 0, 0, 0))
        entries.sort(key=lambda e: e.count, reverse=True)
        frames.append(RacingFrame(period=p, tags=entries))

    logger.info(f"Tag racing: {len(tags)} tags across {len(periods)} periods")
    return TagRacingData(
        racing_data=frames,
        tags=tags,
        periods=periods,
        stats={"totalTags": len(tags), "totalPeriods": len(periods)},
    )


def tag_evolution(
    df: pd.DataFrame,
    tag_limit: int,
    min_occurrences: int,
    max_length: int,
    per_row_limit: int
) -> TagEvolutionData:
    """Daily tag counts, zero-filled across every observed trending date."""
    videos = _dated_with_tags(df)
    if videos.empty:
        return TagEvolutionData(stats=_evolution_stats([], [], 0))

    videos = videos.assign(date_key=videos["trending_date"].dt.strftime("%Y-%m-%d"))
    dates = sorted(videos["date_key"].unique())

    grouped = _count_by(explode_tags(videos, max_length, per_row_limit), "date_key")
    tags = _select_tags(grouped, tag_limit, min_occurrences)

    timelines = []
    total_usage = 0
    for tag in tags:
        days = []
        for d in dates:
            if (tag, d) in grouped.index:
                row = grouped.loc[(tag, d)]
                count = int(row["count"])
                views = int(row["total_views"])
                likes = int(row["total_likes"])
            else:
                count = views = likes = 0
            days.append(TagDayCount(
                date_key=d,
                count=count,
                total_views=views,
                total_likes=likes,
                avg_views=views / count if count else 0.0,
            ))
            total_usage += count
        timelines.append(TagTimeline(tag=tag, timeline=days))

    logger.info(f"Tag evolution: {len(tags)} tags across {len(dates)} dates")
    return TagEvolutionData(
        timeline_data=timelines,
        tags=tags,
        dates=dates,
        stats=_evolution_stats(tags, dates, total_usage),
    )


def _evolution_stats(tags: list, dates: list, total_usage: int) -> dict:
    return {
        "totalTags": len(tags),
        "totalDates": len(dates),
        "totalUsage": total_usage,
        "avgUsagePerTag": total_usage / len(tags) if tags else 0.0,
        "dateRange": {
            "start": dates[0] if dates else None,
            "end": dates[-1] if dates else None,
        },
    }


def tag_category_pairs(df: pd.DataFrame, max_length: int) -> pd.DataFrame:
    """
    Aggregate co-occurrence of each cleaned tag with each category.

    Returns:
        DataFrame with PAIR_COLUMNS, one row per (tag, category)
    """
    has_tags = df["tags"].fillna("").str.len() > 0
    videos = df[has_tags].assign(category=df["category_name"].str.strip())
    videos = videos[videos["category"].str.len() > 0]
    if videos.empty:
        return pd.DataFrame(columns=PAIR_COLUMNS)

    exploded = explode_tags(videos, max_length)
    if exploded.empty:
        return pd.DataFrame(columns=PAIR_COLUMNS)

    pairs = exploded.groupby(["tag", "category"]).agg(
        count=("tag", "size"),
        total_views=("views", "sum"),
        total_likes=("likes", "sum"),
    )
    return pairs.reset_index()[PAIR_COLUMNS]
