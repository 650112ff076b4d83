"""
Aggregation Engine.

Reduces the loaded VideoStore into the view model of each chart. Every
operation builds a fresh result from the current store snapshot and never
raises: missing or empty input yields an empty, well-formed view model and
a log entry.
"""

import functools
import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from trendscope.aggregation import tag_trends
from trendscope.aggregation.flow_graph import FlowGraphBuilder
from trendscope.models.view_models import (
    ChannelEngagement,
    ChannelSummary,
    CountryViews,
    EngagementMetrics,
    HeatmapCell,
    HeatmapData,
    OverviewStats,
    PerformanceSummary,
    PublishingTimingData,
    ScatterFilters,
    ScatterPoint,
    TagEvolutionData,
    TagFlowData,
    TagRacingData,
    TimelinePoint,
    TimingCell,
    TopVideo,
    VideoRef,
)
from trendscope.registry.video_store import VideoStore
from trendscope.utils.countries import GLOBAL_OPTION_LABEL, country_name, scope_name
from config import settings

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _fallback(empty: Callable):
    """Log any unexpected error from an operation and return empty() instead."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
                return empty()
        return wrapper
    return decorator


def _between(values: pd.Series, low, high) -> pd.Series:
    """Inclusive bounds; None leaves that side open."""
    mask = pd.Series(True, index=values.index)
    if low is not None:
        mask &= values >= low
    if high is not None:
        mask &= values <= high
    return mask


def _preset(presets: dict, filter_type: str, default: str) -> tuple:
    if filter_type not in presets:
        logger.warning(f"Unknown filter type {filter_type!r}, using {default!r}")
        filter_type = default
    return presets[filter_type]


class AggregationEngine:
    """
    Per-chart aggregations over a VideoStore.

    Country arguments take a country code or one of settings.ALL_SCOPES
    ("all" / "global").
    """

    def __init__(self, store: VideoStore):
        """
        Initialize engine.

        Args:
            store: Loaded video collection. Never mutated by the engine.
        """
        self._store = store

    @property
    def store(self) -> VideoStore:
        return self._store

    def swap_store(self, store: VideoStore) -> None:
        """Replace the whole collection (reload). In-flight calls keep the old snapshot."""
        self._store = store
        logger.info(f"Swapped video store ({len(store)} rows)")

    def _scope(self, country: str) -> Optional[pd.DataFrame]:
        """Rows for a country scope, or None (logged) for an unknown country."""
        store = self._store
        df = store.frame()
        if country in settings.ALL_SCOPES:
            return df
        if not store.has_country(country):
            logger.warning(f"No data loaded for country {country!r}")
            return None
        return df[df["country"] == country]

    # ------------------------------------------------------------------
    # Country / category overviews
    # ------------------------------------------------------------------

    @_fallback(dict)
    def views_by_country(self, country: str = "all") -> Dict[str, CountryViews]:
        """
        Total views, average views and video count per country.

        An empty country reports avg_views as NaN; guarding the division is
        left to the caller.
        """
        store = self._store
        if country in settings.ALL_SCOPES:
            countries = store.countries
        elif store.has_country(country):
            countries = [country]
        else:
            logger.warning(f"No data loaded for country {country!r}")
            return {}

        grouped = store.frame().groupby("country")["views"].agg(["sum", "size"])

        result = {}
        for c in countries:
            if c in grouped.index:
                total = int(grouped.at[c, "sum"])
                count = int(grouped.at[c, "size"])
            else:
                total, count = 0, 0
            result[c] = CountryViews(
                total_views=total,
                avg_views=total / count if count else math.nan,
                video_count=count,
            )
        return result

    @_fallback(dict)
    def category_distribution(self, country: str = "all") -> Dict[str, int]:
        """Category name -> number of videos."""
        df = self._scope(country)
        if df is None or df.empty:
            return {}
        counts = df["category_name"].value_counts()
        return {name: int(n) for name, n in counts.items()}

    @_fallback(list)
    def available_countries(self) -> List[str]:
        """Countries with at least one row, sorted."""
        return sorted(c for c in self._store.countries if self._store.videos(c))

    @_fallback(list)
    def available_categories(self) -> List[str]:
        df = self._store.frame()
        return sorted(df["category_name"].dropna().unique().tolist())

    @_fallback(list)
    def country_options(self) -> List[Dict[str, str]]:
        """Dropdown entries: the global option, then each non-empty country."""
        options = [{"code": "global", "name": GLOBAL_OPTION_LABEL}]
        options.extend({"code": c, "name": country_name(c)} for c in self.available_countries())
        return options

    @_fallback(dict)
    def country_video_counts(self) -> Dict[str, int]:
        return {c: len(self._store.videos(c)) for c in self._store.countries}

    @_fallback(OverviewStats)
    def overview_stats(self) -> OverviewStats:
        df = self._store.frame()
        total_videos = len(df)
        total_views = int(df["views"].sum())
        total_likes = int(df["likes"].sum())
        return OverviewStats(
            total_videos=total_videos,
            total_views=total_views,
            total_likes=total_likes,
            countries_count=len(self._store.countries),
            categories_count=int(df["category_name"].nunique()),
            avg_views_per_video=total_views / total_videos if total_videos else math.nan,
            avg_likes_per_video=total_likes / total_videos if total_videos else math.nan,
        )

    # ------------------------------------------------------------------
    # Scatter / timeline / engagement
    # ------------------------------------------------------------------

    @_fallback(list)
    def views_vs_likes(
        self,
        sample_size: int = settings.DEFAULT_SAMPLE_SIZE,
        country: str = "all",
        filters: Optional[ScatterFilters] = None,
        seed: Optional[int] = None
    ) -> List[ScatterPoint]:
        """
        Random sample of (views, likes) points for the scatter plot.

        Args:
            sample_size: Maximum number of points returned
            country: Country code or "all"
            filters: Inclusive view/like bounds (None = unbounded)
            seed: Fixes the sample for reproducible output; None draws a
                new sample on every call

        Returns:
            At most sample_size points, each within the filter bounds
        """
        df = self._scope(country)
        if df is None or sample_size <= 0:
            return []

        filters = filters or ScatterFilters()
        mask = (
            (df["views"] > 0)
            & (df["likes"] > 0)
            & _between(df["views"], filters.min_views, filters.max_views)
            & _between(df["likes"], filters.min_likes, filters.max_likes)
        )
        df = df[mask]

        if len(df) > sample_size:
            df = df.sample(n=sample_size, random_state=seed)
        else:
            df = df.sample(frac=1, random_state=seed)

        return [
            ScatterPoint(
                views=int(row.views),
                likes=int(row.likes),
                title=row.title,
                country=row.country,
                category=row.category_name,
            )
            for row in df.itertuples(index=False)
        ]

    @staticmethod
    def views_likes_correlation(points: List[ScatterPoint]) -> float:
        """Pearson r between views and likes; 0.0 when undefined."""
        if len(points) < 2:
            return 0.0
        views = np.array([p.views for p in points], dtype=float)
        likes = np.array([p.likes for p in points], dtype=float)
        if views.var() == 0 or likes.var() == 0:
            return 0.0
        return float(np.corrcoef(views, likes)[0, 1])

    @_fallback(list)
    def timeline(self, country: str = "all") -> List[TimelinePoint]:
        """Videos and views per trending day, oldest first."""
        df = self._scope(country)
        if df is None:
            return []
        dated = df[df["trending_date"].notna()]
        if dated.empty:
            return []

        daily = dated.groupby(dated["trending_date"].dt.normalize()).agg(
            count=("views", "size"),
            total_views=("views", "sum"),
        ).sort_index()

        return [
            TimelinePoint(date=day.date(), count=int(row["count"]), total_views=int(row["total_views"]))
            for day, row in daily.iterrows()
        ]

    @_fallback(EngagementMetrics)
    def engagement_metrics(self, country: str = "all", category: str = "all") -> EngagementMetrics:
        """Likes, dislikes and comments summed over a country/category subset."""
        df = self._scope(country)
        if df is None:
            return EngagementMetrics()
        if category != "all":
            df = df[df["category_name"] == category]
        return EngagementMetrics(
            likes=int(df["likes"].sum()),
            dislikes=int(df["dislikes"].sum()),
            comments=int(df["comment_count"].sum()),
        )

    @_fallback(dict)
    def category_engagement(self, country: str = "all") -> Dict[str, EngagementMetrics]:
        df = self._scope(country)
        if df is None or df.empty:
            return {}
        sums = df.groupby("category_name")[["likes", "dislikes", "comment_count"]].sum()
        return {
            name: EngagementMetrics(
                likes=int(row["likes"]),
                dislikes=int(row["dislikes"]),
                comments=int(row["comment_count"]),
            )
            for name, row in sums.iterrows()
        }

    @_fallback(list)
    def top_videos(self, limit: int = settings.DEFAULT_TOP_VIDEOS_LIMIT, country: str = "all") -> List[TopVideo]:
        """Most viewed videos with their like ratio."""
        df = self._scope(country)
        if df is None:
            return []
        df = df[df["views"] > 0].sort_values("views", ascending=False, kind="mergesort").head(limit)
        return [
            TopVideo(
                id=row.video_id or row.title,
                title=row.title,
                views=int(row.views),
                likes=int(row.likes),
                comments=int(row.comment_count),
                country=row.country,
                category=row.category_name,
                ratio=float(row.likes / row.views),
            )
            for row in df.itertuples(index=False)
        ]

    @_fallback(list)
    def category_performance(self) -> List[PerformanceSummary]:
        return self._performance("category_name")

    @_fallback(list)
    def country_performance(self) -> List[PerformanceSummary]:
        return self._performance("country")

    def _performance(self, key: str) -> List[PerformanceSummary]:
        df = self._store.frame()
        if df.empty:
            return []
        grouped = df.groupby(key).agg(
            total_views=("views", "sum"),
            total_likes=("likes", "sum"),
            total_comments=("comment_count", "sum"),
            video_count=("views", "size"),
        )
        grouped = grouped.sort_values("total_views", ascending=False, kind="mergesort")
        return [
            PerformanceSummary(
                key=name,
                total_views=int(row["total_views"]),
                total_likes=int(row["total_likes"]),
                total_comments=int(row["total_comments"]),
                video_count=int(row["video_count"]),
                avg_views=float(row["total_views"] / row["video_count"]),
            )
            for name, row in grouped.iterrows()
        ]

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def _all_channels(self) -> List[ChannelSummary]:
        df = self._store.frame()
        if df.empty:
            return []
        by_channel = df.groupby("channel_title", sort=False)
        grouped = by_channel.agg(
            video_count=("views", "size"),
            total_views=("views", "sum"),
        )
        countries = by_channel["country"].unique()  # First-appearance order
        grouped = grouped.sort_values("total_views", ascending=False, kind="mergesort")
        return [
            ChannelSummary(
                name=name,
                video_count=int(row["video_count"]),
                total_views=int(row["total_views"]),
                countries=list(countries[name]),
            )
            for name, row in grouped.iterrows()
        ]

    @_fallback(list)
    def top_channels(self, limit: int = settings.DEFAULT_CHANNEL_LIMIT) -> List[ChannelSummary]:
        """Channels by total views across every country."""
        return self._all_channels()[:limit]

    @_fallback(list)
    def channels_by_country(self, country: str, limit: int = settings.DEFAULT_CHANNEL_LIMIT) -> List[ChannelSummary]:
        """Channels that trended in a country, ranked by their total views everywhere."""
        if not self._store.has_country(country):
            logger.warning(f"No data loaded for country {country!r}")
            return []
        return [ch for ch in self._all_channels() if country in ch.countries][:limit]

    @_fallback(list)
    def channel_leaderboard(self, limit: int = settings.DEFAULT_LEADERBOARD_LIMIT, country: str = "all") -> List[ChannelSummary]:
        if country in settings.ALL_SCOPES:
            return self.top_channels(limit)
        return self.channels_by_country(country, limit)

    @_fallback(list)
    def top_channels_by_engagement(self, limit: int = settings.DEFAULT_ENGAGEMENT_CHANNEL_LIMIT) -> List[ChannelEngagement]:
        """
        Channels ranked by like rate across every country.

        Channels with no views have no defined rate and are left out. Ties
        keep first-appearance order.
        """
        df = self._store.frame()
        if df.empty:
            return []
        grouped = df.groupby("channel_title", sort=False).agg(
            total_views=("views", "sum"),
            total_likes=("likes", "sum"),
            total_comments=("comment_count", "sum"),
            video_count=("views", "size"),
        )
        grouped = grouped[grouped["total_views"] > 0]
        grouped = grouped.assign(score=grouped["total_likes"] / grouped["total_views"] * 100)
        grouped = grouped.sort_values("score", ascending=False, kind="mergesort").head(limit)
        return [
            ChannelEngagement(
                name=name,
                engagement_score=float(row["score"]),
                total_views=int(row["total_views"]),
                total_likes=int(row["total_likes"]),
                total_comments=int(row["total_comments"]),
                video_count=int(row["video_count"]),
            )
            for name, row in grouped.iterrows()
        ]

    @_fallback(int)
    def total_channel_count(self) -> int:
        return int(self._store.frame()["channel_title"].nunique())

    # ------------------------------------------------------------------
    # Heatmaps
    # ------------------------------------------------------------------

    @_fallback(HeatmapData)
    def heatmap(self) -> HeatmapData:
        """
        Share of each category within each country's videos.

        Covers the full country x category cross product; a country with no
        videos gets 0 for every category.
        """
        store = self._store
        df = store.frame()
        categories = sorted(df["category_name"].dropna().unique().tolist())
        countries = store.countries
        counts = df.groupby(["country", "category_name"]).size()

        cells = []
        for country in countries:
            total = len(store.videos(country))
            for category in categories:
                count = int(counts.get((country, category), 0))
                cells.append(HeatmapCell(
                    country=country,
                    category=category,
                    value=count / total * 100 if total else 0.0,
                    count=count,
                    total_videos=total,
                ))
        return HeatmapData(data=cells, categories=categories, countries=countries)

    @_fallback(PublishingTimingData)
    def publishing_timing(self, country: str = "global") -> PublishingTimingData:
        """
        Day-of-week x hour-of-day grid of publishing performance.

        Timestamps are read in settings.PUBLISH_TIMEZONE. Rows with a missing
        or unparseable publish_time are skipped. success_rate compares a
        cell's average views to the overall average, capped at 100.
        """
        df = self._scope(country)
        if df is None:
            return PublishingTimingData(selected_country=country, country_name=country_name(country))

        published = pd.to_datetime(df["publish_time"], errors="coerce", utc=True, format="ISO8601")
        published = published.dt.tz_convert(settings.PUBLISH_TIMEZONE)
        valid = df.assign(
            day=(published.dt.dayofweek + 1) % 7,  # pandas: Monday=0; grid: Sunday=0
            hour=published.dt.hour,
        )[published.notna()]
        valid = valid.astype({"day": int, "hour": int})

        grouped = valid.groupby(["day", "hour"]).agg(
            count=("views", "size"),
            total_views=("views", "sum"),
            total_likes=("likes", "sum"),
            total_comments=("comment_count", "sum"),
        )
        overall_avg = float(valid["views"].sum() / len(valid)) if len(valid) else 0.0

        refs = {}
        for row in valid.itertuples(index=False):
            refs.setdefault((row.day, row.hour), []).append(
                VideoRef(title=row.title, views=int(row.views), country=row.country)
            )

        cells = []
        for day in range(7):
            for hour in range(24):
                cell = TimingCell(day=day, day_name=DAYS_OF_WEEK[day], hour=hour)
                if (day, hour) in grouped.index:
                    slot = grouped.loc[(day, hour)]
                    count = int(slot["count"])
                    cell.count = count
                    cell.total_views = int(slot["total_views"])
                    cell.avg_views = float(slot["total_views"] / count)
                    cell.avg_likes = float(slot["total_likes"] / count)
                    cell.avg_comments = float(slot["total_comments"] / count)
                    if overall_avg > 0:
                        cell.success_rate = float(min(
                            settings.SUCCESS_RATE_CAP, cell.avg_views / overall_avg * 100
                        ))
                    cell.videos = refs.get((day, hour), [])
                cells.append(cell)

        max_success = max(cell.success_rate for cell in cells)
        logger.info(
            f"Publishing timing ({country}): {len(valid)} timestamped videos, "
            f"overall average views {overall_avg:,.0f}, max success rate {max_success:.1f}%"
        )
        return PublishingTimingData(
            data=cells,
            days=list(DAYS_OF_WEEK),
            max_success=max_success,
            selected_country=country,
            country_name=scope_name(country, settings.ALL_SCOPES),
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    @_fallback(TagRacingData)
    def tag_racing(self, filter_type: str = settings.DEFAULT_TAG_TREND_FILTER, country: str = "global") -> TagRacingData:
        """Weekly tag competition for the racing bar chart."""
        tag_limit, min_occurrences = _preset(
            settings.TAG_TREND_PRESETS, filter_type, settings.DEFAULT_TAG_TREND_FILTER
        )
        df = self._scope(country)
        if df is None:
            return TagRacingData()
        return tag_trends.tag_racing(
            df,
            tag_limit=tag_limit,
            min_occurrences=min_occurrences,
            max_length=settings.TAG_TREND_MAX_LENGTH,
            per_row_limit=settings.TAGS_PER_ROW_LIMIT,
        )

    @_fallback(TagEvolutionData)
    def tag_evolution(self, filter_type: str = settings.DEFAULT_TAG_TREND_FILTER, country: str = "global") -> TagEvolutionData:
        """Daily tag timelines."""
        tag_limit, min_occurrences = _preset(
            settings.TAG_TREND_PRESETS, filter_type, settings.DEFAULT_TAG_TREND_FILTER
        )
        df = self._scope(country)
        if df is None:
            return TagEvolutionData()
        return tag_trends.tag_evolution(
            df,
            tag_limit=tag_limit,
            min_occurrences=min_occurrences,
            max_length=settings.TAG_TREND_MAX_LENGTH,
            per_row_limit=settings.TAGS_PER_ROW_LIMIT,
        )

    @_fallback(TagFlowData)
    def tag_flow(self, country: str = "global", filter_type: str = settings.DEFAULT_TAG_FLOW_FILTER) -> TagFlowData:
        """Tag -> category Sankey graph."""
        min_flow, tag_limit, category_limit = _preset(
            settings.TAG_FLOW_PRESETS, filter_type, settings.DEFAULT_TAG_FLOW_FILTER
        )
        name = scope_name(country, settings.ALL_SCOPES)
        df = self._scope(country)
        if df is None:
            return TagFlowData(selected_country=country, country_name=name)

        pairs = tag_trends.tag_category_pairs(df, settings.TAG_FLOW_MAX_LENGTH)
        nodes, links = FlowGraphBuilder(min_flow, tag_limit, category_limit).build(pairs)

        return TagFlowData(
            nodes=nodes,
            links=links,
            selected_country=country,
            country_name=name,
            stats={
                "totalTags": sum(1 for n in nodes if n.type == "tag"),
                "totalCategories": sum(1 for n in nodes if n.type == "category"),
                "totalFlows": len(links),
                "minFlowValue": min_flow,
            },
        )
