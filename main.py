"""
TrendScope - Trending Video Chart Data

CLI entry point: loads the dataset and prints (or saves) one chart's view model
as JSON for a renderer to draw.
"""

import argparse
import json
import logging
import sys

from trendscope.aggregation.engine import AggregationEngine
from trendscope.models.view_models import ScatterFilters
from trendscope.orchestrator import DatasetLoader
from trendscope.utils.storage import StorageManager
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def _as_dict(items):
    return {key: value.to_dict() for key, value in items.items()}


def _as_list(items):
    return [item.to_dict() for item in items]


def build_chart(engine: AggregationEngine, args: argparse.Namespace):
    """
    Run the aggregation behind one chart.

    Returns:
        JSON-serializable view model
    """
    chart = args.chart
    country = args.country

    if chart == "views-by-country":
        return _as_dict(engine.views_by_country(country))
    if chart == "category-distribution":
        return engine.category_distribution(country)
    if chart == "scatter":
        filters = ScatterFilters(args.min_views, args.max_views, args.min_likes, args.max_likes)
        points = engine.views_vs_likes(args.sample_size, country, filters, seed=args.seed)
        return {
            "points": _as_list(points),
            "correlation": engine.views_likes_correlation(points),
        }
    if chart == "timeline":
        return _as_list(engine.timeline(country))
    if chart == "engagement":
        return engine.engagement_metrics(country, args.category).to_dict()
    if chart == "category-engagement":
        return _as_dict(engine.category_engagement(country))
    if chart == "channels":
        return _as_list(engine.channel_leaderboard(args.limit or settings.DEFAULT_LEADERBOARD_LIMIT, country))
    if chart == "channel-engagement":
        return _as_list(engine.top_channels_by_engagement(args.limit or settings.DEFAULT_ENGAGEMENT_CHANNEL_LIMIT))
    if chart == "top-videos":
        return _as_list(engine.top_videos(args.limit or settings.DEFAULT_TOP_VIDEOS_LIMIT, country))
    if chart == "heatmap":
        return engine.heatmap().to_dict()
    if chart == "publishing-timing":
        return engine.publishing_timing(country).to_dict()
    if chart == "tag-racing":
        return engine.tag_racing(args.filter or settings.DEFAULT_TAG_TREND_FILTER, country).to_dict()
    if chart == "tag-evolution":
        return engine.tag_evolution(args.filter or settings.DEFAULT_TAG_TREND_FILTER, country).to_dict()
    if chart == "tag-flow":
        return engine.tag_flow(country, args.filter or settings.DEFAULT_TAG_FLOW_FILTER).to_dict()
    if chart == "category-performance":
        return [s.to_dict("category") for s in engine.category_performance()]
    if chart == "country-performance":
        return [s.to_dict("country") for s in engine.country_performance()]
    if chart == "overview":
        stats = engine.overview_stats().to_dict()
        stats["totalChannels"] = engine.total_channel_count()
        stats["videosByCountry"] = engine.country_video_counts()
        return stats
    if chart == "countries":
        return engine.country_options()
    raise ValueError(f"Unknown chart: {chart}")


CHARTS = [
    "views-by-country",
    "category-distribution",
    "scatter",
    "timeline",
    "engagement",
    "category-engagement",
    "channels",
    "channel-engagement",
    "top-videos",
    "heatmap",
    "publishing-timing",
    "tag-racing",
    "tag-evolution",
    "tag-flow",
    "category-performance",
    "country-performance",
    "overview",
    "countries",
]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="TrendScope - aggregate trending video data into chart view models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Category share per country
  python main.py --chart heatmap

  # Reproducible scatter sample for the US, views between 1e5 and 1e7
  python main.py --chart scatter --country US --seed 7 \\
                 --min-views 100000 --max-views 10000000

  # Tag flow for Japan, saved to output/
  python main.py --chart tag-flow --country JP --filter focused --output tag_flow_jp
        """
    )

    parser.add_argument("--chart", required=True, choices=CHARTS, help="View model to build")
    parser.add_argument(
        "--country",
        default="all",
        help="Country code, or 'all'/'global' for every country (default: all)"
    )
    parser.add_argument("--category", default="all", help="Category name for --chart engagement")
    parser.add_argument("--filter", help="Preset for tag charts (overview, top-tags, trending / balanced, focused, detailed)")
    parser.add_argument("--limit", type=int, help="Row limit for channels / channel-engagement / top-videos")
    parser.add_argument("--sample-size", type=int, default=settings.DEFAULT_SAMPLE_SIZE, help="Scatter sample size")
    parser.add_argument("--seed", type=int, help="Seed for the scatter sample")
    parser.add_argument("--min-views", type=float)
    parser.add_argument("--max-views", type=float)
    parser.add_argument("--min-likes", type=float)
    parser.add_argument("--max-likes", type=float)
    parser.add_argument(
        "--countries",
        nargs="+",
        default=list(settings.COUNTRIES),
        help="Countries to load (default: all ten)"
    )
    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )
    parser.add_argument("--output", help="Save the view model to <output-root>/<name>.json instead of printing")
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        storage = StorageManager(args.data_root)
        loader = DatasetLoader(storage)
        store = loader.load(args.countries)

        if not store.countries:
            logger.error(f"No country data could be loaded from {args.data_root}")
            return 1

        engine = AggregationEngine(store)
        data = build_chart(engine, args)

        if args.output:
            path = storage.save_view_model(data, args.output)
            print(f"Saved {args.chart} to {path}")
        else:
            print(json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False, default=str))
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1

    except Exception as e:
        logger.error(f"TrendScope failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
