"""
Configuration settings for TrendScope.

Centralized configuration for loading, parsing and aggregation parameters.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("TRENDSCOPE_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Dataset
COUNTRIES = ("CA", "DE", "FR", "GB", "IN", "JP", "KR", "MX", "RU", "US")
VIDEO_FILE_TEMPLATE = "{country}videos.csv"
CATEGORY_FILE_TEMPLATE = "{country}_category_id.json"
FILE_ENCODING = "utf-8"

# Record parser
MAX_ROWS_PER_COUNTRY = 1000  # Data rows kept per file; the rest is truncated
UNKNOWN_CATEGORY = "Unknown"

# Scope sentinels accepted wherever a country code is expected
ALL_SCOPES = ("all", "global")

# Scatter plot
DEFAULT_SAMPLE_SIZE = 500

# Channels
DEFAULT_CHANNEL_LIMIT = 50
DEFAULT_LEADERBOARD_LIMIT = 25
DEFAULT_ENGAGEMENT_CHANNEL_LIMIT = 10
DEFAULT_TOP_VIDEOS_LIMIT = 30

# Tag racing / evolution: filter type -> (tag limit, min occurrences)
TAG_TREND_PRESETS = {
    "overview": (15, 5),
    "top-tags": (10, 10),
    "trending": (8, 15),
}
DEFAULT_TAG_TREND_FILTER = "overview"
TAG_TREND_MAX_LENGTH = 30
TAGS_PER_ROW_LIMIT = 8

# Tag flow: filter type -> (min flow value, tag limit, category limit)
TAG_FLOW_PRESETS = {
    "balanced": (5, 15, 7),
    "focused": (8, 12, 6),
    "detailed": (3, 20, 8),
}
DEFAULT_TAG_FLOW_FILTER = "balanced"
TAG_FLOW_MAX_LENGTH = 25

# Publishing timing
PUBLISH_TIMEZONE = os.getenv("TRENDSCOPE_TIMEZONE", "UTC")
SUCCESS_RATE_CAP = 100.0

# Loader
LOAD_MAX_WORKERS = 10
CONTINUE_ON_COUNTRY_FAILURE = True  # One broken country must not sink the rest

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "trendscope.log"
