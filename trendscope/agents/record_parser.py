"""
Record Parser.

Turns a country's raw trending-videos CSV text into typed TrendingVideo rows.
"""

import io
import logging
import re
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from trendscope.models.video import TrendingVideo
from config import settings

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(value: Optional[str]) -> int:
    """
    Parse a non-negative counter field.

    Reads the leading integer of the value ("123abc" -> 123). Anything
    unparseable becomes 0 and negatives clamp to 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(0, int(match.group(1)))


def parse_trending_date(value: Optional[str]) -> Optional[date]:
    """
    Parse the compact YY.DD.MM trending date.

    "17.14.11" -> date(2017, 11, 14). Returns None for malformed input.
    """
    if not value:
        return None

    parts = value.strip().split(".")
    if len(parts) != 3:
        return None

    try:
        year, day, month = (int(part) for part in parts)
        return date(2000 + year, month, day)
    except ValueError:
        logger.debug(f"Could not parse trending date: {value!r}")
        return None


class RecordParser:
    """
    Parses delimited video files into TrendingVideo rows.

    Only the first max_rows data records of each file are kept.
    """

    def __init__(self, max_rows: int = settings.MAX_ROWS_PER_COUNTRY):
        """
        Initialize record parser.

        Args:
            max_rows: Maximum number of data records read per file
        """
        self.max_rows = max_rows

    def parse(
        self,
        text: str,
        country: str,
        category_map: Optional[Dict[int, str]] = None
    ) -> List[TrendingVideo]:
        """
        Parse CSV text for one country.

        Args:
            text: Raw file contents, header line first
            country: Country code the file belongs to
            category_map: Category id -> display name for this country

        Returns:
            Ordered list of TrendingVideo rows
        """
        category_map = category_map or {}
        if not text.strip():
            logger.warning(f"Empty video file for {country}")
            return []

        frame = self._read_frame(text.strip())
        frame.columns = [str(name).strip() for name in frame.columns]
        if frame.empty:
            logger.warning(f"No video records for {country}")
            return []

        # Short records are padded with nulls; the last column is always missing
        short = frame[frame.columns[-1]].isna()
        if short.any():
            logger.debug(f"Dropped {int(short.sum())} short records for {country}")
        frame = frame[~short].copy()

        for column in frame.columns:
            frame[column] = frame[column].astype(str).str.strip()

        rows = [
            self._to_video(record, country, category_map)
            for record in frame.to_dict("records")
        ]
        logger.info(f"Parsed {len(rows)} rows for {country}")
        return rows

    def _read_frame(self, text: str) -> pd.DataFrame:
        """Read at most max_rows records as untyped strings."""
        width = len(pd.read_csv(io.StringIO(text), nrows=0, engine="python").columns)

        return pd.read_csv(
            io.StringIO(text),
            dtype=object,
            keep_default_na=False,
            nrows=self.max_rows,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],  # Extra trailing fields are ignored
        )

    def _to_video(
        self,
        record: Dict[str, str],
        country: str,
        category_map: Dict[int, str]
    ) -> TrendingVideo:
        category_id = parse_count(record.get("category_id"))
        return TrendingVideo(
            country=country,
            video_id=record.get("video_id", ""),
            title=record.get("title", ""),
            channel_title=record.get("channel_title", ""),
            category_id=category_id,
            category_name=category_map.get(category_id) or settings.UNKNOWN_CATEGORY,
            publish_time=record.get("publish_time", ""),
            trending_date=parse_trending_date(record.get("trending_date")),
            tags=record.get("tags", ""),
            views=parse_count(record.get("views")),
            likes=parse_count(record.get("likes")),
            dislikes=parse_count(record.get("dislikes")),
            comment_count=parse_count(record.get("comment_count")),
        )
