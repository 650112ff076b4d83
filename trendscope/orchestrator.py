"""
Dataset Loader.

Loads every country's category names and video rows concurrently and freezes
the result into a VideoStore.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from trendscope.agents.record_parser import RecordParser
from trendscope.registry.category_registry import CategoryRegistry
from trendscope.registry.video_store import VideoStore
from trendscope.utils.storage import StorageManager
from config import settings

logger = logging.getLogger(__name__)


class DatasetLoadError(Exception):
    """Raised when a country fails to load and failures are not tolerated."""
    pass


@dataclass
class LoadResult:
    """Outcome of loading one country's files."""
    country: str
    success: bool
    count: int = 0
    error: Optional[str] = None


class DatasetLoader:
    """
    Orchestrates the two-phase load.

    1. Category maps for the requested countries (fan-out, join-all)
    2. Video rows for the same countries (fan-out, join-all)

    A failure in one country is logged and recorded; the others still load.
    """

    def __init__(
        self,
        storage: StorageManager,
        registry: Optional[CategoryRegistry] = None,
        parser: Optional[RecordParser] = None,
        max_workers: int = settings.LOAD_MAX_WORKERS
    ):
        """
        Initialize dataset loader.

        Args:
            storage: Storage manager used to read the files
            registry: Category registry to fill (new one if omitted)
            parser: Record parser (default row cap if omitted)
            max_workers: Thread pool size for the per-country fan-out
        """
        self.storage = storage
        self.registry = registry or CategoryRegistry()
        self.parser = parser or RecordParser()
        self.max_workers = max_workers
        self.results: List[LoadResult] = []

    def load(self, countries: Iterable[str] = settings.COUNTRIES) -> VideoStore:
        """
        Load the requested countries and build a store.

        Args:
            countries: Country codes to load

        Returns:
            VideoStore holding every country that loaded successfully

        Raises:
            DatasetLoadError: If a country failed and
                settings.CONTINUE_ON_COUNTRY_FAILURE is False
        """
        countries = [c for c in countries if self._is_known(c)]
        logger.info(f"Loading {len(countries)} countries: {', '.join(countries)}")

        # Categories first so rows resolve names at parse time
        self._fan_out(self._load_categories, countries)

        outcomes = self._fan_out(self._load_videos, countries)

        videos = {}
        self.results = []
        for country, (result, rows) in zip(countries, outcomes):
            self.results.append(result)
            if result.success:
                videos[country] = rows

        failed = [r for r in self.results if not r.success]
        loaded = len(self.results) - len(failed)
        logger.info(f"Video data loaded: {loaded}/{len(self.results)} countries")

        if failed and not settings.CONTINUE_ON_COUNTRY_FAILURE:
            raise DatasetLoadError(
                f"Failed to load {', '.join(r.country for r in failed)}"
            )

        return VideoStore(videos)

    def _fan_out(self, task, countries):
        """Run task once per country and wait for every call to settle."""
        if not countries:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(task, countries))

    def _load_categories(self, country: str) -> bool:
        try:
            payload = self.storage.load_category_payload(country)
            self.registry.load_payload(country, payload)
            return True
        except Exception as e:
            logger.error(f"Error loading categories for {country}: {e}")
            return False

    def _load_videos(self, country: str) -> Tuple[LoadResult, list]:
        try:
            text = self.storage.load_video_text(country)
            rows = self.parser.parse(text, country, self.registry.mapping_for(country))
            return LoadResult(country=country, success=True, count=len(rows)), rows
        except Exception as e:
            logger.error(f"Error loading video data for {country}: {e}")
            return LoadResult(country=country, success=False, error=str(e)), []

    def _is_known(self, country: str) -> bool:
        if country in settings.COUNTRIES:
            return True
        logger.warning(f"Ignoring unknown country code: {country}")
        return False

    def summary(self) -> Dict[str, int]:
        """Country -> row count for the last load (failed countries omitted)."""
        return {r.country: r.count for r in self.results if r.success}
