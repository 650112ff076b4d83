"""
Category Registry - per-country category id to display name lookup.

Built once per country from the YouTube category JSON payload and read-only
afterwards.
"""

import logging
from typing import Any, Dict

from config import settings

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """
    Resolves numeric category ids to display names per country.

    Lookups never fail: an unknown id or an unloaded country resolves to
    settings.UNKNOWN_CATEGORY.
    """

    def __init__(self):
        self.categories: Dict[str, Dict[int, str]] = {}  # country -> {id: title}

    def load_payload(self, country: str, payload: Dict[str, Any]) -> Dict[int, str]:
        """
        Build the id -> name map for one country.

        Args:
            country: Country code
            payload: Parsed JSON shaped {"items": [{"id", "snippet": {"title"}}]}

        Returns:
            The stored mapping
        """
        mapping = {}
        items = payload.get("items") if isinstance(payload, dict) else None

        for item in items or []:
            try:
                category_id = int(item["id"])
                title = item["snippet"]["title"]
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed category item for {country}: {item!r}")
                continue
            if not isinstance(title, str) or not title.strip():
                logger.debug(f"Skipping untitled category {category_id} for {country}")
                continue
            mapping[category_id] = title.strip()

        self.categories[country] = mapping
        logger.info(f"Loaded {len(mapping)} categories for {country}")
        return mapping

    def resolve(self, country: str, category_id: int) -> str:
        """Return the display name, or "Unknown"."""
        return self.categories.get(country, {}).get(category_id, settings.UNKNOWN_CATEGORY)

    def mapping_for(self, country: str) -> Dict[int, str]:
        """Return a copy of the country's map (empty if not loaded)."""
        return dict(self.categories.get(country, {}))

    def is_loaded(self, country: str) -> bool:
        return country in self.categories
