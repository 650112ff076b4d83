"""
Storage utility.

File I/O helpers for the per-country dataset files and exported view models.
"""

import json
import os
import logging
from typing import Any, Dict

from config import settings

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for the dataset and chart exports.

    Handles:
    - Video rows (data/<CC>videos.csv)
    - Category names (data/<CC>_category_id.json)
    - Exported view models (output/<name>.json)
    """

    def __init__(self, data_root: str, output_root: str = None):
        """
        Initialize storage manager.

        Args:
            data_root: Directory holding the dataset files
            output_root: Directory for exported view models (default: settings.OUTPUT_ROOT)
        """
        self.data_root = str(data_root)
        self.output_root = str(output_root or settings.OUTPUT_ROOT)

        logger.info(f"Initialized StorageManager with data_root={self.data_root}")

    def video_path(self, country: str) -> str:
        return os.path.join(self.data_root, settings.VIDEO_FILE_TEMPLATE.format(country=country))

    def category_path(self, country: str) -> str:
        return os.path.join(self.data_root, settings.CATEGORY_FILE_TEMPLATE.format(country=country))

    def load_video_text(self, country: str) -> str:
        """
        Read the raw video CSV for a country.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        filepath = self.video_path(country)

        # Some country files are not clean UTF-8
        with open(filepath, "r", encoding=settings.FILE_ENCODING, errors="replace") as f:
            text = f.read()
        logger.debug(f"Read {len(text)} characters from {filepath}")
        return text

    def load_category_payload(self, country: str) -> Dict[str, Any]:
        """
        Read the category JSON for a country.

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        filepath = self.category_path(country)

        with open(filepath, "r", encoding=settings.FILE_ENCODING, errors="replace") as f:
            payload = json.load(f)
        return payload

    def save_view_model(self, data: Any, name: str) -> str:
        """
        Save an exported view model as JSON.

        Args:
            data: JSON-serializable view model (already converted with to_dict)
            name: File name without extension

        Returns:
            Path of the written file
        """
        os.makedirs(self.output_root, exist_ok=True)
        filepath = os.path.join(self.output_root, f"{name}.json")

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, allow_nan=False, default=str)
            logger.info(f"Saved view model to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save view model {name}: {e}")
            raise
        return filepath
