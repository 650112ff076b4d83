"""
Unit tests for the Storage Manager.
"""

import json
import os
import tempfile

import pytest

from trendscope.utils.storage import StorageManager


def test_file_paths():
    storage = StorageManager("/data", output_root="/out")

    assert storage.video_path("US") == os.path.join("/data", "USvideos.csv")
    assert storage.category_path("US") == os.path.join("/data", "US_category_id.json")


def test_load_video_text_and_categories():
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "GBvideos.csv"), "w", encoding="utf-8") as f:
            f.write("video_id,title\nabc,Hi\n")
        with open(os.path.join(tmpdir, "GB_category_id.json"), "w", encoding="utf-8") as f:
            json.dump({"items": []}, f)

        storage = StorageManager(tmpdir)

        assert storage.load_video_text("GB").startswith("video_id,title")
        assert storage.load_category_payload("GB") == {"items": []}


def test_undecodable_bytes_are_replaced():
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "RUvideos.csv"), "wb") as f:
            f.write(b"video_id,title\nabc,\xff\xfe\n")

        text = StorageManager(tmpdir).load_video_text("RU")

        assert "\ufffd" in text


def test_missing_files_raise():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)

        with pytest.raises(FileNotFoundError):
            storage.load_video_text("US")
        with pytest.raises(FileNotFoundError):
            storage.load_category_payload("US")


def test_save_view_model():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir, output_root=os.path.join(tmpdir, "output"))

        path = storage.save_view_model({"Likes": 3}, "engagement")

        with open(path) as f:
            assert json.load(f) == {"Likes": 3}


def test_save_view_model_rejects_nan():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir, output_root=os.path.join(tmpdir, "output"))

        with pytest.raises(ValueError):
            storage.save_view_model({"avgViews": float("nan")}, "views")
