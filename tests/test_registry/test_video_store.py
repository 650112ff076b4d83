"""
Unit tests for the Video Store.
"""

import pytest

from trendscope.registry.video_store import FRAME_COLUMNS, VideoStore


def test_store_keeps_fixed_country_order(make_store):
    store = make_store({"US": [{}], "CA": [{}], "JP": [{}]})

    assert store.countries == ["CA", "JP", "US"]


def test_store_rejects_unknown_country(make_video):
    with pytest.raises(ValueError, match="Unknown countries"):
        VideoStore({"ZZ": []})


def test_frame_snapshot(make_store):
    store = make_store({"US": [{"views": 100}, {"views": 300}], "CA": [{"views": 5}]})

    df = store.frame()

    assert list(df.columns) == FRAME_COLUMNS
    assert len(df) == len(store) == 3
    assert df["views"].sum() == 405
    assert str(df["trending_date"].dtype).startswith("datetime64")


def test_videos_for_country(make_store):
    store = make_store({"US": [{}, {}], "CA": []})

    assert len(store.videos("US")) == 2
    assert store.videos("CA") == ()
    assert store.videos("JP") == ()
    assert store.has_country("CA")
    assert not store.has_country("JP")


def test_empty_store():
    store = VideoStore.empty()

    assert store.countries == []
    assert len(store) == 0
    assert list(store.frame().columns) == FRAME_COLUMNS


def test_store_copies_input(make_video):
    rows = [make_video()]
    store = VideoStore({"US": rows})

    rows.append(make_video())

    assert len(store.videos("US")) == 1
