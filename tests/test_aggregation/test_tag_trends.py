"""
Unit tests for the tag trend aggregations.
"""

from datetime import date

import pandas as pd

from trendscope.aggregation import tag_trends
from trendscope.aggregation.flow_graph import PAIR_COLUMNS


def _frame(make_store, rows):
    return make_store({"US": rows}).frame()


def test_explode_tags_one_row_per_tag(make_store):
    df = _frame(make_store, [
        {"tags": '"Gaming"|"none"|"[none]"|"minecraft"'},
        {"tags": '"none"'},
        {"tags": ""},
    ])

    exploded = tag_trends.explode_tags(df, max_length=30)

    assert exploded["tag"].tolist() == ["gaming", "minecraft"]


def test_explode_tags_per_row_limit(make_store):
    df = _frame(make_store, [{"tags": '"alpha"|"bravo"|"charlie"'}])

    exploded = tag_trends.explode_tags(df, max_length=30, per_row_limit=2)

    assert exploded["tag"].tolist() == ["alpha", "bravo"]


def test_rank_tags_threshold_limit_and_ties():
    counts = pd.Series({"zulu": 6, "alpha": 6, "mike": 9, "rare": 2})

    assert tag_trends.rank_tags(counts, tag_limit=10, min_occurrences=5) == ["mike", "alpha", "zulu"]
    assert tag_trends.rank_tags(counts, tag_limit=2, min_occurrences=1) == ["mike", "alpha"]


def test_tag_racing_periods_are_iso_weeks(make_store):
    df = _frame(make_store, [
        {"tags": '"music"', "trending_date": date(2018, 1, 1)},   # 2018-W01
        {"tags": '"music"', "trending_date": date(2017, 12, 31)},  # 2017-W52
        {"tags": '"music"', "trending_date": None},
    ])

    racing = tag_trends.tag_racing(df, tag_limit=5, min_occurrences=1, max_length=30, per_row_limit=8)

    assert racing.periods == ["2017-W52", "2018-W01"]
    assert racing.tags == ["music"]
    assert [f.tags[0].count for f in racing.racing_data] == [1, 1]
    assert racing.stats == {"totalTags": 1, "totalPeriods": 2}


def test_tag_racing_frames_sorted_by_count(make_store):
    rows = (
        [{"tags": '"early"', "trending_date": date(2017, 11, 14)}] * 3
        + [{"tags": '"later"', "trending_date": date(2017, 11, 21)}] * 4
        + [{"tags": '"early"', "trending_date": date(2017, 11, 21)}]
    )
    df = _frame(make_store, rows)

    racing = tag_trends.tag_racing(df, tag_limit=5, min_occurrences=1, max_length=30, per_row_limit=8)

    assert racing.tags == ["early", "later"]
    second = racing.racing_data[1]
    assert [(t.tag, t.count) for t in second.tags] == [("later", 4), ("early", 1)]
    assert second.to_dict()["tags"][0]["totalViews"] == 400


def test_tag_racing_no_tags(make_store):
    df = _frame(make_store, [{"tags": "", "trending_date": date(2017, 11, 14)}])

    racing = tag_trends.tag_racing(df, tag_limit=5, min_occurrences=1, max_length=30, per_row_limit=8)

    assert racing.racing_data == []
    assert racing.stats == {"totalTags": 0, "totalPeriods": 0}


def test_tag_evolution_stats(make_store):
    rows = [
        {"tags": '"alpha"|"bravo"', "trending_date": date(2017, 11, 14), "views": 100},
        {"tags": '"alpha"', "trending_date": date(2017, 11, 16), "views": 300},
        {"tags": '"alpha"', "trending_date": date(2017, 11, 16), "views": 100},
    ]
    df = _frame(make_store, rows)

    evolution = tag_trends.tag_evolution(df, tag_limit=5, min_occurrences=1, max_length=30, per_row_limit=8)

    assert evolution.tags == ["alpha", "bravo"]
    assert evolution.dates == ["2017-11-14", "2017-11-16"]
    alpha = evolution.timeline_data[0].timeline
    assert [d.count for d in alpha] == [1, 2]
    assert alpha[1].avg_views == 200
    bravo = evolution.timeline_data[1].timeline
    assert [d.count for d in bravo] == [1, 0]
    assert bravo[1].avg_views == 0
    assert evolution.stats["totalUsage"] == 4
    assert evolution.stats["avgUsagePerTag"] == 2
    assert evolution.stats["dateRange"] == {"start": "2017-11-14", "end": "2017-11-16"}


def test_tag_evolution_empty(make_store):
    df = _frame(make_store, [{"tags": '"alpha"', "trending_date": None}])

    evolution = tag_trends.tag_evolution(df, tag_limit=5, min_occurrences=1, max_length=30, per_row_limit=8)

    assert evolution.tags == []
    assert evolution.stats["avgUsagePerTag"] == 0.0
    assert evolution.stats["dateRange"] == {"start": None, "end": None}


def test_tag_category_pairs(make_store):
    df = _frame(make_store, [
        {"tags": '"funny"|"cats"', "category_name": "Comedy", "views": 10, "likes": 1},
        {"tags": '"funny"', "category_name": "Comedy", "views": 30, "likes": 3},
        {"tags": '"funny"', "category_name": "Music", "views": 5, "likes": 0},
    ])

    pairs = tag_trends.tag_category_pairs(df, max_length=25)

    assert list(pairs.columns) == PAIR_COLUMNS
    rows = {(r.tag, r.category): (r.count, r.total_views) for r in pairs.itertuples()}
    assert rows == {
        ("cats", "Comedy"): (1, 10),
        ("funny", "Comedy"): (2, 40),
        ("funny", "Music"): (1, 5),
    }


def test_tag_category_pairs_respects_max_length(make_store):
    long_tag = "x" * 25
    df = _frame(make_store, [{"tags": f'"{long_tag}"'}])

    assert tag_trends.tag_category_pairs(df, max_length=25).empty
    assert not tag_trends.tag_category_pairs(df, max_length=30).empty
