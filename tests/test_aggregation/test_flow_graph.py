"""
Unit tests for the Flow Graph Builder.
"""

import pandas as pd
import pytest

from trendscope.aggregation.flow_graph import PAIR_COLUMNS, FlowGraphBuilder


def _pairs(rows):
    return pd.DataFrame(rows, columns=PAIR_COLUMNS)


@pytest.fixture
def pairs():
    return _pairs([
        ("a", "Music", 5, 500, 50),
        ("a", "Gaming", 2, 200, 20),
        ("b", "Music", 3, 30, 3),
        ("c", "Comedy", 4, 4000, 400),
    ])


def test_nodes_tags_then_sorted_categories(pairs):
    nodes, _ = FlowGraphBuilder(min_flow=3, tag_limit=2, category_limit=2).build(pairs)

    # Tags: a (7), c (4) ; categories: Music (8), Comedy (4) -> alphabetical
    assert [n.name for n in nodes] == ["a", "c", "Comedy", "Music"]
    assert [n.id for n in nodes] == ["tag_0", "tag_1", "category_0", "category_1"]
    assert [n.type for n in nodes] == ["tag", "tag", "category", "category"]


def test_links_filtered_by_threshold_and_top_nodes(pairs):
    _, links = FlowGraphBuilder(min_flow=3, tag_limit=2, category_limit=2).build(pairs)

    assert [(l.source, l.target, l.value) for l in links] == [(0, 3, 5), (1, 2, 4)]
    assert links[0].tag == "a"
    assert links[0].category == "Music"
    assert links[1].avg_views == 1000


def test_every_link_resolves_to_a_node(pairs):
    nodes, links = FlowGraphBuilder(min_flow=1, tag_limit=3, category_limit=3).build(pairs)

    for link in links:
        assert nodes[link.source].type == "tag"
        assert nodes[link.target].type == "category"
        assert link.value >= 1


def test_node_statistics(pairs):
    nodes, _ = FlowGraphBuilder(min_flow=1, tag_limit=3, category_limit=3).build(pairs)
    by_name = {n.name: n for n in nodes}

    assert by_name["a"].count == 7
    assert by_name["a"].total_views == 700
    assert by_name["a"].avg_views == 100
    assert by_name["a"].degree == 2
    assert by_name["Music"].degree == 2
    assert by_name["a"].to_dict()["categories"] == 2
    assert by_name["Music"].to_dict()["tags"] == 2


def test_count_ties_break_alphabetically():
    pairs = _pairs([
        ("zebra", "Music", 4, 0, 0),
        ("apple", "Music", 4, 0, 0),
    ])

    nodes, _ = FlowGraphBuilder(min_flow=1, tag_limit=1, category_limit=1).build(pairs)

    assert [n.name for n in nodes] == ["apple", "Music"]


def test_high_threshold_keeps_nodes_without_links(pairs):
    nodes, links = FlowGraphBuilder(min_flow=100, tag_limit=5, category_limit=5).build(pairs)

    assert len(nodes) == 6
    assert links == []


def test_empty_pairs():
    assert FlowGraphBuilder(3, 5, 5).build(_pairs([])) == ([], [])
