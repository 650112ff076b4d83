"""
Flow Graph Builder.

Turns tag -> category co-occurrence aggregates into the node/link structure
consumed by a Sankey-style renderer.
"""

import logging
from typing import List, Tuple

import pandas as pd

from trendscope.models.view_models import FlowLink, FlowNode

logger = logging.getLogger(__name__)

PAIR_COLUMNS = ["tag", "category", "count", "total_views", "total_likes"]


def _rounded_avg(total: int, count: int) -> int:
    return int(round(total / count)) if count else 0


class FlowGraphBuilder:
    """
    Builds a bipartite tag/category graph.

    Node indices are stable: tags first in descending count order (ties
    alphabetical), then categories in alphabetical order. Links only join a
    top tag to a top category and only when their pair count reaches
    min_flow, so every link resolves to an emitted node.
    """

    def __init__(self, min_flow: int, tag_limit: int, category_limit: int):
        """
        Initialize builder.

        Args:
            min_flow: Minimum pair count for a link
            tag_limit: Number of tags kept (by total count)
            category_limit: Number of categories kept (by total count)
        """
        self.min_flow = min_flow
        self.tag_limit = tag_limit
        self.category_limit = category_limit

    def build(self, pairs: pd.DataFrame) -> Tuple[List[FlowNode], List[FlowLink]]:
        """
        Build nodes and links.

        Args:
            pairs: One row per (tag, category) with columns
                tag, category, count, total_views, total_likes

        Returns:
            (nodes, links)
        """
        if pairs.empty:
            return [], []

        tag_stats = self._node_stats(pairs, "tag", "category")
        category_stats = self._node_stats(pairs, "category", "tag")

        top_tags = list(tag_stats.index[: self.tag_limit])
        top_categories = sorted(category_stats.index[: self.category_limit])

        nodes = []
        node_index = {}

        for i, tag in enumerate(top_tags):
            stats = tag_stats.loc[tag]
            nodes.append(self._node(f"tag_{i}", tag, "tag", stats))
            node_index[("tag", tag)] = len(nodes) - 1

        for i, category in enumerate(top_categories):
            stats = category_stats.loc[category]
            nodes.append(self._node(f"category_{i}", category, "category", stats))
            node_index[("category", category)] = len(nodes) - 1

        flows = pairs[
            (pairs["count"] >= self.min_flow)
            & pairs["tag"].isin(top_tags)
            & pairs["category"].isin(top_categories)
        ]

        links = []
        for flow in flows.itertuples(index=False):
            links.append(FlowLink(
                source=node_index[("tag", flow.tag)],
                target=node_index[("category", flow.category)],
                value=int(flow.count),
                tag=flow.tag,
                category=flow.category,
                total_views=int(flow.total_views),
                total_likes=int(flow.total_likes),
                avg_views=_rounded_avg(flow.total_views, flow.count),
                avg_likes=_rounded_avg(flow.total_likes, flow.count),
            ))
        links.sort(key=lambda link: (link.source, link.target))

        logger.debug(
            f"Flow graph: {len(top_tags)} tags, {len(top_categories)} categories, {len(links)} links"
        )
        return nodes, links

    def _node_stats(self, pairs: pd.DataFrame, key: str, other: str) -> pd.DataFrame:
        """Per-node totals, sorted by count desc with alphabetical ties."""
        stats = pairs.groupby(key).agg(
            count=("count", "sum"),
            total_views=("total_views", "sum"),
            degree=(other, "nunique"),
        )
        stats = stats.sort_index().sort_values("count", ascending=False, kind="mergesort")
        return stats

    def _node(self, node_id: str, name: str, node_type: str, stats) -> FlowNode:
        count = int(stats["count"])
        total_views = int(stats["total_views"])
        return FlowNode(
            id=node_id,
            name=name,
            type=node_type,
            count=count,
            total_views=total_views,
            avg_views=_rounded_avg(total_views, count),
            degree=int(stats["degree"]),
        )
