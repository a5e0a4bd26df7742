"""
Core Extraction

Bounded node/link subsets of a GraphModel for one view scope:
    - Forest core: every hierarchy descendant of a seed set
    - Bi-local core: ancestors and descendants of one node, up to N hops

Only child_of links decide membership; interface links are layered in later
by the phase controller.
"""

from __future__ import annotations
import logging
from collections import deque
from typing import Dict, Iterable, Optional, Set

from ..core.graph_model import GraphModel
from ..core.models import Core, NodeId


class CoreExtractor:
    """
    Computes view cores from a GraphModel.

    Example:
        >>> extractor = CoreExtractor(model)
        >>> core = extractor.bi_local_core(root_id=4, depth=2)
        >>> core.depth_by_id[4]
        0
    """

    def __init__(self, model: GraphModel):
        self.model = model
        self.logger = logging.getLogger(__name__)

    def forest_core(self, seed_ids: Optional[Iterable[NodeId]] = None) -> Core:
        """
        Union of all hierarchy subtrees rooted at the seeds.

        Args:
            seed_ids: Seed node ids; empty or None falls back to the model roots.
                      Ids unknown to the model are ignored.
        """
        seeds = list(seed_ids or []) or list(self.model.roots)
        seeds = [s for s in seeds if s in self.model]

        in_set: Set[NodeId] = set(seeds)
        queue = deque(seeds)
        while queue:
            node_id = queue.popleft()
            for child in self.model.children.get(node_id, []):
                if child not in in_set:
                    in_set.add(child)
                    queue.append(child)

        return self._materialize(in_set, depth_by_id=None)

    def bi_local_core(self, root_id: NodeId, depth: int) -> Core:
        """
        Bounded neighborhood around one node.

        Args:
            root_id: Focused node; an unknown id yields an empty core.
            depth: Hop bound applied separately downstream and upstream.

        Returns:
            Core whose depth map covers the downstream half only (root = 0).
        """
        if root_id not in self.model:
            self.logger.warning(f"Root '{root_id}' not found, returning empty core.")
            return Core(nodes=[], links=[], depth_by_id={})

        depth = max(0, int(depth))

        # Descendants, with hop distance
        depth_by_id: Dict[NodeId, int] = {root_id: 0}
        queue = deque([(root_id, 0)])
        while queue:
            node_id, d = queue.popleft()
            if d >= depth:
                continue
            for child in self.model.children.get(node_id, []):
                if child not in depth_by_id:
                    depth_by_id[child] = d + 1
                    queue.append((child, d + 1))

        # Ancestors, distance not recorded
        up_set: Set[NodeId] = {root_id}
        queue = deque([(root_id, 0)])
        while queue:
            node_id, d = queue.popleft()
            if d >= depth:
                continue
            for parent in self.model.parents.get(node_id, []):
                if parent not in up_set:
                    up_set.add(parent)
                    queue.append((parent, d + 1))

        return self._materialize(set(depth_by_id) | up_set, depth_by_id=depth_by_id)

    def _materialize(self, in_set: Set[NodeId], depth_by_id: Optional[Dict[NodeId, int]]) -> Core:
        nodes = [n for n in self.model.nodes if n.id in in_set]
        links = [l for l in self.model.child_links if l.source in in_set and l.target in in_set]
        return Core(nodes=nodes, links=links, depth_by_id=depth_by_id)


def forest_core(model: GraphModel, seed_ids: Optional[Iterable[NodeId]] = None) -> Core:
    return CoreExtractor(model).forest_core(seed_ids)


def bi_local_core(model: GraphModel, root_id: NodeId, depth: int) -> Core:
    return CoreExtractor(model).bi_local_core(root_id, depth)
