"""
Curvature assignment for parallel edges.

Links are grouped by their undirected endpoint pair:
    - child_of links are always straight
    - a lone interface link with no child_of sibling is straight
    - otherwise interface links fan out: +1, -1, +2, -2, ... times ``base``
"""
from __future__ import annotations
from typing import Any, Dict, List, Sequence, Tuple

from ..core.models import RelationKind, endpoint_id

DEFAULT_CURVATURE_BASE = 0.22


def pair_key(link: Any) -> Tuple[Any, Any]:
    """Undirected key of a link's endpoints."""
    a, b = endpoint_id(link.source), endpoint_id(link.target)
    return (a, b) if a <= b else (b, a)


def _is_hierarchy(link: Any) -> bool:
    kind = getattr(link, "kind", None)
    if isinstance(kind, RelationKind):
        return kind is RelationKind.CHILD_OF
    return RelationKind.of(getattr(link, "relation", None)) is RelationKind.CHILD_OF


def curvature_offsets(links: Sequence[Any], base: float = DEFAULT_CURVATURE_BASE) -> List[float]:
    """
    Curvature per link, aligned with the input order.

    Args:
        links: Objects exposing ``source``, ``target`` and ``relation`` (or ``kind``)
        base: Magnitude of one fan step
    """
    offsets = [0.0] * len(links)
    groups: Dict[Tuple[Any, Any], Dict[str, List[int]]] = {}

    for index, link in enumerate(links):
        group = groups.setdefault(pair_key(link), {"child": [], "iface": []})
        group["child" if _is_hierarchy(link) else "iface"].append(index)

    for group in groups.values():
        iface = group["iface"]
        if not iface:
            continue
        if not group["child"] and len(iface) == 1:
            continue
        for i, index in enumerate(iface):
            step = i // 2 + 1
            sign = 1 if i % 2 == 0 else -1
            offsets[index] = sign * step * base

    return offsets


def apply_curvatures(links: Sequence[Any], base: float = DEFAULT_CURVATURE_BASE) -> Sequence[Any]:
    """Annotate each link's ``curvature`` attribute in place and return the links."""
    for link, offset in zip(links, curvature_offsets(links, base)):
        link.curvature = offset
    return links
