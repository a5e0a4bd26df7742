"""
Raw graph document loading (JSON or YAML).
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

logger = logging.getLogger(__name__)


def load_raw_graph(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a ``{nodes, links}`` document.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file

    Returns:
        Dict with ``nodes`` and ``links`` lists (missing keys become empty lists)

    Raises:
        ValueError: unsupported suffix, malformed document, or a document
            that is not a mapping
    """
    path = Path(path)
    suffix = path.suffix.lower()

    with open(path, "r", encoding="utf-8") as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path.name}: {exc}") from exc
        else:
            raise ValueError(f"Unsupported graph file format: '{path.suffix}'")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Graph document must be a mapping, got {type(data).__name__}")

    nodes = data.get("nodes") or []
    links = data.get("links") or []
    logger.info(f"Loaded {path.name}: {len(nodes)} nodes, {len(links)} links")
    return {"nodes": nodes, "links": links}
