"""
blockflow — Flow JSON Deserialiser
==================================
Converts an arbitrary external value (usually the result of json.loads on
a diagram saved by the editor) into a FlowState.

Unlike schema.validate(), this never raises.  A diagram is user-edited and
frequently half-finished, so the deserialiser keeps whatever it can use and
silently skips the rest:

    {
      "nodes": [
        {
          "id":       "d1",                                  // str, required
          "position": { "x": 200, "y": 300 },               // optional
          "data": {
            "label":     "Blink",                            // optional
            "blockType": "digital_write",                    // optional
            "params":    { "pin": 13, "value": "HIGH" }     // optional
          }
        }
      ],
      "edges": [
        { "id": "e1", "source": "s", "target": "d1" }       // all str, required
      ]
    }

Dangling edge endpoints are NOT rejected here; the scheduler ignores them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from .ir import BlockType, FlowEdge, FlowNode, FlowState, NodeData, Primitive

logger = logging.getLogger(__name__)

_SEQUENCE_TYPES = (list, tuple)
_PRIMITIVE_TYPES = (str, int, float, bool)


# ── Field helpers ─────────────────────────────────────────────────────────────

def _coord(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _parse_position(raw: Any) -> Tuple[float, float]:
    if not isinstance(raw, Mapping):
        return (0.0, 0.0)
    return (_coord(raw.get("x")), _coord(raw.get("y")))


def _parse_params(raw: Any) -> Dict[str, Primitive]:
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(k): v
        for k, v in raw.items()
        if isinstance(v, _PRIMITIVE_TYPES)
    }


def _parse_data(raw: Any) -> NodeData:
    if not isinstance(raw, Mapping):
        return NodeData()
    label = raw.get("label")
    return NodeData(
        label=label if isinstance(label, str) else "",
        block_type=BlockType.parse(raw.get("blockType")),
        params=_parse_params(raw.get("params")),
    )


# ── Element parsing ───────────────────────────────────────────────────────────

def _parse_node(item: Any) -> Optional[FlowNode]:
    """Accept any mapping with a string id; everything else is best-effort."""
    if not isinstance(item, Mapping):
        return None
    node_id = item.get("id")
    if not isinstance(node_id, str):
        return None
    return FlowNode(
        id=node_id,
        position=_parse_position(item.get("position")),
        data=_parse_data(item.get("data")),
    )


def _parse_edge(item: Any) -> Optional[FlowEdge]:
    if not isinstance(item, Mapping):
        return None
    edge_id, source, target = item.get("id"), item.get("source"), item.get("target")
    if not all(isinstance(v, str) for v in (edge_id, source, target)):
        return None
    return FlowEdge(id=edge_id, source=source, target=target)


# ── Public entry point ────────────────────────────────────────────────────────

def normalize(value: Any) -> FlowState:
    """
    Extract a FlowState from an arbitrary value.

    Args:
        value: Anything.  Only a mapping with "nodes" and/or "edges" lists
               yields a non-empty result.

    Returns:
        A FlowState holding every node and edge that could be read, in the
        order they were provided.  Never raises.
    """
    if not isinstance(value, Mapping):
        logger.debug("flow value is %s, not a mapping; returning empty flow",
                     type(value).__name__)
        return FlowState()

    nodes: List[FlowNode] = []
    raw_nodes = value.get("nodes")
    if isinstance(raw_nodes, _SEQUENCE_TYPES):
        for index, item in enumerate(raw_nodes):
            node = _parse_node(item)
            if node is None:
                logger.debug("skipping nodes[%d]: no string id", index)
                continue
            nodes.append(node)

    edges: List[FlowEdge] = []
    raw_edges = value.get("edges")
    if isinstance(raw_edges, _SEQUENCE_TYPES):
        for index, item in enumerate(raw_edges):
            edge = _parse_edge(item)
            if edge is None:
                logger.debug("skipping edges[%d]: id/source/target must be strings", index)
                continue
            edges.append(edge)

    return FlowState(nodes=nodes, edges=edges)


__all__ = ["normalize"]
