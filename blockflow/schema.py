"""
blockflow — Flow JSON Schema + Validator
========================================
Opt-in strict validation for flow documents.  The compiler itself never
needs this (deserialiser.normalize() accepts anything); it exists for
tooling that wants to reject a broken diagram file up front, e.g.
`blockflow compile --strict`.

Canonical JSON format
---------------------

    {
      "nodes": [
        {
          "id":       "d1",                        // unique (str, required)
          "position": { "x": 0, "y": 0 },         // optional
          "data": {                                // optional (object)
            "label":     "Blink",
            "blockType": "digital_write",          // known block type
            "params":    { "pin": 13 }             // optional (object)
          }
        }
      ],
      "edges": [
        { "id": "e1", "source": "s", "target": "d1" }   // all str, required
      ]
    }
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, List, Union

from .ir import BlockType


KNOWN_BLOCK_TYPES: frozenset[str] = frozenset(t.value for t in BlockType)


# ── Validation helpers ────────────────────────────────────────────────────────

class SchemaError(ValueError):
    """Raised when flow JSON fails structural validation."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SchemaError(message)


def _require_keys(obj: Dict, keys: List[str], context: str) -> None:
    for key in keys:
        _require(key in obj, f"{context}: missing required field '{key}'")


# ── Public validator ─────────────────────────────────────────────────────────

def validate(data: Any, *, strict: bool = False) -> None:
    """
    Validate a parsed flow JSON value.

    Args:
        data:   A pre-parsed value (result of json.load / json.loads).
        strict: When True, raise SchemaError for unknown block types.
                When False (default), unknown types produce a warning.

    Raises:
        SchemaError: On any structural violation.
    """
    _require(isinstance(data, dict), "flow JSON must be a JSON object at the top level")
    _require_keys(data, ["nodes", "edges"], "flow root")

    _require(isinstance(data["nodes"], list), "nodes must be a list")
    _require(isinstance(data["edges"], list), "edges must be a list")

    # ── Validate nodes ──────────────────────────────────────────────────────

    node_ids: set[str] = set()

    for i, node in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        _require(isinstance(node, dict), f"{ctx}: each node must be a JSON object")
        _require_keys(node, ["id"], ctx)
        _require(isinstance(node["id"], str), f"{ctx}.id must be a string")
        _require(
            node["id"] not in node_ids,
            f"{ctx}: duplicate node id '{node['id']}'",
        )
        node_ids.add(node["id"])

        block_data = node.get("data", {})
        _require(isinstance(block_data, dict), f"{ctx}.data must be an object")
        if "params" in block_data:
            _require(isinstance(block_data["params"], dict), f"{ctx}.data.params must be an object")

        block_type = block_data.get("blockType")
        if block_type is not None and block_type not in KNOWN_BLOCK_TYPES:
            msg = f"{ctx}: unknown block type '{block_type}'"
            if strict:
                raise SchemaError(msg)
            warnings.warn(msg + " (the block will be ignored)", stacklevel=2)

    # ── Validate edges ──────────────────────────────────────────────────────

    for i, edge in enumerate(data["edges"]):
        ctx = f"edges[{i}]"
        _require(isinstance(edge, dict), f"{ctx}: each edge must be a JSON object")
        _require_keys(edge, ["id", "source", "target"], ctx)

        for field in ("id", "source", "target"):
            _require(isinstance(edge[field], str), f"{ctx}.{field} must be a string")

        _require(
            edge["source"] in node_ids,
            f"{ctx}: source '{edge['source']}' not found in nodes",
        )
        _require(
            edge["target"] in node_ids,
            f"{ctx}: target '{edge['target']}' not found in nodes",
        )


def load_file(path: Union[str, Path]) -> Any:
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def validate_file(path: Union[str, Path], *, strict: bool = False) -> Dict[str, Any]:
    """
    Load and validate a flow JSON file.

    Returns:
        The parsed dict on success.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        SchemaError: If the flow structure is invalid.
    """
    data = load_file(path)
    validate(data, strict=strict)
    return data


__all__ = ["KNOWN_BLOCK_TYPES", "SchemaError", "load_file", "validate", "validate_file"]
