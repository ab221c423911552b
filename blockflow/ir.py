"""
blockflow — Flow Graph Intermediate Representation
===================================================
FlowState is a typed snapshot of a diagram authored in the visual block
editor.  It is the data model shared between all pipeline phases:

    JSON value  →  [deserialiser]  →  FlowState
                                         ↓
                                   [scheduler]  →  FlowSchedule
                                                       ↓
                                                  [emitter]  →  Arduino source str

Design goals:
  - Plain dataclasses, no references back into the editor.
  - Read-only for the compiler: no phase mutates nodes or edges.
  - Round-trips to the editor's JSON shape via to_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


Primitive = Union[str, int, float, bool]


# ── Block types ──────────────────────────────────────────────────────────────

class BlockType(str, Enum):
    SETUP = "setup"
    LOOP = "loop"
    VARIABLE = "variable"
    SERVO_ATTACH = "servo_attach"
    SERVO_WRITE = "servo_write"
    DELAY = "delay"
    DIGITAL_WRITE = "digital_write"
    ANALOG_WRITE = "analog_write"
    DIGITAL_READ = "digital_read"
    ANALOG_READ = "analog_read"
    SERIAL_PRINT = "serial_print"
    # Control flow
    IF_CONDITION = "if_condition"
    IF_ELSE = "if_else"
    FOR_LOOP = "for_loop"
    WHILE_LOOP = "while_loop"
    END_BLOCK = "end_block"

    @classmethod
    def parse(cls, value: Any) -> Optional["BlockType"]:
        """Return the matching member, or None for anything unrecognised."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# ── Node ─────────────────────────────────────────────────────────────────────

@dataclass
class NodeData:
    label: str = ""
    block_type: Optional[BlockType] = None
    params: Dict[str, Primitive] = field(default_factory=dict)


@dataclass
class FlowNode:
    id: str
    position: Tuple[float, float] = (0.0, 0.0)   # display only, opaque to the compiler
    data: NodeData = field(default_factory=NodeData)

    @property
    def block_type(self) -> Optional[BlockType]:
        return self.data.block_type

    @property
    def params(self) -> Dict[str, Primitive]:
        return self.data.params

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"label": self.data.label}
        if self.data.block_type is not None:
            data["blockType"] = self.data.block_type.value
        if self.data.params:
            data["params"] = dict(self.data.params)
        x, y = self.position
        return {"id": self.id, "position": {"x": x, "y": y}, "data": data}


# ── Edge ─────────────────────────────────────────────────────────────────────

@dataclass
class FlowEdge:
    id: str
    source: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "source": self.source, "target": self.target}


# ── Graph ─────────────────────────────────────────────────────────────────────

@dataclass
class FlowState:
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)

    # ── Convenience queries ────────────────────────────────────────────────

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
