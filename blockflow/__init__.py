"""
blockflow
=========
Compiles visual block diagrams into Arduino sketches, and diffs code against
a reference solution for the learning platform's interactive editor.

Pipeline:
    JSON value  →  [deserialiser]  →  FlowState
    FlowState   →  [scheduler]     →  FlowSchedule
    FlowSchedule → [emitter]       →  Arduino source str

Public API
----------
    from blockflow import compile_flow, diff_lines

    source = compile_flow(json.loads(saved_diagram))
    ops = diff_lines(user_code, solution_code)
"""

from __future__ import annotations

from typing import Any

from .deserialiser import normalize
from .diff import DiffKind, DiffOp, diff_lines, format_diff
from .emitter import emit, generate_code
from .ir import BlockType, FlowEdge, FlowNode, FlowState
from .scheduler import Scheduler, schedule_topologically


def compile_flow(value: Any) -> str:
    """
    Compile an editor diagram (any JSON-like value) into an Arduino sketch.

    Never raises: malformed diagrams compile to whatever could be read,
    down to an empty setup()/loop() pair.
    """
    state = normalize(value)
    return emit(Scheduler(state).build())


__all__ = [
    "BlockType",
    "DiffKind",
    "DiffOp",
    "FlowEdge",
    "FlowNode",
    "FlowState",
    "Scheduler",
    "compile_flow",
    "diff_lines",
    "format_diff",
    "generate_code",
    "normalize",
    "schedule_topologically",
]
