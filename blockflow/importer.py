"""
blockflow — Arduino Source Importer
===================================
Best-effort reverse of the emitter: reads the body of `void loop()` and
turns recognisable statements into a chain of blocks hanging off the
`loop` marker node.

Only common single-line patterns are understood.  Anything else is skipped,
so importing never fails; it may just produce fewer blocks than expected.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, List, Optional, Tuple

from .ir import BlockType, FlowEdge, FlowNode, FlowState, NodeData

logger = logging.getLogger(__name__)

SETUP_ID = "setup"
LOOP_ID = "loop"

_BLOCK_X = 200.0
_FIRST_Y = 300.0
_STEP_Y = 80.0

_LOOP_BODY = re.compile(r"void\s+loop\s*\(\s*\)\s*\{(.*?)\n\}", re.DOTALL)

_Handler = Callable[[re.Match], NodeData]


def _data(block_type: BlockType, label: str, **params: Any) -> NodeData:
    return NodeData(label=label, block_type=block_type, params=params)


# Order matters: the first matching pattern wins.
_PATTERNS: List[Tuple[re.Pattern, _Handler]] = [
    (re.compile(r"delay\s*\(\s*(\d+)\s*\)"),
     lambda m: _data(BlockType.DELAY, "Delay", ms=int(m.group(1)))),
    (re.compile(r"digitalWrite\s*\(\s*(\d+)\s*,\s*(HIGH|LOW)\s*\)"),
     lambda m: _data(BlockType.DIGITAL_WRITE, "Digital Write",
                     pin=int(m.group(1)), value=m.group(2))),
    (re.compile(r"analogWrite\s*\(\s*(\d+)\s*,\s*(\d+)\s*\)"),
     lambda m: _data(BlockType.ANALOG_WRITE, "Analog Write",
                     pin=int(m.group(1)), value=int(m.group(2)))),
    (re.compile(r"(\w+)\.write\s*\(\s*(\d+)\s*\)"),
     lambda m: _data(BlockType.SERVO_WRITE, "Servo Write",
                     variable=m.group(1), angle=int(m.group(2)))),
    (re.compile(r"(\w+)\.attach\s*\(\s*(\d+)\s*\)"),
     lambda m: _data(BlockType.SERVO_ATTACH, "Servo Attach",
                     variable=m.group(1), pin=int(m.group(2)))),
    (re.compile(r'Serial\.println\s*\(\s*"([^"]*)"\s*\)'),
     lambda m: _data(BlockType.SERIAL_PRINT, "Serial Print", message=m.group(1))),
    (re.compile(r"for\s*\(\s*int\s+(\w+)\s*=\s*(\d+)\s*;\s*\w+\s*<\s*(\d+)\s*;"),
     lambda m: _data(BlockType.FOR_LOOP, "For Loop", variable=m.group(1),
                     start=int(m.group(2)), end=int(m.group(3)), step=1)),
    (re.compile(r"if\s*\(\s*([^)]+)\s*\)\s*\{"),
     lambda m: _data(BlockType.IF_CONDITION, "If", condition=m.group(1).strip())),
    (re.compile(r"while\s*\(\s*([^)]+)\s*\)\s*\{"),
     lambda m: _data(BlockType.WHILE_LOOP, "While", condition=m.group(1).strip())),
]


def _match_line(line: str) -> Optional[NodeData]:
    for pattern, handler in _PATTERNS:
        match = pattern.search(line)
        if match:
            return handler(match)
    return None


class _Chain:
    """Appends nodes below each other, each wired from the previous one."""

    def __init__(self, state: FlowState, head: str):
        self.state = state
        self.last_id = head
        self.counter = 1
        self.y = _FIRST_Y

    def append(self, data: NodeData) -> None:
        node_id = f"node_{self.counter}"
        self.counter += 1
        self.state.nodes.append(FlowNode(id=node_id, position=(_BLOCK_X, self.y), data=data))
        self.state.edges.append(FlowEdge(
            id=f"edge_{self.last_id}_{node_id}",
            source=self.last_id,
            target=node_id,
        ))
        self.last_id = node_id
        self.y += _STEP_Y


def parse_source_to_flow(code: str) -> FlowState:
    """
    Parse Arduino source back into a FlowState.

    The result always contains the `setup` and `loop` marker nodes.
    """
    state = FlowState(nodes=[
        FlowNode(id=SETUP_ID, position=(60.0, 60.0),
                 data=NodeData(label="setup()", block_type=BlockType.SETUP)),
        FlowNode(id=LOOP_ID, position=(60.0, 180.0),
                 data=NodeData(label="loop()", block_type=BlockType.LOOP)),
    ])

    body = _LOOP_BODY.search(code)
    if body is None:
        logger.debug("no loop() body found; returning marker nodes only")
        return state

    chain = _Chain(state, LOOP_ID)
    lines = [line.strip() for line in body.group(1).split("\n")]
    for line in filter(None, lines):
        data = _match_line(line)
        if data is not None:
            chain.append(data)
        if line == "}":
            chain.append(NodeData(label="End", block_type=BlockType.END_BLOCK))

    return state


__all__ = ["parse_source_to_flow"]
