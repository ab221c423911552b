"""
blockflow — Arduino Source Emitter
==================================
Converts an ordered list of FlowNodes into a complete Arduino sketch.

Output structure
----------------
    #include <Servo.h>          ← only when a servo block is present
                                 ← blank
    Servo arm;                  ← declarations (servos first, then globals)
    int counter = 0;
                                 ← blank (only when there are declarations)
    void setup() {
      arm.attach(9);            ← or "// setup" when empty
    }

    void loop() {
      delay(500);               ← or "// loop" when empty
    }

Indentation is two spaces per level.  The text ends with a newline and is
byte-identical for identical input.
"""

from __future__ import annotations

from typing import Iterable, List

from .blocks import resolve_block
from .ir import FlowNode
from .scheduler import FlowSchedule
from .templates import CodeWriter, ProgramBuilder, get_template


# ── Lowering ──────────────────────────────────────────────────────────────────

def _lower(nodes: Iterable[FlowNode]) -> ProgramBuilder:
    program = ProgramBuilder()
    for node in nodes:
        block = resolve_block(node)
        if block is None:
            continue
        get_template(block).lower(block, program)
    program.close_open_blocks()
    return program


# ── Sections ──────────────────────────────────────────────────────────────────

def _header(program: ProgramBuilder) -> List[str]:
    if not program.includes:
        return []
    return [f"#include <{h}>" for h in program.includes] + [""]


def _declarations(program: ProgramBuilder) -> List[str]:
    lines = program.declarations()
    return lines + [""] if lines else []


def _function(name: str, body: List[str]) -> List[str]:
    w = CodeWriter(indent=0)
    w.writeln(f"void {name}() {{")
    w.push()
    if body:
        w.extend(body)
    else:
        w.comment(name)
    w.pop()
    w.writeln("}")
    return w.lines()


# ── Public API ────────────────────────────────────────────────────────────────

def generate_code(ordered_nodes: Iterable[FlowNode]) -> str:
    """
    Emit an Arduino sketch from nodes already in execution order.

    Nodes without a block type (and setup/loop markers) are skipped.

    Returns:
        Sketch source as a single string.
    """
    program = _lower(ordered_nodes)
    sections: List[List[str]] = [
        _header(program),
        _declarations(program),
        _function("setup", program.setup_lines()),
        [""],
        _function("loop", program.loop.lines()),
    ]

    lines: List[str] = []
    for section in sections:
        lines.extend(section)

    return "\n".join(lines) + "\n"


def emit(schedule: FlowSchedule) -> str:
    """Emit the sketch for a FlowSchedule produced by Scheduler.build()."""
    return generate_code(schedule.nodes)


__all__ = ["emit", "generate_code"]
