"""
blockflow — Block Code Templates
================================
A BlockTemplate lowers one typed block into the sections of an Arduino
sketch.  It has three hooks, all with no-op defaults:

  declare(block, program)
      Library includes and global declarations.  Declarations go through
      ProgramBuilder.declare(), which keeps the first declaration of a name
      and drops the rest.

  setup(block, program)
      Statements for the body of setup().

  emit_inline(block, writer)
      Statements for the body of loop(), written at the writer's current
      indent.  Control-flow templates push/pop the indent.

Adding a new block type
-----------------------
1. Add a block dataclass in blocks.py.
2. Subclass BlockTemplate and override the hooks you need.
3. Register: TEMPLATE_REGISTRY[MyBlock] = MyBlockTemplate()
"""

from __future__ import annotations

import json
import logging
from typing import Dict, List, Type

from .blocks import (
    AnalogReadBlock,
    AnalogWriteBlock,
    Block,
    DelayBlock,
    DigitalReadBlock,
    DigitalWriteBlock,
    EndBlock,
    ForLoopBlock,
    IfBlock,
    SerialPrintBlock,
    ServoAttachBlock,
    ServoWriteBlock,
    VariableBlock,
    WhileLoopBlock,
    format_number,
)

logger = logging.getLogger(__name__)

SERVO_HEADER = "Servo.h"
SERIAL_BAUD = 9600


# ── Code writer ───────────────────────────────────────────────────────────────

class CodeWriter:
    """Simple indented string accumulator."""

    def __init__(self, indent: int = 0, unit: str = "  "):
        self._lines: List[str] = []
        self._indent = indent
        self._unit = unit

    @property
    def depth(self) -> int:
        return self._indent

    def writeln(self, line: str = "") -> "CodeWriter":
        if line:
            self._lines.append(self._unit * self._indent + line)
        else:
            self._lines.append("")
        return self

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"// {text}")

    def push(self) -> "CodeWriter":
        self._indent += 1
        return self

    def pop(self) -> "CodeWriter":
        self._indent = max(0, self._indent - 1)
        return self

    def extend(self, lines: List[str]) -> "CodeWriter":
        for line in lines:
            self.writeln(line)
        return self

    def lines(self) -> List[str]:
        return self._lines


# ── Program builder ───────────────────────────────────────────────────────────

class ProgramBuilder:
    """
    Collects the four sketch sections while blocks are lowered.

    Declarations live in namespaces.  "servo" declarations are rendered
    before "global" ones; within a namespace the first declaration of a
    name wins.
    """

    NAMESPACES = ("servo", "global")

    def __init__(self) -> None:
        self.includes: List[str] = []
        self._declared: Dict[str, Dict[str, str]] = {ns: {} for ns in self.NAMESPACES}
        self._setup_prelude: List[str] = []
        self._setup: List[str] = []
        # loop() statements are relative to the body, so start at depth 0
        self.loop = CodeWriter(indent=0)

    def include(self, header: str) -> None:
        if header not in self.includes:
            self.includes.append(header)

    def declare(self, namespace: str, name: str, line: str) -> None:
        declared = self._declared[namespace]
        if name in declared:
            logger.debug("%s declaration of %r already emitted; skipping", namespace, name)
            return
        declared[name] = line

    def setup_once(self, line: str) -> None:
        """Setup statement emitted once, ahead of all per-block setup lines."""
        if line not in self._setup_prelude:
            self._setup_prelude.append(line)

    def setup(self, line: str) -> None:
        self._setup.append(line)

    def declarations(self) -> List[str]:
        return [line for ns in self.NAMESPACES for line in self._declared[ns].values()]

    def setup_lines(self) -> List[str]:
        return self._setup_prelude + self._setup

    def close_open_blocks(self) -> None:
        while self.loop.depth > 0:
            self.loop.pop()
            self.loop.writeln("}")


# ── Base template ─────────────────────────────────────────────────────────────

class BlockTemplate:
    """
    Base class — subclass and override the hooks you need.
    All hooks have safe default implementations.
    """

    def declare(self, block: Block, program: ProgramBuilder) -> None:
        pass

    def setup(self, block: Block, program: ProgramBuilder) -> None:
        pass

    def emit_inline(self, block: Block, writer: CodeWriter) -> None:
        pass

    def lower(self, block: Block, program: ProgramBuilder) -> None:
        self.declare(block, program)
        self.setup(block, program)
        self.emit_inline(block, program.loop)


# ── Declarations ──────────────────────────────────────────────────────────────

class VariableTemplate(BlockTemplate):
    def declare(self, block: VariableBlock, program: ProgramBuilder) -> None:
        program.declare("global", block.name,
                        f"{block.var_type} {block.name} = {block.value};")


# ── Servo ─────────────────────────────────────────────────────────────────────

class ServoAttachTemplate(BlockTemplate):
    def declare(self, block: ServoAttachBlock, program: ProgramBuilder) -> None:
        program.include(SERVO_HEADER)
        program.declare("servo", block.variable, f"Servo {block.variable};")

    def setup(self, block: ServoAttachBlock, program: ProgramBuilder) -> None:
        program.setup(f"{block.variable}.attach({format_number(block.pin)});")


class ServoWriteTemplate(BlockTemplate):
    def declare(self, block: ServoWriteBlock, program: ProgramBuilder) -> None:
        program.include(SERVO_HEADER)

    def emit_inline(self, block: ServoWriteBlock, writer: CodeWriter) -> None:
        writer.writeln(f"{block.variable}.write({format_number(block.angle)});")


# ── Timing / IO ───────────────────────────────────────────────────────────────

class DelayTemplate(BlockTemplate):
    def emit_inline(self, block: DelayBlock, writer: CodeWriter) -> None:
        writer.writeln(f"delay({format_number(block.ms)});")


class DigitalWriteTemplate(BlockTemplate):
    def setup(self, block: DigitalWriteBlock, program: ProgramBuilder) -> None:
        program.setup(f"pinMode({format_number(block.pin)}, OUTPUT);")

    def emit_inline(self, block: DigitalWriteBlock, writer: CodeWriter) -> None:
        writer.writeln(f"digitalWrite({format_number(block.pin)}, {block.value});")


class AnalogWriteTemplate(BlockTemplate):
    def emit_inline(self, block: AnalogWriteBlock, writer: CodeWriter) -> None:
        writer.writeln(
            f"analogWrite({format_number(block.pin)}, {format_number(block.value)});"
        )


class DigitalReadTemplate(BlockTemplate):
    def declare(self, block: DigitalReadBlock, program: ProgramBuilder) -> None:
        program.declare("global", block.variable, f"int {block.variable} = 0;")

    def setup(self, block: DigitalReadBlock, program: ProgramBuilder) -> None:
        program.setup(f"pinMode({format_number(block.pin)}, INPUT);")

    def emit_inline(self, block: DigitalReadBlock, writer: CodeWriter) -> None:
        writer.writeln(f"{block.variable} = digitalRead({format_number(block.pin)});")


class AnalogReadTemplate(BlockTemplate):
    def declare(self, block: AnalogReadBlock, program: ProgramBuilder) -> None:
        program.declare("global", block.variable, f"int {block.variable} = 0;")

    def emit_inline(self, block: AnalogReadBlock, writer: CodeWriter) -> None:
        writer.writeln(f"{block.variable} = analogRead({block.pin});")


class SerialPrintTemplate(BlockTemplate):
    def setup(self, block: SerialPrintBlock, program: ProgramBuilder) -> None:
        program.setup_once(f"Serial.begin({SERIAL_BAUD});")

    def emit_inline(self, block: SerialPrintBlock, writer: CodeWriter) -> None:
        literal = json.dumps(block.message, ensure_ascii=False)
        writer.writeln(f"Serial.println({literal});")


# ── Control flow ──────────────────────────────────────────────────────────────

class IfTemplate(BlockTemplate):
    def emit_inline(self, block: IfBlock, writer: CodeWriter) -> None:
        writer.writeln(f"if ({block.condition}) {{")
        writer.push()


class ForLoopTemplate(BlockTemplate):
    def emit_inline(self, block: ForLoopBlock, writer: CodeWriter) -> None:
        v = block.variable
        start, end, step = (format_number(n) for n in (block.start, block.end, block.step))
        writer.writeln(f"for (int {v} = {start}; {v} < {end}; {v} += {step}) {{")
        writer.push()


class WhileLoopTemplate(BlockTemplate):
    def emit_inline(self, block: WhileLoopBlock, writer: CodeWriter) -> None:
        writer.writeln(f"while ({block.condition}) {{")
        writer.push()


class EndBlockTemplate(BlockTemplate):
    def emit_inline(self, block: EndBlock, writer: CodeWriter) -> None:
        writer.pop()
        writer.writeln("}")


# ── Registry ──────────────────────────────────────────────────────────────────

TEMPLATE_REGISTRY: Dict[Type[object], BlockTemplate] = {
    VariableBlock:     VariableTemplate(),
    ServoAttachBlock:  ServoAttachTemplate(),
    ServoWriteBlock:   ServoWriteTemplate(),
    DelayBlock:        DelayTemplate(),
    DigitalWriteBlock: DigitalWriteTemplate(),
    AnalogWriteBlock:  AnalogWriteTemplate(),
    DigitalReadBlock:  DigitalReadTemplate(),
    AnalogReadBlock:   AnalogReadTemplate(),
    SerialPrintBlock:  SerialPrintTemplate(),
    IfBlock:           IfTemplate(),
    ForLoopBlock:      ForLoopTemplate(),
    WhileLoopBlock:    WhileLoopTemplate(),
    EndBlock:          EndBlockTemplate(),
}

_DEFAULT = BlockTemplate()


def get_template(block: Block) -> BlockTemplate:
    """Return the registered template, falling back to a no-op template."""
    return TEMPLATE_REGISTRY.get(type(block), _DEFAULT)
