"""
blockflow — Typed Blocks
========================
The editor stores each block's parameters as an open key → primitive map.
resolve_block() turns that map into one of the frozen dataclasses below,
applying the per-field defaults exactly once.  Templates never look at raw
params.

Parameter policy
----------------
  number   finite int/float (bool excluded), or a string that parses to one.
           Integral values are normalised to int so 13.0 renders as 13.
  string   must be a str.
  anything else → the field default.  Resolution never fails.

Adding a new block type
-----------------------
1. Add the tag to ir.BlockType.
2. Define a frozen dataclass with a from_params() classmethod.
3. Register it in _BLOCK_CLASSES and give it a template in templates.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type, Union

from .ir import BlockType, FlowNode

Number = Union[int, float]


# ── Parameter readers ─────────────────────────────────────────────────────────

def _normalise_number(value: float) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def num_param(params: Mapping[str, Any], key: str, fallback: Number) -> Number:
    raw = params.get(key)
    if isinstance(raw, bool):
        return fallback
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return _normalise_number(raw) if math.isfinite(raw) else fallback
    if isinstance(raw, str) and raw.strip() and "_" not in raw:
        try:
            parsed = float(raw)
        except ValueError:
            return fallback
        return _normalise_number(parsed) if math.isfinite(parsed) else fallback
    return fallback


def str_param(params: Mapping[str, Any], key: str, fallback: str) -> str:
    raw = params.get(key)
    return raw if isinstance(raw, str) else fallback


def format_number(value: Number) -> str:
    return str(_normalise_number(value))


# ── Declarations ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class VariableBlock:
    name: str = "value"
    var_type: str = "int"
    value: str = "0"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "VariableBlock":
        raw = params.get("value")
        if isinstance(raw, str):
            value = raw
        elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
            value = format_number(raw)
        else:
            value = cls.value
        return cls(
            name=str_param(params, "name", cls.name),
            var_type=str_param(params, "varType", cls.var_type),
            value=value,
        )


# ── Servo ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ServoAttachBlock:
    variable: str = "servo"
    pin: Number = 9

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ServoAttachBlock":
        return cls(
            variable=str_param(params, "variable", cls.variable),
            pin=num_param(params, "pin", cls.pin),
        )


@dataclass(frozen=True)
class ServoWriteBlock:
    variable: str = "servo"
    angle: Number = 90

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ServoWriteBlock":
        return cls(
            variable=str_param(params, "variable", cls.variable),
            angle=num_param(params, "angle", cls.angle),
        )


# ── Timing / IO ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DelayBlock:
    ms: Number = 500

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DelayBlock":
        return cls(ms=num_param(params, "ms", cls.ms))


@dataclass(frozen=True)
class DigitalWriteBlock:
    pin: Number = 13
    value: str = "HIGH"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DigitalWriteBlock":
        return cls(
            pin=num_param(params, "pin", cls.pin),
            value=str_param(params, "value", cls.value),
        )


@dataclass(frozen=True)
class AnalogWriteBlock:
    pin: Number = 9
    value: Number = 128

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AnalogWriteBlock":
        return cls(
            pin=num_param(params, "pin", cls.pin),
            value=num_param(params, "value", cls.value),
        )


@dataclass(frozen=True)
class DigitalReadBlock:
    pin: Number = 2
    variable: str = "buttonState"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DigitalReadBlock":
        return cls(
            pin=num_param(params, "pin", cls.pin),
            variable=str_param(params, "variable", cls.variable),
        )


@dataclass(frozen=True)
class AnalogReadBlock:
    # Analog pins are named (A0..A5), so the pin is a string here.
    pin: str = "A0"
    variable: str = "sensorValue"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AnalogReadBlock":
        return cls(
            pin=str_param(params, "pin", cls.pin),
            variable=str_param(params, "variable", cls.variable),
        )


@dataclass(frozen=True)
class SerialPrintBlock:
    message: str = "Hello"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SerialPrintBlock":
        return cls(message=str_param(params, "message", cls.message))


# ── Control flow ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class IfBlock:
    condition: str = "true"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "IfBlock":
        return cls(condition=str_param(params, "condition", cls.condition))


@dataclass(frozen=True)
class ForLoopBlock:
    variable: str = "i"
    start: Number = 0
    end: Number = 10
    step: Number = 1

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ForLoopBlock":
        return cls(
            variable=str_param(params, "variable", cls.variable),
            start=num_param(params, "start", cls.start),
            end=num_param(params, "end", cls.end),
            step=num_param(params, "step", cls.step),
        )


@dataclass(frozen=True)
class WhileLoopBlock:
    condition: str = "true"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "WhileLoopBlock":
        return cls(condition=str_param(params, "condition", cls.condition))


@dataclass(frozen=True)
class EndBlock:
    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "EndBlock":
        return cls()


Block = Union[
    VariableBlock, ServoAttachBlock, ServoWriteBlock, DelayBlock,
    DigitalWriteBlock, AnalogWriteBlock, DigitalReadBlock, AnalogReadBlock,
    SerialPrintBlock, IfBlock, ForLoopBlock, WhileLoopBlock, EndBlock,
]


# ── Resolution ────────────────────────────────────────────────────────────────

# setup / loop are structural markers in the editor and lower to nothing.
_BLOCK_CLASSES: Dict[BlockType, Type[Any]] = {
    BlockType.VARIABLE:      VariableBlock,
    BlockType.SERVO_ATTACH:  ServoAttachBlock,
    BlockType.SERVO_WRITE:   ServoWriteBlock,
    BlockType.DELAY:         DelayBlock,
    BlockType.DIGITAL_WRITE: DigitalWriteBlock,
    BlockType.ANALOG_WRITE:  AnalogWriteBlock,
    BlockType.DIGITAL_READ:  DigitalReadBlock,
    BlockType.ANALOG_READ:   AnalogReadBlock,
    BlockType.SERIAL_PRINT:  SerialPrintBlock,
    BlockType.IF_CONDITION:  IfBlock,
    BlockType.IF_ELSE:       IfBlock,
    BlockType.FOR_LOOP:      ForLoopBlock,
    BlockType.WHILE_LOOP:    WhileLoopBlock,
    BlockType.END_BLOCK:     EndBlock,
}


def resolve_block(node: FlowNode) -> Optional[Block]:
    """Return the typed block for a node, or None if it lowers to nothing."""
    block_type = node.block_type
    if block_type is None:
        return None
    cls = _BLOCK_CLASSES.get(block_type)
    if cls is None:
        return None
    return cls.from_params(node.params)
