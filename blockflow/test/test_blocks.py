import pytest

from blockflow.blocks import (
    AnalogReadBlock,
    DelayBlock,
    DigitalWriteBlock,
    EndBlock,
    ForLoopBlock,
    IfBlock,
    ServoAttachBlock,
    VariableBlock,
    num_param,
    resolve_block,
    str_param,
)
from blockflow.ir import BlockType, FlowNode, NodeData


def _node(block_type, **params) -> FlowNode:
    return FlowNode(id="n", data=NodeData(block_type=block_type, params=params))


class TestParamReaders:

    @pytest.mark.parametrize("raw, expected", [
        (13, 13),
        (2.5, 2.5),
        (12.0, 12),
        ("250", 250),
        (" 7 ", 7),
        ("1.5", 1.5),
        ("1e3", 1000),
    ])
    def test_num_param_accepts_numbers_and_numeric_strings(self, raw, expected):
        assert num_param({"v": raw}, "v", -1) == expected

    @pytest.mark.parametrize("raw", [
        "abc", "", "   ", True, False, None, float("nan"), float("inf"), "inf", "1_000",
    ])
    def test_num_param_falls_back(self, raw):
        assert num_param({"v": raw}, "v", 42) == 42

    def test_num_param_missing_key(self):
        assert num_param({}, "pin", 9) == 9

    def test_str_param(self):
        assert str_param({"s": "LOW"}, "s", "HIGH") == "LOW"
        assert str_param({"s": 1}, "s", "HIGH") == "HIGH"
        assert str_param({}, "s", "HIGH") == "HIGH"


class TestResolveBlock:

    def test_untyped_and_markers_resolve_to_none(self):
        assert resolve_block(FlowNode(id="n")) is None
        assert resolve_block(_node(BlockType.SETUP)) is None
        assert resolve_block(_node(BlockType.LOOP)) is None

    def test_defaults(self):
        assert resolve_block(_node(BlockType.VARIABLE)) == VariableBlock("value", "int", "0")
        assert resolve_block(_node(BlockType.SERVO_ATTACH)) == ServoAttachBlock("servo", 9)
        assert resolve_block(_node(BlockType.DELAY)) == DelayBlock(500)
        assert resolve_block(_node(BlockType.DIGITAL_WRITE)) == DigitalWriteBlock(13, "HIGH")
        assert resolve_block(_node(BlockType.ANALOG_READ)) == AnalogReadBlock("A0", "sensorValue")
        assert resolve_block(_node(BlockType.FOR_LOOP)) == ForLoopBlock("i", 0, 10, 1)
        assert resolve_block(_node(BlockType.END_BLOCK)) == EndBlock()

    def test_variable_value_accepts_string_or_number(self):
        assert resolve_block(_node(BlockType.VARIABLE, value=3.0)).value == "3"
        assert resolve_block(_node(BlockType.VARIABLE, value="LOW")).value == "LOW"
        assert resolve_block(_node(BlockType.VARIABLE, value=True)).value == "0"

    def test_variable_reads_var_type(self):
        block = resolve_block(_node(BlockType.VARIABLE, name="speed", varType="float", value=1.5))
        assert block == VariableBlock("speed", "float", "1.5")

    def test_if_else_shares_if_block(self):
        assert resolve_block(_node(BlockType.IF_ELSE, condition="x > 1")) == IfBlock("x > 1")

    def test_invalid_params_fall_back(self):
        block = resolve_block(_node(BlockType.DIGITAL_WRITE, pin="thirteen", value=1))
        assert block == DigitalWriteBlock(13, "HIGH")
