import logging

from blockflow.blocks import DelayBlock, ServoAttachBlock, VariableBlock
from blockflow.templates import CodeWriter, ProgramBuilder, get_template


class TestCodeWriter:

    def test_two_space_indent(self):
        w = CodeWriter()
        w.writeln("a").push().writeln("b").push().writeln("c").pop().writeln("")
        assert w.lines() == ["a", "  b", "    c", ""]

    def test_pop_never_goes_negative(self):
        w = CodeWriter()
        w.pop().pop().writeln("x")
        assert w.depth == 0
        assert w.lines() == ["x"]

    def test_comment(self):
        assert CodeWriter(indent=1).comment("loop").lines() == ["  // loop"]


class TestProgramBuilder:

    def test_servo_namespace_renders_first(self):
        program = ProgramBuilder()
        program.declare("global", "x", "int x = 0;")
        program.declare("servo", "arm", "Servo arm;")
        assert program.declarations() == ["Servo arm;", "int x = 0;"]

    def test_duplicate_declaration_is_logged_and_dropped(self, caplog):
        caplog.set_level(logging.DEBUG, logger="blockflow.templates")
        program = ProgramBuilder()
        program.declare("global", "x", "int x = 0;")
        program.declare("global", "x", "float x = 1;")
        assert program.declarations() == ["int x = 0;"]
        assert "already emitted" in caplog.text

    def test_setup_once_precedes_setup(self):
        program = ProgramBuilder()
        program.setup("pinMode(1, OUTPUT);")
        program.setup_once("Serial.begin(9600);")
        program.setup_once("Serial.begin(9600);")
        assert program.setup_lines() == ["Serial.begin(9600);", "pinMode(1, OUTPUT);"]

    def test_close_open_blocks(self):
        program = ProgramBuilder()
        program.loop.writeln("while (true) {").push().writeln("if (x) {").push()
        program.close_open_blocks()
        assert program.loop.lines() == ["while (true) {", "  if (x) {", "  }", "}"]


class TestTemplates:

    def test_lower_runs_every_hook(self):
        program = ProgramBuilder()
        get_template(ServoAttachBlock("claw", 5)).lower(ServoAttachBlock("claw", 5), program)
        assert program.includes == ["Servo.h"]
        assert program.declarations() == ["Servo claw;"]
        assert program.setup_lines() == ["claw.attach(5);"]
        assert program.loop.lines() == []

    def test_each_block_type_has_a_template(self):
        for block in (VariableBlock(), DelayBlock()):
            assert type(get_template(block)).__name__ != "BlockTemplate"

    def test_unknown_block_gets_noop_template(self):
        program = ProgramBuilder()
        get_template(object()).lower(object(), program)
        assert program.declarations() == []
        assert program.loop.lines() == []
