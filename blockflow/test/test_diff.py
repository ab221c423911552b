import pytest

from blockflow.diff import (
    LOOKAHEAD,
    DiffKind,
    DiffOp,
    diff_lines,
    format_diff,
    has_changes,
    split_lines,
)


def _rebuild(ops, keep) -> str:
    return "\n".join(op.line for op in ops if op.kind in (DiffKind.EQUAL, keep))


PAIRS = [
    ("a\nb\nc", "a\nx\nc"),
    ("", "one\ntwo"),
    ("one\ntwo", ""),
    ("a\nb\nc\nd", "d\nc\nb\na"),
    ("x\ny\nx\ny", "y\nx\ny\nx\nz"),
    ("same\n", "same\n"),
    ("void setup() {\n}\n", "#include <Servo.h>\n\nvoid setup() {\n  s.attach(9);\n}\n"),
    ("\n\n", "\n"),
]


class TestDiffLines:

    def test_substitution_scenario(self):
        assert diff_lines("a\nb\nc", "a\nx\nc") == [
            DiffOp.equal("a"),
            DiffOp.delete("b"),
            DiffOp.insert("x"),
            DiffOp.equal("c"),
        ]

    @pytest.mark.parametrize("old, new", PAIRS)
    def test_round_trip(self, old, new):
        ops = diff_lines(old, new)
        assert _rebuild(ops, DiffKind.DELETE) == old
        assert _rebuild(ops, DiffKind.INSERT) == new

    def test_identity(self):
        text = "int x = 0;\n\nvoid loop() {\n  delay(1);\n}"
        ops = diff_lines(text, text)
        assert all(op.kind is DiffKind.EQUAL for op in ops)
        assert len(ops) == len(text.split("\n"))
        assert not has_changes(ops)

    def test_crlf_is_normalised(self):
        ops = diff_lines("a\r\nb", "a\nb")
        assert ops == [DiffOp.equal("a"), DiffOp.equal("b")]

    def test_empty_old_is_all_insert(self):
        assert diff_lines("", "a\nb") == [DiffOp.insert("a"), DiffOp.insert("b")]

    def test_empty_new_is_all_delete(self):
        assert diff_lines("a\nb", "") == [DiffOp.delete("a"), DiffOp.delete("b")]

    def test_both_empty(self):
        assert diff_lines("", "") == []

    def test_inserted_line(self):
        assert diff_lines("a\nc", "a\nb\nc") == [
            DiffOp.equal("a"),
            DiffOp.insert("b"),
            DiffOp.equal("c"),
        ]

    def test_deleted_line(self):
        assert diff_lines("a\nb\nc", "a\nc") == [
            DiffOp.equal("a"),
            DiffOp.delete("b"),
            DiffOp.equal("c"),
        ]

    def test_tie_prefers_insert(self):
        # "a" reappears 1 line ahead in new, "b" 1 line ahead in old.
        ops = diff_lines("a\nb", "b\na")
        assert ops[0] == DiffOp.insert("b")

    def test_match_beyond_lookahead_is_a_substitution(self):
        filler = [f"line{i}" for i in range(LOOKAHEAD + 5)]
        old = "\n".join(["target"])
        new = "\n".join(["other"] + filler + ["target"])
        ops = diff_lines(old, new)
        assert ops[0] == DiffOp.delete("target")
        assert ops[1] == DiffOp.insert("other")


class TestFormatDiff:

    def test_prefixes_and_headers(self):
        text = format_diff(diff_lines("a\nb", "a\nc"))
        assert text == "--- Your Code\n+++ Solution\n a\n-b\n+c\n"

    def test_custom_labels(self):
        text = format_diff([], old_label="old.ino", new_label="new.ino")
        assert text == "--- old.ino\n+++ new.ino\n"


class TestHelpers:

    def test_split_lines(self):
        assert split_lines("") == []
        assert split_lines("a\r\nb\n") == ["a", "b", ""]

    def test_to_dict(self):
        assert DiffOp.insert("x").to_dict() == {"type": "insert", "line": "x"}
