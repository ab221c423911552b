import json

import pytest

from blockflow.schema import SchemaError, validate, validate_file


def _flow(**overrides):
    flow = {
        "nodes": [
            {"id": "a", "data": {"blockType": "delay", "params": {"ms": 5}}},
            {"id": "b"},
        ],
        "edges": [{"id": "e", "source": "a", "target": "b"}],
    }
    flow.update(overrides)
    return flow


class TestValidate:

    def test_valid_flow(self):
        validate(_flow(), strict=True)

    @pytest.mark.parametrize("data, message", [
        ([], "JSON object"),
        ({"nodes": []}, "missing required field 'edges'"),
        ({"nodes": {}, "edges": []}, "nodes must be a list"),
        (_flow(nodes=[{"name": "x"}]), "missing required field 'id'"),
        (_flow(nodes=[{"id": 1}]), "id must be a string"),
        (_flow(nodes=[{"id": "a"}, {"id": "a"}], edges=[]), "duplicate node id 'a'"),
        (_flow(nodes=[{"id": "a", "data": []}], edges=[]), "data must be an object"),
        (_flow(nodes=[{"id": "a", "data": {"params": 3}}], edges=[]), "params must be an object"),
        (_flow(edges=[{"id": "e", "source": "a"}]), "missing required field 'target'"),
        (_flow(edges=[{"id": "e", "source": "a", "target": "zz"}]), "target 'zz' not found"),
    ])
    def test_structural_errors(self, data, message):
        with pytest.raises(SchemaError, match=message):
            validate(data)

    def test_unknown_block_type_warns(self):
        data = _flow(nodes=[{"id": "a", "data": {"blockType": "laser"}}], edges=[])
        with pytest.warns(UserWarning, match="unknown block type 'laser'"):
            validate(data)

    def test_unknown_block_type_strict(self):
        data = _flow(nodes=[{"id": "a", "data": {"blockType": "laser"}}], edges=[])
        with pytest.raises(SchemaError, match="unknown block type"):
            validate(data, strict=True)

    def test_schema_error_is_value_error(self):
        assert issubclass(SchemaError, ValueError)


class TestValidateFile:

    def test_returns_parsed_data(self, tmp_path):
        path = tmp_path / "flow.json"
        path.write_text(json.dumps(_flow()), encoding="utf-8")
        assert validate_file(path) == _flow()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            validate_file(tmp_path / "nope.json")
