import json

import pytest
import yaml

from wp_api_docs.errors import EncodingFailure
from wp_api_docs.export import dump_json, dump_yaml


class TestDumpJson:
    def test_indent_and_unicode(self):
        text = dump_json({"title": "Über uns", "n": 1}, indent=2)
        assert "Über uns" in text
        assert text.startswith('{\n  "title"')
        assert json.loads(text) == {"title": "Über uns", "n": 1}

    def test_unserializable(self):
        with pytest.raises(EncodingFailure):
            dump_json({"when": object()})

    def test_circular(self):
        data: dict = {}
        data["self"] = data
        with pytest.raises(EncodingFailure):
            dump_json(data)


class TestDumpYaml:
    def test_keeps_key_order(self):
        text = dump_yaml({"openapi": "3.0.3", "info": {"title": "T"}, "paths": {}})
        assert text.index("openapi") < text.index("info") < text.index("paths")
        assert yaml.safe_load(text)["info"] == {"title": "T"}

    def test_unrepresentable(self):
        with pytest.raises(EncodingFailure):
            dump_yaml({"when": object()})

    def test_repeated_objects_written_in_full(self):
        shared = {"type": "string"}
        text = dump_yaml({"a": shared, "b": shared})
        assert "&id" not in text
        assert yaml.safe_load(text) == {"a": {"type": "string"}, "b": {"type": "string"}}
