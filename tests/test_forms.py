from datetime import datetime, timezone

from wp_api_docs.collection.base import JsonBody, MultipartBody
from wp_api_docs.collection.forms import (
    FormField,
    build_submit_body,
    option_values,
    parse_fields,
    sample_number,
    sample_value,
)

NOW = datetime(2024, 5, 6, 7, 8, tzinfo=timezone.utc)


class TestSampleNumber:
    def test_min_aligned_down_to_step(self):
        assert sample_number(FormField(name="qty", type="number", min=5, step=2)) == 4

    def test_fractional_step_gives_float(self):
        value = sample_number(FormField(name="rating", type="number", step=0.5))
        assert isinstance(value, float)
        assert value == 42.0

    def test_default_step_floors_to_int(self):
        value = sample_number(FormField(name="n", type="number", min=3.7))
        assert value == 3
        assert isinstance(value, int)

    def test_max_used_without_min(self):
        assert sample_number(FormField(name="n", type="number", max=10, step=3)) == 9

    def test_min_wins_over_max(self):
        assert sample_number(FormField(name="n", type="number", min=20, max=10)) == 20

    def test_string_bounds_are_parsed(self):
        assert sample_number(FormField(name="n", type="number", min="8", step="4")) == 8

    def test_non_finite_bounds_ignored(self):
        assert sample_number(FormField(name="n", type="number", min="nan", step=2)) == 42
        assert sample_number(FormField(name="n", type="number", min=1e400)) == 42
        assert sample_number(FormField(name="n", type="number", max="-inf", min=10**400)) == 42

    def test_step_too_small_to_align(self):
        assert sample_number(FormField(name="n", type="number", min=1e300, step=1e-300)) == 1e300


class TestOptionValues:
    def test_value_then_label_then_raw(self):
        assert option_values([{"value": "a", "label": "A"}, {"label": "B"}, "c", 4]) == ["a", "B", "c", "4"]


class TestSampleValue:
    def test_text_like_fields(self):
        assert sample_value(FormField(name="e", type="email")) == "test@example.com"
        assert sample_value(FormField(name="c", type="checkbox")) == "1"
        assert sample_value(FormField(name="u", type="unknown")) == "Sample text"

    def test_dates_use_clock(self):
        assert sample_value(FormField(name="d", type="date"), NOW) == "2024-05-06"
        assert sample_value(FormField(name="t", type="time"), NOW) == "07:08"
        assert sample_value(FormField(name="dt", type="datetime-local"), NOW) == "2024-05-06T07:08"

    def test_multi_select_truncated_to_two(self):
        field = FormField(name="s", type="select", multiple=True, options=["a", "b", "c", "d", "e"])
        assert sample_value(field) == ["a", "b"]

    def test_multi_select_single_option(self):
        field = FormField(name="s", type="select", multiple=True, options=[{"value": "only"}])
        assert sample_value(field) == ["only"]

    def test_radio_without_options(self):
        assert sample_value(FormField(name="r", type="radio")) == "option"

    def test_file_fields(self):
        assert sample_value(FormField(name="f", type="file")) == "sample.pdf"
        assert sample_value(FormField(name="f", type="file", multiple=True)) == ["sample.pdf"]


class TestParseFields:
    def test_json_text(self):
        fields = parse_fields('[{"name": "a", "type": "email", "required": "1"}, {"type": "text"}, "junk"]')
        assert [f.name for f in fields] == ["a"]
        assert fields[0].required is True

    def test_invalid_json(self):
        assert parse_fields("{not json") == []

    def test_missing_config(self):
        assert parse_fields(None) == []

    def test_false_strings(self):
        fields = parse_fields([{"name": "a", "multiple": "0", "required": "false"}])
        assert fields[0].multiple is False
        assert fields[0].required is False

    def test_null_type_is_text(self):
        fields = parse_fields([{"name": "nickname", "type": None}])
        assert [(f.name, f.type) for f in fields] == [("nickname", "text")]
        assert build_submit_body(fields, NOW).fields == {"nickname": "Sample Text"}


class TestBuildSubmitBody:
    def test_json_without_files(self):
        fields = parse_fields([
            {"name": "name", "type": "text"},
            {"name": "age", "type": "number", "min": 18},
        ])
        body = build_submit_body(fields, NOW)
        assert isinstance(body, JsonBody)
        assert body.fields == {"name": "Sample Text", "age": 18}

    def test_multipart_with_file(self):
        fields = parse_fields([
            {"name": "name", "type": "text", "required": True},
            {"name": "cv", "type": "file", "required": True},
            {"name": "extras", "type": "file", "multiple": True},
            {"name": "tags", "type": "select", "multiple": True, "options": ["x", "y", "z"]},
        ])
        body = build_submit_body(fields, NOW)
        assert isinstance(body, MultipartBody)
        assert [(p.key, p.kind, p.value) for p in body.parts] == [
            ("name", "text", "Sample Text"),
            ("cv", "file", "sample.pdf"),
            ("extras[]", "file", "sample.pdf"),
            ("tags[]", "text", "x"),
            ("tags[]", "text", "y"),
        ]
        assert [p.required for p in body.parts[:3]] == [True, True, False]
