import json

import pytest
from pydantic import ValidationError

from wp_api_docs.collection.base import (
    Collection,
    CollectionInfo,
    Folder,
    Header,
    JsonBody,
    MultipartBody,
    Operation,
    QueryParam,
    UrlTemplate,
    Variable,
    is_placeholder,
    path_key,
)


def _op(name="List", method="GET", path="wp-json/wp/v2/posts", query=None, body=None) -> Operation:
    return Operation(name=name, method=method, url=UrlTemplate.build(path, query), body=body)


class TestUrlTemplate:
    def test_raw_built_from_segments_and_enabled_params(self):
        url = UrlTemplate.build(
            "wp-json/wp/v2/posts",
            [QueryParam(key="_fields", value="id,slug"), QueryParam(key="page", value="1", enabled=False)],
        )
        assert url.raw == "{{baseUrl}}/wp-json/wp/v2/posts?_fields=id,slug"
        assert url.path == ["wp-json", "wp", "v2", "posts"]
        assert len(url.query) == 2
        assert url.host == ["{{baseUrl}}"]

    def test_build_from_list_drops_empty_segments(self):
        url = UrlTemplate.build(["wp-json", "", "wp", "v2"])
        assert url.path == ["wp-json", "wp", "v2"]
        assert url.path_string == "/wp-json/wp/v2"

    def test_path_variables(self):
        url = UrlTemplate.build("/wp-json/myplugin/v1/items/:id/meta/:key")
        assert url.path_variables() == ["id", "key"]


class TestOperation:
    def test_method_is_upper_cased(self):
        assert _op(method="delete").method == "DELETE"

    def test_get_with_body_rejected(self):
        with pytest.raises(ValidationError):
            _op(body=JsonBody(fields={"title": "x"}))

    def test_duplicate_query_keys_rejected(self):
        with pytest.raises(ValidationError):
            _op(query=[QueryParam(key="page", value="1"), QueryParam(key="page", value="2")])

    def test_post_with_multipart_body(self):
        op = _op(method="POST", body=MultipartBody())
        assert op.body.mode == "multipart"
        assert op.path == "/wp-json/wp/v2/posts"


class TestJsonBody:
    def test_render_fields_keeps_unicode(self):
        body = JsonBody(fields={"title": "Grüße"})
        assert json.loads(body.render()) == {"title": "Grüße"}
        assert "Grüße" in body.render()

    def test_render_prefers_template(self):
        assert JsonBody(fields={"a": 1}, template='{"b": 2}').render() == '{"b": 2}'


class TestFolder:
    def test_operations_depth_first(self):
        folder = Folder(name="root", items=[
            _op(name="a"),
            Folder(name="sub", items=[_op(name="b"), Folder(name="deeper", items=[_op(name="c")])]),
            _op(name="d"),
        ])
        assert [op.name for op in folder.operations()] == ["a", "b", "c", "d"]
        assert folder.folder("sub").name == "sub"
        assert folder.folder("missing") is None

    def test_tagged_union_from_dict(self):
        folder = Folder.model_validate({
            "name": "root",
            "items": [
                {"kind": "folder", "name": "sub", "items": []},
                {
                    "kind": "operation",
                    "name": "Create",
                    "method": "POST",
                    "url": {"raw": "{{baseUrl}}/x", "path": ["x"]},
                    "body": {"mode": "json", "fields": {"a": 1}},
                },
            ],
        })
        assert isinstance(folder.items[0], Folder)
        assert isinstance(folder.items[1], Operation)
        assert isinstance(folder.items[1].body, JsonBody)


class TestCollection:
    def test_variable_keys_unique(self):
        with pytest.raises(ValidationError):
            Collection(
                info=CollectionInfo(name="x"),
                root=Folder(name="x"),
                variables=[Variable(key="baseUrl"), Variable(key="baseUrl")],
            )

    def test_variable_map(self):
        c = Collection(
            info=CollectionInfo(name="x"),
            root=Folder(name="x", items=[_op()]),
            variables=[Variable(key="baseUrl", value="http://a"), Variable(key="PostID", value="1")],
        )
        assert c.variable_map() == {"baseUrl": "http://a", "PostID": "1"}
        assert len(list(c.operations())) == 1


class TestPathKey:
    def test_placeholders(self):
        assert is_placeholder("{{PostID}}")
        assert is_placeholder(":id")
        assert not is_placeholder("posts")
        assert not is_placeholder("{postId}")

    def test_both_placeholder_styles_normalize_alike(self):
        assert path_key(["wp-json", "wp", "v2", "posts", "{{PostID}}"]) == "/wp-json/wp/v2/posts/*"
        assert path_key("/wp-json/wp/v2/posts/:id") == "/wp-json/wp/v2/posts/*"

    def test_header_model(self):
        h = Header(key="X-WP-Nonce", value="{{wpNonce}}", enabled=False)
        assert h.enabled is False
        assert h.description == ""
