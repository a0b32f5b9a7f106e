from pathlib import Path

from wp_api_docs.collection.assembler import CollectionAssembler, Selection
from wp_api_docs.collection.base import Collection, CollectionInfo, Folder, Operation, UrlTemplate, Variable
from wp_api_docs.collection.postman import load_collection
from wp_api_docs.collection.routes import RouteCatalog
from wp_api_docs.export import dump_json
from wp_api_docs.host import SiteSnapshot, load_snapshot
from wp_api_docs.openapi.converter import OpenApiConverter, infer_property_schema, to_camel_case_param
from wp_api_docs.openapi.validator import validate_openapi

FIXTURES = Path(__file__).parent / "fixtures"


def _collection(*items, variables=None) -> Collection:
    return Collection(
        info=CollectionInfo(name="Test"),
        root=Folder(name="Test", items=list(items)),
        variables=variables if variables is not None else [Variable(key="baseUrl", value="https://t.example.com")],
    )


def _site_doc(selection: Selection) -> dict:
    site = load_snapshot(FIXTURES / "site.yaml")
    return OpenApiConverter().convert(CollectionAssembler(site).assemble(selection))


def _params(operation: dict) -> dict:
    return {(p["name"], p["in"]): p for p in operation.get("parameters", [])}


class TestHelpers:
    def test_camel_case(self):
        assert to_camel_case_param("PostID") == "postId"
        assert to_camel_case_param("CaseStudyID") == "casestudyId"
        assert to_camel_case_param("form-slug") == "formSlug"

    def test_build_path(self):
        assert OpenApiConverter.build_path(["wp-json", "wp", "v2", "posts", "{{PostID}}"]) == "/wp-json/wp/v2/posts/{postId}"
        assert OpenApiConverter.build_path(["wp-json", "myplugin", "v1", "items", ":id"]) == "/wp-json/myplugin/v1/items/{id}"
        assert OpenApiConverter.build_path([]) is None

    def test_tags(self):
        assert OpenApiConverter.extract_tags("/wp-json/wp/v2/posts/{postId}") == ["wp - posts"]
        assert OpenApiConverter.extract_tags("/other") == []

    def test_property_schema(self):
        assert infer_property_schema(True) == {"type": "boolean"}
        assert infer_property_schema(3) == {"type": "integer"}
        assert infer_property_schema(1.5) == {"type": "number"}
        assert infer_property_schema(["a"]) == {"type": "array", "items": {"type": "string"}}
        assert infer_property_schema({"a": 1}) == {"type": "object"}
        assert infer_property_schema("x") == {"type": "string"}


class TestEntityConversion:
    def _doc(self) -> dict:
        folder = RouteCatalog(SiteSnapshot()).entity_folder("posts", "Post")
        return OpenApiConverter().convert(_collection(folder))

    def test_delete_by_id(self):
        doc = self._doc()
        delete = doc["paths"]["/wp-json/wp/v2/posts/{postId}"]["delete"]
        post_id = _params(delete)[("postId", "path")]
        assert post_id["required"] is True
        assert post_id["schema"] == {"type": "integer", "format": "int64"}
        assert delete["parameters"][0]["in"] == "path"
        assert len(delete["security"]) == 3
        assert delete["tags"] == ["wp - posts"]

    def test_list_and_slug_merged(self):
        doc = self._doc()
        methods = doc["paths"]["/wp-json/wp/v2/posts"]
        assert set(methods) == {"get", "post"}
        get = methods["get"]
        assert get["operationId"] == "list_of_posts_1"
        assert get["description"].startswith("List all posts with pagination.")
        params = _params(get)
        assert ("slug", "query") in params
        assert ("per_page", "query") in params
        assert "security" not in get
        assert set(get["responses"]["200"]["headers"]) == {"X-WP-Total", "X-WP-TotalPages"}

    def test_get_by_id_has_no_pagination_headers(self):
        doc = self._doc()
        get = doc["paths"]["/wp-json/wp/v2/posts/{postId}"]["get"]
        assert "headers" not in get["responses"]["200"]

    def test_disabled_headers_left_out(self):
        doc = self._doc()
        create = doc["paths"]["/wp-json/wp/v2/posts"]["post"]
        assert all(p["in"] != "header" for p in create.get("parameters", []))
        assert set(create["responses"]) == {"200", "201", "401", "403", "404", "500"}

    def test_request_body_from_fields(self):
        doc = self._doc()
        body = doc["paths"]["/wp-json/wp/v2/posts"]["post"]["requestBody"]
        schema = body["content"]["application/json"]["schema"]
        assert schema["properties"]["status"]["type"] == "string"
        assert body["content"]["application/json"]["example"]["status"] == "draft"

    def test_settings_has_no_pagination_headers(self):
        folder = RouteCatalog(SiteSnapshot()).entity_folder("settings", "Setting")
        doc = OpenApiConverter().convert(_collection(folder))
        get = doc["paths"]["/wp-json/wp/v2/settings"]["get"]
        assert "headers" not in get["responses"]["200"]


class TestDocument:
    def test_top_level(self):
        doc = _site_doc(Selection())
        assert doc["openapi"] == "3.0.3"
        assert doc["info"]["title"] == "Demo Site"
        assert doc["info"]["version"] == "1.0.0"
        assert doc["servers"][0]["url"] == "https://demo.example.com"
        assert doc["externalDocs"]["url"].startswith("https://developer.wordpress.org/")
        assert set(doc["components"]["schemas"]) >= {"WP_Post", "WP_Page", "WP_Term", "WP_REST_Error"}

    def test_full_site_is_consistent(self):
        selection = Selection(
            custom_types=["book", "fh_forms"],
            page_slugs=["about"],
            category_slugs=["news"],
            namespaces=["myplugin/v1", "shop/v2"],
            include_ecommerce=True,
        )
        doc = _site_doc(selection)
        assert validate_openapi(doc) == {}
        assert "/wp-json/myplugin/v1/items/{id}" in doc["paths"]
        assert "/wp-json/forms-handler/v1/forms/job-application/submit" in doc["paths"]

    def test_conversion_is_repeatable(self):
        site = load_snapshot(FIXTURES / "site.yaml")
        collection = CollectionAssembler(site).assemble(Selection(custom_types=["book"]))
        converter = OpenApiConverter()
        assert dump_json(converter.convert(collection)) == dump_json(converter.convert(collection))

    def test_ecommerce_security_scheme(self):
        with_shop = _site_doc(Selection(include_ecommerce=True))
        without_shop = _site_doc(Selection(include_ecommerce=False))
        assert "wcBasicAuth" in with_shop["components"]["securitySchemes"]
        assert "wcBasicAuth" not in without_shop["components"]["securitySchemes"]
        assert set(without_shop["components"]["securitySchemes"]) == {"cookieAuth", "nonceAuth", "applicationPassword"}

    def test_specific_pages_left_out(self):
        doc = _site_doc(Selection(entities=["tags"], page_slugs=["about"]))
        assert "/wp-json/wp/v2/pages" not in doc["paths"]

    def test_fallback_base_url(self):
        op = Operation(name="Ping", method="GET", url=UrlTemplate.build("wp-json/x/v1/ping"))
        doc = OpenApiConverter(base_url="https://fallback.example.com/").convert(_collection(op, variables=[]))
        assert doc["servers"][0]["url"] == "https://fallback.example.com"

    def test_transform_hook(self):
        op = Operation(name="Ping", method="GET", url=UrlTemplate.build("wp-json/x/v1/ping"))
        converter = OpenApiConverter(transform=lambda d: {**d, "x-generator": "wp-api-docs"})
        assert converter.convert(_collection(op))["x-generator"] == "wp-api-docs"

    def test_api_version(self):
        op = Operation(name="Ping", method="GET", url=UrlTemplate.build("wp-json/x/v1/ping"))
        assert OpenApiConverter(api_version="2.3.0").convert(_collection(op))["info"]["version"] == "2.3.0"


class TestImportedCollection:
    def _doc(self) -> dict:
        return OpenApiConverter().convert(load_collection(FIXTURES / "sample.postman.json"))

    def test_server_from_variable(self):
        assert self._doc()["servers"] == [{"url": "https://sample.example.com", "description": "WordPress site URL"}]

    def test_operation_ids(self):
        doc = self._doc()
        ids = sorted(op["operationId"] for methods in doc["paths"].values() for op in methods.values())
        assert ids == ["create_post_2", "delete_post_3", "list_of_posts_1", "upload_document_4"]

    def test_skipped_operations(self):
        paths = self._doc()["paths"]
        assert set(paths) == {
            "/wp-json/wp/v2/posts",
            "/wp-json/wp/v2/posts/{postId}",
            "/wp-json/docs/v1/uploads",
        }

    def test_merged_listing_description(self):
        get = self._doc()["paths"]["/wp-json/wp/v2/posts"]["get"]
        assert get["description"] == (
            "List all posts with pagination. To get a specific post, use the slug parameter (e.g. slug=home)."
        )
        assert {p["name"] for p in get["parameters"]} == {"_fields", "page", "slug"}

    def test_synthesized_description_and_body_types(self):
        create = self._doc()["paths"]["/wp-json/wp/v2/posts"]["post"]
        assert create["description"] == "Create a new post"
        properties = create["requestBody"]["content"]["application/json"]["schema"]["properties"]
        assert properties["title"]["type"] == "string"
        assert properties["sticky"]["type"] == "boolean"
        assert properties["menu_order"]["type"] == "integer"
        assert properties["categories"]["type"] == "array"

    def test_kept_description(self):
        delete = self._doc()["paths"]["/wp-json/wp/v2/posts/{postId}"]["delete"]
        assert delete["description"] == "Delete Post by ID. Add ?force=true to bypass Trash."
        force = _params(delete)[("force", "query")]
        assert force["schema"]["type"] == "boolean"

    def test_multipart_body(self):
        upload = self._doc()["paths"]["/wp-json/docs/v1/uploads"]["post"]
        body = upload["requestBody"]
        schema = body["content"]["multipart/form-data"]["schema"]
        assert body["required"] is True
        assert schema["required"] == ["title", "file"]
        assert schema["properties"]["file"]["format"] == "binary"
        assert "format" not in schema["properties"]["title"]
        assert upload["tags"] == ["docs - uploads"]
