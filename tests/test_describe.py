from wp_api_docs.openapi.describe import (
    describe_operation,
    extract_entity,
    is_good_description,
    list_or_slug_description,
    singular,
)


class TestIsGoodDescription:
    def test_keeps_descriptive_text(self):
        assert is_good_description("Get list of all posts", "List of Posts")

    def test_rejects_empty_and_name(self):
        assert not is_good_description("", "List of Posts")
        assert not is_good_description("List of Posts", "List of Posts")

    def test_rejects_short(self):
        assert not is_good_description("Get posts", "x")

    def test_rejects_without_action_verb(self):
        assert not is_good_description("Erstellt einen Beitrag", "Create Post")

    def test_rejects_non_latin(self):
        assert not is_good_description("Получить список записей (get)", "List")
        assert not is_good_description("获取文章列表 get list", "List")
        assert not is_good_description("รายการบทความทั้งหมด get list", "List")
        assert not is_good_description("პოსტების სია get list", "List")
        assert not is_good_description("የጽሁፎች ዝርዝር get list", "List")

    def test_accented_latin_allowed(self):
        assert is_good_description("Get list of café posts, déjà vu", "List")


class TestEntity:
    def test_singular(self):
        assert singular("categories") == "category"
        assert singular("media") == "media"
        assert singular("stories") == "story"
        assert singular("boxes") == "box"
        assert singular("books") == "book"
        assert singular("data") == "data"

    def test_extract_entity(self):
        assert extract_entity("/wp-json/wp/v2/posts") == "posts"
        assert extract_entity("/wp-json/wp/v2/posts/{postId}") == "posts"
        assert extract_entity("/wp-json/wp/v2/posts/{postId}/revisions") == "posts"
        assert extract_entity("/") == ""


class TestDescribeOperation:
    def test_form_submit(self):
        assert describe_operation("/wp-json/forms-handler/v1/forms/contact/submit", "POST", []) == "Submit form data"

    def test_form_info(self):
        assert describe_operation("/wp-json/forms-handler/v1/forms/contact", "GET", []) == "Retrieve form information"

    def test_search(self):
        assert describe_operation("/wp-json/wp/v2/search", "GET", []) == "Search content across the site"

    def test_options(self):
        assert describe_operation("/wp-json/custom/v1/options", "GET", []) == "Retrieve list of options pages"
        assert describe_operation("/wp-json/custom/v1/options/footer", "GET", []) == "Retrieve options page data"

    def test_generic_by_method(self):
        assert describe_operation("/wp-json/wp/v2/books", "GET", []) == "Retrieve a list of books"
        assert describe_operation("/wp-json/wp/v2/books/{bookId}", "GET", []) == "Retrieve a specific book by ID"
        assert describe_operation("/wp-json/wp/v2/books", "POST", []) == "Create a new book"
        assert describe_operation("/wp-json/wp/v2/books/{bookId}", "PUT", []) == "Update an existing book"
        assert describe_operation("/wp-json/wp/v2/books/{bookId}", "PATCH", []) == "Partially update an existing book"
        assert describe_operation("/wp-json/wp/v2/categories/{categoryId}", "DELETE", []) == "Delete a category"

    def test_search_parameter(self):
        params = [{"name": "search", "in": "query"}]
        assert describe_operation("/wp-json/wp/v2/books", "GET", params) == "Search for books"

    def test_empty_path(self):
        assert describe_operation("/", "GET", []) == ""


def test_list_or_slug_description():
    assert list_or_slug_description("/wp-json/wp/v2/pages") == (
        "List all pages with pagination. To get a specific page, use the slug parameter (e.g. slug=home)."
    )
