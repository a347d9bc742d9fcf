"""
Unit tests for identifier case conversion and pluralization helpers.
"""

from apigen.api.utils.naming import (
    capitalize,
    is_audit_field,
    is_foreign_key_column,
    resource_path,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_property_name,
    to_singular,
    to_snake_case,
)


class TestCaseConversion:
    """Test conversions between snake, camel, pascal and kebab case."""

    def test_pascal_from_snake(self):
        assert to_pascal_case("user_profile") == "UserProfile"

    def test_pascal_from_kebab_and_camel(self):
        assert to_pascal_case("user-profile") == "UserProfile"
        assert to_pascal_case("userProfile") == "UserProfile"

    def test_camel_from_snake(self):
        assert to_camel_case("user_profile") == "userProfile"
        assert to_camel_case("id") == "id"

    def test_snake_from_pascal(self):
        assert to_snake_case("UserProfile") == "user_profile"
        assert to_snake_case("userProfileId") == "user_profile_id"

    def test_snake_keeps_acronyms_together(self):
        assert to_snake_case("HTTPServer") == "http_server"

    def test_snake_from_spaces_and_hyphens(self):
        assert to_snake_case("Blog Service") == "blog_service"
        assert to_snake_case("blog-service") == "blog_service"

    def test_kebab(self):
        assert to_kebab_case("OrderItem") == "order-item"

    def test_capitalize_keeps_rest(self):
        assert capitalize("orderItem") == "OrderItem"
        assert capitalize("") == ""

    def test_empty_values_pass_through(self):
        assert to_pascal_case("") == ""
        assert to_snake_case("") == ""


class TestPluralization:
    """Test the table-name plural/singular heuristics."""

    def test_plural_rules(self):
        assert to_plural("post") == "posts"
        assert to_plural("category") == "categories"
        assert to_plural("box") == "boxes"
        assert to_plural("match") == "matches"
        assert to_plural("day") == "days"

    def test_singular_rules(self):
        assert to_singular("posts") == "post"
        assert to_singular("categories") == "category"
        assert to_singular("addresses") == "address"
        assert to_singular("boxes") == "box"
        assert to_singular("statuses") == "status"

    def test_singular_leaves_double_s(self):
        assert to_singular("address") == "address"

    def test_resource_path_pluralizes_last_word(self):
        assert resource_path("OrderItem") == "order-items"
        assert resource_path("Category") == "categories"
        assert resource_path("Post") == "posts"


class TestColumnHelpers:
    """Test helpers that classify and rename columns."""

    def test_property_name_drops_id_suffix(self):
        assert to_property_name("author_id") == "author"
        assert to_property_name("parent_category_id") == "parentCategory"

    def test_property_name_without_suffix(self):
        assert to_property_name("owner") == "owner"

    def test_foreign_key_column(self):
        assert is_foreign_key_column("author_id")
        assert not is_foreign_key_column("id")
        assert not is_foreign_key_column("title")

    def test_audit_field(self):
        assert is_audit_field("created_at")
        assert is_audit_field("UPDATED_BY")
        assert not is_audit_field("title")
