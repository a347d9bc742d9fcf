"""
Unit tests for per-language type mappers and entity context extraction.
"""

import pytest

from apigen.api.extractors import build_entity_context, build_function_contexts, split_list_type
from apigen.api.extractors.type_mapper import (
    CSharpTypeMapper,
    GoTypeMapper,
    JavaTypeMapper,
    KotlinTypeMapper,
    PhpTypeMapper,
    PythonTypeMapper,
    RustTypeMapper,
    TypeScriptTypeMapper,
)
from apigen.features import DEFAULT_FEATURES, Feature
from apigen.model.schema import SqlColumn


class TestListTypes:

    def test_split_list_type(self):
        assert split_list_type("List<Integer>") == "Integer"
        assert split_list_type("Integer") is None
        assert split_list_type(None) is None

    @pytest.mark.parametrize("mapper,expected", [
        (JavaTypeMapper(), "List<Long>"),
        (GoTypeMapper(), "[]int64"),
        (RustTypeMapper(), "Vec<i64>"),
        (PythonTypeMapper(), "list[int]"),
        (TypeScriptTypeMapper(), "number[]"),
        (PhpTypeMapper(), "array"),
    ])
    def test_list_of_long(self, mapper, expected):
        assert mapper.map("List<Long>") == expected


class TestScalarMapping:
    """Test logical to language type mapping and nullable forms."""

    @pytest.mark.parametrize("mapper,logical,expected", [
        (JavaTypeMapper(), "LocalDateTime", "LocalDateTime"),
        (KotlinTypeMapper(), "Integer", "Int"),
        (GoTypeMapper(), "UUID", "uuid.UUID"),
        (RustTypeMapper(), "BigDecimal", "Decimal"),
        (CSharpTypeMapper(), "UUID", "Guid"),
        (PhpTypeMapper(), "Long", "int"),
        (PythonTypeMapper(), "LocalDate", "date"),
        (TypeScriptTypeMapper(), "Long", "number"),
    ])
    def test_map(self, mapper, logical, expected):
        assert mapper.map(logical) == expected

    def test_unknown_logical_type_uses_fallback(self):
        assert JavaTypeMapper().map("Geometry") == "Object"
        assert GoTypeMapper().map("Geometry") == "interface{}"

    def test_nullable_column(self):
        column = SqlColumn(name="note", sql_type="TEXT", logical_type="String", nullable=True)
        assert KotlinTypeMapper().map_column(column) == "String?"
        assert GoTypeMapper().map_column(column) == "*string"
        assert RustTypeMapper().map_column(column) == "Option<String>"
        assert PythonTypeMapper().map_column(column) == "str | None"
        assert TypeScriptTypeMapper().map_column(column) == "string | null"
        assert JavaTypeMapper().map_column(column) == "String"

    def test_primary_key_never_nullable(self):
        column = SqlColumn(name="id", sql_type="BIGINT", logical_type="Long",
                           nullable=True, primary_key=True)
        assert RustTypeMapper().map_column(column) == "i64"

    def test_go_slices_are_not_pointers(self):
        assert GoTypeMapper().nullable("[]byte") == "[]byte"


class TestKeywordsAndImports:

    def test_safe_names(self):
        assert JavaTypeMapper().safe_name("class") == "class_"
        assert KotlinTypeMapper().safe_name("when") == "`when`"
        assert RustTypeMapper().safe_name("type") == "r#type"
        assert CSharpTypeMapper().safe_name("event") == "@event"
        assert PythonTypeMapper().safe_name("from") == "from_"
        assert JavaTypeMapper().safe_name("title") == "title"

    def test_java_imports(self):
        imports = JavaTypeMapper().imports_for(["String", "BigDecimal", "List<UUID>"])
        assert imports == ["java.math.BigDecimal", "java.util.List", "java.util.UUID"]

    def test_sample_values(self):
        assert JavaTypeMapper().sample_value("Long") == "1L"
        assert JavaTypeMapper().sample_value("List<String>") == "List.of()"
        assert KotlinTypeMapper().sample_value("List<String>") == "emptyList()"
        assert PythonTypeMapper().sample_value("Boolean") == "True"


class TestTargetSpecificHelpers:
    """Test helpers only one target uses."""

    def test_php_blueprint(self):
        mapper = PhpTypeMapper()
        base = {"auto_increment": False, "primary_key": False, "length": None,
                "precision": None, "scale": None, "nullable": False, "unique": False,
                "default": None, "sql_type": "VARCHAR(80)"}
        assert mapper.blueprint(dict(base, name="id", logical="Long", auto_increment=True,
                                     primary_key=True, sql_type="BIGSERIAL")) == "id('id')"
        assert mapper.blueprint(dict(base, name="title", logical="String", length=80,
                                     unique=True)) == "string('title', 80)->unique()"
        assert mapper.blueprint(dict(base, name="price", logical="BigDecimal", precision=10,
                                     scale=2, nullable=True, sql_type="DECIMAL(10,2)")) \
            == "decimal('price', 10, 2)->nullable()"
        assert mapper.blueprint(dict(base, name="body", logical="String",
                                     sql_type="TEXT")) == "text('body')"

    def test_php_defaults_and_rules(self):
        mapper = PhpTypeMapper()
        assert mapper.default_literal("TRUE") == "true"
        assert mapper.default_literal("'DRAFT'") == "'DRAFT'"
        assert mapper.default_literal("CURRENT_TIMESTAMP") is None
        assert mapper.rule("UUID") == "uuid"
        assert mapper.cast("Boolean") == "boolean"
        assert mapper.cast("String") is None

    def test_typescript_orm_types_per_dialect(self):
        mapper = TypeScriptTypeMapper()
        assert mapper.orm_type("LocalDateTime") == "timestamp"
        assert mapper.orm_type("LocalDateTime", "mysql") == "datetime"
        assert mapper.orm_type("List<String>") == "jsonb"
        assert mapper.orm_type("List<String>", "mysql") == "json"
        assert mapper.orm_type("Integer", "mysql") == "int"

    def test_sqlalchemy_autoincrement_bigint(self):
        mapper = PythonTypeMapper()
        base = {"is_list": False, "length": None, "precision": None, "scale": None,
                "sql_type": "BIGSERIAL", "logical": "Long"}
        assert mapper.sqlalchemy_type(dict(base, auto_increment=True)) \
            == 'BigInteger().with_variant(sa.Integer(), "sqlite")'
        assert mapper.sqlalchemy_type(dict(base, auto_increment=False)) == "BigInteger"
        assert mapper.sqlalchemy_type(dict(base, logical="Integer", sql_type="SERIAL",
                                           auto_increment=True)) == "Integer"

    def test_typescript_validators(self):
        mapper = TypeScriptTypeMapper()
        assert mapper.validator("UUID") == "IsUUID"
        assert mapper.validator("List<Integer>") == "IsArray"
        assert mapper.validator("byte[]") is None


class TestEntityContext:
    """Test template context extraction from tables."""

    @pytest.fixture
    def post_context(self, blog_schema):
        posts = blog_schema.get_table("posts")
        return build_entity_context(posts, blog_schema, JavaTypeMapper(), DEFAULT_FEATURES)

    def test_names(self, post_context):
        assert post_context["name"] == "Post"
        assert post_context["variable"] == "post"
        assert post_context["plural"] == "Posts"
        assert post_context["resource"] == "posts"
        assert post_context["table"] == "posts"

    def test_fields_exclude_keys_and_audit_columns(self, post_context):
        assert [f["column"] for f in post_context["fields"]] == [
            "title", "body", "status", "price", "published_at",
        ]
        assert post_context["id"]["type"] == "Long"

    def test_field_details(self, post_context):
        title = post_context["fields"][0]
        assert title["name"] == "title"
        assert title["required"]
        assert title["length"] == 200
        status = post_context["fields"][2]
        assert not status["required"]

    def test_foreign_keys_and_many_to_one(self, post_context):
        assert [f["column"] for f in post_context["foreign_keys"]] == ["author_id"]
        relation = post_context["many_to_one"][0]
        assert relation["property"] == "author"
        assert relation["target"]["name"] == "Author"
        assert relation["on_delete"] == "CASCADE"
        assert not relation["one_to_one"]

    def test_many_to_many(self, post_context):
        relation = post_context["many_to_many"][0]
        assert relation["property"] == "tags"
        assert relation["junction_table"] == "post_tags"
        assert relation["target_id_type"] == "Integer"

    def test_one_to_many_on_parent(self, blog_schema):
        authors = blog_schema.get_table("authors")
        context = build_entity_context(authors, blog_schema, JavaTypeMapper(), DEFAULT_FEATURES)
        assert [r["property"] for r in context["one_to_many"]] == ["posts"]
        assert context["one_to_many"][0]["mapped_by"] == "author"
        assert context["audit"]["created_at"]

    def test_relations_follow_features(self, blog_schema):
        posts = blog_schema.get_table("posts")
        context = build_entity_context(posts, blog_schema, JavaTypeMapper(), {Feature.CRUD})
        assert context["many_to_one"] == []
        assert context["many_to_many"] == []
        assert [f["column"] for f in context["foreign_keys"]] == ["author_id"]

    def test_snake_field_case(self, blog_schema):
        posts = blog_schema.get_table("posts")
        context = build_entity_context(posts, blog_schema, PythonTypeMapper(), DEFAULT_FEATURES, "snake")
        assert "published_at" in [f["name"] for f in context["fields"]]

    def test_table_without_single_pk_is_skipped(self, blog_schema):
        post_tags = blog_schema.get_table("post_tags")
        assert build_entity_context(post_tags, blog_schema, JavaTypeMapper(), DEFAULT_FEATURES) is None

    def test_function_contexts(self, blog_schema):
        contexts = build_function_contexts(blog_schema.functions, JavaTypeMapper())
        assert contexts[0]["method"] == "countAuthorPosts"
        assert contexts[0]["params"][0]["name"] == "pAuthorId"
        assert contexts[0]["params"][0]["type"] == "Long"


class TestRelationContext:
    """Test relation details resolved on the entity context for templates."""

    @pytest.fixture
    def contexts(self, relations_schema):
        def _build(name, features=DEFAULT_FEATURES, mapper=None):
            table = relations_schema.get_table(name)
            return build_entity_context(table, relations_schema, mapper or JavaTypeMapper(), features)
        return _build

    def test_foreign_key_carries_its_relation(self, contexts):
        reviews = contexts("reviews")
        for field in reviews["foreign_keys"]:
            assert field["relation"] in reviews["many_to_one"]
            assert field["relation"]["field"] is field

    def test_relation_is_none_without_many_to_one(self, contexts):
        reviews = contexts("reviews", {Feature.CRUD})
        assert [f["relation"] for f in reviews["foreign_keys"]] == [None, None]

    def test_inverse_property_matches_parent_collection(self, contexts):
        reviews = contexts("reviews")
        authors = contexts("authors")
        inverses = [r["inverse_property"] for r in reviews["many_to_one"]]
        assert inverses == ["authorReviews", "reviewerReviews"]
        assert [r["property"] for r in authors["one_to_many"]] == inverses

    def test_inverse_property_uses_field_case(self, relations_schema):
        table = relations_schema.get_table("reviews")
        context = build_entity_context(table, relations_schema, CSharpTypeMapper(),
                                       DEFAULT_FEATURES, "pascal")
        assert context["many_to_one"][0]["inverse_property"] == "AuthorReviews"

    def test_no_inverse_without_one_to_many(self, contexts):
        reviews = contexts("reviews", {Feature.CRUD, Feature.MANY_TO_ONE})
        assert [r["inverse_property"] for r in reviews["many_to_one"]] == [None, None]

    def test_one_to_one_has_no_inverse(self, contexts):
        relation = contexts("profiles")["many_to_one"][0]
        assert relation["one_to_one"]
        assert relation["inverse_property"] is None
        assert contexts("authors")["one_to_many"][0]["target"]["name"] == "Review"

    def test_self_reference_has_no_inverse(self, contexts):
        departments = contexts("departments")
        relation = departments["many_to_one"][0]
        assert relation["property"] == "parent"
        assert relation["target"]["name"] == "Department"
        assert relation["inverse_property"] is None
        assert departments["one_to_many"] == []

    def test_many_to_many_inverse_property(self, contexts):
        relation = contexts("departments")["many_to_many"][0]
        assert relation["property"] == "authors"
        assert relation["inverse_property"] == "departments"
