"""
Unit tests for the FK dependency graph and the SQL migration generator.
"""

from os.path import join

import pytest

from apigen.api.generators.base import create_environment
from apigen.api.generators.migration_generator import (
    build_table_contexts,
    column_ddl,
    deferred_fk_contexts,
    generate_migration_sql,
)
from apigen.api.graph import build_schema_graph
from apigen.language import TEMPLATES_DIR
from apigen.model.schema import SqlColumn, SqlForeignKey, SqlSchema, SqlTable


def _table(name, *fk_targets):
    columns = [SqlColumn(name="id", sql_type="BIGINT", logical_type="Long",
                         nullable=False, primary_key=True)]
    foreign_keys = []
    for target in fk_targets:
        column = f"{target}_id"
        columns.append(SqlColumn(name=column, sql_type="BIGINT", logical_type="Long"))
        foreign_keys.append(SqlForeignKey(column_name=column, referenced_table=target))
    return SqlTable(name=name, columns=columns, foreign_keys=foreign_keys,
                    primary_key_columns=["id"])


@pytest.fixture
def cyclic_schema():
    """departments <-> employees reference each other."""
    return SqlSchema(name="hr", tables=[
        _table("departments", "employees"),
        _table("employees", "departments"),
    ])


@pytest.fixture
def shared_env():
    return create_environment([join(TEMPLATES_DIR, "_shared")])


class TestSchemaGraph:
    """Test ordering and cycle handling."""

    def test_referenced_tables_first(self):
        schema = SqlSchema(tables=[_table("comments", "posts"), _table("posts", "users"), _table("users")])
        order = [t.name for t in build_schema_graph(schema).creation_order()]
        assert order == ["users", "posts", "comments"]

    def test_declaration_order_kept_when_independent(self, blog_schema):
        order = [t.name for t in build_schema_graph(blog_schema).creation_order()]
        assert order == ["authors", "posts", "tags", "post_tags"]

    def test_acyclic_schema(self, blog_schema):
        graph = build_schema_graph(blog_schema)
        assert not graph.has_cycles()
        assert graph.detect_cycles() == []
        assert graph.deferred_foreign_keys() == []

    def test_cycle_detected_and_deferred(self, cyclic_schema):
        graph = build_schema_graph(cyclic_schema)
        assert graph.has_cycles()
        assert len(graph.detect_cycles()) == 1
        deferred = graph.deferred_foreign_keys()
        assert len(deferred) == 1
        table, fk = deferred[0]
        assert table.name == "employees"
        assert fk.column_name == "departments_id"
        assert [t.name for t in graph.creation_order()] == ["employees", "departments"]

    def test_self_reference_is_not_a_cycle(self):
        schema = SqlSchema(tables=[_table("categories", "categories")])
        graph = build_schema_graph(schema)
        assert not graph.has_cycles()

    def test_dependents_of(self, blog_schema):
        graph = build_schema_graph(blog_schema)
        assert graph.dependents_of("authors") == ["posts"]
        assert graph.dependents_of("unknown") == []


class TestMigrationGenerator:
    """Test the initial migration script."""

    def test_column_ddl(self):
        column = SqlColumn(name="email", sql_type="VARCHAR(255)", nullable=False, unique=True,
                           default_value="''")
        assert column_ddl(column) == "email VARCHAR(255) NOT NULL UNIQUE DEFAULT ''"

    def test_identity_for_non_serial_auto_increment(self):
        column = SqlColumn(name="id", sql_type="BIGINT", primary_key=True, auto_increment=True,
                           nullable=False)
        assert column_ddl(column) == "id BIGINT GENERATED BY DEFAULT AS IDENTITY NOT NULL"

    def test_table_contexts(self, blog_schema):
        tables = build_table_contexts(blog_schema)
        posts = next(t for t in tables if t["name"] == "posts")
        assert posts["primary_key"] == ["id"]
        assert [fk["column"] for fk in posts["foreign_keys"]] == ["author_id"]
        assert posts["foreign_keys"][0]["name"] == "fk_posts_author_id"
        assert posts["fk_indexes"] == [{"name": "idx_posts_author_id", "column": "author_id"}]
        post_tags = next(t for t in tables if t["name"] == "post_tags")
        assert post_tags["is_junction"]
        assert [i["column"] for i in post_tags["fk_indexes"]] == ["tag_id"]

    def test_migration_sql(self, blog_schema, shared_env):
        sql = generate_migration_sql(blog_schema, shared_env)
        assert 'CREATE EXTENSION IF NOT EXISTS "pgcrypto";' in sql
        assert sql.index("CREATE TABLE authors (") < sql.index("CREATE TABLE posts (")
        assert "CREATE INDEX idx_posts_title ON posts (title);" in sql
        assert "-- People who write posts" in sql
        assert "CREATE OR REPLACE FUNCTION count_author_posts(p_author_id BIGINT)" in sql
        assert "ALTER TABLE" not in sql

    def test_deferred_foreign_keys_emitted(self, cyclic_schema, shared_env):
        sql = generate_migration_sql(cyclic_schema, shared_env)
        assert ("ALTER TABLE employees ADD CONSTRAINT fk_employees_departments_id "
                "FOREIGN KEY (departments_id) REFERENCES departments(id);") in sql
        deferred = deferred_fk_contexts(cyclic_schema)
        assert [fk["table"] for fk in deferred] == ["employees"]
