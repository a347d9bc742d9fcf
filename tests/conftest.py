"""
Pytest configuration and shared fixtures for the apigen test suite.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from apigen.config import build_config
from apigen.parsers import SqlSchemaParser
from apigen.transformers import OpenApiParser


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for generated project output."""
    temp_dir = tempfile.mkdtemp(prefix="apigen_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def sql_parser():
    return SqlSchemaParser()


@pytest.fixture
def openapi_parser():
    return OpenApiParser()


@pytest.fixture
def blog_sql():
    """A small blog schema: two entities, a lookup table, a junction and a function."""
    return """
CREATE EXTENSION IF NOT EXISTS "pgcrypto";

CREATE TABLE authors (
    id BIGSERIAL PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    email VARCHAR(255) NOT NULL UNIQUE,
    active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP
);

-- posts belong to an author
CREATE TABLE posts (
    id BIGSERIAL PRIMARY KEY,
    title VARCHAR(200) NOT NULL,
    body TEXT,
    status VARCHAR(20) NOT NULL DEFAULT 'DRAFT',
    price DECIMAL(10,2),
    published_at TIMESTAMP,
    author_id BIGINT NOT NULL REFERENCES authors(id) ON DELETE CASCADE,
    deleted_at TIMESTAMP
);

CREATE TABLE tags (
    id SERIAL PRIMARY KEY,
    label VARCHAR(50) NOT NULL UNIQUE
);

CREATE TABLE post_tags (
    post_id BIGINT NOT NULL,
    tag_id INTEGER NOT NULL,
    PRIMARY KEY (post_id, tag_id),
    CONSTRAINT fk_post_tags_post FOREIGN KEY (post_id) REFERENCES posts(id),
    CONSTRAINT fk_post_tags_tag FOREIGN KEY (tag_id) REFERENCES tags(id)
);

CREATE INDEX idx_posts_title ON posts (title);

COMMENT ON TABLE authors IS 'People who write posts';

CREATE OR REPLACE FUNCTION count_author_posts(p_author_id BIGINT)
RETURNS INTEGER
LANGUAGE sql
AS $$
    SELECT COUNT(*) FROM posts WHERE author_id = p_author_id;
$$;
"""


@pytest.fixture
def blog_openapi():
    """OpenAPI 3 document describing the same blog domain."""
    return """
openapi: 3.0.3
info:
  title: Blog API
  version: 1.0.0
paths: {}
components:
  schemas:
    Author:
      type: object
      required: [name, email]
      properties:
        id:
          type: integer
          format: int64
        name:
          type: string
          maxLength: 100
        email:
          type: string
          format: email
        bio:
          type: string
          maxLength: 100000
    Post:
      type: object
      required: [title]
      properties:
        title:
          type: string
          maxLength: 200
        rating:
          type: number
        views:
          type: integer
          default: 0
        published_at:
          type: string
          format: date-time
        author:
          $ref: '#/components/schemas/Author'
        tags:
          type: array
          items:
            $ref: '#/components/schemas/Tag'
    Tag:
      type: object
      properties:
        id:
          type: string
          format: uuid
        label:
          type: string
        posts:
          type: array
          items:
            $ref: '#/components/schemas/Post'
    PostRequest:
      type: object
      properties:
        title:
          type: string
    Error:
      type: object
      properties:
        message:
          type: string
"""


@pytest.fixture
def blog_schema(sql_parser, blog_sql):
    return sql_parser.parse_string(blog_sql)


@pytest.fixture
def relations_sql():
    """Self reference, one-to-one, two FKs to one parent and a junction with an extra column."""
    return """
CREATE TABLE authors (
    id BIGSERIAL PRIMARY KEY,
    name VARCHAR(100) NOT NULL
);

CREATE TABLE profiles (
    id BIGSERIAL PRIMARY KEY,
    author_id BIGINT UNIQUE REFERENCES authors(id),
    bio TEXT
);

CREATE TABLE departments (
    id BIGSERIAL PRIMARY KEY,
    name VARCHAR(80) NOT NULL,
    parent_id BIGINT REFERENCES departments(id) ON DELETE SET NULL
);

CREATE TABLE reviews (
    id BIGSERIAL PRIMARY KEY,
    score INTEGER NOT NULL,
    author_id BIGINT NOT NULL REFERENCES authors(id),
    reviewer_id BIGINT NOT NULL REFERENCES authors(id)
);

CREATE TABLE memberships (
    department_id BIGINT NOT NULL REFERENCES departments(id),
    author_id BIGINT NOT NULL REFERENCES authors(id),
    joined_at TIMESTAMP,
    PRIMARY KEY (department_id, author_id)
);
"""


@pytest.fixture
def relations_schema(sql_parser, relations_sql):
    return sql_parser.parse_string(relations_sql)


@pytest.fixture
def blog_config():
    return build_config(name="Blog Service")


@pytest.fixture
def write_schema_file(temp_output_dir):
    """Factory fixture to write schema text to a temporary file."""
    def _write(content: str, filename: str = "blog.sql") -> Path:
        file_path = temp_output_dir / filename
        file_path.write_text(content)
        return file_path
    return _write
