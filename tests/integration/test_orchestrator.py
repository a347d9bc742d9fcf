"""
Integration tests for generate_project, write_project and archive_project.
"""

import zipfile

import pytest
from jinja2 import ChoiceLoader, DictLoader

from apigen.api.generator import archive_project, generate_project, resolve_target, write_project
from apigen.api.generators.targets import ChiGenerator
from apigen.config import build_config
from apigen.exceptions import ConfigError, GenerationError, UnknownTargetError


JUNCTION_ONLY_SQL = """
CREATE TABLE post_tags (
    post_id BIGINT NOT NULL REFERENCES posts(id),
    tag_id BIGINT NOT NULL REFERENCES tags(id),
    PRIMARY KEY (post_id, tag_id)
);
"""


class TestGenerateProject:
    """Test the validation gates in front of rendering."""

    def test_resolve_target_accepts_instance(self):
        generator = ChiGenerator()
        assert resolve_target(generator) is generator
        assert resolve_target("go/chi").key == "go/chi"

    def test_unknown_target(self, blog_schema, blog_config):
        with pytest.raises(UnknownTargetError):
            generate_project(blog_schema, blog_config, "cobol/cics")

    def test_unsupported_database(self, blog_schema):
        config = build_config(name="Blog Service", database={"type": "oracle"})
        with pytest.raises(ConfigError, match="oracle"):
            generate_project(blog_schema, config, "go/gin")

    def test_oracle_allowed_where_supported(self, blog_schema):
        config = build_config(name="Blog Service", database={"type": "oracle"})
        result = generate_project(blog_schema, config, "python/fastapi")
        assert "app/main.py" in result.files

    def test_no_entity_tables(self, sql_parser, blog_config):
        schema = sql_parser.parse_string(JUNCTION_ONLY_SQL)
        with pytest.raises(GenerationError, match="no entity tables"):
            generate_project(schema, blog_config, "java/spring-boot")

    def test_target_instance(self, blog_schema, blog_config):
        result = generate_project(blog_schema, blog_config, ChiGenerator())
        assert result.target == "go/chi"

    def test_template_error_names_template(self, blog_schema, blog_config):
        generator = ChiGenerator()
        generator.env.loader = ChoiceLoader([
            DictLoader({"README.md.jinja": "{{ entities[0].no_such_key }}"}),
            generator.env.loader,
        ])
        with pytest.raises(GenerationError, match="go/chi: failed to render README.md.jinja"):
            generate_project(blog_schema, blog_config, generator)


class TestOutput:
    """Test writing generated files to disk and to a zip archive."""

    @pytest.fixture
    def result(self, blog_schema, blog_config):
        return generate_project(blog_schema, blog_config, "go/chi")

    def test_write_project(self, result, temp_output_dir):
        out_path = write_project(result, temp_output_dir / "blog")
        assert out_path == (temp_output_dir / "blog").resolve()
        for relative, content in result.files.items():
            written = out_path / relative
            assert written.is_file()
            assert written.read_text(encoding="utf-8") == content

    def test_archive_project_with_root(self, result, temp_output_dir):
        zip_path = archive_project(result, temp_output_dir / "dist" / "blog.zip", root="blog-service")
        assert zip_path.is_file()
        with zipfile.ZipFile(zip_path) as archive:
            names = archive.namelist()
            assert len(names) == result.file_count
            assert all(name.startswith("blog-service/") for name in names)
            assert archive.read("blog-service/go.mod").decode("utf-8") == result.files["go.mod"]

    def test_archive_project_without_root(self, result, temp_output_dir):
        zip_path = archive_project(result, temp_output_dir / "blog.zip")
        with zipfile.ZipFile(zip_path) as archive:
            assert "main.go" in archive.namelist()
