"""
Integration tests for the apigen command line.
"""

import logging
import shutil
import zipfile

import pytest
from click.testing import CliRunner

from apigen.cli import cli
from apigen.language import TEMPLATES_DIR


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch, temp_output_dir):
    """Run each command from an empty directory with no APIGEN_* overrides."""
    monkeypatch.chdir(temp_output_dir)
    for name in ("APIGEN_DEFAULT_TARGET", "APIGEN_TEMPLATES_DIR", "APIGEN_FORMAT_PYTHON",
                 "APIGEN_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)
    yield
    # The CLI binds its handler to the runner's stderr, which is closed afterwards.
    logger = logging.getLogger("apigen.gen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def blog_file(write_schema_file, blog_sql):
    return write_schema_file(blog_sql)


class TestInformationalCommands:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "apigen" in result.output

    def test_targets(self, runner):
        result = runner.invoke(cli, ["targets"])
        assert result.exit_code == 0
        assert "go/chi" in result.output

    def test_targets_by_feature(self, runner):
        result = runner.invoke(cli, ["targets", "--feature", "social-login"])
        assert result.exit_code == 0
        assert "python/fastapi" in result.output
        assert "go/gin" not in result.output

    def test_targets_unknown_feature(self, runner):
        result = runner.invoke(cli, ["targets", "--feature", "teleport"])
        assert result.exit_code == 1

    def test_inspect(self, runner, blog_file):
        result = runner.invoke(cli, ["inspect", str(blog_file)])
        assert result.exit_code == 0
        assert "authors" in result.output


class TestValidate:
    """Test the validate command."""

    def test_valid_schema(self, runner, blog_file):
        result = runner.invoke(cli, ["validate", str(blog_file)])
        assert result.exit_code == 0
        assert "success" in result.output

    def test_openapi_schema(self, runner, write_schema_file, blog_openapi):
        path = write_schema_file(blog_openapi, "blog.yaml")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 0

    def test_schema_without_tables(self, runner, write_schema_file):
        path = write_schema_file("-- nothing here\n", "empty.sql")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1

    def test_missing_file(self, runner):
        result = runner.invoke(cli, ["validate", "missing.sql"])
        assert result.exit_code != 0


class TestGenerate:
    """Test the generate command end to end."""

    def test_generate_writes_project(self, runner, blog_file, temp_output_dir):
        out_dir = temp_output_dir / "out"
        result = runner.invoke(cli, ["-q", "generate", str(blog_file), "-t", "go/gin",
                                     "--out", str(out_dir), "--name", "Blog Service"])
        assert result.exit_code == 0, result.output
        assert (out_dir / "go.mod").is_file()
        assert (out_dir / "internal" / "models" / "post.go").is_file()
        assert (out_dir / "postman_collection.json").is_file()

    def test_generate_with_zip(self, runner, blog_file, temp_output_dir):
        zip_path = temp_output_dir / "blog.zip"
        result = runner.invoke(cli, ["-q", "generate", str(blog_file), "-t", "rust/axum",
                                     "--out", str(temp_output_dir / "out"), "--zip", str(zip_path),
                                     "--name", "Blog Service"])
        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(zip_path) as archive:
            assert "blog-service/Cargo.toml" in archive.namelist()

    def test_default_target_from_environment(self, runner, blog_file, temp_output_dir, monkeypatch):
        monkeypatch.setenv("APIGEN_DEFAULT_TARGET", "typescript/nestjs")
        out_dir = temp_output_dir / "out"
        result = runner.invoke(cli, ["-q", "generate", str(blog_file), "--out", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert (out_dir / "package.json").is_file()

    def test_config_file_and_feature_flags(self, runner, blog_file, temp_output_dir):
        (temp_output_dir / "apigen.yaml").write_text(
            "project:\n"
            "  name: Blog Service\n"
            "  group_id: com.acme\n"
        )
        out_dir = temp_output_dir / "out"
        result = runner.invoke(cli, ["-q", "generate", str(blog_file), "-t", "java",
                                     "--out", str(out_dir), "--feature", "crud",
                                     "--feature", "jwt-auth"])
        assert result.exit_code == 0, result.output
        java = out_dir / "src" / "main" / "java" / "com" / "acme" / "blogservice"
        assert (java / "entity" / "Post.java").is_file()
        assert (java / "security" / "JwtService.java").is_file()
        assert not (java / "common" / "PageResponse.java").exists()

    def test_unknown_target(self, runner, blog_file, temp_output_dir):
        result = runner.invoke(cli, ["generate", str(blog_file), "-t", "cobol/cics",
                                     "--out", str(temp_output_dir / "out")])
        assert result.exit_code == 1
        assert not (temp_output_dir / "out").exists()

    def test_unsupported_database(self, runner, blog_file, temp_output_dir):
        result = runner.invoke(cli, ["generate", str(blog_file), "-t", "go/chi", "--db", "oracle",
                                     "--out", str(temp_output_dir / "out")])
        assert result.exit_code == 1

    def test_invalid_feature(self, runner, blog_file, temp_output_dir):
        result = runner.invoke(cli, ["generate", str(blog_file), "--feature", "teleport",
                                     "--out", str(temp_output_dir / "out")])
        assert result.exit_code == 1

    def test_broken_template_fails_cleanly(self, runner, blog_file, temp_output_dir, monkeypatch):
        templates = temp_output_dir / "templates"
        shutil.copytree(TEMPLATES_DIR, templates)
        (templates / "_shared" / "README.md.jinja").write_text("# {{ project.no_such_key }}\n")
        monkeypatch.setenv("APIGEN_TEMPLATES_DIR", str(templates))
        result = runner.invoke(cli, ["-q", "generate", str(blog_file), "-t", "go/chi",
                                     "--out", str(temp_output_dir / "out")])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "README.md.jinja" in result.output
        assert not (temp_output_dir / "out").exists()
