"""Python / FastAPI target: SQLAlchemy 2.0 models, pydantic schemas, routers."""

from apigen.api.extractors.type_mapper import PythonTypeMapper
from apigen.api.generators.base import (
    FileSpec,
    ProjectGenerator,
    has_junction_tables,
    has_tests,
)
from apigen.features import Feature

_SQLALCHEMY_DRIVERS = {
    "postgresql": "postgresql+psycopg",
    "mysql": "mysql+pymysql",
    "mariadb": "mysql+pymysql",
    "sqlserver": "mssql+pyodbc",
    "oracle": "oracle+oracledb",
}

_PACKAGES = ["core", "schemas", "repositories", "services", "routers"]


class FastApiGenerator(ProjectGenerator):
    language = "python"
    framework = "fastapi"
    display_name = "Python / FastAPI"
    description = "FastAPI with SQLAlchemy 2.0, pydantic v2 and pytest"
    default_language_version = "3.12"
    default_framework_version = "0.115"
    supported_features = frozenset(Feature)
    type_mapper_class = PythonTypeMapper
    field_case = "snake"
    json_case = "snake"
    template_subdir = "python_fastapi"
    supported_databases = tuple(_SQLALCHEMY_DRIVERS)
    default_port = 8000
    run_command = "pip install -e .[test] && uvicorn app.main:app --reload"
    test_command = "pytest"

    project_files = [
        FileSpec("pyproject.toml.jinja", "pyproject.toml"),
        FileSpec("env.example.jinja", ".env.example"),
        FileSpec("package_init.py.jinja", "app/__init__.py"),
        *[FileSpec("package_init.py.jinja", f"app/{p}/__init__.py") for p in _PACKAGES],
        FileSpec("main.py.jinja", "app/main.py"),
        FileSpec("config.py.jinja", "app/core/config.py"),
        FileSpec("database.py.jinja", "app/core/database.py"),
        FileSpec("exceptions.py.jinja", "app/core/exceptions.py"),
        FileSpec("rate_limit.py.jinja", "app/core/rate_limit.py", Feature.RATE_LIMITING),
        FileSpec("security.py.jinja", "app/core/security.py", Feature.JWT_AUTH),
        FileSpec("models_init.py.jinja", "app/models/__init__.py"),
        FileSpec("models_base.py.jinja", "app/models/base.py"),
        FileSpec("associations.py.jinja", "app/models/associations.py", Feature.MANY_TO_MANY,
                 when=has_junction_tables),
        FileSpec("user_account.py.jinja", "app/models/user_account.py", Feature.JWT_AUTH),
        FileSpec("schemas_common.py.jinja", "app/schemas/common.py"),
        FileSpec("schemas_auth.py.jinja", "app/schemas/auth.py", Feature.JWT_AUTH),
        FileSpec("base_repository.py.jinja", "app/repositories/base_repository.py"),
        FileSpec("auth_router.py.jinja", "app/routers/auth_router.py", Feature.JWT_AUTH),
        FileSpec("social_router.py.jinja", "app/routers/social_router.py", Feature.SOCIAL_LOGIN),
        FileSpec("mail_service.py.jinja", "app/services/mail_service.py", Feature.MAIL_SERVICE),
        FileSpec("package_init.py.jinja", "app/storage/__init__.py", Feature.FILE_UPLOAD),
        FileSpec("storage.py.jinja", "app/storage/storage.py", Feature.FILE_UPLOAD),
        FileSpec("file_router.py.jinja", "app/routers/file_router.py", Feature.FILE_UPLOAD),
        FileSpec("tests_conftest.py.jinja", "tests/conftest.py",
                 when=has_tests),
    ]

    entity_files = [
        FileSpec("entity_model.py.jinja", "app/models/{{ entity.snake }}.py"),
        FileSpec("entity_schema.py.jinja", "app/schemas/{{ entity.snake }}.py"),
        FileSpec("entity_repository.py.jinja", "app/repositories/{{ entity.snake }}_repository.py"),
        FileSpec("entity_service.py.jinja", "app/services/{{ entity.snake }}_service.py"),
        FileSpec("entity_router.py.jinja", "app/routers/{{ entity.snake }}_router.py"),
        FileSpec("test_service.py.jinja", "tests/unit/test_{{ entity.snake }}_service.py", Feature.UNIT_TESTS),
        FileSpec("test_api.py.jinja", "tests/integration/test_{{ entity.snake }}_api.py",
                 Feature.INTEGRATION_TESTS),
    ]

    exposes_functions = True

    def project_context(self, config, features):
        context = super().project_context(config, features)
        db = config.database
        driver = _SQLALCHEMY_DRIVERS.get(db.type, db.type)
        context["database_url"] = f"{driver}://{db.username}:{db.password}@{db.host}:{db.port}/{db.name}"
        return context
