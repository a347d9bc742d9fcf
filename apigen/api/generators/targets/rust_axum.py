"""Rust / Axum target: sqlx query builders, validator, tower middleware."""

from apigen.api.extractors.type_mapper import RustTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

# database type -> (sqlx cargo feature, sqlx Database type)
SQLX_BACKENDS = {
    "postgresql": ("postgres", "Postgres"),
    "mysql": ("mysql", "MySql"),
    "mariadb": ("mysql", "MySql"),
}


class AxumGenerator(ProjectGenerator):
    language = "rust"
    framework = "axum"
    display_name = "Rust / Axum"
    description = "Axum 0.7 with sqlx, validator and tower-governor"
    default_language_version = "1.80"
    default_framework_version = "0.7"
    supported_features = frozenset({
        Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
        Feature.PAGINATION, Feature.MIGRATIONS, Feature.JWT_AUTH,
        Feature.RATE_LIMITING, Feature.UNIT_TESTS,
    })
    type_mapper_class = RustTypeMapper
    field_case = "snake"
    template_subdir = "rust_axum"
    supported_databases = tuple(SQLX_BACKENDS)
    default_port = 3000
    run_command = "cargo run"
    test_command = "cargo test"

    project_files = [
        FileSpec("Cargo.toml.jinja", "Cargo.toml"),
        FileSpec("env.example.jinja", ".env.example"),
        FileSpec("main.rs.jinja", "src/main.rs"),
        FileSpec("config.rs.jinja", "src/config.rs"),
        FileSpec("db.rs.jinja", "src/db.rs"),
        FileSpec("error.rs.jinja", "src/error.rs"),
        FileSpec("pagination.rs.jinja", "src/pagination.rs", Feature.PAGINATION),
        FileSpec("auth.rs.jinja", "src/auth.rs", Feature.JWT_AUTH),
        FileSpec("mod.rs.jinja", "src/models/mod.rs"),
        FileSpec("mod.rs.jinja", "src/repository/mod.rs"),
        FileSpec("mod.rs.jinja", "src/handlers/mod.rs"),
        FileSpec("auth_tables.sql.jinja", "migrations/0002_auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
    ]

    entity_files = [
        FileSpec("model.rs.jinja", "src/models/{{ entity.snake }}.rs"),
        FileSpec("repository.rs.jinja", "src/repository/{{ entity.snake }}.rs"),
        FileSpec("handler.rs.jinja", "src/handlers/{{ entity.snake }}.rs"),
    ]

    def project_context(self, config, features):
        context = super().project_context(config, features)
        db = config.database
        sqlx_feature, sqlx_db = SQLX_BACKENDS.get(db.type, SQLX_BACKENDS["postgresql"])
        scheme = "postgres" if sqlx_feature == "postgres" else "mysql"
        context.update({
            "sqlx_feature": sqlx_feature,
            "sqlx_db": sqlx_db,
            "returning": sqlx_feature == "postgres",
            "database_url": f"{scheme}://{db.username}:{db.password}@{db.host}:{db.port}/{db.name}",
        })
        return context
