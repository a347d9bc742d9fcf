"""Shared plan for the Go targets: GORM models and repositories, env config."""

from apigen.api.extractors.type_mapper import GoTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

GORM_DRIVERS = {
    "postgresql": ("postgres", "v1.5.9"),
    "mysql": ("mysql", "v1.5.7"),
    "mariadb": ("mysql", "v1.5.7"),
    "sqlserver": ("sqlserver", "v1.5.3"),
}

GO_CORE_FEATURES = frozenset({
    Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
    Feature.PAGINATION, Feature.MIGRATIONS, Feature.MANY_TO_ONE, Feature.ONE_TO_MANY,
    Feature.JWT_AUTH, Feature.RATE_LIMITING,
})


def go_dsn(db) -> str:
    if db.type == "postgresql":
        return (f"host={db.host} user={db.username} password={db.password} "
                f"dbname={db.name} port={db.port} sslmode=disable")
    if db.type == "sqlserver":
        return f"sqlserver://{db.username}:{db.password}@{db.host}:{db.port}?database={db.name}"
    return f"{db.username}:{db.password}@tcp({db.host}:{db.port})/{db.name}?parseTime=true"


class GoGenerator(ProjectGenerator):
    """Common base for Gin and Chi; subclasses add the HTTP layer."""

    language = "go"
    default_language_version = "1.22"
    type_mapper_class = GoTypeMapper
    field_case = "pascal"
    template_fallbacks = ["go_common"]
    supported_databases = tuple(GORM_DRIVERS)
    run_command = "go mod tidy && go run ."
    test_command = "go test ./..."
    validate_tag = "validate"

    common_files = [
        FileSpec("go.mod.jinja", "go.mod"),
        FileSpec("env.example.jinja", ".env.example"),
        FileSpec("config.go.jinja", "internal/config/config.go"),
        FileSpec("database.go.jinja", "internal/database/database.go"),
        FileSpec("repository_base.go.jinja", "internal/repository/repository.go"),
        FileSpec("auth.go.jinja", "internal/auth/auth.go", Feature.JWT_AUTH),
        FileSpec("auth_tables.sql.jinja", "migrations/0002_auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
    ]

    common_entity_files = [
        FileSpec("model.go.jinja", "internal/models/{{ entity.snake }}.go"),
        FileSpec("repository.go.jinja", "internal/repository/{{ entity.snake }}_repository.go"),
    ]

    def project_context(self, config, features):
        context = super().project_context(config, features)
        driver, version = GORM_DRIVERS.get(config.database.type, GORM_DRIVERS["postgresql"])
        context.update({
            "go_module": config.options.get("go_module", config.artifact_id),
            "go_dsn": go_dsn(config.database),
            "gorm_driver": driver,
            "gorm_driver_version": version,
            "validate_tag": self.validate_tag,
        })
        return context
