"""PHP / Laravel target: Eloquent models, form requests, API resource routes."""

from apigen.api.extractors.type_mapper import PhpTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

LARAVEL_CONNECTIONS = {
    "postgresql": "pgsql",
    "mysql": "mysql",
    "mariadb": "mariadb",
    "sqlserver": "sqlsrv",
}


class LaravelGenerator(ProjectGenerator):
    language = "php"
    framework = "laravel"
    display_name = "PHP / Laravel"
    description = "Laravel 11 with Eloquent, form requests and schema-builder migrations"
    default_language_version = "8.2"
    default_framework_version = "11.0"
    supported_features = frozenset({
        Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
        Feature.PAGINATION, Feature.MIGRATIONS, Feature.MANY_TO_ONE, Feature.ONE_TO_MANY,
    })
    type_mapper_class = PhpTypeMapper
    field_case = "snake"
    json_case = "snake"
    template_subdir = "php_laravel"
    # Laravel migrations replace the plain SQL script
    migration_path = None
    supported_databases = tuple(LARAVEL_CONNECTIONS)
    default_port = 8000
    run_command = "composer install && php artisan key:generate && php artisan migrate && php artisan serve"
    test_command = ""

    project_files = [
        FileSpec("composer.json.jinja", "composer.json"),
        FileSpec("env.example.jinja", ".env.example"),
        FileSpec("artisan.jinja", "artisan"),
        FileSpec("index.php.jinja", "public/index.php"),
        FileSpec("app.php.jinja", "bootstrap/app.php"),
        FileSpec("api.php.jinja", "routes/api.php"),
        FileSpec("BaseController.php.jinja", "app/Http/Controllers/Controller.php"),
        FileSpec("migration.php.jinja", "database/migrations/0001_01_01_000100_create_schema_tables.php",
                 Feature.MIGRATIONS),
    ]

    entity_files = [
        FileSpec("Model.php.jinja", "app/Models/{{ entity.name }}.php"),
        FileSpec("Request.php.jinja", "app/Http/Requests/{{ entity.name }}Request.php"),
        FileSpec("Controller.php.jinja", "app/Http/Controllers/{{ entity.name }}Controller.php"),
    ]

    def project_context(self, config, features):
        context = super().project_context(config, features)
        context["laravel_connection"] = LARAVEL_CONNECTIONS.get(config.database.type, "pgsql")
        return context
