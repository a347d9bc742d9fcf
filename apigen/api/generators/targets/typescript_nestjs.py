"""TypeScript / NestJS target: TypeORM entities, class-validator DTOs, jest specs."""

from apigen.api.extractors.type_mapper import TypeScriptTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

# database type -> (TypeORM driver type, column dialect, npm driver, version)
TYPEORM_DRIVERS = {
    "postgresql": ("postgres", "postgres", "pg", "^8.13.0"),
    "mysql": ("mysql", "mysql", "mysql2", "^3.11.3"),
    "mariadb": ("mariadb", "mysql", "mysql2", "^3.11.3"),
}

ENTITY_DIR = "src/{{ entity.kebab }}/{{ entity.kebab }}"


class NestJsGenerator(ProjectGenerator):
    language = "typescript"
    framework = "nestjs"
    display_name = "TypeScript / NestJS"
    description = "NestJS 10 with TypeORM, class-validator and jest"
    default_language_version = "5.6"
    default_framework_version = "10.4.4"
    supported_features = frozenset({
        Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
        Feature.PAGINATION, Feature.OPENAPI, Feature.MIGRATIONS, Feature.MANY_TO_ONE,
        Feature.ONE_TO_MANY, Feature.MANY_TO_MANY, Feature.JWT_AUTH, Feature.RATE_LIMITING,
        Feature.MAIL_SERVICE, Feature.PASSWORD_RESET, Feature.FILE_UPLOAD,
        Feature.S3_STORAGE, Feature.AZURE_STORAGE, Feature.UNIT_TESTS,
    })
    type_mapper_class = TypeScriptTypeMapper
    template_subdir = "typescript_nestjs"
    supported_databases = tuple(TYPEORM_DRIVERS)
    default_port = 3000
    run_command = "npm install && npm run start:dev"
    test_command = "npm test"

    project_files = [
        FileSpec("package.json.jinja", "package.json"),
        FileSpec("tsconfig.json.jinja", "tsconfig.json"),
        FileSpec("nest-cli.json.jinja", "nest-cli.json"),
        FileSpec("env.example.jinja", ".env.example"),
        FileSpec("main.ts.jinja", "src/main.ts"),
        FileSpec("app.module.ts.jinja", "src/app.module.ts"),
        FileSpec("query-failed.filter.ts.jinja", "src/common/query-failed.filter.ts"),
        FileSpec("page.ts.jinja", "src/common/page.ts", Feature.PAGINATION),
        FileSpec("user-account.entity.ts.jinja", "src/auth/user-account.entity.ts", Feature.JWT_AUTH),
        FileSpec("auth.dto.ts.jinja", "src/auth/auth.dto.ts", Feature.JWT_AUTH),
        FileSpec("public.decorator.ts.jinja", "src/auth/public.decorator.ts", Feature.JWT_AUTH),
        FileSpec("jwt-auth.guard.ts.jinja", "src/auth/jwt-auth.guard.ts", Feature.JWT_AUTH),
        FileSpec("auth.service.ts.jinja", "src/auth/auth.service.ts", Feature.JWT_AUTH),
        FileSpec("auth.controller.ts.jinja", "src/auth/auth.controller.ts", Feature.JWT_AUTH),
        FileSpec("auth.module.ts.jinja", "src/auth/auth.module.ts", Feature.JWT_AUTH),
        FileSpec("auth_tables.sql.jinja", "migrations/0002_auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
        FileSpec("mail.service.ts.jinja", "src/mail/mail.service.ts", Feature.MAIL_SERVICE),
        FileSpec("mail.module.ts.jinja", "src/mail/mail.module.ts", Feature.MAIL_SERVICE),
        FileSpec("storage.service.ts.jinja", "src/storage/storage.service.ts", Feature.FILE_UPLOAD),
        FileSpec("files.controller.ts.jinja", "src/storage/files.controller.ts", Feature.FILE_UPLOAD),
        FileSpec("storage.module.ts.jinja", "src/storage/storage.module.ts", Feature.FILE_UPLOAD),
    ]

    entity_files = [
        FileSpec("entity.ts.jinja", ENTITY_DIR + ".entity.ts"),
        FileSpec("dto.ts.jinja", "src/{{ entity.kebab }}/dto/{{ entity.kebab }}.dto.ts"),
        FileSpec("service.ts.jinja", ENTITY_DIR + ".service.ts"),
        FileSpec("controller.ts.jinja", ENTITY_DIR + ".controller.ts"),
        FileSpec("module.ts.jinja", ENTITY_DIR + ".module.ts"),
        FileSpec("service.spec.ts.jinja", ENTITY_DIR + ".service.spec.ts", Feature.UNIT_TESTS),
    ]

    def project_context(self, config, features):
        context = super().project_context(config, features)
        orm_type, dialect, driver, version = TYPEORM_DRIVERS.get(
            config.database.type, TYPEORM_DRIVERS["postgresql"]
        )
        context.update({
            "typeorm_type": orm_type,
            "orm_dialect": dialect,
            "db_driver": driver,
            "db_driver_version": version,
        })
        return context
