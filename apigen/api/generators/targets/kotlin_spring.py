"""Kotlin / Spring Boot target: the Java layout with data classes and Gradle."""

from apigen.api.extractors.type_mapper import KotlinTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

KOTLIN_SRC = "src/main/kotlin/{{ project.package_path }}"
KOTLIN_TEST = "src/test/kotlin/{{ project.package_path }}"


class KotlinSpringGenerator(ProjectGenerator):
    language = "kotlin"
    framework = "spring-boot"
    display_name = "Kotlin / Spring Boot"
    description = "Spring Boot 3 in Kotlin with Spring Data JPA, Flyway and Gradle"
    default_language_version = "2.0.21"
    default_framework_version = "3.3.4"
    supported_features = frozenset({
        Feature.CRUD, Feature.AUDITING, Feature.SOFT_DELETE, Feature.FILTERING,
        Feature.PAGINATION, Feature.OPENAPI, Feature.MIGRATIONS,
        Feature.MANY_TO_ONE, Feature.ONE_TO_MANY, Feature.MANY_TO_MANY,
        Feature.JWT_AUTH, Feature.RATE_LIMITING, Feature.UNIT_TESTS,
    })
    type_mapper_class = KotlinTypeMapper
    template_subdir = "kotlin_spring"
    # application.yml is shared with the Java target
    template_fallbacks = ["java_spring"]
    migration_path = "src/main/resources/db/migration/V1__init.sql"
    exposes_functions = True
    run_command = "./gradlew bootRun"
    test_command = "./gradlew test"

    project_files = [
        FileSpec("build.gradle.kts.jinja", "build.gradle.kts"),
        FileSpec("settings.gradle.kts.jinja", "settings.gradle.kts"),
        FileSpec("application.yml.jinja", "src/main/resources/application.yml"),
        FileSpec("Application.kt.jinja", f"{KOTLIN_SRC}/{{{{ project.pascal }}}}Application.kt"),
        FileSpec("Common.kt.jinja", f"{KOTLIN_SRC}/common/Common.kt"),
        FileSpec("OpenApiConfig.kt.jinja", f"{KOTLIN_SRC}/config/OpenApiConfig.kt", Feature.OPENAPI),
        FileSpec("RateLimitFilter.kt.jinja", f"{KOTLIN_SRC}/config/RateLimitFilter.kt", Feature.RATE_LIMITING),
        FileSpec("Security.kt.jinja", f"{KOTLIN_SRC}/security/Security.kt", Feature.JWT_AUTH),
        FileSpec("Auth.kt.jinja", f"{KOTLIN_SRC}/security/Auth.kt", Feature.JWT_AUTH),
        FileSpec("auth_tables.sql.jinja", "src/main/resources/db/migration/V2__auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
    ]

    entity_files = [
        FileSpec("Entity.kt.jinja", f"{KOTLIN_SRC}/entity/{{{{ entity.name }}}}.kt"),
        FileSpec("Dtos.kt.jinja", f"{KOTLIN_SRC}/dto/{{{{ entity.name }}}}Dtos.kt"),
        FileSpec("Repository.kt.jinja", f"{KOTLIN_SRC}/repository/{{{{ entity.name }}}}Repository.kt"),
        FileSpec("Service.kt.jinja", f"{KOTLIN_SRC}/service/{{{{ entity.name }}}}Service.kt"),
        FileSpec("Controller.kt.jinja", f"{KOTLIN_SRC}/controller/{{{{ entity.name }}}}Controller.kt"),
        FileSpec("ServiceTest.kt.jinja", f"{KOTLIN_TEST}/service/{{{{ entity.name }}}}ServiceTest.kt",
                 Feature.UNIT_TESTS),
    ]
