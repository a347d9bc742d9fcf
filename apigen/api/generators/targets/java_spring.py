"""Java / Spring Boot target: JPA entities, records, Spring Data repositories."""

from apigen.api.extractors.type_mapper import JavaTypeMapper
from apigen.api.generators.base import FileSpec, ProjectGenerator
from apigen.features import Feature

JAVA_SRC = "src/main/java/{{ project.package_path }}"
JAVA_TEST = "src/test/java/{{ project.package_path }}"

STORAGE_CLASS = (
    "{{ 'S3StorageService' if features.s3_storage else "
    "('AzureBlobStorageService' if features.azure_storage else 'LocalStorageService') }}"
)


class SpringBootGenerator(ProjectGenerator):
    language = "java"
    framework = "spring-boot"
    display_name = "Java / Spring Boot"
    description = "Spring Boot 3 with Spring Data JPA, Flyway and springdoc"
    default_language_version = "21"
    default_framework_version = "3.3.4"
    supported_features = frozenset(Feature) - {Feature.INTEGRATION_TESTS}
    type_mapper_class = JavaTypeMapper
    template_subdir = "java_spring"
    migration_path = "src/main/resources/db/migration/V1__init.sql"
    exposes_functions = True
    run_command = "mvn spring-boot:run"
    test_command = "mvn test"

    project_files = [
        FileSpec("pom.xml.jinja", "pom.xml"),
        FileSpec("application.yml.jinja", "src/main/resources/application.yml"),
        FileSpec("Application.java.jinja", f"{JAVA_SRC}/{{{{ project.pascal }}}}Application.java"),
        FileSpec("BaseEntity.java.jinja", f"{JAVA_SRC}/common/BaseEntity.java", Feature.AUDITING),
        FileSpec("PageResponse.java.jinja", f"{JAVA_SRC}/common/PageResponse.java", Feature.PAGINATION),
        FileSpec("ResourceNotFoundException.java.jinja", f"{JAVA_SRC}/exception/ResourceNotFoundException.java"),
        FileSpec("GlobalExceptionHandler.java.jinja", f"{JAVA_SRC}/exception/GlobalExceptionHandler.java"),
        FileSpec("OpenApiConfig.java.jinja", f"{JAVA_SRC}/config/OpenApiConfig.java", Feature.OPENAPI),
        FileSpec("RateLimitFilter.java.jinja", f"{JAVA_SRC}/config/RateLimitFilter.java", Feature.RATE_LIMITING),
        FileSpec("SecurityConfig.java.jinja", f"{JAVA_SRC}/security/SecurityConfig.java", Feature.JWT_AUTH),
        FileSpec("JwtService.java.jinja", f"{JAVA_SRC}/security/JwtService.java", Feature.JWT_AUTH),
        FileSpec("JwtAuthenticationFilter.java.jinja", f"{JAVA_SRC}/security/JwtAuthenticationFilter.java",
                 Feature.JWT_AUTH),
        FileSpec("UserAccount.java.jinja", f"{JAVA_SRC}/security/UserAccount.java", Feature.JWT_AUTH),
        FileSpec("UserAccountRepository.java.jinja", f"{JAVA_SRC}/security/UserAccountRepository.java",
                 Feature.JWT_AUTH),
        FileSpec("AuthDtos.java.jinja", f"{JAVA_SRC}/security/AuthDtos.java", Feature.JWT_AUTH),
        FileSpec("AuthController.java.jinja", f"{JAVA_SRC}/security/AuthController.java", Feature.JWT_AUTH),
        FileSpec("OAuth2SuccessHandler.java.jinja", f"{JAVA_SRC}/security/OAuth2SuccessHandler.java",
                 Feature.SOCIAL_LOGIN),
        FileSpec("MailService.java.jinja", f"{JAVA_SRC}/mail/MailService.java", Feature.MAIL_SERVICE),
        FileSpec("StorageService.java.jinja", f"{JAVA_SRC}/storage/StorageService.java", Feature.FILE_UPLOAD),
        FileSpec("StorageServiceImpl.java.jinja", f"{JAVA_SRC}/storage/{STORAGE_CLASS}.java", Feature.FILE_UPLOAD),
        FileSpec("FileController.java.jinja", f"{JAVA_SRC}/storage/FileController.java", Feature.FILE_UPLOAD),
        FileSpec("auth_tables.sql.jinja", "src/main/resources/db/migration/V2__auth.sql", Feature.JWT_AUTH,
                 when=lambda ctx: ctx["features"]["migrations"]),
    ]

    entity_files = [
        FileSpec("Entity.java.jinja", f"{JAVA_SRC}/entity/{{{{ entity.name }}}}.java"),
        FileSpec("Dto.java.jinja", f"{JAVA_SRC}/dto/{{{{ entity.name }}}}Dto.java"),
        FileSpec("Request.java.jinja", f"{JAVA_SRC}/dto/{{{{ entity.name }}}}Request.java"),
        FileSpec("Mapper.java.jinja", f"{JAVA_SRC}/mapper/{{{{ entity.name }}}}Mapper.java"),
        FileSpec("Repository.java.jinja", f"{JAVA_SRC}/repository/{{{{ entity.name }}}}Repository.java"),
        FileSpec("Service.java.jinja", f"{JAVA_SRC}/service/{{{{ entity.name }}}}Service.java"),
        FileSpec("Controller.java.jinja", f"{JAVA_SRC}/controller/{{{{ entity.name }}}}Controller.java"),
        FileSpec("ServiceTest.java.jinja", f"{JAVA_TEST}/service/{{{{ entity.name }}}}ServiceTest.java",
                 Feature.UNIT_TESTS),
    ]
