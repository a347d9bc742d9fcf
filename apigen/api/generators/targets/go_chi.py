"""Go / Chi target: the Gin feature set plus mail, password reset, storage and tests."""

from apigen.api.generators.base import FileSpec
from apigen.api.generators.targets.go_common import GO_CORE_FEATURES, GoGenerator
from apigen.features import Feature


class ChiGenerator(GoGenerator):
    framework = "chi"
    display_name = "Go / Chi"
    description = "chi router with GORM, go-playground/validator and httprate"
    default_framework_version = "5.1.0"
    supported_features = GO_CORE_FEATURES | {
        Feature.UNIT_TESTS, Feature.MAIL_SERVICE, Feature.PASSWORD_RESET,
        Feature.FILE_UPLOAD, Feature.S3_STORAGE, Feature.AZURE_STORAGE,
    }
    template_subdir = "go_chi"

    project_files = GoGenerator.common_files + [
        FileSpec("main.go.jinja", "main.go"),
        FileSpec("response.go.jinja", "internal/handlers/response.go"),
        FileSpec("auth_handler.go.jinja", "internal/handlers/auth_handler.go", Feature.JWT_AUTH),
        FileSpec("middleware.go.jinja", "internal/middleware/auth.go", Feature.JWT_AUTH),
        FileSpec("mail.go.jinja", "internal/mail/mail.go", Feature.MAIL_SERVICE),
        FileSpec("storage.go.jinja", "internal/storage/storage.go", Feature.FILE_UPLOAD),
        FileSpec("file_handler.go.jinja", "internal/handlers/file_handler.go", Feature.FILE_UPLOAD),
    ]

    entity_files = GoGenerator.common_entity_files + [
        FileSpec("handler.go.jinja", "internal/handlers/{{ entity.snake }}_handler.go"),
        FileSpec("handler_test.go.jinja", "internal/handlers/{{ entity.snake }}_handler_test.go",
                 Feature.UNIT_TESTS),
    ]
