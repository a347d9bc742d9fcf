"""Go / Gin target."""

from apigen.api.generators.base import FileSpec
from apigen.api.generators.targets.go_common import GO_CORE_FEATURES, GoGenerator
from apigen.features import Feature


class GinGenerator(GoGenerator):
    framework = "gin"
    display_name = "Go / Gin"
    description = "Gin with GORM, golang-jwt and x/time/rate"
    default_framework_version = "1.10.0"
    supported_features = GO_CORE_FEATURES
    template_subdir = "go_gin"
    validate_tag = "binding"

    project_files = GoGenerator.common_files + [
        FileSpec("main.go.jinja", "main.go"),
        FileSpec("response.go.jinja", "internal/handlers/response.go"),
        FileSpec("auth_handler.go.jinja", "internal/handlers/auth_handler.go", Feature.JWT_AUTH),
        FileSpec("middleware.go.jinja", "internal/middleware/middleware.go",
                 when=lambda ctx: ctx["features"]["jwt_auth"] or ctx["features"]["rate_limiting"]),
    ]

    entity_files = GoGenerator.common_entity_files + [
        FileSpec("handler.go.jinja", "internal/handlers/{{ entity.snake }}_handler.go"),
    ]
