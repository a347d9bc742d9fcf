"""Optional capabilities a target generator may emit."""

from enum import Enum


class Feature(str, Enum):
    CRUD = "crud"
    AUDITING = "auditing"
    SOFT_DELETE = "soft_delete"
    FILTERING = "filtering"
    PAGINATION = "pagination"
    OPENAPI = "openapi"
    MIGRATIONS = "migrations"
    MANY_TO_ONE = "many_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"
    JWT_AUTH = "jwt_auth"
    RATE_LIMITING = "rate_limiting"
    MAIL_SERVICE = "mail_service"
    PASSWORD_RESET = "password_reset"
    SOCIAL_LOGIN = "social_login"
    FILE_UPLOAD = "file_upload"
    S3_STORAGE = "s3_storage"
    AZURE_STORAGE = "azure_storage"
    UNIT_TESTS = "unit_tests"
    INTEGRATION_TESTS = "integration_tests"

    @classmethod
    def parse(cls, text: str) -> "Feature":
        """Accept 'jwt_auth', 'JWT_AUTH' or 'jwt-auth'."""
        key = text.strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown feature '{text}'. Valid features: "
                + ", ".join(f.value for f in cls)
            ) from None


DEFAULT_FEATURES = frozenset({
    Feature.CRUD,
    Feature.AUDITING,
    Feature.SOFT_DELETE,
    Feature.FILTERING,
    Feature.PAGINATION,
    Feature.OPENAPI,
    Feature.MIGRATIONS,
    Feature.MANY_TO_ONE,
    Feature.ONE_TO_MANY,
    Feature.MANY_TO_MANY,
    Feature.UNIT_TESTS,
})

# Enabling the key turns on every feature in the value.
FEATURE_IMPLICATIONS = {
    Feature.PASSWORD_RESET: (Feature.MAIL_SERVICE, Feature.JWT_AUTH),
    Feature.SOCIAL_LOGIN: (Feature.JWT_AUTH,),
    Feature.S3_STORAGE: (Feature.FILE_UPLOAD,),
    Feature.AZURE_STORAGE: (Feature.FILE_UPLOAD,),
}


def expand_features(features):
    """Close a feature set under FEATURE_IMPLICATIONS."""
    expanded = set(features)
    pending = list(expanded)
    while pending:
        feature = pending.pop()
        for implied in FEATURE_IMPLICATIONS.get(feature, ()):
            if implied not in expanded:
                expanded.add(implied)
                pending.append(implied)
    return expanded
