"""
Project configuration.

ProjectConfig describes the project being generated (names, package, database,
enabled features). It is usually loaded from an `apigen.yaml` file and then
overridden by CLI flags. Settings holds tool-level defaults that can be changed
through APIGEN_* environment variables.
"""

import re
from pathlib import Path
from typing import Dict, Optional, Set

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apigen.exceptions import ConfigError
from apigen.features import DEFAULT_FEATURES, Feature


GROUP_ID_PATTERN = r"^[a-z][a-z0-9]*(\.[a-z][a-z0-9]*)*$"
ARTIFACT_ID_PATTERN = r"^[a-z][a-z0-9-]*$"

DEFAULT_PORTS = {
    "postgresql": 5432,
    "mysql": 3306,
    "mariadb": 3306,
    "sqlserver": 1433,
    "oracle": 1521,
    "h2": 9092,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="APIGEN_", extra="ignore")

    default_target: str = "java/spring-boot"
    templates_dir: Optional[str] = None
    format_python: bool = True
    config_file: str = "apigen.yaml"


class DatabaseConfig(BaseModel):
    type: str = "postgresql"
    name: str = "appdb"
    username: str = "appuser"
    password: str = "changeme"
    host: str = "localhost"
    port: Optional[int] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        value = value.lower()
        if value not in DEFAULT_PORTS:
            raise ValueError(
                f"Unsupported database '{value}'. Valid: {', '.join(DEFAULT_PORTS)}"
            )
        return value

    @model_validator(mode="after")
    def _default_port(self):
        if self.port is None:
            self.port = DEFAULT_PORTS[self.type]
        return self

    @property
    def jdbc_url(self) -> str:
        if self.type == "h2":
            return f"jdbc:h2:mem:{self.name}"
        if self.type == "sqlserver":
            return f"jdbc:sqlserver://{self.host}:{self.port};databaseName={self.name}"
        if self.type == "oracle":
            return f"jdbc:oracle:thin:@{self.host}:{self.port}/{self.name}"
        return f"jdbc:{self.type}://{self.host}:{self.port}/{self.name}"

    @property
    def url(self) -> str:
        """Driver-agnostic connection URL used by non-JVM targets."""
        scheme = {"postgresql": "postgres", "sqlserver": "sqlserver"}.get(self.type, self.type)
        return f"{scheme}://{self.username}:{self.password}@{self.host}:{self.port}/{self.name}"


class ProjectConfig(BaseModel):
    name: str
    group_id: str = "com.example"
    artifact_id: Optional[str] = None
    description: str = ""
    features: Set[Feature] = Field(default_factory=lambda: set(DEFAULT_FEATURES))
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    language_version: Optional[str] = None
    framework_version: Optional[str] = None
    options: Dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Project name is required")
        return value.strip()

    @field_validator("group_id")
    @classmethod
    def _group_id_format(cls, value: str) -> str:
        if not re.match(GROUP_ID_PATTERN, value):
            raise ValueError(f"Invalid group id '{value}' (expected e.g. 'com.example')")
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _parse_features(cls, value):
        if value is None:
            return set(DEFAULT_FEATURES)
        return {v if isinstance(v, Feature) else Feature.parse(str(v)) for v in value}

    @model_validator(mode="after")
    def _derive_artifact_id(self):
        if self.artifact_id is None:
            slug = re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")
            if not slug or not slug[0].isalpha():
                slug = f"app-{slug}".rstrip("-")
            self.artifact_id = slug
        if not re.match(ARTIFACT_ID_PATTERN, self.artifact_id):
            raise ValueError(
                f"Invalid artifact id '{self.artifact_id}' (lowercase letters, digits, hyphens)"
            )
        if Feature.S3_STORAGE in self.features and Feature.AZURE_STORAGE in self.features:
            raise ValueError("Choose a single storage backend: s3_storage or azure_storage")
        return self

    @property
    def base_package(self) -> str:
        return f"{self.group_id}.{self.artifact_id.replace('-', '')}"

    @property
    def base_package_path(self) -> str:
        return self.base_package.replace(".", "/")

    def has(self, feature: Feature) -> bool:
        return feature in self.features


def build_config(**values) -> ProjectConfig:
    """Construct a ProjectConfig, turning pydantic errors into ConfigError."""
    try:
        return ProjectConfig(**values)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(e)) from e


def load_config(path, **overrides) -> ProjectConfig:
    """
    Load a ProjectConfig from a YAML file.

    Keys under `project:` are used when present, otherwise the top level.
    Non-None overrides replace file values.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    data = dict(data.get("project", data))
    data.update({k: v for k, v in overrides.items() if v is not None})
    return build_config(**data)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "config"
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)
