"""
Base class for target project generators.

A target is described declaratively: which templates make up the project
skeleton (rendered once), which make up an entity (rendered per entity table),
and which feature gates each file. ProjectGenerator resolves the enabled
features, builds the template context and renders every planned file into an
ordered {path: content} mapping. Nothing is written to disk here.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from os.path import join
from typing import Callable, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from apigen.api.extractors.entity_extractor import build_entity_context, build_function_contexts
from apigen.api.extractors.type_mapper import TypeMapper
from apigen.api.gen_logging import get_logger
from apigen.api.generators.migration_generator import (
    build_table_contexts,
    deferred_fk_contexts,
    generate_migration_sql,
)
from apigen.api.generators.api_testing_generator import (
    generate_http_requests,
    generate_postman_collection,
    sample_body,
)
from apigen.api.utils.formatters import format_python_code
from apigen.api.utils.naming import (
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_snake_case,
)
from apigen.exceptions import GenerationError
from apigen.features import Feature, expand_features
from apigen.language import TEMPLATES_DIR
from apigen.model.schema import GLOBAL_FUNCTIONS_KEY

logger = get_logger(__name__)


@dataclass
class FileSpec:
    """One generated file: template name, output path pattern, optional gate."""
    template: str
    path: str
    feature: Optional[Feature] = None
    when: Optional[Callable[[Dict], bool]] = None

    def enabled(self, features, context) -> bool:
        if self.feature is not None and self.feature not in features:
            return False
        if self.when is not None and not self.when(context):
            return False
        return True


@dataclass
class GenerationResult:
    target: str
    files: Dict[str, str] = field(default_factory=OrderedDict)
    enabled_features: List[Feature] = field(default_factory=list)
    skipped_features: List[Feature] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)


def create_environment(template_dirs) -> Environment:
    env = Environment(
        loader=FileSystemLoader([str(d) for d in template_dirs]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters.update({
        "pascal": to_pascal_case,
        "camel": to_camel_case,
        "snake": to_snake_case,
        "kebab": to_kebab_case,
        "plural": to_plural,
        "upper_snake": lambda s: to_snake_case(s).upper(),
        "pyrepr": repr,
        "quote": lambda s: '"' + str(s).replace("\\", "\\\\").replace('"', '\\"') + '"',
    })
    return env


def has_junction_tables(context) -> bool:
    return any(t["is_junction"] for t in context["tables"])


def has_tests(context) -> bool:
    return context["features"]["unit_tests"] or context["features"]["integration_tests"]


class ProjectGenerator:
    """Template-driven project generator for one language/framework pair."""

    language = ""
    framework = ""
    display_name = ""
    description = ""
    default_language_version = ""
    default_framework_version = ""
    supported_features = frozenset()
    type_mapper_class = TypeMapper
    field_case = "camel"
    template_subdir = ""
    template_fallbacks: List[str] = []
    migration_path: Optional[str] = "migrations/0001_init.sql"
    exposes_functions = False
    supported_databases = ("postgresql", "mysql", "mariadb", "sqlserver", "oracle", "h2")
    default_port = 8080
    api_prefix = "/api"
    json_case = "camel"
    run_command = ""
    test_command = ""
    project_files: List[FileSpec] = []
    entity_files: List[FileSpec] = []

    def __init__(self, templates_dir=None, format_python: bool = True):
        self.type_mapper = self.type_mapper_class()
        self.format_python = format_python
        root = templates_dir or TEMPLATES_DIR
        search = [self.template_subdir, *self.template_fallbacks, "_shared"]
        self.env = create_environment([join(root, d) for d in search])

    @property
    def key(self) -> str:
        return f"{self.language}/{self.framework}"

    def supports(self, feature: Feature) -> bool:
        return feature in self.supported_features

    # ------------------------------------------------------------------
    # Configuration

    def validate_config(self, config) -> List[str]:
        """Return config problems that make generation impossible for this target."""
        from apigen.validation import verify_project_config
        return verify_project_config(config, self)

    def resolve_features(self, requested):
        """
        Return (enabled, skipped). Implications are expanded from the supported
        subset only, so an unsupported feature never drags its dependencies in.
        """
        requested = set(requested) | {Feature.CRUD}
        supported = requested & set(self.supported_features)
        enabled = expand_features(supported) & set(self.supported_features)
        enabled.add(Feature.CRUD)
        skipped = sorted(requested - set(self.supported_features), key=lambda f: f.value)
        return enabled, skipped

    # ------------------------------------------------------------------
    # Context

    def project_context(self, config, features) -> Dict:
        artifact = config.artifact_id
        return {
            "project": {
                "name": config.name,
                "description": config.description or f"{config.name} API",
                "group_id": config.group_id,
                "artifact_id": artifact,
                "base_package": config.base_package,
                "package_path": config.base_package_path,
                "pascal": to_pascal_case(artifact),
                "camel": to_camel_case(artifact),
                "snake": to_snake_case(artifact),
                "kebab": to_kebab_case(artifact),
            },
            "db": config.database,
            "features": {f.value: (f in features) for f in Feature},
            "versions": {
                "language": config.language_version or self.default_language_version,
                "framework": config.framework_version or self.default_framework_version,
            },
            "generator": {
                "language": self.language,
                "framework": self.framework,
                "display_name": self.display_name,
                "run_command": self.run_command,
                "test_command": self.test_command,
            },
            "options": dict(config.options),
            "server": {
                "port": self.default_port,
                "api_prefix": self.api_prefix,
                "base_url": f"http://localhost:{self.default_port}",
            },
            "json_case": self.json_case,
            "types": self.type_mapper,
        }

    def entity_contexts(self, schema, features) -> List[Dict]:
        functions_by_table = schema.functions_by_table
        contexts = []
        for table in schema.entity_tables:
            ctx = build_entity_context(table, schema, self.type_mapper, features, self.field_case)
            if ctx is None:
                continue
            ctx["functions"] = build_function_contexts(
                functions_by_table.get(table.name, []), self.type_mapper, self.field_case
            )
            contexts.append(ctx)
        return contexts

    # ------------------------------------------------------------------
    # Rendering

    def render(self, template: str, context: Dict) -> str:
        try:
            return self.env.get_template(template).render(**context)
        except TemplateError as exc:
            raise GenerationError(f"{self.key}: failed to render {template}: {exc}") from exc

    def render_path(self, pattern: str, context: Dict) -> str:
        try:
            return self.env.from_string(pattern).render(**context)
        except TemplateError as exc:
            raise GenerationError(f"{self.key}: failed to render path {pattern!r}: {exc}") from exc

    def _emit(self, result: GenerationResult, path: str, content: str):
        if self.format_python and path.endswith(".py"):
            content = format_python_code(content)
        result.files[path] = content
        logger.debug(f"  [GENERATED] {path}")

    def generate(self, schema, config) -> GenerationResult:
        result = GenerationResult(target=self.key)
        features, skipped = self.resolve_features(config.features)
        result.enabled_features = sorted(features, key=lambda f: f.value)
        result.skipped_features = skipped
        for feature in skipped:
            result.warnings.append(
                f"Feature '{feature.value}' is not supported by {self.display_name}; skipped"
            )

        context = self.project_context(config, features)
        entities = self.entity_contexts(schema, features)
        for entity in entities:
            entity["sample_body"] = sample_body(context, entity)
        context["entities"] = entities
        context["tables"] = build_table_contexts(schema)
        context["deferred_foreign_keys"] = deferred_fk_contexts(schema)
        context["global_functions"] = build_function_contexts(
            schema.functions_by_table.get(GLOBAL_FUNCTIONS_KEY, []),
            self.type_mapper, self.field_case,
        )
        self._note_functions(schema, result)

        for spec in self.project_files:
            if spec.enabled(features, context):
                self._emit(result, self.render_path(spec.path, context), self.render(spec.template, context))

        for entity in entities:
            entity_context = dict(context, entity=entity)
            for spec in self.entity_files:
                if spec.enabled(features, entity_context):
                    self._emit(
                        result,
                        self.render_path(spec.path, entity_context),
                        self.render(spec.template, entity_context),
                    )

        if Feature.MIGRATIONS in features and self.migration_path:
            self._emit(result, self.render_path(self.migration_path, context),
                       generate_migration_sql(schema, self.env))

        self._emit(result, "README.md", self.render("README.md.jinja", context))
        self._emit(result, "api-tests.http", generate_http_requests(context, self.env))
        self._emit(result, "postman_collection.json", generate_postman_collection(context))

        for path, content in self.extra_files(context, features).items():
            self._emit(result, path, content)

        return result

    def extra_files(self, context: Dict, features) -> Dict[str, str]:
        """Hook for files that do not fit the project/entity plan."""
        return {}

    def _note_functions(self, schema, result: GenerationResult):
        if schema.functions and not self.exposes_functions:
            result.notes.append(
                f"{len(schema.functions)} stored function(s) found; "
                f"{self.display_name} exposes them only through the migration script"
            )
