"""
Unit tests for the generator registry and feature resolution on targets.
"""

import pytest

from apigen.api.generators import GeneratorRegistry, ProjectGenerator, default_registry
from apigen.api.generators.targets import (
    ChiGenerator,
    GinGenerator,
    LaravelGenerator,
    SpringBootGenerator,
    TARGETS,
)
from apigen.exceptions import UnknownTargetError
from apigen.features import Feature


EXPECTED_KEYS = [
    "java/spring-boot",
    "kotlin/spring-boot",
    "go/gin",
    "go/chi",
    "rust/axum",
    "csharp/aspnetcore",
    "php/laravel",
    "python/fastapi",
    "typescript/nestjs",
]


@pytest.fixture(scope="module")
def registry():
    return default_registry()


class TestGeneratorRegistry:
    """Test lookups on the built-in registry."""

    def test_all_targets_registered(self, registry):
        assert [g.key for g in registry.all()] == EXPECTED_KEYS
        assert len(registry) == len(TARGETS)

    def test_default_registry_is_cached(self, registry):
        assert default_registry() is registry

    def test_get_pair(self, registry):
        assert isinstance(registry.get("go", "chi"), ChiGenerator)
        assert registry.get("go", "echo") is None

    def test_language_default_is_first_registered(self, registry):
        assert isinstance(registry.get_default("go"), GinGenerator)
        assert isinstance(registry.get_by_key("java"), SpringBootGenerator)

    def test_get_by_key_is_case_insensitive(self, registry):
        assert registry.get_by_key("PHP/Laravel").key == "php/laravel"

    def test_unknown_key_lists_available(self, registry):
        with pytest.raises(UnknownTargetError) as excinfo:
            registry.get_by_key("cobol/cics")
        assert excinfo.value.key == "cobol/cics"
        assert "go/gin" in excinfo.value.available

    def test_contains(self, registry):
        assert "rust/axum" in registry
        assert "rust/rocket" not in registry

    def test_languages_and_frameworks(self, registry):
        assert registry.supported_languages() == [
            "java", "kotlin", "go", "rust", "csharp", "php", "python", "typescript",
        ]
        assert registry.supported_frameworks("go") == ["gin", "chi"]

    def test_by_language(self, registry):
        assert [g.key for g in registry.by_language(" Go ")] == ["go/gin", "go/chi"]
        assert registry.by_language("cobol") == []

    def test_by_feature(self, registry):
        keys = [g.key for g in registry.by_feature(Feature.SOCIAL_LOGIN)]
        assert keys == ["java/spring-boot", "python/fastapi"]
        assert len(registry.by_feature(Feature.CRUD)) == len(EXPECTED_KEYS)

    def test_register_requires_language_and_framework(self):
        class Nameless(ProjectGenerator):
            language = "lisp"

        with pytest.raises(ValueError, match="framework"):
            GeneratorRegistry().register(Nameless())


class TestFeatureResolution:
    """Test how a target narrows requested features to what it supports."""

    def test_crud_always_enabled(self):
        enabled, skipped = LaravelGenerator().resolve_features(set())
        assert enabled == {Feature.CRUD}
        assert skipped == []

    def test_unsupported_features_skipped(self):
        enabled, skipped = LaravelGenerator().resolve_features({Feature.JWT_AUTH, Feature.PAGINATION})
        assert Feature.PAGINATION in enabled
        assert Feature.JWT_AUTH not in enabled
        assert skipped == [Feature.JWT_AUTH]

    def test_implications_only_from_supported_features(self):
        enabled, skipped = GinGenerator().resolve_features({Feature.PASSWORD_RESET})
        assert skipped == [Feature.PASSWORD_RESET]
        assert Feature.JWT_AUTH not in enabled
        assert Feature.MAIL_SERVICE not in enabled

    def test_implications_expanded(self):
        enabled, _ = ChiGenerator().resolve_features({Feature.PASSWORD_RESET})
        assert {Feature.PASSWORD_RESET, Feature.MAIL_SERVICE, Feature.JWT_AUTH} <= enabled

    def test_generator_metadata(self):
        for generator_class in TARGETS:
            generator = generator_class()
            assert generator.display_name
            assert Feature.CRUD in generator.supported_features
            assert generator.supported_databases
            assert generator.default_language_version

    def test_supports(self):
        assert SpringBootGenerator().supports(Feature.SOCIAL_LOGIN)
        assert not LaravelGenerator().supports(Feature.JWT_AUTH)
