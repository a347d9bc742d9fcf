"""
Registry of project generators keyed by language and framework.

The first generator registered for a language becomes that language's
default, so `apigen generate --target go` picks Gin while `go/chi` selects
Chi explicitly.
"""

from collections import OrderedDict
from typing import Dict, List, Optional

from apigen.exceptions import UnknownTargetError
from apigen.features import Feature


class GeneratorRegistry:

    def __init__(self):
        self._generators: Dict[str, "ProjectGenerator"] = OrderedDict()
        self._defaults: Dict[str, str] = {}

    @staticmethod
    def _key(language: str, framework: str) -> str:
        return f"{language.strip().lower()}/{framework.strip().lower()}"

    def register(self, generator) -> None:
        if not generator.language or not generator.language.strip():
            raise ValueError(f"{type(generator).__name__} has no language")
        if not generator.framework or not generator.framework.strip():
            raise ValueError(f"{type(generator).__name__} has no framework")
        key = self._key(generator.language, generator.framework)
        self._generators[key] = generator
        self._defaults.setdefault(generator.language.strip().lower(), key)

    def get(self, language: str, framework: str):
        """Generator for the pair, or None."""
        return self._generators.get(self._key(language, framework))

    def get_default(self, language: str):
        key = self._defaults.get(language.strip().lower())
        return self._generators[key] if key else None

    def get_by_key(self, key: str):
        """
        Resolve 'language/framework' or a bare 'language' (its default).
        Raises UnknownTargetError when nothing matches.
        """
        language, _, framework = key.partition("/")
        generator = self.get(language, framework) if framework else self.get_default(language)
        if generator is None:
            raise UnknownTargetError(key, list(self._generators))
        return generator

    def all(self) -> List:
        return list(self._generators.values())

    def by_feature(self, feature: Feature) -> List:
        return [g for g in self._generators.values() if g.supports(feature)]

    def by_language(self, language: str) -> List:
        language = language.strip().lower()
        return [g for g in self._generators.values() if g.language == language]

    def supported_languages(self) -> List[str]:
        return list(self._defaults)

    def supported_frameworks(self, language: str) -> List[str]:
        return [g.framework for g in self.by_language(language)]

    def __contains__(self, key: str) -> bool:
        return key.strip().lower() in self._generators

    def __len__(self) -> int:
        return len(self._generators)


_default: Optional[GeneratorRegistry] = None


def default_registry(templates_dir=None, format_python: bool = True) -> GeneratorRegistry:
    """
    Registry with every built-in target. The no-argument form is cached;
    passing a templates dir or formatting flag builds a fresh registry.
    """
    global _default
    custom = templates_dir is not None or not format_python
    if _default is not None and not custom:
        return _default

    from apigen.api.generators.targets import TARGETS

    registry = GeneratorRegistry()
    for generator_class in TARGETS:
        registry.register(generator_class(templates_dir=templates_dir, format_python=format_python))
    if not custom:
        _default = registry
    return registry
