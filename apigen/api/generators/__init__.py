"""
Project generators.

Organized into:
- base: declarative file plans and the rendering loop
- targets/: one ProjectGenerator per language/framework pair
- migration_generator / api_testing_generator: outputs shared by every target
"""

from .base import FileSpec, GenerationResult, ProjectGenerator
from .registry import GeneratorRegistry, default_registry
from .migration_generator import generate_migration_sql
from .api_testing_generator import generate_http_requests, generate_postman_collection

__all__ = [
    "FileSpec",
    "GenerationResult",
    "ProjectGenerator",
    "GeneratorRegistry",
    "default_registry",
    "generate_migration_sql",
    "generate_http_requests",
    "generate_postman_collection",
]
