"""
Main entry point for project generation.

This module orchestrates turning a parsed SqlSchema into a complete project
for one target (language/framework pair).

Architecture:
    - extractors/: entity contexts and per-language type mapping
    - graph/: FK dependency graph for table ordering
    - generators/: the ProjectGenerator base, targets and shared outputs
    - utils/: naming, relationship detection, formatting
"""

import zipfile
from pathlib import Path

from apigen.api.gen_logging import get_logger
from apigen.api.generators.base import GenerationResult
from apigen.api.generators.registry import default_registry
from apigen.exceptions import ConfigError, GenerationError

logger = get_logger(__name__)


def resolve_target(target, registry=None):
    """Accept a ProjectGenerator or a 'language[/framework]' key."""
    if not isinstance(target, str):
        return target
    registry = registry or default_registry()
    return registry.get_by_key(target)


def generate_project(schema, config, target, registry=None) -> GenerationResult:
    """
    Generate every file of a project in memory.

    Args:
        schema: Parsed SqlSchema
        config: ProjectConfig
        target: ProjectGenerator instance or 'language/framework' key

    Raises:
        UnknownTargetError: target key is not registered
        ConfigError: the config does not fit the target
        GenerationError: the schema has no entity tables
    """
    generator = resolve_target(target, registry)

    logger.info("\n" + "=" * 70)
    logger.info(f"  GENERATING {config.name} ({generator.display_name})")
    logger.info("=" * 70 + "\n")

    logger.info("[PHASE 1] Validating configuration...")
    issues = generator.validate_config(config)
    if issues:
        raise ConfigError("; ".join(issues))

    logger.info("[PHASE 2] Checking schema...")
    for error in schema.parse_errors:
        logger.warning(f"  [WARN] {error}")
    if not schema.entity_tables:
        raise GenerationError(
            f"Schema '{schema.name}' has no entity tables; nothing to generate"
        )
    for issue in schema.validate():
        logger.warning(f"  [WARN] {issue}")
    logger.info(f"  {len(schema.entity_tables)} entity table(s), "
                f"{len(schema.junction_tables)} junction table(s), "
                f"{len(schema.functions)} function(s)")

    logger.info("[PHASE 3] Rendering templates...")
    result = generator.generate(schema, config)
    for warning in result.warnings:
        logger.warning(f"  [WARN] {warning}")
    for note in result.notes:
        logger.info(f"  [NOTE] {note}")

    logger.info(f"  Generated {result.file_count} file(s) for {result.target}")
    return result


def write_project(result: GenerationResult, out_dir) -> Path:
    """Write every generated file under out_dir; returns the resolved directory."""
    out_path = Path(out_dir).resolve()
    logger.info(f"[PHASE 4] Writing files to {out_path}...")
    for relative, content in result.files.items():
        target = out_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug(f"  [WRITE] {relative}")
    return out_path


def archive_project(result: GenerationResult, zip_path, root: str = None) -> Path:
    """
    Pack the generated files into a zip archive.

    Entries are placed under `root/` when given, so unzipping produces a
    single project directory.
    """
    zip_path = Path(zip_path).resolve()
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"[PHASE 4] Archiving files to {zip_path}...")
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for relative, content in result.files.items():
            name = f"{root}/{relative}" if root else relative
            archive.writestr(name, content)
    return zip_path


__all__ = [
    "resolve_target",
    "generate_project",
    "write_project",
    "archive_project",
]
