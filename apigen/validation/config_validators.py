"""
Checks that a ProjectConfig can be generated by a given target.

ProjectConfig already validates its own fields; these checks cover the
combinations only a target can judge (database drivers, version strings).
"""

import re

from apigen.features import Feature


_VERSION = re.compile(r"^\d+(\.\d+)*([.-][A-Za-z0-9]+)?$")


def verify_database_support(config, generator):
    if config.database.type not in generator.supported_databases:
        return [
            f"Database '{config.database.type}' is not supported by {generator.display_name} "
            f"(supported: {', '.join(generator.supported_databases)})"
        ]
    return []


def verify_versions(config, generator):
    issues = []
    for label, value in (("language_version", config.language_version),
                         ("framework_version", config.framework_version)):
        if value is not None and not _VERSION.match(value):
            issues.append(f"Invalid {label} '{value}' for {generator.display_name}")
    return issues


def verify_storage_backend(config, generator):
    if Feature.S3_STORAGE in config.features and Feature.AZURE_STORAGE in config.features:
        return ["Choose a single storage backend: s3_storage or azure_storage"]
    return []


def verify_project_config(config, generator):
    """Return every problem found; an empty list means the config is usable."""
    issues = []
    issues.extend(verify_database_support(config, generator))
    issues.extend(verify_versions(config, generator))
    issues.extend(verify_storage_backend(config, generator))
    return issues
