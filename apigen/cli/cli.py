from datetime import date
from pathlib import Path

import click
from rich import pretty
from rich.console import Console
from rich.table import Table

from apigen import __version__
from apigen.api.gen_logging import configure_gen_logging
from apigen.api.generator import archive_project, generate_project, write_project
from apigen.api.generators.registry import default_registry
from apigen.config import Settings, build_config, load_config
from apigen.exceptions import ApiGenError
from apigen.features import Feature
from apigen.loader import build_schema
from apigen.utils import print_schema_summary, schema_diagram

pretty.install()
console = Console()

FORMATS = click.Choice(["sql", "openapi"], case_sensitive=False)


def _today() -> str:
    return date.today().strftime('%Y-%m-%d')


def _fail(context, action: str, error: Exception):
    console.print(f"[{_today()}] {action} failed with error(s): {error}", style="red")
    context.exit(1)


def _load_project_config(schema_path, config_path, name, features, package, database):
    overrides = {
        "name": name,
        "features": list(features) or None,
        "group_id": package,
    }
    if config_path:
        config = load_config(config_path, **overrides)
    else:
        overrides["name"] = name or Path(schema_path).stem
        config = build_config(**{k: v for k, v in overrides.items() if v is not None})
    if database:
        config.database = config.database.model_validate(
            dict(config.database.model_dump(exclude={"port"}), type=database)
        )
    return config


@click.group()
@click.version_option(__version__, prog_name="apigen")
@click.option("-v", "--verbose", is_flag=True, help="Show per-file generation detail.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.pass_context
def cli(context, verbose, quiet):
    context.ensure_object(dict)
    context.obj["settings"] = Settings()
    configure_gen_logging(verbose=verbose, quiet=quiet)


@cli.command("validate", help="Parse a schema and report structural problems.")
@click.pass_context
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", type=FORMATS, default=None, help="Input format (default: from extension).")
def validate(context, schema_path, fmt):
    try:
        schema = build_schema(schema_path, fmt)
    except ApiGenError as e:
        _fail(context, "Validation", e)
        return

    issues = schema.validate()
    for warning in schema.parse_errors:
        console.print(f"[{_today()}] Skipped statement: {warning}", style="yellow")
    if not schema.entity_tables:
        issues.append("Schema has no entity tables")
    if issues:
        console.print(f"[{_today()}] Validation failed with error(s):", style="red")
        for issue in issues:
            console.print(f"  - {issue}", style="red")
        context.exit(1)
    console.print(
        f"[{_today()}] Schema validation success! "
        f"({len(schema.entity_tables)} entities, {len(schema.functions)} functions)",
        style="green",
    )
    context.exit(0)


@cli.command("inspect", help="Parse a schema and print its tables, relationships and functions.")
@click.pass_context
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", type=FORMATS, default=None, help="Input format (default: from extension).")
def inspect_cmd(context, schema_path, fmt):
    try:
        schema = build_schema(schema_path, fmt)
    except ApiGenError as e:
        _fail(context, "Inspect", e)
        return
    print_schema_summary(schema, console)
    context.exit(0)


@cli.command("generate", help="Emit a project for one target from a SQL or OpenAPI schema.")
@click.pass_context
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", "-t", default=None,
              help="Target as language/framework, e.g. java/spring-boot (default: $APIGEN_DEFAULT_TARGET).")
@click.option("--out", "out_dir", default="generated", help="Output directory (default: ./generated)")
@click.option("--zip", "zip_path", default=None, type=click.Path(dir_okay=False),
              help="Also pack the project into this zip file.")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Project config YAML (default: ./apigen.yaml when present).")
@click.option("--name", default=None, help="Project name (overrides the config file).")
@click.option("--feature", "features", multiple=True, help="Enable a feature; repeatable. Replaces configured features.")
@click.option("--package", default=None, help="Group id / base package, e.g. com.acme.")
@click.option("--db", "database", default=None, help="Database type (postgresql, mysql, ...).")
@click.option("--format", "fmt", type=FORMATS, default=None, help="Input format (default: from extension).")
def generate(context, schema_path, target, out_dir, zip_path, config_path, name, features, package,
             database, fmt):
    settings = context.obj["settings"]
    if config_path is None and Path(settings.config_file).is_file():
        config_path = settings.config_file
    try:
        config = _load_project_config(schema_path, config_path, name, features, package, database)
        schema = build_schema(schema_path, fmt)
        registry = default_registry(settings.templates_dir, settings.format_python)
        result = generate_project(schema, config, target or settings.default_target, registry)
        out_path = write_project(result, out_dir)
        if zip_path:
            archive_project(result, zip_path, root=config.artifact_id)
    except (ApiGenError, ValueError) as e:
        _fail(context, "Generate", e)
        return

    for warning in result.warnings:
        console.print(f"[{_today()}] {warning}", style="yellow")
    console.print(
        f"[{_today()}] {result.file_count} files for {result.target} emitted to: {out_path}",
        style="green",
    )
    if zip_path:
        console.print(f"[{_today()}] Archive written to: {Path(zip_path).resolve()}", style="green")
    context.exit(0)


@cli.command("targets", help="List the available targets and the features each supports.")
@click.pass_context
@click.option("--feature", default=None, help="Only list targets supporting this feature.")
def targets_cmd(context, feature):
    registry = default_registry()
    try:
        generators = registry.by_feature(Feature.parse(feature)) if feature else registry.all()
    except ValueError as e:
        _fail(context, "Targets", e)
        return

    table = Table(title="Targets")
    table.add_column("Target")
    table.add_column("Name")
    table.add_column("Versions")
    table.add_column("Databases")
    table.add_column("Features", justify="right")
    for generator in generators:
        default = registry.get_default(generator.language) is generator
        table.add_row(
            generator.key + (" (default)" if default else ""),
            generator.display_name,
            f"{generator.default_language_version} / {generator.default_framework_version}",
            ", ".join(generator.supported_databases),
            f"{len(generator.supported_features)}/{len(Feature)}",
        )
    console.print(table)
    context.exit(0)


@cli.command("visualize", help="Render an ER diagram of a schema with GraphViz.")
@click.pass_context
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", "output_dir", default="docs", help="Output directory for PNG/DOT files (default: docs)")
@click.option("--format", "fmt", type=FORMATS, default=None, help="Input format (default: from extension).")
def visualize_cmd(context, schema_path, output_dir, fmt):
    try:
        schema = build_schema(schema_path, fmt)
    except ApiGenError as e:
        _fail(context, "Visualization", e)
        return

    dot = schema_diagram(schema)
    out_path = Path(output_dir).resolve()
    out_path.mkdir(exist_ok=True, parents=True)
    file_base = out_path / f"{Path(schema_path).stem}_diagram"
    dot_file = Path(f"{file_base}.dot")
    png_file = Path(f"{file_base}.png")

    try:
        dot.render(str(file_base), format="png", cleanup=True)
        console.print(f"[{_today()}] Schema diagram written to: {png_file}", style="green")
    except Exception:
        # no `dot` executable: keep the source so it can be rendered later
        dot.save(str(dot_file))
        console.print(
            f"[{_today()}] GraphViz 'dot' executable not found. Saved DOT file to: {dot_file}",
            style="yellow",
        )
        console.print(
            f"To generate PNG: Install GraphViz (https://graphviz.org/download/) and run: "
            f"dot -Tpng {dot_file} -o {png_file}",
            style="yellow",
        )
    context.exit(0)


def main():
    cli(prog_name="apigen")
