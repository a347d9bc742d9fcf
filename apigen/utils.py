from graphviz import Digraph
from rich.table import Table

from apigen.model.schema import RelationType


def safe_label(text, max_len=50):
    """Escape text for GraphViz record labels and truncate long values."""
    if text is None:
        return ""
    text = str(text)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("<", "\\<").replace(">", "\\>")
    text = text.replace("{", "\\{").replace("}", "\\}").replace("|", "\\|")
    text = text.replace("\n", " ")
    if len(text) > max_len:
        text = text[:max_len] + "..."
    return text


def print_schema_summary(schema, console):
    """Print tables, relationships and functions of a parsed schema."""
    console.print(f"[bold]Schema:[/bold] {schema.name}"
                  + (f"  ({schema.source_file})" if schema.source_file else ""))

    tables = Table(title="Tables", show_lines=False)
    tables.add_column("Table")
    tables.add_column("Entity")
    tables.add_column("Kind")
    tables.add_column("Columns", justify="right")
    tables.add_column("Primary key")
    tables.add_column("Foreign keys")
    for table in schema.tables:
        if table.is_junction_table:
            kind = "junction"
        elif table.is_audit_table:
            kind = "audit"
        else:
            kind = "entity"
        pk = ", ".join(table.primary_key_columns) or "-"
        fks = ", ".join(f"{fk.column_name} -> {fk.referenced_table}" for fk in table.foreign_keys)
        tables.add_row(table.name, table.entity_name, kind, str(len(table.columns)), pk, fks or "-")
    console.print(tables)

    relationships = schema.all_relationships
    if relationships:
        rels = Table(title="Relationships")
        rels.add_column("From")
        rels.add_column("To")
        rels.add_column("Column")
        rels.add_column("Type")
        for rel in relationships:
            rels.add_row(rel.source_table.name, rel.target_table.name,
                         rel.foreign_key.column_name, rel.relation_type.value)
        console.print(rels)

    if schema.functions:
        functions = Table(title="Functions")
        functions.add_column("Name")
        functions.add_column("Kind")
        functions.add_column("Parameters")
        functions.add_column("Returns")
        for function in schema.functions:
            params = ", ".join(f"{p.mode.value} {p.name} {p.sql_type}" for p in function.parameters)
            functions.add_row(function.name, function.function_type, params or "-",
                              function.return_type or "-")
        console.print(functions)

    for error in schema.parse_errors:
        console.print(f"[yellow]parse warning:[/yellow] {error}")


def schema_diagram(schema) -> Digraph:
    """ER diagram: one record node per table, one edge per foreign key."""
    dot = Digraph(comment=f"{schema.name} schema")
    dot.attr(rankdir="LR", fontsize="10", fontname="Arial")
    dot.attr(nodesep="0.5", ranksep="1.0")
    dot.attr("node", shape="record", fontname="Arial", fontsize="10")
    dot.attr("edge", fontsize="9")

    for table in schema.tables:
        rows = []
        for column in table.columns:
            marker = "PK " if column.primary_key else "FK " if table.foreign_key_for(column.name) else ""
            rows.append(f"{marker}{safe_label(column.name)}: {safe_label(column.sql_type)}")
        label = "{" + safe_label(table.name) + "|" + "\\l".join(rows) + "\\l}"
        fill = "#e0e0e0" if table.is_junction_table else "#bbdefb"
        dot.node(table.name, label=label, style="filled", fillcolor=fill)

    for rel in schema.all_relationships:
        one_to_one = rel.relation_type == RelationType.ONE_TO_ONE
        dot.edge(
            rel.source_table.name,
            rel.target_table.name,
            label=safe_label(rel.foreign_key.column_name),
            arrowhead="tee" if one_to_one else "crow",
        )
    return dot
