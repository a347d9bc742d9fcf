"""
Schema model: tables, columns, keys, indexes and stored functions.

The model is deliberately flat. Relationships are not stored; they are derived
from foreign keys on demand (see SqlSchema.all_relationships and
apigen.api.utils.relationships).
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from apigen.api.utils.naming import to_camel_case, to_pascal_case, to_singular


BASE_COLUMNS = {
    "estado", "fecha_creacion", "fecha_actualizacion", "fecha_eliminacion",
    "creado_por", "modificado_por", "eliminado_por", "version",
    "created_at", "updated_at", "deleted_at",
    "created_by", "updated_by", "deleted_by",
}

GLOBAL_FUNCTIONS_KEY = "_global"


class ForeignKeyAction(str, Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ForeignKeyAction":
        if not text:
            return cls.NO_ACTION
        normalized = " ".join(text.upper().split())
        for action in cls:
            if action.value == normalized:
                return action
        return cls.NO_ACTION


class IndexType(str, Enum):
    BTREE = "BTREE"
    HASH = "HASH"
    GIN = "GIN"
    GIST = "GIST"
    BRIN = "BRIN"

    @classmethod
    def parse(cls, text: Optional[str]) -> "IndexType":
        if not text:
            return cls.BTREE
        try:
            return cls(text.upper())
        except ValueError:
            return cls.BTREE


class RelationType(str, Enum):
    ONE_TO_ONE = "ONE_TO_ONE"
    MANY_TO_ONE = "MANY_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_MANY = "MANY_TO_MANY"


class ParameterMode(str, Enum):
    IN = "IN"
    OUT = "OUT"
    INOUT = "INOUT"


@dataclass
class SqlColumn:
    """A single table column."""
    name: str
    sql_type: str
    logical_type: str = "Object"
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[str] = None
    enum_values: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    check: Optional[str] = None

    @property
    def field_name(self) -> str:
        return to_camel_case(self.name)


@dataclass
class SqlForeignKey:
    column_name: str
    referenced_table: str
    referenced_column: str = "id"
    name: Optional[str] = None
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION
    on_update: ForeignKeyAction = ForeignKeyAction.NO_ACTION

    def infer_relation_type(self, source_table: "SqlTable", target_table: "SqlTable" = None) -> RelationType:
        """
        ONE_TO_ONE when the FK column is unique (or is the source's only PK
        column), MANY_TO_ONE otherwise.
        """
        column = source_table.get_column(self.column_name)
        if column is not None and column.unique:
            return RelationType.ONE_TO_ONE
        pk = [c.lower() for c in source_table.primary_key_columns]
        if pk == [self.column_name.lower()]:
            return RelationType.ONE_TO_ONE
        return RelationType.MANY_TO_ONE


@dataclass
class SqlIndex:
    name: str
    table_name: str
    columns: List[str] = field(default_factory=list)
    unique: bool = False
    index_type: IndexType = IndexType.BTREE


@dataclass
class SqlParameter:
    name: str
    sql_type: str
    logical_type: str = "Object"
    mode: ParameterMode = ParameterMode.IN


@dataclass
class SqlFunction:
    """A stored function or procedure declared in the schema."""
    name: str
    function_type: str = "FUNCTION"
    parameters: List[SqlParameter] = field(default_factory=list)
    return_type: Optional[str] = None
    language: str = "sql"
    body: Optional[str] = None

    @property
    def method_name(self) -> str:
        return to_camel_case(self.name)

    @property
    def is_procedure(self) -> bool:
        return self.function_type.upper() == "PROCEDURE"

    @property
    def input_parameters(self) -> List[SqlParameter]:
        return [p for p in self.parameters if p.mode != ParameterMode.OUT]


@dataclass
class SqlTable:
    name: str
    schema: Optional[str] = None
    comment: Optional[str] = None
    columns: List[SqlColumn] = field(default_factory=list)
    foreign_keys: List[SqlForeignKey] = field(default_factory=list)
    indexes: List[SqlIndex] = field(default_factory=list)
    primary_key_columns: List[str] = field(default_factory=list)
    unique_constraints: List[str] = field(default_factory=list)
    check_constraints: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Naming

    @property
    def entity_name(self) -> str:
        return to_pascal_case(to_singular(self.name.lower()))

    @property
    def entity_variable_name(self) -> str:
        return to_camel_case(self.entity_name)

    @property
    def module_name(self) -> str:
        return self.name.lower().replace("_", "")

    # ------------------------------------------------------------------
    # Lookups

    def get_column(self, name: str) -> Optional[SqlColumn]:
        lowered = name.lower()
        for column in self.columns:
            if column.name.lower() == lowered:
                return column
        return None

    def has_column(self, name: str) -> bool:
        return self.get_column(name) is not None

    def foreign_key_for(self, column_name: str) -> Optional[SqlForeignKey]:
        lowered = column_name.lower()
        for fk in self.foreign_keys:
            if fk.column_name.lower() == lowered:
                return fk
        return None

    @property
    def primary_key(self) -> Optional[SqlColumn]:
        """The single PK column, or None for composite/missing keys."""
        if len(self.primary_key_columns) != 1:
            return None
        return self.get_column(self.primary_key_columns[0])

    # ------------------------------------------------------------------
    # Classification

    @property
    def is_junction_table(self) -> bool:
        if len(self.foreign_keys) != 2 or len(self.primary_key_columns) != 2:
            return False
        pk = {c.lower() for c in self.primary_key_columns}
        return all(fk.column_name.lower() in pk for fk in self.foreign_keys)

    @property
    def is_audit_table(self) -> bool:
        lowered = self.name.lower()
        return lowered.endswith(("_aud", "_audit")) or lowered == "revision_info"

    @property
    def business_columns(self) -> List[SqlColumn]:
        fk_columns = {fk.column_name.lower() for fk in self.foreign_keys}
        return [
            c for c in self.columns
            if not c.primary_key
            and c.name.lower() not in fk_columns
            and c.name.lower() not in BASE_COLUMNS
        ]

    @property
    def extends_base(self) -> bool:
        return self.has_column("estado") or self.has_column("created_at")

    @property
    def has_soft_delete(self) -> bool:
        return self.has_column("deleted_at") or self.has_column("fecha_eliminacion")


@dataclass
class TableRelationship:
    source_table: SqlTable
    target_table: SqlTable
    foreign_key: SqlForeignKey
    relation_type: RelationType


@dataclass
class ManyToManyRelation:
    junction_table: SqlTable
    join_column: str
    inverse_join_column: str
    target_table: SqlTable


@dataclass
class SqlSchema:
    name: str = "schema"
    source_file: Optional[str] = None
    tables: List[SqlTable] = field(default_factory=list)
    functions: List[SqlFunction] = field(default_factory=list)
    standalone_indexes: List[SqlIndex] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)
    parse_errors: List[str] = field(default_factory=list)

    def get_table(self, name: str) -> Optional[SqlTable]:
        lowered = name.lower()
        for table in self.tables:
            if table.name.lower() == lowered:
                return table
        return None

    @property
    def entity_tables(self) -> List[SqlTable]:
        return [t for t in self.tables if not t.is_junction_table and not t.is_audit_table]

    @property
    def junction_tables(self) -> List[SqlTable]:
        return [t for t in self.tables if t.is_junction_table]

    @property
    def all_relationships(self) -> List[TableRelationship]:
        relationships = []
        for table in self.tables:
            for fk in table.foreign_keys:
                target = self.get_table(fk.referenced_table)
                if target is None:
                    continue
                relationships.append(TableRelationship(
                    source_table=table,
                    target_table=target,
                    foreign_key=fk,
                    relation_type=fk.infer_relation_type(table, target),
                ))
        return relationships

    @property
    def tables_by_module(self) -> Dict[str, List[SqlTable]]:
        grouped: Dict[str, List[SqlTable]] = OrderedDict()
        for table in self.entity_tables:
            grouped.setdefault(table.module_name, []).append(table)
        return grouped

    @property
    def functions_by_table(self) -> Dict[str, List[SqlFunction]]:
        """
        Attach each function to the first entity table whose singular name
        appears in the function name; leftovers go under '_global'.
        """
        grouped: Dict[str, List[SqlFunction]] = OrderedDict()
        for function in self.functions:
            lowered = function.name.lower()
            owner = GLOBAL_FUNCTIONS_KEY
            for table in self.entity_tables:
                singular = to_singular(table.name.lower())
                if singular and singular in lowered:
                    owner = table.name
                    break
            grouped.setdefault(owner, []).append(function)
        return grouped

    def validate(self) -> List[str]:
        """Return human-readable consistency issues (empty when clean)."""
        from apigen.validation import validate_schema
        return validate_schema(self)
