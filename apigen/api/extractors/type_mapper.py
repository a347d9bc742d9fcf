"""
Type mapping from logical column types to each target language.

Columns carry a logical type (Integer, Long, String, LocalDateTime, ...).
Every target has a TypeMapper subclass translating that vocabulary into its
own types, nullable forms, imports and sample literals for generated tests.
"""

import re
from typing import Dict, Iterable, List, Optional, Set


_LIST_TYPE = re.compile(r"^List<(.+)>$")


def split_list_type(logical: str) -> Optional[str]:
    """'List<Integer>' -> 'Integer'; None for scalar types."""
    match = _LIST_TYPE.match(logical or "")
    return match.group(1) if match else None


class TypeMapper:
    """Base mapper; subclasses fill TYPE_MAP and override the hooks they need."""

    language = ""
    TYPE_MAP: Dict[str, str] = {}
    FALLBACK = "Object"
    IMPORTS: Dict[str, str] = {}
    KEYWORDS: Set[str] = set()
    SAMPLES: Dict[str, str] = {}
    SAMPLE_FALLBACK = '"sample"'

    def map(self, logical: str) -> str:
        element = split_list_type(logical)
        if element is not None:
            return self.list_of(self.map(element))
        return self.TYPE_MAP.get(logical, self.FALLBACK)

    def map_column(self, column) -> str:
        mapped = self.map(column.logical_type)
        if column.nullable and not column.primary_key:
            return self.nullable(mapped)
        return mapped

    def list_of(self, element: str) -> str:
        return f"List<{element}>"

    def nullable(self, mapped: str) -> str:
        return mapped

    def imports_for(self, logical_types: Iterable[str]) -> List[str]:
        imports = set()
        for logical in logical_types:
            element = split_list_type(logical)
            if element is not None:
                if "List" in self.IMPORTS:
                    imports.add(self.IMPORTS["List"])
                logical = element
            if logical in self.IMPORTS:
                imports.add(self.IMPORTS[logical])
        return sorted(imports)

    def safe_name(self, name: str) -> str:
        return f"{name}_" if name in self.KEYWORDS else name

    def sample_value(self, logical: str) -> str:
        if split_list_type(logical) is not None:
            return self.empty_list()
        return self.SAMPLES.get(logical, self.SAMPLE_FALLBACK)

    def empty_list(self) -> str:
        return "List.of()"


class JavaTypeMapper(TypeMapper):
    language = "java"
    TYPE_MAP = {
        "String": "String", "Integer": "Integer", "Long": "Long", "Short": "Short",
        "Byte": "Byte", "BigDecimal": "BigDecimal", "Float": "Float", "Double": "Double",
        "Boolean": "Boolean", "LocalDate": "LocalDate", "LocalTime": "LocalTime",
        "LocalDateTime": "LocalDateTime", "UUID": "UUID", "Duration": "Duration",
        "byte[]": "byte[]", "Object": "Object",
    }
    IMPORTS = {
        "BigDecimal": "java.math.BigDecimal",
        "LocalDate": "java.time.LocalDate",
        "LocalTime": "java.time.LocalTime",
        "LocalDateTime": "java.time.LocalDateTime",
        "Duration": "java.time.Duration",
        "UUID": "java.util.UUID",
        "List": "java.util.List",
    }
    KEYWORDS = {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
        "class", "const", "continue", "default", "do", "double", "else", "enum",
        "extends", "final", "finally", "float", "for", "goto", "if", "implements",
        "import", "instanceof", "int", "interface", "long", "native", "new", "package",
        "private", "protected", "public", "return", "short", "static", "strictfp",
        "super", "switch", "synchronized", "this", "throw", "throws", "transient",
        "try", "void", "volatile", "while", "record", "var",
    }
    SAMPLES = {
        "String": '"test"', "Integer": "1", "Long": "1L", "Short": "(short) 1",
        "Byte": "(byte) 1", "BigDecimal": "new BigDecimal(\"10.00\")", "Float": "1.0f",
        "Double": "1.0", "Boolean": "true", "LocalDate": "LocalDate.now()",
        "LocalTime": "LocalTime.now()", "LocalDateTime": "LocalDateTime.now()",
        "UUID": "UUID.randomUUID()", "Duration": "Duration.ofMinutes(5)",
        "byte[]": "new byte[0]",
    }
    SAMPLE_FALLBACK = "null"


class KotlinTypeMapper(TypeMapper):
    language = "kotlin"
    TYPE_MAP = {
        "String": "String", "Integer": "Int", "Long": "Long", "Short": "Short",
        "Byte": "Byte", "BigDecimal": "BigDecimal", "Float": "Float", "Double": "Double",
        "Boolean": "Boolean", "LocalDate": "LocalDate", "LocalTime": "LocalTime",
        "LocalDateTime": "LocalDateTime", "UUID": "UUID", "Duration": "Duration",
        "byte[]": "ByteArray", "Object": "Any",
    }
    FALLBACK = "Any"
    IMPORTS = {k: v for k, v in JavaTypeMapper.IMPORTS.items() if k != "List"}
    KEYWORDS = {
        "as", "break", "class", "continue", "do", "else", "false", "for", "fun", "if",
        "in", "interface", "is", "null", "object", "package", "return", "super",
        "this", "throw", "true", "try", "typealias", "typeof", "val", "var", "when",
        "while",
    }
    SAMPLES = {
        "String": '"test"', "Integer": "1", "Long": "1L", "Short": "1.toShort()",
        "Byte": "1.toByte()", "BigDecimal": 'BigDecimal("10.00")', "Float": "1.0f",
        "Double": "1.0", "Boolean": "true", "LocalDate": "LocalDate.now()",
        "LocalTime": "LocalTime.now()", "LocalDateTime": "LocalDateTime.now()",
        "UUID": "UUID.randomUUID()", "Duration": "Duration.ofMinutes(5)",
        "byte[]": "ByteArray(0)",
    }
    SAMPLE_FALLBACK = "null"

    def nullable(self, mapped: str) -> str:
        return f"{mapped}?"

    def safe_name(self, name: str) -> str:
        return f"`{name}`" if name in self.KEYWORDS else name

    def empty_list(self) -> str:
        return "emptyList()"


class GoTypeMapper(TypeMapper):
    language = "go"
    TYPE_MAP = {
        "String": "string", "Integer": "int", "Long": "int64", "Short": "int16",
        "Byte": "int8", "BigDecimal": "float64", "Float": "float32", "Double": "float64",
        "Boolean": "bool", "LocalDate": "time.Time", "LocalTime": "time.Time",
        "LocalDateTime": "time.Time", "UUID": "uuid.UUID", "Duration": "time.Duration",
        "byte[]": "[]byte", "Object": "interface{}",
    }
    FALLBACK = "interface{}"
    IMPORTS = {
        "LocalDate": "time",
        "LocalTime": "time",
        "LocalDateTime": "time",
        "Duration": "time",
        "UUID": "github.com/google/uuid",
    }
    KEYWORDS = {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface", "map",
        "package", "range", "return", "select", "struct", "switch", "type", "var",
    }
    SAMPLES = {
        "String": '"test"', "Integer": "1", "Long": "1", "Short": "1", "Byte": "1",
        "BigDecimal": "10.5", "Float": "1.5", "Double": "1.5", "Boolean": "true",
        "LocalDate": "time.Now()", "LocalTime": "time.Now()",
        "LocalDateTime": "time.Now()", "UUID": "uuid.New()",
        "Duration": "5 * time.Minute", "byte[]": "[]byte{}",
    }
    SAMPLE_FALLBACK = "nil"

    def list_of(self, element: str) -> str:
        return f"[]{element}"

    def nullable(self, mapped: str) -> str:
        if mapped.startswith(("[]", "*")) or mapped == "interface{}":
            return mapped
        return f"*{mapped}"

    def empty_list(self) -> str:
        return "nil"


class RustTypeMapper(TypeMapper):
    language = "rust"
    TYPE_MAP = {
        "String": "String", "Integer": "i32", "Long": "i64", "Short": "i16",
        "Byte": "i8", "BigDecimal": "Decimal", "Float": "f32", "Double": "f64",
        "Boolean": "bool", "LocalDate": "NaiveDate", "LocalTime": "NaiveTime",
        "LocalDateTime": "NaiveDateTime", "UUID": "Uuid", "Duration": "i64",
        "byte[]": "Vec<u8>", "Object": "serde_json::Value",
    }
    FALLBACK = "serde_json::Value"
    IMPORTS = {
        "BigDecimal": "rust_decimal::Decimal",
        "LocalDate": "chrono::NaiveDate",
        "LocalTime": "chrono::NaiveTime",
        "LocalDateTime": "chrono::NaiveDateTime",
        "UUID": "uuid::Uuid",
    }
    KEYWORDS = {
        "as", "async", "await", "break", "const", "continue", "crate", "dyn", "else",
        "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
        "match", "mod", "move", "mut", "pub", "ref", "return", "self", "static",
        "struct", "super", "trait", "true", "type", "unsafe", "use", "where", "while",
    }
    SAMPLES = {
        "String": '"test".to_string()', "Integer": "1", "Long": "1", "Short": "1",
        "Byte": "1", "BigDecimal": "Decimal::new(1050, 2)", "Float": "1.5",
        "Double": "1.5", "Boolean": "true",
        "LocalDate": "chrono::Utc::now().date_naive()",
        "LocalTime": "chrono::Utc::now().time()",
        "LocalDateTime": "chrono::Utc::now().naive_utc()", "UUID": "Uuid::new_v4()",
        "Duration": "300", "byte[]": "vec![]",
    }
    SAMPLE_FALLBACK = "serde_json::Value::Null"

    def list_of(self, element: str) -> str:
        return f"Vec<{element}>"

    def nullable(self, mapped: str) -> str:
        return f"Option<{mapped}>"

    def safe_name(self, name: str) -> str:
        return f"r#{name}" if name in self.KEYWORDS else name

    def empty_list(self) -> str:
        return "vec![]"


class CSharpTypeMapper(TypeMapper):
    language = "csharp"
    TYPE_MAP = {
        "String": "string", "Integer": "int", "Long": "long", "Short": "short",
        "Byte": "sbyte", "BigDecimal": "decimal", "Float": "float", "Double": "double",
        "Boolean": "bool", "LocalDate": "DateOnly", "LocalTime": "TimeOnly",
        "LocalDateTime": "DateTime", "UUID": "Guid", "Duration": "TimeSpan",
        "byte[]": "byte[]", "Object": "object",
    }
    FALLBACK = "object"
    IMPORTS = {"List": "System.Collections.Generic"}
    KEYWORDS = {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
        "checked", "class", "const", "continue", "decimal", "default", "delegate", "do",
        "double", "else", "enum", "event", "explicit", "extern", "false", "finally",
        "fixed", "float", "for", "foreach", "goto", "if", "implicit", "in", "int",
        "interface", "internal", "is", "lock", "long", "namespace", "new", "null",
        "object", "operator", "out", "override", "params", "private", "protected",
        "public", "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "static", "string", "struct", "switch", "this", "throw", "true", "try",
        "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using", "virtual",
        "void", "volatile", "while",
    }
    SAMPLES = {
        "String": '"test"', "Integer": "1", "Long": "1L", "Short": "(short)1",
        "Byte": "(sbyte)1", "BigDecimal": "10.50m", "Float": "1.5f", "Double": "1.5",
        "Boolean": "true", "LocalDate": "DateOnly.FromDateTime(DateTime.UtcNow)",
        "LocalTime": "TimeOnly.FromDateTime(DateTime.UtcNow)",
        "LocalDateTime": "DateTime.UtcNow", "UUID": "Guid.NewGuid()",
        "Duration": "TimeSpan.FromMinutes(5)", "byte[]": "Array.Empty<byte>()",
    }
    SAMPLE_FALLBACK = "null"

    def nullable(self, mapped: str) -> str:
        return f"{mapped}?"

    def safe_name(self, name: str) -> str:
        return f"@{name}" if name in self.KEYWORDS else name

    def empty_list(self) -> str:
        return "new()"


class PhpTypeMapper(TypeMapper):
    language = "php"
    TYPE_MAP = {
        "String": "string", "Integer": "int", "Long": "int", "Short": "int",
        "Byte": "int", "BigDecimal": "string", "Float": "float", "Double": "float",
        "Boolean": "bool", "LocalDate": "string", "LocalTime": "string",
        "LocalDateTime": "string", "UUID": "string", "Duration": "string",
        "byte[]": "string", "Object": "mixed",
    }
    FALLBACK = "mixed"
    CASTS = {
        "Integer": "integer", "Long": "integer", "Short": "integer", "Byte": "integer",
        "Float": "float", "Double": "float", "Boolean": "boolean",
        "LocalDate": "date", "LocalDateTime": "datetime",
    }
    RULES = {
        "String": "string", "Integer": "integer", "Long": "integer", "Short": "integer",
        "Byte": "integer", "BigDecimal": "numeric", "Float": "numeric",
        "Double": "numeric", "Boolean": "boolean", "LocalDate": "date",
        "LocalTime": "date_format:H:i:s", "LocalDateTime": "date", "UUID": "uuid",
    }
    SAMPLES = {
        "String": "'test'", "Integer": "1", "Long": "1", "Short": "1", "Byte": "1",
        "BigDecimal": "'10.50'", "Float": "1.5", "Double": "1.5", "Boolean": "true",
        "LocalDate": "'2024-01-01'", "LocalTime": "'12:00:00'",
        "LocalDateTime": "'2024-01-01 12:00:00'",
        "UUID": "'3fa85f64-5717-4562-b3fc-2c963f66afa6'", "Duration": "'PT5M'",
        "byte[]": "''",
    }
    SAMPLE_FALLBACK = "null"

    def list_of(self, element: str) -> str:
        return "array"

    def nullable(self, mapped: str) -> str:
        return mapped if mapped == "mixed" else f"?{mapped}"

    BLUEPRINT = {
        "String": "string", "Integer": "integer", "Long": "bigInteger",
        "Short": "smallInteger", "Byte": "tinyInteger", "BigDecimal": "decimal",
        "Float": "float", "Double": "double", "Boolean": "boolean", "LocalDate": "date",
        "LocalTime": "time", "LocalDateTime": "timestamp", "UUID": "uuid",
        "Duration": "string", "byte[]": "binary", "Object": "json",
    }
    _LITERAL_DEFAULT = re.compile(r"^(-?\d+(\.\d+)?|'[^']*')$")

    def blueprint(self, column) -> str:
        """Laravel schema builder call for a migration column context."""
        name = column["name"]
        logical = column["logical"]
        if column["auto_increment"] and column["primary_key"]:
            return f"increments('{name}')" if logical == "Integer" else f"id('{name}')"
        method = "json" if split_list_type(logical) else self.BLUEPRINT.get(logical, "string")
        if method == "string" and column["sql_type"].upper().startswith(("TEXT", "CLOB")):
            method = "text"
        args = [f"'{name}'"]
        if method == "string" and column["length"]:
            args.append(str(column["length"]))
        if method == "decimal":
            args.extend([str(column["precision"] or 19), str(column["scale"] or 0)])
        call = f"{method}({', '.join(args)})"
        if column["nullable"]:
            call += "->nullable()"
        if column["unique"] and not column["primary_key"]:
            call += "->unique()"
        default = self.default_literal(column["default"])
        if default is not None:
            call += f"->default({default})"
        return call

    def default_literal(self, default: Optional[str]) -> Optional[str]:
        """PHP literal for simple SQL defaults; expressions are left to the database."""
        if default is None:
            return None
        text = default.strip()
        if text.upper() in ("TRUE", "FALSE"):
            return text.lower()
        if self._LITERAL_DEFAULT.match(text):
            return text
        return None

    def cast(self, logical: str) -> Optional[str]:
        if split_list_type(logical) is not None:
            return "array"
        return self.CASTS.get(logical)

    def rule(self, logical: str) -> str:
        if split_list_type(logical) is not None:
            return "array"
        return self.RULES.get(logical, "string")

    def empty_list(self) -> str:
        return "[]"


class PythonTypeMapper(TypeMapper):
    language = "python"
    TYPE_MAP = {
        "String": "str", "Integer": "int", "Long": "int", "Short": "int", "Byte": "int",
        "BigDecimal": "Decimal", "Float": "float", "Double": "float", "Boolean": "bool",
        "LocalDate": "date", "LocalTime": "time", "LocalDateTime": "datetime",
        "UUID": "UUID", "Duration": "timedelta", "byte[]": "bytes", "Object": "Any",
    }
    FALLBACK = "Any"
    IMPORTS = {
        "BigDecimal": "from decimal import Decimal",
        "LocalDate": "from datetime import date",
        "LocalTime": "from datetime import time",
        "LocalDateTime": "from datetime import datetime",
        "Duration": "from datetime import timedelta",
        "UUID": "from uuid import UUID",
        "Object": "from typing import Any",
    }
    SQLALCHEMY_TYPES = {
        "String": "String", "Integer": "Integer", "Long": "BigInteger",
        "Short": "SmallInteger", "Byte": "SmallInteger", "BigDecimal": "Numeric",
        "Float": "Float", "Double": "Float", "Boolean": "Boolean", "LocalDate": "Date",
        "LocalTime": "Time", "LocalDateTime": "DateTime", "UUID": "Uuid",
        "Duration": "Interval", "byte[]": "LargeBinary", "Object": "JSON",
    }
    KEYWORDS = {
        "False", "None", "True", "and", "as", "assert", "async", "await", "break",
        "class", "continue", "def", "del", "elif", "else", "except", "finally", "for",
        "from", "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
        "pass", "raise", "return", "try", "while", "with", "yield",
    }
    SAMPLES = {
        "String": '"test"', "Integer": "1", "Long": "1", "Short": "1", "Byte": "1",
        "BigDecimal": '"10.50"', "Float": "1.5", "Double": "1.5", "Boolean": "True",
        "LocalDate": '"2024-01-01"', "LocalTime": '"12:00:00"',
        "LocalDateTime": '"2024-01-01T12:00:00"',
        "UUID": '"3fa85f64-5717-4562-b3fc-2c963f66afa6"', "Duration": '"PT5M"',
        "byte[]": '""',
    }
    SAMPLE_FALLBACK = "None"

    def list_of(self, element: str) -> str:
        return f"list[{element}]"

    def nullable(self, mapped: str) -> str:
        return f"{mapped} | None"

    def sqlalchemy_type(self, field) -> str:
        """SQLAlchemy column type for a field context dict."""
        if field["is_list"]:
            return "JSON"
        base = self.SQLALCHEMY_TYPES.get(field["logical"], "JSON")
        if base == "String" and field["length"]:
            return f"String({field['length']})"
        if base == "String" and field["sql_type"].upper().startswith(("TEXT", "CLOB")):
            return "Text"
        if base == "Numeric" and field["precision"]:
            return f"Numeric({field['precision']}, {field['scale'] or 0})"
        if base == "BigInteger" and field.get("auto_increment"):
            # sqlite only autoincrements INTEGER PRIMARY KEY
            return 'BigInteger().with_variant(sa.Integer(), "sqlite")'
        return base

    def empty_list(self) -> str:
        return "[]"


class TypeScriptTypeMapper(TypeMapper):
    language = "typescript"
    TYPE_MAP = {
        "String": "string", "Integer": "number", "Long": "number", "Short": "number",
        "Byte": "number", "BigDecimal": "string", "Float": "number", "Double": "number",
        "Boolean": "boolean", "LocalDate": "string", "LocalTime": "string",
        "LocalDateTime": "Date", "UUID": "string", "Duration": "string",
        "byte[]": "Buffer", "Object": "unknown",
    }
    FALLBACK = "unknown"
    ORM_TYPES = {
        "String": "varchar", "Integer": "int", "Long": "bigint", "Short": "smallint",
        "Byte": "smallint", "BigDecimal": "decimal", "Float": "real", "Double": "double precision",
        "Boolean": "boolean", "LocalDate": "date", "LocalTime": "time",
        "LocalDateTime": "timestamp", "UUID": "uuid", "Duration": "interval",
        "byte[]": "bytea", "Object": "jsonb",
    }
    MYSQL_ORM_TYPES = {
        "Double": "double", "LocalDateTime": "datetime", "UUID": "varchar",
        "Duration": "varchar", "byte[]": "blob", "Object": "json",
    }
    VALIDATORS = {
        "String": "IsString", "Integer": "IsInt", "Long": "IsInt", "Short": "IsInt",
        "Byte": "IsInt", "BigDecimal": "IsNumberString", "Float": "IsNumber",
        "Double": "IsNumber", "Boolean": "IsBoolean", "LocalDate": "IsDateString",
        "LocalTime": "IsString", "LocalDateTime": "IsDate", "UUID": "IsUUID",
    }
    KEYWORDS = {
        "break", "case", "catch", "class", "const", "continue", "debugger", "default",
        "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
        "function", "if", "import", "in", "instanceof", "new", "null", "return",
        "super", "switch", "this", "throw", "true", "try", "typeof", "var", "void",
        "while", "with",
    }
    SAMPLES = {
        "String": "'test'", "Integer": "1", "Long": "1", "Short": "1", "Byte": "1",
        "BigDecimal": "'10.50'", "Float": "1.5", "Double": "1.5", "Boolean": "true",
        "LocalDate": "'2024-01-01'", "LocalTime": "'12:00:00'",
        "LocalDateTime": "new Date()",
        "UUID": "'3fa85f64-5717-4562-b3fc-2c963f66afa6'", "Duration": "'PT5M'",
        "byte[]": "Buffer.alloc(0)",
    }
    SAMPLE_FALLBACK = "null"

    def list_of(self, element: str) -> str:
        return f"{element}[]"

    def nullable(self, mapped: str) -> str:
        return f"{mapped} | null"

    def orm_type(self, logical: str, dialect: str = "postgres") -> str:
        if dialect != "postgres":
            if split_list_type(logical) is not None:
                return "json"
            return self.MYSQL_ORM_TYPES.get(logical, self.ORM_TYPES.get(logical, "json"))
        if split_list_type(logical) is not None:
            return "jsonb"
        return self.ORM_TYPES.get(logical, "jsonb")

    def validator(self, logical: str) -> Optional[str]:
        if split_list_type(logical) is not None:
            return "IsArray"
        return self.VALIDATORS.get(logical)

    def empty_list(self) -> str:
        return "[]"
