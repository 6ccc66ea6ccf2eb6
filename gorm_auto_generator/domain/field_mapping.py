"""
Field mapping domain logic for GORM Auto Generator.

This module holds the static SQL -> Go type table and the mapper that
picks the Go representation of a column from its SQL type, its
nullability and the active null style.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from gorm_auto_generator.config_validation import NullStyle, OptionSet
from gorm_auto_generator.constants import GoImports
from gorm_auto_generator.domain.models import ColumnSchema, GoTypeResolution
from gorm_auto_generator.exceptions import UnsupportedTypeError


@dataclass(frozen=True)
class GoType:
    """Go representation of one SQL base type."""

    base: str
    wrapped: Optional[str] = None
    default_null_style: NullStyle = NullStyle.WRAPPED
    # Types whose zero value already encodes NULL (nil slices)
    nil_ok: bool = False

    @property
    def base_imports(self) -> FrozenSet[str]:
        if self.base.lstrip("*").startswith("time."):
            return frozenset({GoImports.TIME})
        return frozenset()

    @property
    def wrapped_imports(self) -> FrozenSet[str]:
        return frozenset({GoImports.DATABASE_SQL}) if self.wrapped else frozenset()


_STRING = GoType("string", "sql.NullString")
_TIME = GoType("time.Time", "sql.NullTime")
_BYTES = GoType("[]byte", nil_ok=True)
_FLOAT64 = GoType("float64", "sql.NullFloat64")

# (SQL base type, unsigned) -> Go type. Unsigned integers use unsigned Go
# types; their wrapped form is the next wider signed sql.NullXXX.
TYPE_MAPPING: Dict[Tuple[str, bool], GoType] = {
    # Integers
    ("TINYINT", False): GoType("int8", "sql.NullInt16"),
    ("SMALLINT", False): GoType("int16", "sql.NullInt16"),
    ("MEDIUMINT", False): GoType("int32", "sql.NullInt32"),
    ("INT", False): GoType("int32", "sql.NullInt32"),
    ("BIGINT", False): GoType("int64", "sql.NullInt64"),
    ("TINYINT", True): GoType("uint8", "sql.NullInt16"),
    ("SMALLINT", True): GoType("uint16", "sql.NullInt32"),
    ("MEDIUMINT", True): GoType("uint32", "sql.NullInt64"),
    ("INT", True): GoType("uint32", "sql.NullInt64"),
    # No standard wrapper holds a full uint64
    ("BIGINT", True): GoType("uint64", default_null_style=NullStyle.POINTER),
    # BIGINT UNSIGNED NOT NULL AUTO_INCREMENT UNIQUE
    ("SERIAL", False): GoType("uint64", default_null_style=NullStyle.POINTER),
    ("YEAR", False): GoType("int16", "sql.NullInt16"),
    ("BOOLEAN", False): GoType("bool", "sql.NullBool"),

    # Fractional numbers
    ("DECIMAL", False): _FLOAT64,
    ("DECIMAL", True): _FLOAT64,
    ("FLOAT", False): GoType("float32", "sql.NullFloat64"),
    ("FLOAT", True): GoType("float32", "sql.NullFloat64"),
    ("DOUBLE", False): _FLOAT64,
    ("DOUBLE", True): _FLOAT64,

    # Strings
    ("CHAR", False): _STRING,
    ("VARCHAR", False): _STRING,
    ("NCHAR", False): _STRING,
    ("NVARCHAR", False): _STRING,
    ("TINYTEXT", False): _STRING,
    ("TEXT", False): _STRING,
    ("MEDIUMTEXT", False): _STRING,
    ("LONGTEXT", False): _STRING,
    ("ENUM", False): _STRING,
    ("SET", False): _STRING,
    ("JSON", False): _STRING,
    ("UUID", False): _STRING,
    # MySQL TIME ranges past 24h, so it does not fit time.Time
    ("TIME", False): _STRING,

    # Dates and timestamps
    ("DATE", False): _TIME,
    ("DATETIME", False): _TIME,
    ("TIMESTAMP", False): _TIME,
    ("TIMESTAMPTZ", False): _TIME,
    ("TIMESTAMPLTZ", False): _TIME,

    # Binary
    ("BIT", False): _BYTES,
    ("BINARY", False): _BYTES,
    ("VARBINARY", False): _BYTES,
    ("TINYBLOB", False): _BYTES,
    ("BLOB", False): _BYTES,
    ("MEDIUMBLOB", False): _BYTES,
    ("LONGBLOB", False): _BYTES,
}


def lookup_go_type(column: ColumnSchema, table_name: Optional[str] = None) -> GoType:
    """
    Look up the Go type for a column's SQL type.

    Raises:
        UnsupportedTypeError: if the (type, unsigned) pair has no mapping.
    """
    go_type = TYPE_MAPPING.get((column.type_name, column.unsigned))
    if go_type is None:
        sql_type = f"{column.type_name} UNSIGNED" if column.unsigned else column.type_name
        location = f"{table_name}.{column.name}" if table_name else column.name
        raise UnsupportedTypeError(
            f"Unsupported SQL type '{sql_type}' for column '{location}'",
            sql_type=sql_type,
            table=table_name,
            column=column.name,
        )
    return go_type


class FieldMapper:
    """
    Maps columns to Go types under one OptionSet.

    Precedence for nullable columns: no_null_type gives the plain type;
    otherwise the 'sql' style gives sql.NullXXX, the 'ptr' style gives *T,
    and with no style each type uses its own default.
    """

    def __init__(self, options: OptionSet):
        self.options = options

    def map_column(self, column: ColumnSchema, table_name: Optional[str] = None) -> GoTypeResolution:
        go_type = lookup_go_type(column, table_name)

        if not column.nullable or self.options.no_null_type or go_type.nil_ok:
            return GoTypeResolution(go_type.base, go_type.base_imports)

        style = self.options.null_style
        if style == NullStyle.NONE:
            style = go_type.default_null_style

        if style == NullStyle.WRAPPED and go_type.wrapped:
            return GoTypeResolution(go_type.wrapped, go_type.wrapped_imports)
        return GoTypeResolution(f"*{go_type.base}", go_type.base_imports)
