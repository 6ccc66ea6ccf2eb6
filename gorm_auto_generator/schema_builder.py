"""
Schema building for GORM Auto Generator.

Normalizes parser output into canonical TableSchema/ColumnSchema records:
nullability is made explicit, charset/collation are resolved, unsigned
numeric types are split into (base type, unsigned flag) and every key is
checked against the declared columns.
"""

import logging
from typing import List, Optional, Sequence, Set, Tuple

from gorm_auto_generator.config_validation import OptionSet
from gorm_auto_generator.constants import DefaultConfig
from gorm_auto_generator.domain.models import (
    ColumnSchema,
    KeyInfo,
    RawColumnDeclaration,
    RawTableDeclaration,
    TableSchema,
)
from gorm_auto_generator.exceptions import SchemaError

logger = logging.getLogger(__name__)

# The parser reports "<type> UNSIGNED" as a distinct "U<type>" type name
UNSIGNED_CAPABLE_TYPES: Set[str] = {
    "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT",
    "DECIMAL", "FLOAT", "DOUBLE",
}

LENGTH_TYPES: Set[str] = {
    "CHAR", "VARCHAR", "NCHAR", "NVARCHAR", "BINARY", "VARBINARY", "BIT",
    "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT", "YEAR",
}

PRECISION_TYPES: Set[str] = {"DECIMAL", "FLOAT", "DOUBLE"}

# Alias for BIGINT UNSIGNED NOT NULL AUTO_INCREMENT UNIQUE
SERIAL_TYPE = "SERIAL"


def split_unsigned(type_name: str) -> Tuple[str, bool]:
    """Split a sqlglot type name such as ``UBIGINT`` into ``("BIGINT", True)``."""
    if type_name.startswith("U") and type_name[1:] in UNSIGNED_CAPABLE_TYPES:
        return type_name[1:], True
    return type_name, False


def _int_param(params: Sequence[str], index: int) -> Optional[int]:
    if len(params) > index and params[index].strip().isdigit():
        return int(params[index])
    return None


def _resolve(*candidates: Optional[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def _check_key_columns(table: str, kind: str, key: KeyInfo, known: Set[str]) -> None:
    for column in key.columns:
        if column not in known:
            label = f"{kind} '{key.name}'" if key.name else kind
            raise SchemaError(
                f"Table '{table}': {label} references unknown column '{column}'",
                table=table,
                column=column,
            )


def build_column_schema(
    raw: RawColumnDeclaration,
    table: RawTableDeclaration,
    options: OptionSet,
    table_charset: str,
    table_collation: str,
    primary_key: Set[str],
    single_unique: Set[str],
) -> ColumnSchema:
    """Resolve one column declaration."""
    is_pk = raw.name in primary_key
    serial = raw.type_name == SERIAL_TYPE
    conflict = None
    if raw.not_null and raw.default_is_null:
        conflict = "is NOT NULL but defaults to NULL"
    elif raw.not_null and raw.explicit_null:
        conflict = "is declared both NULL and NOT NULL"
    elif raw.explicit_null and is_pk:
        conflict = "is part of the primary key but declared NULL"
    elif raw.explicit_null and serial:
        conflict = "is SERIAL but declared NULL"
    if conflict:
        raise SchemaError(
            f"Column '{raw.name}' in table '{table.name}' {conflict}",
            table=table.name,
            column=raw.name,
        )
    # Absence of NOT NULL means nullable; primary key columns are implicitly NOT NULL
    nullable = not raw.not_null and not is_pk and not serial

    base_type, unsigned = split_unsigned(raw.type_name)
    length = precision = scale = None
    if base_type in PRECISION_TYPES:
        precision = _int_param(raw.type_params, 0)
        scale = _int_param(raw.type_params, 1)
    elif base_type in LENGTH_TYPES:
        length = _int_param(raw.type_params, 0)

    return ColumnSchema(
        name=raw.name,
        type_name=base_type,
        type_sql=raw.type_sql,
        nullable=nullable,
        unsigned=unsigned,
        length=length,
        precision=precision,
        scale=scale,
        default=raw.default,
        auto_increment=raw.auto_increment or serial,
        comment=raw.comment,
        is_pk=is_pk,
        is_unique=raw.name in single_unique or (serial and not is_pk),
        charset=_resolve(options.charset, raw.charset, table_charset),
        collation=_resolve(options.collation, raw.collation, table_collation),
    )


def build_table_schema(raw: RawTableDeclaration, options: OptionSet) -> TableSchema:
    """
    Build the canonical schema for one parsed table.

    Raises:
        SchemaError: if the table has no columns, declares a column twice,
            or has a key referencing a column it does not declare.
    """
    if not raw.columns:
        raise SchemaError(f"Table '{raw.name}' has no columns", table=raw.name)

    known: Set[str] = set()
    for column in raw.columns:
        if column.name in known:
            raise SchemaError(
                f"Table '{raw.name}' declares column '{column.name}' more than once",
                table=raw.name,
                column=column.name,
            )
        known.add(column.name)

    _check_key_columns(raw.name, "PRIMARY KEY", KeyInfo(name=None, columns=raw.primary_key), known)
    for key in raw.unique_keys:
        _check_key_columns(raw.name, "UNIQUE KEY", key, known)
    for key in raw.indexes:
        _check_key_columns(raw.name, "KEY", key, known)
    for key in raw.foreign_keys:
        _check_key_columns(raw.name, "FOREIGN KEY", key, known)

    table_charset = _resolve(options.charset, raw.charset, DefaultConfig.CHARSET)
    table_collation = _resolve(options.collation, raw.collation, DefaultConfig.COLLATION)

    primary_key = set(raw.primary_key)
    single_unique = {key.columns[0] for key in raw.unique_keys if len(key.columns) == 1}

    columns = tuple(
        build_column_schema(
            column, raw, options, table_charset, table_collation, primary_key, single_unique
        )
        for column in raw.columns
    )

    return TableSchema(
        name=raw.name,
        columns=columns,
        comment=raw.comment,
        engine=raw.engine,
        charset=table_charset,
        collation=table_collation,
        primary_key_columns=raw.primary_key,
        unique_keys=raw.unique_keys,
        indexes=raw.indexes,
        foreign_keys=raw.foreign_keys,
    )


def build_table_schemas(
    raw_tables: Sequence[RawTableDeclaration], options: OptionSet
) -> List[TableSchema]:
    """Build schemas for every parsed table, failing on the first invalid one."""
    tables = [build_table_schema(raw, options) for raw in raw_tables]
    logger.debug(f"Built {len(tables)} table schema(s).")
    return tables
