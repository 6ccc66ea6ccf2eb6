"""
Struct descriptor building for GORM Auto Generator.

Combines the Type & Null mapper and the naming conventions to turn
TableSchema records into emission-ready StructDescriptor/FieldDescriptor
records, including the rendered gorm/json struct tags.

Example:
    >>> options = build_options(json_tag=True)
    >>> structs = build_struct_descriptors(tables, options)
    >>> structs[0].fields[0].tag
    'gorm:"column:id;primary_key;AUTO_INCREMENT;NOT NULL" json:"id"'
"""

import logging
from typing import List, Optional, Sequence

from gorm_auto_generator.config_validation import OptionSet
from gorm_auto_generator.constants import GormTags
from gorm_auto_generator.domain.field_mapping import FieldMapper
from gorm_auto_generator.domain.models import (
    ColumnSchema,
    FieldDescriptor,
    StructDescriptor,
    TableSchema,
)
from gorm_auto_generator.domain.naming import NamingConventions
from gorm_auto_generator.exceptions import NamingCollisionError

logger = logging.getLogger(__name__)

# Name of the accessor GORM calls for an explicit table name
TABLE_NAME_METHOD = "TableName"


def quote_tag_value(value: str) -> str:
    """Escape a struct tag value so the raw string literal and strconv.Unquote survive it."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("`", "\\x60")
        .replace("\n", "\\n")
    )


def build_gorm_tag(column: ColumnSchema, options: OptionSet) -> str:
    """Render the gorm tag parts for one column, in a fixed order."""
    parts = [f"{GormTags.COLUMN}:{column.name}"]
    if options.with_type:
        parts.append(f"{GormTags.TYPE}:{column.type_sql}")
    if column.is_pk:
        parts.append(GormTags.PRIMARY_KEY)
    if column.is_unique and not column.is_pk:
        parts.append(GormTags.UNIQUE)
    if column.auto_increment:
        parts.append(GormTags.AUTO_INCREMENT)
    if not column.nullable:
        parts.append(GormTags.NOT_NULL)
    if column.default is not None:
        default = column.default if column.default != "" else "''"
        parts.append(f"{GormTags.DEFAULT}:{default}")
    return ";".join(parts)


def build_field_tag(column: ColumnSchema, json_name: Optional[str], options: OptionSet) -> str:
    tag = f'gorm:"{quote_tag_value(build_gorm_tag(column, options))}"'
    if json_name is not None:
        tag += f' json:"{quote_tag_value(json_name)}"'
    return tag


def build_struct_descriptor(
    table: TableSchema, struct_name: str, options: OptionSet
) -> StructDescriptor:
    """
    Build the descriptor for one table.

    Raises:
        UnsupportedTypeError: if a column's SQL type has no Go mapping.
        NamingCollisionError: if two columns map to the same field name, or
            a field would shadow the TableName() accessor.
    """
    mapper = FieldMapper(options)
    field_names = NamingConventions.field_names(
        table.name, [column.name for column in table.columns], options.column_prefix
    )

    fields: List[FieldDescriptor] = []
    imports = set()
    for column, field_name in zip(table.columns, field_names):
        resolution = mapper.map_column(column, table.name)
        imports.update(resolution.imports)
        json_name = (
            NamingConventions.column_to_json(column.name, options.column_prefix)
            if options.json_tag
            else None
        )
        fields.append(
            FieldDescriptor(
                name=field_name,
                go_type=resolution.go_type,
                tag=build_field_tag(column, json_name, options),
                column_name=column.name,
                json_name=json_name,
                comment=column.comment,
            )
        )

    emit_table_name = (
        options.force_table_name
        or NamingConventions.conventional_table_name(struct_name) != table.name
    )
    if emit_table_name and TABLE_NAME_METHOD in field_names:
        column_name = table.columns[field_names.index(TABLE_NAME_METHOD)].name
        raise NamingCollisionError(
            f"Column '{column_name}' of table '{table.name}' maps to field "
            f"'{TABLE_NAME_METHOD}', which clashes with the {TABLE_NAME_METHOD}() method",
            name=TABLE_NAME_METHOD,
            identifiers=[column_name, f"{TABLE_NAME_METHOD}()"],
            table=table.name,
            suggestions=[
                "Rename the column",
                "Drop --with-tablename when GORM can infer the table name",
            ],
        )

    return StructDescriptor(
        name=struct_name,
        fields=tuple(fields),
        table_name=table.name,
        package=options.package,
        comment=table.comment,
        emit_table_name=emit_table_name,
        imports=frozenset(imports),
    )


def build_struct_descriptors(
    tables: Sequence[TableSchema], options: OptionSet
) -> List[StructDescriptor]:
    """
    Build descriptors for every table, in input order.

    Raises:
        NamingCollisionError: if two tables map to the same struct name.
    """
    struct_names = NamingConventions.struct_names(
        [table.name for table in tables], options.table_prefix
    )
    structs = [
        build_struct_descriptor(table, struct_name, options)
        for table, struct_name in zip(tables, struct_names)
    ]
    logger.debug(f"Mapped {len(structs)} struct descriptor(s).")
    return structs
