"""
Translation pipeline for GORM Auto Generator.

Sequences parsing, schema building, type mapping, naming and emission
for one invocation. The pipeline is a pure function of the SQL text and
the OptionSet: no module-level state is written, so concurrent callers
only need their own OptionSet.
"""

import logging
from typing import List, TextIO

from gorm_auto_generator.codegen import render_structs
from gorm_auto_generator.config_validation import OptionSet
from gorm_auto_generator.domain.models import StructDescriptor, TableSchema
from gorm_auto_generator.exceptions import SchemaError
from gorm_auto_generator.mapper import build_struct_descriptors
from gorm_auto_generator.schema_builder import build_table_schemas
from gorm_auto_generator.sql_parser import parse_create_tables

logger = logging.getLogger(__name__)


def parse_schema(sql_text: str, options: OptionSet) -> List[TableSchema]:
    """
    Parse and build the schemas of every CREATE TABLE in ``sql_text``.

    Raises:
        SqlSyntaxError: if the DDL is malformed.
        SchemaError: if there is no CREATE TABLE or a table is invalid.
    """
    raw_tables = parse_create_tables(sql_text)
    if not raw_tables:
        raise SchemaError("No CREATE TABLE statement found in the SQL input")
    return build_table_schemas(raw_tables, options)


def build_structs(sql_text: str, options: OptionSet) -> List[StructDescriptor]:
    """Run every stage up to, but not including, emission."""
    return build_struct_descriptors(parse_schema(sql_text, options), options)


def translate(sql_text: str, options: OptionSet) -> str:
    """
    Translate CREATE TABLE statements into Go GORM model source.

    All tables are processed before anything is returned; the first
    failing stage raises and no partial output exists.

    Args:
        sql_text: MySQL DDL containing one or more CREATE TABLE statements.
        options: The validated option set for this invocation.

    Returns:
        The rendered Go source, one package clause for the whole batch.

    Raises:
        GormAutoGeneratorError: any SqlSyntaxError, SchemaError,
            UnsupportedTypeError or NamingCollisionError from the stages.
    """
    structs = build_structs(sql_text, options)
    source = render_structs(structs, options.package)
    logger.debug(f"Translated {len(structs)} table(s).")
    return source


def translate_to_stream(sql_text: str, options: OptionSet, stream: TextIO) -> str:
    """Translate and write the result to ``stream`` in a single write."""
    source = translate(sql_text, options)
    stream.write(source)
    return source
