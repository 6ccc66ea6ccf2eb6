"""
Input acquisition for GORM Auto Generator.

The pipeline only sees SQL text; this module obtains it from exactly one
of three sources: literal SQL, a file, or a live MySQL table.
"""

import logging
from pathlib import Path
from typing import Optional

from gorm_auto_generator.exceptions import ConfigurationError, InputSourceError
from gorm_auto_generator.introspection_django import fetch_create_statement

logger = logging.getLogger(__name__)


def read_sql_file(path: str) -> str:
    """Read a DDL file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputSourceError(f"read {path} failed: {e}", path=path) from e


def count_sources(sql: Optional[str], input_file: Optional[str], db_dsn: Optional[str]) -> int:
    return sum(1 for source in (sql, input_file, db_dsn) if source)


def resolve_sql_input(
    sql: Optional[str] = None,
    input_file: Optional[str] = None,
    db_dsn: Optional[str] = None,
    db_table: Optional[str] = None,
) -> str:
    """
    Return the SQL text from the single source the caller supplied.

    Raises:
        ConfigurationError: if zero or several sources are given, or if a
            database table is named without a DSN (or the reverse).
        InputSourceError: if the input file cannot be read.
        DatabaseConnectionError: if the live table cannot be fetched.
    """
    supplied = count_sources(sql, input_file, db_dsn)
    if supplied == 0:
        raise ConfigurationError("no SQL input (--sql | -f | --db-dsn)", option="input")
    if supplied > 1:
        raise ConfigurationError(
            "only one SQL input may be given (--sql | -f | --db-dsn)", option="input"
        )
    if db_table and not db_dsn:
        raise ConfigurationError("--db-table requires --db-dsn", option="db-table")

    if sql:
        return sql
    if input_file:
        logger.debug(f"Reading SQL from {input_file}")
        return read_sql_file(input_file)
    if not db_table:
        raise ConfigurationError("miss mysql table (--db-table)", option="db-table")

    return fetch_create_statement(db_dsn, db_table)
