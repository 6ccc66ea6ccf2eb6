"""
Domain module for GORM Auto Generator.

Schema records, the SQL to Go type table and the Go naming rules. Nothing
here touches SQL parsing, templates or I/O.
"""

from .models import (
    KeyInfo,
    RawColumnDeclaration,
    RawTableDeclaration,
    ColumnSchema,
    TableSchema,
    GoTypeResolution,
    FieldDescriptor,
    StructDescriptor,
)

from .field_mapping import (
    GoType,
    TYPE_MAPPING,
    FieldMapper,
    lookup_go_type,
)

from .naming import (
    NamingConventions,
    to_snake_case,
    to_go_name,
    split_words,
    strip_prefix,
    pluralize,
)

__all__ = [
    # Models
    'KeyInfo',
    'RawColumnDeclaration',
    'RawTableDeclaration',
    'ColumnSchema',
    'TableSchema',
    'GoTypeResolution',
    'FieldDescriptor',
    'StructDescriptor',

    # Field mapping
    'GoType',
    'TYPE_MAPPING',
    'FieldMapper',
    'lookup_go_type',

    # Naming
    'NamingConventions',
    'to_snake_case',
    'to_go_name',
    'split_words',
    'strip_prefix',
    'pluralize',
]
