"""
Core domain models for GORM Auto Generator.

These records are passed from stage to stage of the translation
pipeline: the parser produces Raw*Declaration records, the schema
builder turns them into TableSchema/ColumnSchema, and the mapping and
naming stages assemble StructDescriptor/FieldDescriptor for the emitter.
All of them are frozen; a stage never edits the output of an earlier one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class KeyInfo:
    """A primary, unique, plain or foreign key declared on a table."""

    name: Optional[str]
    columns: Tuple[str, ...]
    # Foreign keys only; kept as metadata
    referenced_table: Optional[str] = None
    referenced_columns: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'columns': list(self.columns),
            'referenced_table': self.referenced_table,
            'referenced_columns': list(self.referenced_columns),
        }


# --- Parser output ---


@dataclass(frozen=True)
class RawColumnDeclaration:
    """One column definition exactly as written in the DDL."""

    name: str
    type_name: str
    type_sql: str
    type_params: Tuple[str, ...] = ()
    not_null: bool = False
    explicit_null: bool = False
    default: Optional[str] = None
    default_is_null: bool = False
    auto_increment: bool = False
    comment: Optional[str] = None
    charset: Optional[str] = None
    collation: Optional[str] = None


@dataclass(frozen=True)
class RawTableDeclaration:
    """One CREATE TABLE statement."""

    name: str
    columns: Tuple[RawColumnDeclaration, ...]
    primary_key: Tuple[str, ...] = ()
    unique_keys: Tuple[KeyInfo, ...] = ()
    indexes: Tuple[KeyInfo, ...] = ()
    foreign_keys: Tuple[KeyInfo, ...] = ()
    comment: Optional[str] = None
    engine: Optional[str] = None
    charset: Optional[str] = None
    collation: Optional[str] = None


# --- Schema builder output ---


@dataclass(frozen=True)
class ColumnSchema:
    """
    Canonical description of a database column.

    Nullability, charset and collation are fully resolved; key
    membership is copied from the owning table's key declarations.
    """

    name: str
    type_name: str
    type_sql: str
    nullable: bool
    unsigned: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default: Optional[str] = None
    auto_increment: bool = False
    comment: Optional[str] = None
    is_pk: bool = False
    is_unique: bool = False
    charset: Optional[str] = None
    collation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'type_name': self.type_name,
            'type_sql': self.type_sql,
            'nullable': self.nullable,
            'unsigned': self.unsigned,
            'length': self.length,
            'precision': self.precision,
            'scale': self.scale,
            'default': self.default,
            'auto_increment': self.auto_increment,
            'comment': self.comment,
            'is_pk': self.is_pk,
            'is_unique': self.is_unique,
            'charset': self.charset,
            'collation': self.collation,
        }


@dataclass(frozen=True)
class TableSchema:
    """Canonical description of a table; column order is declaration order."""

    name: str
    columns: Tuple[ColumnSchema, ...]
    comment: Optional[str] = None
    engine: Optional[str] = None
    charset: Optional[str] = None
    collation: Optional[str] = None
    primary_key_columns: Tuple[str, ...] = ()
    unique_keys: Tuple[KeyInfo, ...] = ()
    indexes: Tuple[KeyInfo, ...] = ()
    foreign_keys: Tuple[KeyInfo, ...] = ()

    def get_column_by_name(self, name: str) -> Optional[ColumnSchema]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'comment': self.comment,
            'engine': self.engine,
            'charset': self.charset,
            'collation': self.collation,
            'columns': [col.to_dict() for col in self.columns],
            'primary_key_columns': list(self.primary_key_columns),
            'unique_keys': [key.to_dict() for key in self.unique_keys],
            'indexes': [key.to_dict() for key in self.indexes],
            'foreign_keys': [key.to_dict() for key in self.foreign_keys],
        }


# --- Mapping / naming output ---


@dataclass(frozen=True)
class GoTypeResolution:
    """The Go type chosen for one column and the imports it needs."""

    go_type: str
    imports: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class FieldDescriptor:
    """Emission-ready description of one struct field."""

    name: str
    go_type: str
    tag: str
    column_name: str
    json_name: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class StructDescriptor:
    """Emission-ready description of one generated struct."""

    name: str
    fields: Tuple[FieldDescriptor, ...]
    table_name: str
    package: str
    comment: Optional[str] = None
    emit_table_name: bool = False
    imports: FrozenSet[str] = field(default_factory=frozenset)
