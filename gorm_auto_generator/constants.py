"""
Centralized constants for GORM Auto Generator.

Default option values, Go naming tables and the recognised
command-line / HTTP option names live here so that the pipeline stages
and the adapters agree on them.
"""

from typing import Dict, FrozenSet, List, Tuple


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    PACKAGE_NAME = "model"
    CHARSET = "utf8mb4"
    COLLATION = "utf8mb4_general_ci"

    # Source dialect handed to sqlglot
    SQL_DIALECT = "mysql"

    # Web surface
    SERVE_ADDRESS = ":18080"


class NullStyleNames:
    """Accepted spellings of the null style option."""

    NONE = "none"
    WRAPPED = "sql"
    POINTER = "ptr"

    ALIASES: Dict[str, str] = {
        "": NONE,
        "none": NONE,
        "sql": WRAPPED,
        "wrapped": WRAPPED,
        "ptr": POINTER,
        "pointer": POINTER,
    }


# =============================================================================
# GO NAMING
# =============================================================================

class GoNaming:
    """Go identifier conventions."""

    # Initialisms golint expects in upper case
    COMMON_INITIALISMS: FrozenSet[str] = frozenset({
        "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML",
        "HTTP", "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS",
        "RPC", "SLA", "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP",
        "UI", "UID", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XMPP",
        "XSRF", "XSS",
    })

    # Characters treated as word separators in SQL identifiers
    SEPARATORS = "_- $."

    # Prefix for identifiers that would otherwise start with a digit
    DIGIT_PREFIX = "X"

    GO_KEYWORDS: FrozenSet[str] = frozenset({
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select",
        "struct", "switch", "type", "var",
    })


class GormTags:
    """Fragments of the gorm struct tag, in emission order."""

    COLUMN = "column"
    TYPE = "type"
    PRIMARY_KEY = "primary_key"
    UNIQUE = "unique"
    AUTO_INCREMENT = "AUTO_INCREMENT"
    NOT_NULL = "NOT NULL"
    DEFAULT = "default"


class GoImports:
    """Import paths referenced by generated code."""

    DATABASE_SQL = "database/sql"
    TIME = "time"


# =============================================================================
# CLI / HTTP OPTION NAMES
# =============================================================================

# (http field, OptionSet field) pairs for the /api/parse request body
HTTP_OPTION_FIELDS: List[Tuple[str, str]] = [
    ("col_prefix", "column_prefix"),
    ("json", "json_tag"),
    ("table_prefix", "table_prefix"),
    ("package", "package"),
    ("no_null", "no_null_type"),
    ("null_style", "null_style"),
    ("gorm_type", "with_type"),
    ("force_tablename", "force_table_name"),
    ("charset", "charset"),
    ("collation", "collation"),
]

# argparse destination -> OptionSet field
CLI_OPTION_FIELDS: Dict[str, str] = {
    "charset": "charset",
    "collation": "collation",
    "json": "json_tag",
    "table_prefix": "table_prefix",
    "col_prefix": "column_prefix",
    "no_null": "no_null_type",
    "null_style": "null_style",
    "pkg": "package",
    "with_type": "with_type",
    "with_tablename": "force_table_name",
}
