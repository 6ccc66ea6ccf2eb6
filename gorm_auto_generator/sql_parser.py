"""
SQL DDL parsing for GORM Auto Generator.

Turns raw MySQL DDL text into RawTableDeclaration records using sqlglot.
Statements other than CREATE TABLE are skipped. A statement sqlglot
cannot parse fails the whole batch with SqlSyntaxError; nothing is
returned for the statements that did parse.
"""

import logging
import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import sqlglot
from sqlglot import exp
from sqlglot.dialects.mysql import MySQL
from sqlglot.errors import ParseError, TokenError
from sqlglot.tokens import Token, TokenType

from gorm_auto_generator.constants import DefaultConfig
from gorm_auto_generator.domain.models import (
    KeyInfo,
    RawColumnDeclaration,
    RawTableDeclaration,
)
from gorm_auto_generator.exceptions import SqlSyntaxError

logger = logging.getLogger(__name__)

_CREATE_TABLE_COMMAND_RE = re.compile(r"^\s*(TEMPORARY\s+)?TABLE\b", re.IGNORECASE)

# Types whose UNSIGNED form is recorded in DataType.meta instead of a U* type
_UNSIGNED_FLAG_TYPES = {
    exp.DataType.Type.FLOAT,
    exp.DataType.Type.DOUBLE,
    exp.DataType.Type.DECIMAL,
}

_SIGNED_TO_UNSIGNED = MySQL.Parser.SIGNED_TO_UNSIGNED_TYPE_TOKEN


class MySQLDDL(MySQL):
    """
    MySQL dialect tuned for table definitions.

    - Unknown type words (spatial types, typos) parse as user-defined
      types, so the type mapper can reject them by name.
    - INT1..INT8 are MySQL's byte-width aliases, not bit widths.
    - FLOAT, DOUBLE and DECIMAL accept UNSIGNED, as SHOW CREATE TABLE
      prints it on MySQL 5.7.
    """

    SUPPORTS_USER_DEFINED_TYPES = True

    class Tokenizer(MySQL.Tokenizer):
        KEYWORDS = {
            **MySQL.Tokenizer.KEYWORDS,
            "INT1": TokenType.TINYINT,
            "INT2": TokenType.SMALLINT,
            "INT3": TokenType.MEDIUMINT,
            "MIDDLEINT": TokenType.MEDIUMINT,
            "INT4": TokenType.INT,
            "INT8": TokenType.BIGINT,
        }

    class Parser(MySQL.Parser):
        SUPPORTS_USER_DEFINED_TYPES = True

        SIGNED_TO_UNSIGNED_TYPE_TOKEN = {
            **_SIGNED_TO_UNSIGNED,
            TokenType.FLOAT: TokenType.FLOAT,
            TokenType.DOUBLE: _SIGNED_TO_UNSIGNED.get(TokenType.DOUBLE, TokenType.DOUBLE),
            TokenType.DECIMAL: _SIGNED_TO_UNSIGNED.get(TokenType.DECIMAL, TokenType.DECIMAL),
        }

        def _parse_types(self, *args, **kwargs):
            this = super()._parse_types(*args, **kwargs)
            if (
                isinstance(this, exp.DataType)
                and this.this in _UNSIGNED_FLAG_TYPES
                and self._prev is not None
                and self._prev.text.upper() == "UNSIGNED"
            ):
                this.meta["unsigned"] = True
            return this


_DDL_DIALECT = MySQLDDL()


def parse_create_tables(sql_text: str) -> List[RawTableDeclaration]:
    """
    Parse every CREATE TABLE statement in ``sql_text``.

    Args:
        sql_text: One or more SQL statements.

    Returns:
        The table declarations in source order.

    Raises:
        SqlSyntaxError: if any statement is malformed.
    """
    dialect = DefaultConfig.SQL_DIALECT
    try:
        _reject_empty_list_items(_DDL_DIALECT.tokenize(sql_text))
        statements = sqlglot.parse(sql_text, read=_DDL_DIALECT)
    except ParseError as e:
        raise _syntax_error_from_parse_error(e) from e
    except TokenError as e:
        raise SqlSyntaxError(f"Could not tokenize SQL: {e}") from e

    tables: List[RawTableDeclaration] = []
    for statement in statements:
        if statement is None:
            continue
        if isinstance(statement, exp.Create):
            if (statement.args.get("kind") or "").upper() == "TABLE":
                tables.append(_extract_table(statement, dialect))
            continue
        if isinstance(statement, exp.Command) and _is_create_table_command(statement):
            # sqlglot falls back to an opaque Command for syntax it does not model
            raise SqlSyntaxError(
                "Unsupported CREATE TABLE syntax",
                snippet=_shorten(statement.sql(dialect=dialect)),
            )
        logger.debug(f"Skipping non CREATE TABLE statement: {type(statement).__name__}")

    logger.debug(f"Parsed {len(tables)} CREATE TABLE statement(s).")
    return tables


def _split_statements(tokens: Sequence[Token]) -> Iterator[List[Token]]:
    statement: List[Token] = []
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            if statement:
                yield statement
            statement = []
        else:
            statement.append(token)
    if statement:
        yield statement


def _reject_empty_list_items(tokens: Sequence[Token]) -> None:
    """
    Fail on ``a,,b``, ``(a,)`` and ``(,a)`` inside CREATE TABLE statements.

    sqlglot drops the empty item silently, MySQL rejects the statement.
    """
    for statement in _split_statements(tokens):
        head = [token.token_type for token in statement[:3]]
        if head[:1] != [TokenType.CREATE] or TokenType.TABLE not in head[1:]:
            continue
        for previous, token in zip(statement, statement[1:]):
            empty_item = (
                previous.token_type == TokenType.COMMA
                and token.token_type in (TokenType.COMMA, TokenType.R_PAREN)
            ) or (previous.token_type == TokenType.L_PAREN and token.token_type == TokenType.COMMA)
            if empty_item:
                raise SqlSyntaxError(
                    f"SQL syntax error at line {token.line}, column {token.col}: "
                    f"unexpected '{token.text}' after '{previous.text}'",
                    line=token.line,
                    column=token.col,
                    snippet=f"{previous.text}{token.text}",
                )


def _syntax_error_from_parse_error(error: ParseError) -> SqlSyntaxError:
    details = error.errors[0] if getattr(error, "errors", None) else {}
    description = details.get("description") or str(error)
    line = details.get("line")
    column = details.get("col")
    snippet = "".join(
        details.get(part) or "" for part in ("start_context", "highlight", "end_context")
    )
    if line is not None and column is not None:
        message = f"SQL syntax error at line {line}, column {column}: {description}"
    else:
        message = f"SQL syntax error: {description}"
    return SqlSyntaxError(message, line=line, column=column, snippet=_shorten(snippet))


def _is_create_table_command(statement: exp.Command) -> bool:
    return (
        statement.text("this").upper() == "CREATE"
        and bool(_CREATE_TABLE_COMMAND_RE.match(statement.text("expression")))
    )


def _shorten(text: str, limit: int = 80) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


# --- Node helpers ---


def _text(node: Optional[exp.Expression], dialect: str) -> Optional[str]:
    """Plain text of an identifier, literal or var; SQL text for anything else."""
    if node is None:
        return None
    if isinstance(node, (exp.Identifier, exp.Literal, exp.Var)):
        return node.name
    if isinstance(node, exp.Table):
        return node.name
    return node.sql(dialect=dialect)


def _identifier_name(node: exp.Expression) -> str:
    if isinstance(node, exp.Identifier):
        return node.name
    identifier = node.find(exp.Identifier)
    return identifier.name if identifier is not None else node.name


def _column_names(nodes: Iterable[exp.Expression]) -> Tuple[str, ...]:
    return tuple(_identifier_name(node) for node in nodes or [])


# --- Table extraction ---


def _extract_table(statement: exp.Create, dialect: str) -> RawTableDeclaration:
    schema_node = statement.this
    if isinstance(schema_node, exp.Schema):
        table_node = schema_node.this
        definitions = schema_node.expressions
    else:
        # CREATE TABLE ... LIKE / AS SELECT carry no column list
        table_node = schema_node
        definitions = []

    table_name = table_node.name if table_node is not None else ""
    columns: List[RawColumnDeclaration] = []
    primary_key: List[str] = []
    unique_keys: List[KeyInfo] = []
    indexes: List[KeyInfo] = []
    foreign_keys: List[KeyInfo] = []

    for definition in definitions:
        if isinstance(definition, exp.ColumnDef):
            column, inline_pk, inline_unique = _extract_column(definition, table_name, dialect)
            columns.append(column)
            if inline_pk:
                primary_key.append(column.name)
            if inline_unique:
                unique_keys.append(KeyInfo(name=None, columns=(column.name,)))
            continue

        constraint_name = None
        inner_nodes = [definition]
        if isinstance(definition, exp.Constraint):
            constraint_name = _text(definition.this, dialect)
            inner_nodes = definition.expressions

        for node in inner_nodes:
            if isinstance(node, exp.PrimaryKey):
                primary_key.extend(_column_names(node.expressions))
            elif isinstance(node, exp.ForeignKey):
                foreign_keys.append(_extract_foreign_key(node, constraint_name, dialect))
            elif isinstance(node, exp.UniqueColumnConstraint):
                unique_keys.append(_extract_unique_key(node, constraint_name, dialect))
            elif isinstance(node, exp.IndexColumnConstraint):
                key = KeyInfo(
                    name=_text(node.this, dialect) or constraint_name,
                    columns=_column_names(node.expressions),
                )
                if str(node.args.get("kind") or "").upper() == "UNIQUE":
                    unique_keys.append(key)
                else:
                    indexes.append(key)
            else:
                logger.debug(
                    f"Ignoring table-level definition {type(node).__name__} in '{table_name}'"
                )

    engine, charset, collation, comment = _extract_table_properties(statement, dialect)

    return RawTableDeclaration(
        name=table_name,
        columns=tuple(columns),
        primary_key=tuple(primary_key),
        unique_keys=tuple(unique_keys),
        indexes=tuple(indexes),
        foreign_keys=tuple(foreign_keys),
        comment=comment,
        engine=engine,
        charset=charset,
        collation=collation,
    )


def _extract_unique_key(
    node: exp.UniqueColumnConstraint, constraint_name: Optional[str], dialect: str
) -> KeyInfo:
    target = node.this
    if isinstance(target, exp.Schema):
        name = _text(target.this, dialect) if target.this is not None else None
        return KeyInfo(name=name or constraint_name, columns=_column_names(target.expressions))
    return KeyInfo(name=constraint_name, columns=_column_names(node.expressions))


def _extract_foreign_key(
    node: exp.ForeignKey, constraint_name: Optional[str], dialect: str
) -> KeyInfo:
    referenced_table = None
    referenced_columns: Tuple[str, ...] = ()
    reference = node.args.get("reference")
    if reference is not None:
        target = reference.this
        if isinstance(target, exp.Schema):
            referenced_table = _text(target.this, dialect)
            referenced_columns = _column_names(target.expressions)
        else:
            referenced_table = _text(target, dialect)
    return KeyInfo(
        name=constraint_name,
        columns=_column_names(node.expressions),
        referenced_table=referenced_table,
        referenced_columns=referenced_columns,
    )


def _extract_table_properties(statement: exp.Create, dialect: str):
    engine = charset = collation = comment = None
    properties = statement.args.get("properties")
    for prop in (properties.expressions if properties is not None else []):
        if isinstance(prop, exp.EngineProperty):
            engine = _text(prop.this, dialect)
        elif isinstance(prop, exp.CharacterSetProperty):
            charset = _text(prop.this, dialect)
        elif isinstance(prop, exp.CollateProperty):
            collation = _text(prop.this, dialect)
        elif isinstance(prop, exp.SchemaCommentProperty):
            comment = _text(prop.this, dialect)
    return engine, charset, collation, comment


# --- Column extraction ---


def _type_name(kind: exp.DataType) -> str:
    if kind.this == exp.DataType.Type.USERDEFINED:
        # Unknown type names are kept verbatim so the mapper can report them
        return str(kind.args.get("kind") or kind.sql()).upper()
    name = kind.this.value.upper()
    return "U" + name if kind.meta.get("unsigned") else name


def _type_sql(kind: exp.DataType, dialect: str) -> str:
    rendered = kind.sql(dialect=dialect)
    return f"{rendered} UNSIGNED" if kind.meta.get("unsigned") else rendered


def _extract_column(
    definition: exp.ColumnDef, table_name: str, dialect: str
) -> Tuple[RawColumnDeclaration, bool, bool]:
    name = definition.name
    kind = definition.args.get("kind")
    if not isinstance(kind, exp.DataType):
        raise SqlSyntaxError(
            f"Column '{name}' in table '{table_name}' has no data type",
            snippet=_shorten(definition.sql(dialect=dialect)),
        )

    not_null = explicit_null = default_is_null = auto_increment = False
    inline_pk = inline_unique = False
    default = comment = charset = collation = None

    for constraint in definition.args.get("constraints") or []:
        kind_node = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint
        if isinstance(kind_node, exp.NotNullColumnConstraint):
            if kind_node.args.get("allow_null"):
                explicit_null = True
            else:
                not_null = True
        elif isinstance(kind_node, exp.DefaultColumnConstraint):
            value = kind_node.this
            if isinstance(value, exp.Null):
                default_is_null = True
            elif isinstance(value, exp.Literal):
                default = value.name
            else:
                default = value.sql(dialect=dialect)
        elif isinstance(kind_node, exp.AutoIncrementColumnConstraint):
            auto_increment = True
        elif isinstance(kind_node, exp.CommentColumnConstraint):
            comment = _text(kind_node.this, dialect)
        elif isinstance(kind_node, exp.PrimaryKeyColumnConstraint):
            inline_pk = True
        elif isinstance(kind_node, exp.UniqueColumnConstraint):
            inline_unique = True
        elif isinstance(kind_node, exp.CharacterSetColumnConstraint):
            charset = _text(kind_node.this, dialect)
        elif isinstance(kind_node, exp.CollateColumnConstraint):
            collation = _text(kind_node.this, dialect)

    column = RawColumnDeclaration(
        name=name,
        type_name=_type_name(kind),
        type_sql=_type_sql(kind, dialect),
        type_params=tuple(param.sql(dialect=dialect) for param in kind.expressions),
        not_null=not_null,
        explicit_null=explicit_null,
        default=default,
        default_is_null=default_is_null,
        auto_increment=auto_increment,
        comment=comment,
        charset=charset,
        collation=collation,
    )
    return column, inline_pk, inline_unique
