"""
Naming convention utilities for GORM Auto Generator.

This module strips configured prefixes from SQL identifiers and converts
them to exported Go identifiers (struct and field names), JSON tag names
and the table name GORM would infer for a struct.
"""

import re
from typing import List, Sequence

import inflect

from gorm_auto_generator.constants import GoNaming
from gorm_auto_generator.exceptions import NamingCollisionError


# Initialize inflect engine for pluralization
p = inflect.engine()

_SEPARATOR_RE = re.compile("[" + re.escape(GoNaming.SEPARATORS) + "]+")
# All-caps run before a capitalized word, capitalized/lower word, all-caps
# run, digits, then any other (non-ASCII) letters
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+|[^\W\d_A-Za-z]+")

# Anything but letters and digits separates JSON name words
_JSON_SPLIT_RE = re.compile(r"[\W_]+")


def to_snake_case(name: str) -> str:
    """
    Convert CamelCase or PascalCase to snake_case.

    Example:
        >>> to_snake_case("UserAccount")
        'user_account'
        >>> to_snake_case("XMLHttpRequest")
        'xml_http_request'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    name = re.sub("__([A-Z])", r"_\1", name)
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def split_words(identifier: str) -> List[str]:
    """
    Split an identifier on separators and camelCase boundaries.

    Example:
        >>> split_words("HTTPStatus_code")
        ['HTTP', 'Status', 'code']
    """
    words: List[str] = []
    for chunk in _SEPARATOR_RE.split(identifier):
        words.extend(_WORD_RE.findall(chunk))
    return words


def _go_word(word: str) -> str:
    upper = word.upper()
    if upper in GoNaming.COMMON_INITIALISMS:
        return upper
    if word.isupper() and len(word) > 1:
        # Acronym-like run from the source identifier
        return word
    return word[:1].upper() + word[1:].lower()


def to_go_name(identifier: str) -> str:
    """
    Convert a SQL identifier to an exported Go identifier.

    Example:
        >>> to_go_name("user_id")
        'UserID'
        >>> to_go_name("HTTPStatus")
        'HTTPStatus'
    """
    name = "".join(_go_word(word) for word in split_words(identifier))
    if not name or name[0].isdigit():
        name = GoNaming.DIGIT_PREFIX + name
    return name


def _split_prefixes(prefixes: str) -> List[str]:
    candidates = {prefix.strip() for prefix in (prefixes or "").split(",") if prefix.strip()}
    return sorted(candidates, key=lambda prefix: (-len(prefix), prefix))


def strip_prefix(name: str, prefixes: str) -> str:
    """
    Remove the longest configured prefix that ends on a word boundary.

    ``prefixes`` may hold several comma separated prefixes. A prefix only
    matches when it ends with an underscore or is followed by one in
    ``name``; a mid-word match (``t`` in ``tuser``) is left alone, and so
    is a match that would leave nothing behind.

    Example:
        >>> strip_prefix("t_user", "t_")
        'user'
        >>> strip_prefix("tuser", "t")
        'tuser'
    """
    for prefix in _split_prefixes(prefixes):
        if not name.startswith(prefix) or len(name) == len(prefix):
            continue
        rest = name[len(prefix):]
        if not prefix.endswith("_"):
            if not rest.startswith("_"):
                continue
            rest = rest.lstrip("_")
        if rest:
            return rest
    return name


def pluralize(word: str) -> str:
    """Pluralize the last word of a snake_case name, leaving plurals alone."""
    head, _, last = word.rpartition("_")
    if not last:
        return word
    plural = last if p.singular_noun(last) else p.plural_noun(last)
    return f"{head}_{plural}" if head else plural


class NamingConventions:
    """
    Centralized naming convention utilities.

    This class provides consistent naming across the codebase.
    """

    @staticmethod
    def table_to_struct(table_name: str, table_prefix: str = "") -> str:
        """Convert table name to Go struct name."""
        return to_go_name(strip_prefix(table_name, table_prefix))

    @staticmethod
    def column_to_field(column_name: str, column_prefix: str = "") -> str:
        """Convert column name to Go field name."""
        return to_go_name(strip_prefix(column_name, column_prefix))

    @staticmethod
    def column_to_json(column_name: str, column_prefix: str = "") -> str:
        """Convert column name to its lower snake_case json tag name."""
        stripped = strip_prefix(column_name, column_prefix)
        chunks = [chunk for chunk in _JSON_SPLIT_RE.split(stripped) if chunk]
        if not chunks:
            return to_snake_case(stripped)
        return "_".join(to_snake_case(chunk) for chunk in chunks)

    @staticmethod
    def conventional_table_name(struct_name: str) -> str:
        """Table name GORM infers for a struct: snake_case, pluralized."""
        return pluralize(to_snake_case(struct_name))

    @staticmethod
    def field_names(table_name: str, column_names: Sequence[str], column_prefix: str = "") -> List[str]:
        """
        Go field names for a table's columns, in column order.

        Raises:
            NamingCollisionError: if two columns map to the same field name.
        """
        seen = {}
        names = []
        for column_name in column_names:
            field_name = NamingConventions.column_to_field(column_name, column_prefix)
            if field_name in seen:
                raise NamingCollisionError(
                    f"Columns '{seen[field_name]}' and '{column_name}' of table "
                    f"'{table_name}' both map to field '{field_name}'",
                    name=field_name,
                    identifiers=[seen[field_name], column_name],
                    table=table_name,
                )
            seen[field_name] = column_name
            names.append(field_name)
        return names

    @staticmethod
    def struct_names(table_names: Sequence[str], table_prefix: str = "") -> List[str]:
        """
        Go struct names for a batch of tables, in input order.

        Raises:
            NamingCollisionError: if two tables map to the same struct name.
        """
        seen = {}
        names = []
        for table_name in table_names:
            struct_name = NamingConventions.table_to_struct(table_name, table_prefix)
            if struct_name in seen:
                raise NamingCollisionError(
                    f"Tables '{seen[struct_name]}' and '{table_name}' both map to "
                    f"struct '{struct_name}'",
                    name=struct_name,
                    identifiers=[seen[struct_name], table_name],
                )
            seen[struct_name] = table_name
            names.append(struct_name)
        return names
