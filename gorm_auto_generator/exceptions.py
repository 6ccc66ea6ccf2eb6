"""
Custom exception hierarchy for GORM Auto Generator.

Every error raised by the translation pipeline derives from
GormAutoGeneratorError and carries enough context (table, column,
offending value) to be shown directly to an end user.
"""

import re
from typing import Dict, Any, Optional, List


class GormAutoGeneratorError(Exception):
    """
    Base exception for all GORM Auto Generator errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [self.message]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error body used by the HTTP surface."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "context": {key: str(value) for key, value in self.context.items()},
        }


class ConfigurationError(GormAutoGeneratorError):
    """Raised when an option value is invalid or input sources conflict."""

    def __init__(self, message: str, option: str = None, value: Any = None, **kwargs):
        context = kwargs.get('context', {})
        if option:
            context['option'] = option
        if value is not None:
            context['value'] = value

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the option spelling and value",
                "Valid null styles are 'sql' and 'ptr'",
                "Supply exactly one SQL source (literal SQL, file or database)",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="CONFIG_ERROR"
        )


class SqlSyntaxError(GormAutoGeneratorError):
    """Raised when the DDL text cannot be parsed."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        snippet: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if line is not None:
            context['line'] = line
        if column is not None:
            context['column'] = column
        if snippet:
            context['near'] = snippet
        self.line = line
        self.column = column

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the statement near the reported position",
                "Only MySQL CREATE TABLE syntax is supported",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="SQL_SYNTAX_ERROR"
        )


class SchemaError(GormAutoGeneratorError):
    """Raised when a parsed table is structurally invalid."""

    def __init__(self, message: str, table: str = None, column: str = None, **kwargs):
        context = kwargs.get('context', {})
        if table:
            context['table'] = table
        if column:
            context['column'] = column

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Verify every key references a declared column",
                "Make sure each table declares at least one column",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="SCHEMA_ERROR"
        )


class UnsupportedTypeError(GormAutoGeneratorError):
    """Raised when a SQL type has no Go type mapping."""

    def __init__(self, message: str, sql_type: str = None, table: str = None, column: str = None, **kwargs):
        context = kwargs.get('context', {})
        if table:
            context['table'] = table
        if column:
            context['column'] = column
        if sql_type:
            context['sql_type'] = sql_type
        self.sql_type = sql_type

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check if the SQL type is supported",
                "Change the column to a supported MySQL type",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="UNSUPPORTED_TYPE"
        )


class NamingCollisionError(GormAutoGeneratorError):
    """Raised when two identifiers normalize to the same Go name."""

    def __init__(
        self,
        message: str,
        name: str = None,
        identifiers: Optional[List[str]] = None,
        table: str = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if table:
            context['table'] = table
        if identifiers:
            context['identifiers'] = ", ".join(identifiers)
        if name:
            context['go_name'] = name

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Rename one of the conflicting columns or tables",
                "Adjust the table/column prefix options",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="NAMING_COLLISION"
        )


class InputSourceError(GormAutoGeneratorError):
    """Raised when the SQL input file cannot be read."""

    def __init__(self, message: str, path: str = None, **kwargs):
        context = kwargs.get('context', {})
        if path:
            context['path'] = path

        super().__init__(
            message,
            context=context,
            suggestions=kwargs.get('suggestions', ["Check the file path and permissions"]),
            error_code="INPUT_SOURCE_ERROR"
        )


class DatabaseConnectionError(GormAutoGeneratorError):
    """Raised when the live database cannot be queried."""

    def __init__(self, message: str, database_url: str = None, table: str = None, **kwargs):
        context = kwargs.get('context', {})
        if database_url:
            # Mask sensitive parts of the URL
            context['database_url'] = self._mask_credentials(database_url)
        if table:
            context['table'] = table

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check database server is running",
                "Verify connection credentials",
                "Ensure the mysqlclient driver is installed",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="DATABASE_CONNECTION_ERROR"
        )

    @staticmethod
    def _mask_credentials(url: str) -> str:
        """Mask sensitive credentials in database URL or Go-style DSN."""
        if '://' in url:
            return re.sub(r'://([^:/@]+):([^@]+)@', r'://\1:***@', url)
        return re.sub(r'^([^:/@]+):([^@]+)@', r'\1:***@', url)
