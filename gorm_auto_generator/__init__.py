"""
GORM Auto Generator: MySQL CREATE TABLE statements in, Go GORM model structs out.
"""

__version__ = "0.1.0"

from gorm_auto_generator.config_validation import NullStyle, OptionSet, build_options
from gorm_auto_generator.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    GormAutoGeneratorError,
    InputSourceError,
    NamingCollisionError,
    SchemaError,
    SqlSyntaxError,
    UnsupportedTypeError,
)
from gorm_auto_generator.pipeline import translate, translate_to_stream

__all__ = [
    '__version__',
    'NullStyle',
    'OptionSet',
    'build_options',
    'translate',
    'translate_to_stream',
    'GormAutoGeneratorError',
    'ConfigurationError',
    'SqlSyntaxError',
    'SchemaError',
    'UnsupportedTypeError',
    'NamingCollisionError',
    'InputSourceError',
    'DatabaseConnectionError',
]
