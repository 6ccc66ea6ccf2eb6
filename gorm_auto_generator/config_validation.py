import logging
import re
from argparse import Namespace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from gorm_auto_generator.constants import (
    CLI_OPTION_FIELDS,
    DefaultConfig,
    GoNaming,
    NullStyleNames,
)
from gorm_auto_generator.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_GO_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# --- Helper Functions for Validation ---


def is_valid_go_package_name(name: str) -> bool:
    """Check if a string can be used as a Go package clause."""
    return bool(_GO_IDENTIFIER_RE.match(name)) and name not in GoNaming.GO_KEYWORDS


class NullStyle(str, Enum):
    """How nullable columns are represented in the generated struct."""

    NONE = NullStyleNames.NONE
    WRAPPED = NullStyleNames.WRAPPED
    POINTER = NullStyleNames.POINTER


# --- Pydantic Model for the Option Set ---
class OptionSet(BaseModel):
    """Immutable configuration threaded through every pipeline stage."""

    charset: Optional[str] = Field(
        default=None, description="Character set override applied to every table."
    )
    collation: Optional[str] = Field(
        default=None, description="Collation override applied to every table."
    )
    json_tag: bool = Field(default=False, description="Emit a json struct tag.")
    table_prefix: str = Field(
        default="",
        description="Table name prefix(es) to strip; comma separated for several.",
    )
    column_prefix: str = Field(
        default="",
        description="Column name prefix(es) to strip; comma separated for several.",
    )
    no_null_type: bool = Field(
        default=False,
        description="Always use the plain Go type, even for nullable columns.",
    )
    null_style: NullStyle = Field(
        default=NullStyle.NONE,
        description="'sql' for sql.NullXXX, 'ptr' for *T, unset for per-type default.",
    )
    package: str = Field(
        default=DefaultConfig.PACKAGE_NAME, description="Go package name."
    )
    with_type: bool = Field(
        default=False, description="Write the SQL column type into the gorm tag."
    )
    force_table_name: bool = Field(
        default=False, description="Always emit a TableName() accessor."
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("null_style", mode="before")
    @classmethod
    def validate_null_style(cls, v: Any) -> NullStyle:
        if v is None or isinstance(v, NullStyle):
            return v or NullStyle.NONE
        if not isinstance(v, str):
            raise ValueError(f"invalid null style: {v!r}")
        canonical = NullStyleNames.ALIASES.get(v.strip().lower())
        if canonical is None:
            raise ValueError(f"invalid null style: {v}")
        return NullStyle(canonical)

    @field_validator("package", mode="before")
    @classmethod
    def validate_package(cls, v: Any) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DefaultConfig.PACKAGE_NAME
        if not isinstance(v, str) or not is_valid_go_package_name(v.strip()):
            raise ValueError(f"'{v}' is not a valid Go package name.")
        return v.strip()

    @field_validator("charset", "collation", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("table_prefix", "column_prefix", mode="before")
    @classmethod
    def prefix_or_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator(
        "json_tag", "no_null_type", "with_type", "force_table_name", mode="before"
    )
    @classmethod
    def blank_flag_is_false(cls, v: Any) -> Any:
        # HTML forms post unchecked boxes as ""
        if v is None or v == "":
            return False
        return v


# --- Validation Functions ---
def build_options(**values: Any) -> OptionSet:
    """
    Validate raw option values and return an OptionSet.

    Raises:
        ConfigurationError: if any value is rejected by the schema.
    """
    try:
        options = OptionSet.model_validate(values)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first.get("loc", ())) or None
        messages = []
        for error in e.errors():
            loc_parts = [str(loc_item) for loc_item in error.get("loc", ())]
            loc_str = " -> ".join(loc_parts) if loc_parts else "options"
            messages.append(f"{loc_str}: {error.get('msg', 'invalid value')}")
        raise ConfigurationError(
            "Invalid options: " + "; ".join(messages),
            option=loc,
            value=first.get("input"),
        ) from e
    logger.debug(f"Options validated: {options!r}")
    return options


def load_config(config_path: Optional[str], cli_args: Namespace) -> OptionSet:
    """
    Loads options from a YAML file, merges explicitly given CLI arguments
    over them and validates the result.
    """
    raw_config: Dict[str, Any] = {}

    # 1. Load from YAML file if path is provided
    if config_path:
        config_file = Path(config_path)
        if not config_file.is_file():
            raise ConfigurationError(
                f"Config file not found: {config_path}", option="config", value=config_path
            )
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Error parsing YAML file {config_path}: {e}", option="config"
            ) from e
        if yaml_config and not isinstance(yaml_config, dict):
            raise ConfigurationError(
                f"Content in config file {config_path} is not a mapping.", option="config"
            )
        raw_config.update(yaml_config or {})
        logger.debug(f"Loaded configuration from {config_path}")

    # 2. Override with CLI arguments (only those explicitly provided)
    cli_dict = vars(cli_args)
    overridden_keys = set()
    for cli_key, option_key in CLI_OPTION_FIELDS.items():
        value = cli_dict.get(cli_key)
        if value is not None:
            raw_config[option_key] = value
            overridden_keys.add(option_key)
    if overridden_keys:
        logger.debug(f"Overridden config keys from CLI arguments: {sorted(overridden_keys)}")

    return build_options(**raw_config)
