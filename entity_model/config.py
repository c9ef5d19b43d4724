"""
Settings for building a schema model.

Settings are validated with pydantic and can be loaded from a YAML file,
optionally overridden by the caller (for example from CLI arguments).
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .constants import AuditTables
from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ModelSettings(BaseModel):
    """Options controlling how a SchemaModel resolves and presents tables."""

    case_insensitive_names: bool = Field(
        default=True,
        description="Resolve table references ignoring case.",
    )
    exclude_audit_tables: bool = Field(
        default=True,
        description="Hide audit/history tables from the entity table view.",
    )
    audit_table_suffixes: List[str] = Field(
        default_factory=lambda: list(AuditTables.SUFFIXES),
        description="Table name suffixes that mark audit/history tables.",
    )
    audit_table_names: List[str] = Field(
        default_factory=lambda: list(AuditTables.NAMES),
        description="Exact table names treated as audit/history tables.",
    )
    require_foreign_key_columns: bool = Field(
        default=True,
        description="Fail the build when a foreign key names a column missing from its table.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @field_validator("audit_table_suffixes", "audit_table_names", mode="before")
    @classmethod
    def check_name_list(cls, v: Any) -> List[str]:
        """Ensure name lists hold non-empty, lower-cased strings."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError("Expected a list of strings.")
        processed = []
        for index, item in enumerate(v):
            if not isinstance(item, str):
                raise ValueError(
                    f"Item at index {index} must be a string, found: {type(item).__name__}"
                )
            stripped = item.strip().lower()
            if not stripped:
                raise ValueError(f"Item at index {index} cannot be empty or just whitespace.")
            processed.append(stripped)
        return processed

    def is_audit_table(self, table_name: Optional[str]) -> bool:
        """Check if a table name denotes an audit/history table."""
        if not table_name:
            return False
        lower = table_name.lower()
        return lower in self.audit_table_names or any(
            lower.endswith(suffix) for suffix in self.audit_table_suffixes
        )


def validate_settings(raw_settings: Dict[str, Any], config_file: str = None) -> ModelSettings:
    """
    Validate a raw settings mapping.

    Raises:
        ConfigurationError: If any option is unknown or has an invalid value
    """
    try:
        settings = ModelSettings.model_validate(raw_settings)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            location = " -> ".join(str(part) for part in error.get("loc", ())) or "settings"
            problems.append(f"{location}: {error.get('msg', 'invalid value')}")
        logger.error(f"Settings validation failed: {'; '.join(problems)}")
        raise ConfigurationError(
            "Invalid model settings",
            config_file=config_file,
            context={"errors": problems},
        ) from e

    logger.debug(f"Model settings validated: {settings.model_dump()}")
    return settings


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ModelSettings:
    """
    Load settings from a YAML file, merge explicit overrides, and validate.

    Options may sit at the top level of the file or under an
    ``entity_model`` key. Overrides whose value is None are ignored.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or the
            merged settings are invalid
    """
    raw_settings: Dict[str, Any] = {}

    if config_path:
        config_file = Path(config_path)
        if not config_file.is_file():
            raise ConfigurationError(
                f"Config file not found: {config_file}", config_file=str(config_file)
            )
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Error parsing YAML file: {e}", config_file=str(config_file)
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Error reading config file: {e}", config_file=str(config_file)
            ) from e

        if yaml_config is None:
            yaml_config = {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(
                "Config file content must be a mapping", config_file=str(config_file)
            )
        if isinstance(yaml_config.get("entity_model"), dict):
            yaml_config = yaml_config["entity_model"]

        raw_settings.update(yaml_config)
        logger.debug(f"Loaded settings from {config_file}")

    if overrides:
        applied = {key: value for key, value in overrides.items() if value is not None}
        raw_settings.update(applied)
        if applied:
            logger.debug(f"Overridden settings: {sorted(applied)}")

    return validate_settings(raw_settings, config_file=str(config_path) if config_path else None)
