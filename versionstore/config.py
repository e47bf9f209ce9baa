"""
Version store configuration.

Defines the immutable per-store settings and loads them from the
``version_store`` section of a YAML configuration file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "VersionInfo"
DEFAULT_LOCK_KEY = 2609878
DEFAULT_LOCK_NAME = "VersionStoreExclusiveLock"

# Identifiers are spliced into SQL text, so only plain names are accepted
SAFE_IDENTIFIER_PATTERN = r'^[A-Za-z_][A-Za-z0-9_]*$'

ELLIPSIS = "..."


class StoreConfig(BaseModel):
    """Settings shared by every statement a store generates."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    table_name: str = Field(
        DEFAULT_TABLE_NAME,
        max_length=63,
        pattern=SAFE_IDENTIFIER_PATTERN,
        description="Name of the version table",
    )
    max_description_length: int = Field(
        0, ge=0, description="Maximum stored description length (0 = unlimited)"
    )
    lock_key: int = Field(DEFAULT_LOCK_KEY, description="PostgreSQL advisory lock key")
    lock_name: str = Field(
        DEFAULT_LOCK_NAME, min_length=1, max_length=64, description="MySQL named lock"
    )
    lock_timeout: int = Field(-1, description="MySQL lock wait in seconds (negative = forever)")

    @field_validator('max_description_length')
    @classmethod
    def validate_max_description_length(cls, v):
        """Leave room for the ellipsis appended on truncation."""
        if 0 < v <= len(ELLIPSIS):
            raise ValueError(
                f"max_description_length must be 0 or greater than {len(ELLIPSIS)}"
            )
        return v


def load_store_config(config_path: Union[str, Path]) -> StoreConfig:
    """
    Load store configuration from a YAML file.

    Args:
        config_path: Path to YAML file with an optional ``version_store`` section

    Returns:
        Validated StoreConfig
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    section = data.get('version_store') or {}
    logger.debug(f"Loaded version_store section from {path}: {section}")
    return StoreConfig(**section)


def get_default_config(db_type: str, table_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Get default factory configuration for a database type.

    Args:
        db_type: Database type
        table_name: Optional version table name

    Returns:
        Dictionary accepted by ``VersionStoreFactory.create_from_config``
    """
    # Local import to avoid a cycle with the factory
    from .store_factory import VersionStoreFactory

    if db_type not in VersionStoreFactory.get_supported_databases():
        raise ValueError(f"Unsupported database type: {db_type}")

    return {
        'db_type': db_type,
        'version_store': {
            'table_name': table_name or DEFAULT_TABLE_NAME,
            'max_description_length': 0,
        },
    }
