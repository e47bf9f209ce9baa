"""
Version record model.

This module defines the Pydantic model for one row of the version table,
the append-only log of applied migrations.
"""

from datetime import datetime
from typing import Any, Mapping
from pydantic import BaseModel, ConfigDict, Field


class VersionRecord(BaseModel):
    """
    Applied migration record.

    Records are created by the database on insert and never modified
    afterwards, so the model is frozen.
    """

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(..., ge=1, description="Store-assigned insertion identifier")
    version: int = Field(..., description="Schema version marked as applied")
    applied_at: datetime = Field(..., description="Database-local time of insertion")
    description: str = Field(..., description="Human-readable migration name")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'VersionRecord':
        """
        Build a record from a version table row.

        Args:
            row: Row mapping keyed by the table's column names

        Returns:
            VersionRecord instance
        """
        # Unquoted identifiers come back lower-cased from PostgreSQL
        values = {str(key).lower(): value for key, value in row.items()}
        return cls(
            sequence=values['id'],
            version=values['version'],
            applied_at=values['appliedon'],
            description=values['description'],
        )

    def __str__(self) -> str:
        return f"Version {self.version} (#{self.sequence}): {self.description}"
