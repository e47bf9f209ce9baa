"""
Base version store using SQLAlchemy Core.

A version store maintains an append-only table of applied schema versions.
Each dialect subclass supplies the SQL templates for its engine and its
exclusive-lock primitive; everything else lives here.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional
import logging
import time

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.engine import Connection

from .config import ELLIPSIS, StoreConfig
from .errors import VersionFormatError
from .logging_config import StoreLoggerAdapter
from .models import VersionRecord


def coerce_version(value: Any) -> int:
    """
    Read a stored version as an integer.

    Integers, integral floats / Decimals and numeric strings are accepted.

    Raises:
        ValueError: If the value has a fractional part or is not numeric
        TypeError: If the value is of an unsupported type
        OverflowError: If the value is infinite
    """
    if isinstance(value, (float, Decimal)) and value != int(value):
        raise ValueError(f"version has a fractional part: {value!r}")
    return int(value)


class VersionStore(ABC):
    """
    Abstract version store.

    Every operation runs on a caller-supplied connection. The store never
    opens, commits or closes connections.
    """

    # Name used for logging and by the factory
    dialect_name: str = ""

    # False when the lock hooks are no-ops and callers must serialise
    # concurrent runs themselves (e.g. with a file lock)
    supports_distributed_lock: bool = False

    def __init__(self, config: Optional[StoreConfig] = None):
        """
        Initialize version store.

        Args:
            config: Immutable store configuration (defaults if omitted)
        """
        self.config = config or StoreConfig()
        self.logger = StoreLoggerAdapter(
            logging.getLogger(f'versionstore.{self.__class__.__name__.lower()}'),
            {'dialect': self.dialect_name, 'table_name': self.config.table_name},
        )

    @property
    def table_name(self) -> str:
        return self.config.table_name

    @property
    def max_description_length(self) -> int:
        return self.config.max_description_length

    def ensure_created_and_get_current_version(self, connection: Connection) -> int:
        """
        Create the version table if absent and return the current version.

        Safe to call on every startup.

        Args:
            connection: Open SQLAlchemy connection

        Returns:
            Current schema version
        """
        for statement in self.create_version_table_statements():
            try:
                self._execute(connection, statement)
            except Exception as e:
                self.logger.error(f"Failed to create version table {self.table_name}: {e}")
                raise

        return self.get_current_version(connection)

    def get_current_version(self, connection: Connection) -> int:
        """
        Get the version of the most recently inserted record.

        Args:
            connection: Open SQLAlchemy connection

        Returns:
            Current version, 0 if the table is empty

        Raises:
            VersionFormatError: If the stored value is not an integer
        """
        result = self._execute(connection, self.current_version_sql()).scalar()

        if result is None:
            return 0

        try:
            return coerce_version(result)
        except (TypeError, ValueError, OverflowError) as e:
            self.logger.error(f"Non-integer current version in {self.table_name}: {result!r}")
            raise VersionFormatError(
                f"Version table {self.table_name} returned a current version "
                f"which isn't an integer: {result!r}"
            ) from e

    def update_version(self, connection: Connection, old_version: int,
                       new_version: int, description: str) -> None:
        """
        Append a record marking ``new_version`` as applied.

        Args:
            connection: Open SQLAlchemy connection
            old_version: Version being upgraded from (informational)
            new_version: Version being upgraded to
            description: Migration description, truncated if a maximum
                length is configured
        """
        description = self.truncate_description(description)
        params = {'Version': new_version, 'Description': description}

        try:
            self._execute(connection, self.set_version_sql(), params)
        except Exception as e:
            self.logger.error(f"Failed to record version {new_version}: {e}")
            raise

        self.logger.info(f"Recorded version {old_version} -> {new_version}: {description}")

    def get_version_history(self, connection: Connection) -> List[VersionRecord]:
        """
        Get every record in insertion order.

        Args:
            connection: Open SQLAlchemy connection

        Returns:
            List of VersionRecord objects, oldest first

        Raises:
            VersionFormatError: If a stored row cannot be read as a record
        """
        result = self._execute(connection, self.version_history_sql())

        records = []
        for row in result:
            try:
                records.append(VersionRecord.from_row(row._mapping))
            except (KeyError, ValidationError) as e:
                self.logger.error(f"Corrupt record in {self.table_name}: {dict(row._mapping)!r}")
                raise VersionFormatError(
                    f"Version table {self.table_name} holds a record which isn't "
                    f"a valid version entry: {dict(row._mapping)!r}"
                ) from e
        return records

    def truncate_description(self, description: str) -> str:
        """Cut ``description`` to the configured maximum length."""
        max_length = self.max_description_length
        if max_length > 0 and len(description) > max_length:
            return description[:max_length - len(ELLIPSIS)] + ELLIPSIS
        return description

    @contextmanager
    def locked(self, connection: Connection) -> Iterator[Connection]:
        """
        Hold the database lock for the duration of a block.

        The lock is released on every exit path, including exceptions.

        Args:
            connection: Open SQLAlchemy connection
        """
        self.acquire_database_lock(connection)
        try:
            yield connection
        finally:
            self.release_database_lock(connection)

    @abstractmethod
    def acquire_database_lock(self, connection: Connection) -> None:
        """Obtain exclusive access for running migrations."""

    @abstractmethod
    def release_database_lock(self, connection: Connection) -> None:
        """Give up the lock taken by ``acquire_database_lock``."""

    @abstractmethod
    def create_version_table_sql(self) -> str:
        """Should be 'CREATE TABLE IF NOT EXISTS', or similar."""

    @abstractmethod
    def current_version_sql(self) -> str:
        """
        SQL selecting the Version column of the row with the highest Id,
        limited to one row.
        """

    @abstractmethod
    def set_version_sql(self) -> str:
        """
        SQL inserting a new row.

        Binds ``:Version`` and ``:Description``; the timestamp must be
        computed by the database.
        """

    def create_version_table_statements(self) -> List[str]:
        """Ordered DDL issued to create the version table."""
        return [self.create_version_table_sql()]

    def version_history_sql(self) -> str:
        return f"SELECT Id, Version, AppliedOn, Description FROM {self.table_name} ORDER BY Id"

    def _execute(self, connection: Connection, statement: str,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a statement on the caller's connection.

        Args:
            connection: Open SQLAlchemy connection
            statement: SQL text
            params: Named bind parameters

        Returns:
            SQLAlchemy CursorResult
        """
        start_time = time.time()
        result = connection.execute(text(statement), params or {})
        self.logger.statement(statement, params, time.time() - start_time)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(table_name='{self.table_name}')"
