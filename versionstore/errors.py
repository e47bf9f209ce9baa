"""Error types surfaced by the version store.

Only the version-coercion failure is wrapped into a domain error. Execution
failures of generated SQL reach the caller exactly as the driver raised them,
so the schema-creation and statement-execution kinds are bound to SQLAlchemy's
``DBAPIError`` rather than to wrapper classes.

``SchemaCreationError`` and ``StatementExecutionError`` are the same type:
callers cannot tell a failed CREATE from a failed INSERT, SELECT or lock
statement by exception type, and neither derives from ``MigrationError``.
Catch ``MigrationError`` for the domain errors and ``DBAPIError`` (under
either name) for everything the driver raised.
"""

from sqlalchemy.exc import DBAPIError


class MigrationError(Exception):
    """Base exception for version store errors."""
    pass


class VersionFormatError(MigrationError):
    """Raised when the stored current version cannot be read as an integer."""
    pass


class LockAcquisitionError(MigrationError):
    """Raised when a dialect's lock primitive reports it could not lock."""
    pass


# Propagated unchanged from the driver
SchemaCreationError = DBAPIError
StatementExecutionError = DBAPIError

__all__ = [
    'MigrationError',
    'VersionFormatError',
    'LockAcquisitionError',
    'SchemaCreationError',
    'StatementExecutionError',
]
