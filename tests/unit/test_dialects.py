"""Unit tests for dialect SQL templates and lock hooks."""

import pytest
from decimal import Decimal
from sqlalchemy.exc import DBAPIError
from unittest.mock import MagicMock

from versionstore.config import StoreConfig
from versionstore.dialects import (
    DuckDBVersionStore, MySQLVersionStore, PostgreSQLVersionStore, SQLiteVersionStore
)
from versionstore.errors import (
    LockAcquisitionError, MigrationError, SchemaCreationError, StatementExecutionError, VersionFormatError
)

ALL_STORES = [SQLiteVersionStore, DuckDBVersionStore, PostgreSQLVersionStore, MySQLVersionStore]


def make_connection(scalar=None):
    """Create a mock connection whose statements return ``scalar``."""
    connection = MagicMock()
    connection.execute.return_value.scalar.return_value = scalar
    return connection


def executed(connection):
    """Return (sql, params) for every statement run on a mock connection."""
    return [(str(call.args[0]), call.args[1]) for call in connection.execute.call_args_list]


class TestSqlTemplates:
    """Test the generated SQL of every dialect."""

    @pytest.mark.parametrize("store_class", ALL_STORES)
    def test_templates_use_configured_table(self, store_class):
        store = store_class(StoreConfig(table_name="schema_versions"))

        for sql in [store.create_version_table_sql(), store.current_version_sql(),
                    store.set_version_sql(), store.version_history_sql()]:
            assert "schema_versions" in sql
            assert "VersionInfo" not in sql

    @pytest.mark.parametrize("store_class", ALL_STORES)
    def test_create_is_conditional(self, store_class):
        sql = store_class().create_version_table_sql()
        assert sql.startswith("CREATE TABLE IF NOT EXISTS VersionInfo")
        for column in ["Id", "Version", "AppliedOn", "Description"]:
            assert column in sql

    @pytest.mark.parametrize("store_class", ALL_STORES)
    def test_current_version_selects_latest_row(self, store_class):
        assert store_class().current_version_sql() == \
            "SELECT Version FROM VersionInfo ORDER BY Id DESC LIMIT 1"

    @pytest.mark.parametrize("store_class, now_sql", [
        (SQLiteVersionStore, "datetime('now', 'localtime')"),
        (DuckDBVersionStore, "current_localtimestamp()"),
        (PostgreSQLVersionStore, "LOCALTIMESTAMP"),
        (MySQLVersionStore, "NOW()"),
    ])
    def test_insert_binds_parameters_and_server_time(self, store_class, now_sql):
        sql = store_class().set_version_sql()
        assert sql == (
            "INSERT INTO VersionInfo (Version, AppliedOn, Description) "
            f"VALUES (:Version, {now_sql}, :Description)"
        )

    @pytest.mark.parametrize("store_class, fragment", [
        (SQLiteVersionStore, "INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT"),
        (PostgreSQLVersionStore, "SERIAL PRIMARY KEY"),
        (MySQLVersionStore, "AUTO_INCREMENT PRIMARY KEY"),
        (DuckDBVersionStore, "DEFAULT nextval('VersionInfo_Id_seq')"),
    ])
    def test_auto_increment_primary_key(self, store_class, fragment):
        assert fragment in store_class().create_version_table_sql()

    def test_duckdb_creates_sequence_first(self):
        statements = DuckDBVersionStore().create_version_table_statements()
        assert statements[0] == "CREATE SEQUENCE IF NOT EXISTS VersionInfo_Id_seq START 1"
        assert statements[1].startswith("CREATE TABLE IF NOT EXISTS VersionInfo")

    def test_single_create_statement_by_default(self):
        store = SQLiteVersionStore()
        assert store.create_version_table_statements() == [store.create_version_table_sql()]

    @pytest.mark.parametrize("store_class, column", [
        (SQLiteVersionStore, "Version INTEGER NOT NULL"),
        (DuckDBVersionStore, "Version BIGINT NOT NULL"),
        (PostgreSQLVersionStore, "Version BIGINT NOT NULL"),
        (MySQLVersionStore, "Version BIGINT NOT NULL"),
    ])
    def test_version_column_holds_64_bit_integers(self, store_class, column):
        """Test the Version column is an integer type wide enough for 64-bit versions."""
        assert column in store_class().create_version_table_sql()


class TestErrorTypes:
    """Test the error hierarchy."""

    def test_driver_error_names_share_one_type(self):
        """Test execution failures keep the driver's exception type."""
        assert SchemaCreationError is DBAPIError
        assert StatementExecutionError is DBAPIError
        assert not issubclass(DBAPIError, MigrationError)

    def test_domain_errors_derive_from_migration_error(self):
        assert issubclass(VersionFormatError, MigrationError)
        assert issubclass(LockAcquisitionError, MigrationError)


class TestContractOperations:
    """Test base operations against a mock connection."""

    def test_update_version_binds_version_and_description(self):
        connection = make_connection()
        store = PostgreSQLVersionStore()

        store.update_version(connection, 3, 4, "add users table")

        [(sql, params)] = executed(connection)
        assert sql == store.set_version_sql()
        assert params == {'Version': 4, 'Description': 'add users table'}

    def test_update_version_truncates(self):
        connection = make_connection()
        store = MySQLVersionStore(StoreConfig(max_description_length=10))

        store.update_version(connection, 0, 1, "a very long description")

        [(_, params)] = executed(connection)
        assert params['Description'] == "a very ..."

    def test_ensure_created_runs_create_then_select(self):
        connection = make_connection(scalar=7)
        store = DuckDBVersionStore()

        assert store.ensure_created_and_get_current_version(connection) == 7

        statements = [sql for sql, _ in executed(connection)]
        assert statements == store.create_version_table_statements() + [store.current_version_sql()]

    def test_create_failure_propagates_unchanged(self):
        connection = make_connection()
        error = RuntimeError("permission denied")
        connection.execute.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            SQLiteVersionStore().ensure_created_and_get_current_version(connection)
        assert exc_info.value is error

    @pytest.mark.parametrize("scalar, expected", [
        (None, 0), (5, 5), ("42", 42), (2.0, 2), (Decimal("3"), 3)
    ])
    def test_current_version_coercion(self, scalar, expected):
        connection = make_connection(scalar=scalar)
        assert PostgreSQLVersionStore().get_current_version(connection) == expected

    @pytest.mark.parametrize("scalar", [
        "v1", "1.5", object(), 1.5, Decimal("1.5"), float("inf"), float("nan")
    ])
    def test_current_version_not_integer(self, scalar):
        connection = make_connection(scalar=scalar)
        with pytest.raises(VersionFormatError):
            PostgreSQLVersionStore().get_current_version(connection)


class TestPostgreSQLLocking:
    """Test advisory lock hooks."""

    def test_supports_distributed_lock(self):
        assert PostgreSQLVersionStore.supports_distributed_lock is True

    def test_acquire_and_release(self):
        connection = make_connection(scalar=True)
        store = PostgreSQLVersionStore(StoreConfig(lock_key=42))

        store.acquire_database_lock(connection)
        store.release_database_lock(connection)

        assert executed(connection) == [
            ("SELECT pg_advisory_lock(:key)", {'key': 42}),
            ("SELECT pg_advisory_unlock(:key)", {'key': 42}),
        ]

    def test_release_when_not_held_does_not_raise(self):
        connection = make_connection(scalar=False)
        PostgreSQLVersionStore().release_database_lock(connection)

    def test_locked_releases_on_error(self):
        """Test the lock is released when the body fails."""
        connection = make_connection(scalar=True)
        store = PostgreSQLVersionStore()

        with pytest.raises(ValueError):
            with store.locked(connection):
                raise ValueError("migration failed")

        statements = [sql for sql, _ in executed(connection)]
        assert statements == ["SELECT pg_advisory_lock(:key)", "SELECT pg_advisory_unlock(:key)"]


class TestMySQLLocking:
    """Test named lock hooks."""

    def test_acquire(self):
        connection = make_connection(scalar=1)
        store = MySQLVersionStore(StoreConfig(lock_name="migrations", lock_timeout=30))

        store.acquire_database_lock(connection)

        assert executed(connection) == [
            ("SELECT GET_LOCK(:name, :timeout)", {'name': 'migrations', 'timeout': 30})
        ]

    @pytest.mark.parametrize("scalar", [0, None])
    def test_acquire_failure(self, scalar):
        connection = make_connection(scalar=scalar)

        with pytest.raises(LockAcquisitionError):
            MySQLVersionStore().acquire_database_lock(connection)

    def test_locked_does_not_release_when_acquire_fails(self):
        connection = make_connection(scalar=0)
        store = MySQLVersionStore()

        with pytest.raises(LockAcquisitionError):
            with store.locked(connection):
                pass

        assert len(executed(connection)) == 1

    def test_release(self):
        connection = make_connection(scalar=1)
        MySQLVersionStore().release_database_lock(connection)

        assert executed(connection) == [
            ("SELECT RELEASE_LOCK(:name)", {'name': 'VersionStoreExclusiveLock'})
        ]


class TestLockFreeDialects:
    """Test engines without a lock primitive."""

    @pytest.mark.parametrize("store_class", [SQLiteVersionStore, DuckDBVersionStore])
    def test_lock_hooks_are_no_ops(self, store_class):
        connection = make_connection()
        store = store_class()

        assert store.supports_distributed_lock is False
        store.acquire_database_lock(connection)
        store.release_database_lock(connection)

        connection.execute.assert_not_called()
