"""
Version store factory for creating dialect-specific stores
"""

from typing import Any, Dict, List, Optional, Type
import logging

from .base_store import VersionStore
from .config import StoreConfig
from .dialects import DuckDBVersionStore, MySQLVersionStore, PostgreSQLVersionStore, SQLiteVersionStore

logger = logging.getLogger(__name__)


class VersionStoreFactory:
    """Factory selecting the version store for an explicitly named database type"""

    _STORES: Dict[str, Type[VersionStore]] = {
        'duckdb': DuckDBVersionStore,
        'sqlite': SQLiteVersionStore,
        'postgresql': PostgreSQLVersionStore,
        'mysql': MySQLVersionStore,
    }

    @staticmethod
    def create_store(db_type: str, config: Optional[StoreConfig] = None) -> VersionStore:
        """
        Create version store for a database type

        Args:
            db_type: Database type ('duckdb', 'sqlite', 'postgresql', 'mysql')
            config: Store configuration (defaults if omitted)

        Returns:
            VersionStore instance for the dialect
        """
        store_class = VersionStoreFactory._STORES.get(db_type)
        if store_class is None:
            raise ValueError(
                f"Unsupported database type: {db_type}. "
                f"Supported: {', '.join(VersionStoreFactory.get_supported_databases())}"
            )

        store = store_class(config)

        if not store.supports_distributed_lock:
            logger.debug(f"{db_type} has no native lock; serialise concurrent runs externally")

        logger.info(f"Created {db_type} version store for table {store.table_name}")
        return store

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> VersionStore:
        """
        Create version store from configuration dictionary

        Args:
            config: Configuration with 'db_type' and optional 'version_store' keys

        Returns:
            VersionStore instance
        """
        db_type = config.get('db_type')

        if not db_type:
            raise ValueError("Configuration must include 'db_type'")

        store_config = StoreConfig(**(config.get('version_store') or {}))
        return VersionStoreFactory.create_store(db_type, store_config)

    @staticmethod
    def get_supported_databases() -> List[str]:
        """
        Get list of supported database types

        Returns:
            List of supported database type strings
        """
        return list(VersionStoreFactory._STORES)
