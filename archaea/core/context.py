"""
context.py -- Provide application context for the archaea dashboard
"""
import logging
import threading
from typing import Dict, Any, Optional

from archaea.db.manager import DBManager
from archaea.config import ConfigManager


class ApplicationContext:
    """Application context for the archaea dashboard

    Owns the configuration and the database pool. One is built per process
    (CLI run or API app) and handed to the services explicitly.
    """

    def __init__(self, config_path: Optional[str] = None,
                 config_manager: Optional[ConfigManager] = None,
                 db_manager: Optional[DBManager] = None):
        """Initialize application context

        Args:
            config_path: Path to configuration file
            config_manager: Prebuilt configuration (takes precedence over config_path)
            db_manager: Prebuilt database manager; opened from config on first use otherwise
        """
        self.logger = logging.getLogger("archaea.context")
        self.config_manager = config_manager or ConfigManager(config_path)
        self.logger.info("Configuration initialized")
        self._db_manager = db_manager
        self._db_lock = threading.Lock()

    @property
    def db(self) -> DBManager:
        """Get database manager, opening the pool on first use

        Concurrent first callers share one pool.

        Raises:
            ConfigurationError: If database settings are incomplete
            StoreUnavailableError: If the pool cannot be opened
        """
        if self._db_manager is None:
            with self._db_lock:
                if self._db_manager is None:
                    self._db_manager = DBManager(self.config_manager.get_db_config())
                    self.logger.info("Database manager initialized")
        return self._db_manager

    def open(self) -> DBManager:
        """Open the database pool now so configuration problems surface at startup"""
        return self.db

    @property
    def config(self) -> Dict[str, Any]:
        return self.config_manager.config

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted config lookup, e.g. 'curation.transaction_timeout_ms'"""
        return self.config_manager.get(key, default)

    def close(self) -> None:
        with self._db_lock:
            if self._db_manager is not None:
                self._db_manager.close()
                self._db_manager = None

    def __enter__(self) -> 'ApplicationContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
