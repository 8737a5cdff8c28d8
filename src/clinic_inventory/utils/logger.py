"""
Logging infrastructure for the clinic inventory tracker.

Provides file rotation plus an audit trail of state-changing actions.
"""

import logging
import os
import sys
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config.config_manager import get_config_manager

LOG_DIR_ENV = "CLINIC_INVENTORY_LOG_DIR"
ROOT_LOGGER_NAME = "clinic_inventory"


class ClinicInventoryLogger:
    """
    Application logger setup.

    Configures the root ``clinic_inventory`` logger with both file and
    console output; module loggers are its children.
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        log_dir: Optional[str] = None,
        log_file: str = "clinic_inventory.log"
    ) -> None:
        """
        Initialize logger.

        Args:
            name: Logger name
            log_dir: Directory for log files (defaults to config/env)
            log_file: Log file name
        """
        config = get_config_manager()

        self.name = name
        self.log_dir = Path(
            log_dir or os.getenv(LOG_DIR_ENV) or config.get("logging.log_dir", "logs")
        )
        self.log_file = self.log_dir / log_file
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_level = str(config.get("logging.level", "INFO")).upper()
        self.max_file_size_mb = config.get("logging.max_file_size_mb", 10)
        self.backup_count = config.get("logging.backup_count", 5)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, self.log_level, logging.INFO))
        self.logger.propagate = False

        self.logger.handlers.clear()

        self.file_formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        self.console_formatter = logging.Formatter(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        self._setup_file_handler()
        self._setup_console_handler()

    def _setup_file_handler(self) -> None:
        """Set up rotating file handler."""
        max_bytes = self.max_file_size_mb * 1024 * 1024

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # File gets all logs
        file_handler.setFormatter(self.file_formatter)

        self.logger.addHandler(file_handler)

    def _setup_console_handler(self) -> None:
        """Set up console handler."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, self.log_level, logging.INFO))
        console_handler.setFormatter(self.console_formatter)

        self.logger.addHandler(console_handler)

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get the root logger or one of its children.

        Args:
            name: Optional child name, e.g. "order_service"

        Returns:
            logging.Logger instance
        """
        if not name or name == self.name:
            return self.logger
        return self.logger.getChild(name)


class AuditLogger:
    """
    Audit logger for state-changing actions.

    Writes every entry to the log file and, when a store is attached,
    appends it to the ``audit_log`` table, which keeps only the newest
    ``max_entries`` records; the rotating log file holds the full trail.
    """

    def __init__(self, store=None, max_entries: Optional[int] = None) -> None:
        """
        Initialize audit logger.

        Args:
            store: JsonStore instance (optional)
            max_entries: Table size cap (defaults to
                ``logging.audit_max_entries``)
        """
        self.store = store
        if max_entries is None:
            max_entries = get_config_manager().get("logging.audit_max_entries", 5000)
        self.max_entries = max(1, int(max_entries))
        self.file_logger = get_logger("audit")

    def log_action(
        self,
        action_type: str,
        actor: str,
        details: Optional[dict] = None,
        outcome: str = "success",
        item_id: Optional[str] = None,
        order_id: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> None:
        """
        Log an action to the audit trail.

        Args:
            action_type: Type of action
            actor: Who performed the action (user, system)
            details: Additional details
            outcome: Action outcome (success, failure, noop)
            item_id: Related inventory item ID
            order_id: Related purchase order ID
            error_message: Error message if failed
        """
        log_entry = {
            "id": str(uuid.uuid4()),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "actionType": action_type,
            "actor": actor,
            "details": details or {},
            "outcome": outcome,
            "itemId": item_id,
            "orderId": order_id,
            "errorMessage": error_message,
        }

        self.file_logger.info(
            f"AUDIT: {action_type} by {actor} - {outcome}",
            extra={"audit": log_entry}
        )

        if self.store is not None:
            try:
                with self.store.transaction() as tx:
                    entries = tx.read(self.store.AUDIT_LOG)
                    entries.append(log_entry)
                    tx.write(self.store.AUDIT_LOG, entries[-self.max_entries:])
            except Exception as e:
                self.file_logger.error(f"Failed to write audit log to store: {e}")

    def get_recent_logs(self, limit: int = 100) -> list:
        """
        Get recent audit entries, newest first.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of audit log entries
        """
        if self.store is None:
            return []

        entries = self.store.read(self.store.AUDIT_LOG)
        return list(reversed(entries))[:limit]


# Global logger instance
_logger: Optional[ClinicInventoryLogger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get application logger.

    Args:
        name: Optional child logger name (defaults to the root app logger)

    Returns:
        Logger instance
    """
    global _logger
    if _logger is None:
        _logger = ClinicInventoryLogger()
    return _logger.get_logger(name)

