"""
JSON table store with journaled multi-table commits.

Each table is a JSON array in its own file. Every read-modify-write cycle
runs under one process-wide writer lock, and a commit touching several
tables goes through a write-ahead journal so it is applied all or nothing.
"""

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import PersistenceFailure
from ..utils import get_logger

Record = Dict[str, Any]


class StoreTransaction:
    """
    Staged view of the store inside a transaction.

    Reads see earlier staged writes; nothing reaches disk until the
    owning ``JsonStore.transaction`` block exits cleanly.
    """

    def __init__(self, store: "JsonStore") -> None:
        self._store = store
        self._staged: Dict[str, List[Record]] = {}

    def read(self, table: str) -> List[Record]:
        """Return a private copy of a table's records."""
        if table in self._staged:
            return deepcopy(self._staged[table])
        return self._store._read_table(table)

    def write(self, table: str, records: List[Record]) -> None:
        """Stage a full replacement of a table."""
        self._store._check_table(table)
        self._staged[table] = deepcopy(records)

    def append(self, table: str, record: Record) -> None:
        """Stage one record appended to a table."""
        records = self.read(table)
        records.append(record)
        self.write(table, records)

    @property
    def staged_tables(self) -> List[str]:
        return list(self._staged)


class JsonStore:
    """
    Flat-file store for inventory, usage, order and audit tables.

    Missing table files are created as empty arrays. Unreadable or
    malformed files raise PersistenceFailure instead of reading as empty.
    """

    INVENTORY = "inventory"
    USAGE_HISTORY = "usage_history"
    PURCHASE_ORDERS = "purchase_orders"
    AUDIT_LOG = "audit_log"

    TABLES = (INVENTORY, USAGE_HISTORY, PURCHASE_ORDERS, AUDIT_LOG)
    JOURNAL_FILE = "_journal.json"

    def __init__(self, data_dir: str) -> None:
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the table files
        """
        self.data_dir = Path(data_dir)
        self.journal_path = self.data_dir / self.JOURNAL_FILE
        self.logger = get_logger("json_store")
        self._lock = threading.RLock()

    def table_path(self, table: str) -> Path:
        self._check_table(table)
        return self.data_dir / f"{table}.json"

    def initialize(self) -> None:
        """
        Create the data directory and any missing table files, and
        replay a journal left behind by an interrupted commit.
        """
        with self._lock:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistenceFailure(f"Cannot create data directory {self.data_dir}: {e}") from e

            self.recover()

            for table in self.TABLES:
                path = self.table_path(table)
                if not path.exists():
                    self._atomic_write(path, [])
                    self.logger.info(f"Created empty table file: {path}")

    def recover(self) -> bool:
        """
        Apply a leftover commit journal.

        Returns:
            True if a journal was found and replayed
        """
        with self._lock:
            if not self.journal_path.exists():
                return False

            try:
                with open(self.journal_path, "r", encoding="utf-8") as f:
                    journal = json.load(f)
                tables = journal["tables"]
            except (OSError, ValueError, KeyError, TypeError) as e:
                raise PersistenceFailure(f"Unreadable commit journal {self.journal_path}: {e}") from e

            self.logger.warning(
                f"Replaying interrupted commit for tables: {', '.join(sorted(tables))}"
            )
            for table, records in tables.items():
                self._atomic_write(self.table_path(table), records)
            self._remove_journal()
            return True

    def read(self, table: str) -> List[Record]:
        """
        Read all records of a table.

        Applies any pending commit journal first.

        Args:
            table: Table name

        Returns:
            List of record dicts (a private copy)
        """
        with self._lock:
            self.recover()
            return self._read_table(table)

    def append(self, table: str, record: Record) -> None:
        """Append a single record to a table in its own commit."""
        with self.transaction() as tx:
            tx.append(table, record)

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """
        Run a read-modify-write cycle under the writer lock.

        Yields:
            StoreTransaction for staging table writes

        Staged writes are committed together when the block exits
        normally and discarded if it raises. A journal left by an
        interrupted commit is applied first; while it cannot be, the
        store raises PersistenceFailure instead of serving partial state.
        """
        with self._lock:
            self.recover()
            tx = StoreTransaction(self)
            yield tx
            if tx.staged_tables:
                self._commit(tx._staged)

    def _commit(self, staged: Dict[str, List[Record]]) -> None:
        journaled = len(staged) > 1
        if journaled:
            self._atomic_write(self.journal_path, {"tables": staged})

        try:
            for table, records in staged.items():
                self._atomic_write(self.table_path(table), records)
        except PersistenceFailure:
            if not journaled:
                raise
            # Roll forward now; if that fails too the journal stays and
            # blocks the store until it can be applied.
            self.logger.error("Commit interrupted, replaying journal")
            self.recover()
        else:
            if journaled:
                self._remove_journal()

        self.logger.debug(f"Committed tables: {', '.join(staged)}")

    def _read_table(self, table: str) -> List[Record]:
        path = self.table_path(table)
        if not path.exists():
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read table {table}: {e}")
            raise PersistenceFailure(f"Failed to read {table} table: {e}") from e

        if not isinstance(data, list):
            self.logger.error(f"Table {table} does not contain a JSON array")
            raise PersistenceFailure(f"Table {table} is not a JSON array")

        return data

    def _atomic_write(self, path: Path, payload: Any) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise PersistenceFailure(f"Failed to write {path.name}: {e}") from e

    def _remove_journal(self) -> None:
        try:
            self.journal_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceFailure(f"Failed to remove commit journal: {e}") from e

    def _check_table(self, table: str) -> None:
        if table not in self.TABLES:
            raise ValueError(f"Unknown table: {table}")


def create_json_store(data_dir: Optional[str] = None) -> JsonStore:
    """
    Create and initialize a store using configuration defaults.

    Args:
        data_dir: Data directory (defaults to ``storage.data_dir``)

    Returns:
        Initialized JsonStore
    """
    if data_dir is None:
        from ..config import get_config_manager

        data_dir = get_config_manager().get("storage.data_dir", "data")

    store = JsonStore(data_dir)
    store.initialize()
    return store
