"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/database.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Embedded SQLite store for users and archived documents.
                Exposes typed table and index handles plus a small record API
                (get/put/add/delete/query by index). Every call runs as one
                atomic transaction; a store-wide lock serializes access from
                worker threads.
------------------------------------------------------------------------------
"""

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel

from core.exceptions import DuplicateKeyError, StoreUnavailableError
from core.logger import get_logger, log_sql_query
from core.models.document import ArchiveDocument
from core.models.user import User

logger = get_logger("db")


@dataclass(frozen=True)
class Index:
    """A declared secondary index: name plus the ordered columns it covers."""
    name: str
    columns: Tuple[str, ...]

    @property
    def is_composite(self) -> bool:
        return len(self.columns) > 1


@dataclass(frozen=True)
class Table:
    """
    Typed handle for one logical table.
    Callers select tables and indexes through these handles, never by raw string.
    """
    name: str
    model: Type[BaseModel]
    primary_key: str
    auto_increment: bool
    columns: Tuple[str, ...]
    indexes: Tuple[Index, ...] = ()

    def index(self, name: str) -> Index:
        for idx in self.indexes:
            if idx.name == name:
                return idx
        raise ValueError(f"Table '{self.name}' has no index '{name}'")

    def key_of(self, record: BaseModel) -> Any:
        return getattr(record, self.primary_key)


# --- Schema ---

USERS = Table(
    name="users",
    model=User,
    primary_key="id",
    auto_increment=False,
    columns=("id", "email", "password_hash"),
)

BY_USER = Index("user_id", ("user_id",))
BY_USER_FOLDER = Index("user_id_folder", ("user_id", "folder"))
BY_UPLOAD_DATE = Index("upload_date", ("upload_date",))

DOCUMENTS = Table(
    name="documents",
    model=ArchiveDocument,
    primary_key="id",
    auto_increment=True,
    columns=(
        "id", "user_id", "folder", "file_name", "original_file_name",
        "upload_date", "file_data", "mime_type", "file_size",
    ),
    indexes=(BY_USER, BY_USER_FOLDER, BY_UPLOAD_DATE),
)

TABLES: Tuple[Table, ...] = (USERS, DOCUMENTS)

IndexRef = Union[Index, str]


def _to_sql_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class DatabaseManager:
    """
    Manages the SQLite connection, schema initialization/migration and the
    record-level API used by the repositories.
    """

    def __init__(self, db_path: str = "dokumini.db") -> None:
        """
        Opens the store and ensures the schema exists.

        Args:
            db_path: Path to the SQLite database file, or ':memory:'.

        Raises:
            StoreUnavailableError: If the database cannot be opened or initialized.
        """
        self.db_path: str = db_path
        self.connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._connect()
        self.init_db()

    def _connect(self) -> None:
        """
        Establishes the connection and configures PRAGMAs (WAL journal).
        """
        try:
            # check_same_thread=False allows using the connection across worker threads
            self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA journal_mode = WAL")
            logger.info(f"Connected to database at {self.db_path} (WAL mode enabled)")
        except sqlite3.Error as e:
            logger.critical(f"Failed to connect to database: {e}")
            self.connection = None
            raise StoreUnavailableError(
                f"Cannot open database at {self.db_path}", operation="connect", cause=e
            ) from e

    def init_db(self) -> None:
        """
        Creates tables, migrates legacy layouts and creates the secondary indexes.
        """
        create_users_table = """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            password_hash TEXT NOT NULL
        );
        """

        create_documents_table = """
        CREATE TABLE IF NOT EXISTS documents (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            folder TEXT NOT NULL,
            file_name TEXT NOT NULL,
            original_file_name TEXT,
            upload_date TEXT NOT NULL,
            file_data BLOB,
            mime_type TEXT,
            file_size INTEGER -- NULL for records created before size tracking
        );
        """

        with self._transaction("init_db") as conn:
            conn.execute(create_users_table)
            conn.execute(create_documents_table)
            self._migrate_schema(conn)
            for table in TABLES:
                for idx in table.indexes:
                    conn.execute(
                        f"CREATE INDEX IF NOT EXISTS idx_{table.name}_{idx.name} "
                        f"ON {table.name} ({', '.join(idx.columns)})"
                    )

    def _migrate_schema(self, conn: sqlite3.Connection) -> None:
        """Adds columns missing from databases written by older versions."""
        cursor = conn.execute("PRAGMA table_info(documents)")
        cols = [row[1] for row in cursor.fetchall()]

        if "file_size" not in cols:
            logger.info("Migrating: adding 'file_size' to documents")
            conn.execute("ALTER TABLE documents ADD COLUMN file_size INTEGER")

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """
        Runs the enclosed statements as one transaction under the store lock.
        Integrity errors propagate as-is for the caller to translate; every
        other sqlite error becomes StoreUnavailableError.
        """
        with self._lock:
            if self.connection is None:
                raise StoreUnavailableError("Store is not open", operation=operation)
            try:
                with self.connection:
                    yield self.connection
            except sqlite3.IntegrityError:
                raise
            except sqlite3.Error as e:
                logger.error(f"Store failure during {operation}: {e}")
                raise StoreUnavailableError(
                    f"Storage failure during {operation}", operation=operation, cause=e
                ) from e

    # --- Record API ---

    def get(self, table: Table, key: Any) -> Optional[BaseModel]:
        """
        Fetches one record by primary key.

        Returns:
            The record, or None if the key is absent.
        """
        sql = f"SELECT {', '.join(table.columns)} FROM {table.name} WHERE {table.primary_key} = ?"
        params = (_to_sql_value(key),)
        with self._transaction(f"get:{table.name}") as conn:
            row = conn.execute(sql, params).fetchone()
        log_sql_query(sql, params, 1 if row else 0)
        return self._row_to_record(table, row) if row else None

    def put(self, table: Table, record: BaseModel) -> Any:
        """
        Inserts or replaces a record by primary key. Other records are untouched.
        A record without a key in an auto-increment table is inserted fresh.

        Returns:
            The primary key of the written record.
        """
        key = table.key_of(record)
        if key is None and table.auto_increment:
            return self._insert(table, record, replace=False)
        if key is None:
            raise ValueError(f"Record for '{table.name}' has no '{table.primary_key}'")
        return self._insert(table, record, replace=True)

    def add(self, table: Table, record: BaseModel) -> Any:
        """
        Inserts a new record.

        Returns:
            The assigned (auto-increment) or explicit primary key.

        Raises:
            DuplicateKeyError: If the primary key is already taken.
            ValueError: If a non auto-increment table receives a record without key.
        """
        if table.key_of(record) is None and not table.auto_increment:
            raise ValueError(f"Record for '{table.name}' has no '{table.primary_key}'")
        return self._insert(table, record, replace=False)

    def delete(self, table: Table, key: Any) -> None:
        """Removes a record by primary key. Absent keys are a no-op."""
        sql = f"DELETE FROM {table.name} WHERE {table.primary_key} = ?"
        params = (_to_sql_value(key),)
        with self._transaction(f"delete:{table.name}") as conn:
            cursor = conn.execute(sql, params)
        log_sql_query(sql, params, cursor.rowcount)

    def query_by_index(self, table: Table, index: IndexRef, match: Any) -> List[BaseModel]:
        """
        Returns all records whose index columns equal 'match' exactly.

        Args:
            table: The table handle.
            index: An Index handle of this table, or its name.
            match: A scalar for single-column indexes, a tuple for composite ones.

        Returns:
            Matching records ordered by the index columns, then primary key.
        """
        idx = self._resolve_index(table, index)
        values = tuple(match) if isinstance(match, (tuple, list)) else (match,)
        if len(values) != len(idx.columns):
            raise ValueError(
                f"Index '{idx.name}' expects {len(idx.columns)} value(s), got {len(values)}"
            )

        where = " AND ".join(f"{col} = ?" for col in idx.columns)
        order = ", ".join(idx.columns + (table.primary_key,))
        sql = f"SELECT {', '.join(table.columns)} FROM {table.name} WHERE {where} ORDER BY {order}"
        params = tuple(_to_sql_value(v) for v in values)
        return self._select(table, sql, params, f"query:{table.name}.{idx.name}")

    def query_range(
        self,
        table: Table,
        index: IndexRef,
        lower: Any = None,
        upper: Any = None
    ) -> List[BaseModel]:
        """
        Inclusive range scan over a single-column index. Open bounds are None.
        """
        idx = self._resolve_index(table, index)
        if idx.is_composite:
            raise ValueError(f"Range queries need a single-column index, '{idx.name}' is composite")

        col = idx.columns[0]
        clauses: List[str] = []
        params: List[Any] = []
        if lower is not None:
            clauses.append(f"{col} >= ?")
            params.append(_to_sql_value(lower))
        if upper is not None:
            clauses.append(f"{col} <= ?")
            params.append(_to_sql_value(upper))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        sql = (
            f"SELECT {', '.join(table.columns)} FROM {table.name} {where} "
            f"ORDER BY {col}, {table.primary_key}"
        )
        return self._select(table, sql, tuple(params), f"range:{table.name}.{idx.name}")

    def count(self, table: Table) -> int:
        sql = f"SELECT COUNT(*) FROM {table.name}"
        with self._transaction(f"count:{table.name}") as conn:
            return conn.execute(sql).fetchone()[0]

    def close(self) -> None:
        """Closes the connection. Later calls raise StoreUnavailableError."""
        with self._lock:
            if self.connection:
                self.connection.close()
                self.connection = None

    # --- Internals ---

    def _resolve_index(self, table: Table, index: IndexRef) -> Index:
        if isinstance(index, str):
            return table.index(index)
        if index not in table.indexes:
            raise ValueError(f"Index '{index.name}' is not declared on '{table.name}'")
        return index

    def _insert(self, table: Table, record: BaseModel, replace: bool) -> Any:
        data = self._record_to_row(table, record)
        key = data.get(table.primary_key)
        if key is None:
            data.pop(table.primary_key, None)

        cols = list(data.keys())
        verb = "INSERT OR REPLACE" if replace else "INSERT"
        sql = f"{verb} INTO {table.name} ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})"
        params = tuple(data[c] for c in cols)

        try:
            with self._transaction(f"{'put' if replace else 'add'}:{table.name}") as conn:
                cursor = conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            logger.warning(f"Integrity violation on {table.name} (key={key!r}): {e}")
            raise DuplicateKeyError(
                f"Key already exists in {table.name}", table=table.name, key=key, cause=e
            ) from e

        log_sql_query(sql, params, cursor.rowcount)
        return key if key is not None else cursor.lastrowid

    def _select(self, table: Table, sql: str, params: Sequence[Any], operation: str) -> List[BaseModel]:
        with self._transaction(operation) as conn:
            rows = conn.execute(sql, params).fetchall()
        log_sql_query(sql, tuple(params), len(rows))
        return [self._row_to_record(table, row) for row in rows]

    @staticmethod
    def _record_to_row(table: Table, record: BaseModel) -> Dict[str, Any]:
        if not isinstance(record, table.model):
            raise TypeError(f"Expected {table.model.__name__} for '{table.name}', got {type(record).__name__}")
        return {col: _to_sql_value(getattr(record, col)) for col in table.columns}

    @staticmethod
    def _row_to_record(table: Table, row: sqlite3.Row) -> BaseModel:
        return table.model.model_validate({col: row[col] for col in table.columns})
