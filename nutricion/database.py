"""Database connection handling and schema creation."""

from __future__ import annotations

import enum
import logging
import re
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pymysql
import pymysql.cursors

log = logging.getLogger(__name__)

_NAMED_PARAM = re.compile(r"(?<!:):([A-Za-z_]\w*)")

_SQLITE_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS users ("
    "user_id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "first_name TEXT NOT NULL, "
    "last_name1 TEXT NOT NULL, "
    "last_name2 TEXT, "
    "gender TEXT NOT NULL, "
    "birth_date TEXT NOT NULL, "
    "activity_level TEXT NOT NULL, "
    "goal TEXT NOT NULL, "
    "created_at TEXT DEFAULT CURRENT_TIMESTAMP"
    ")",
    "CREATE TABLE IF NOT EXISTS health_metrics ("
    "metric_id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "user_id INTEGER NOT NULL, "
    "date TEXT NOT NULL, "
    "weight REAL NOT NULL, "
    "height REAL NOT NULL, "
    "bmi REAL, "
    "body_fat_percentage REAL, "
    "muscle_mass_percentage REAL, "
    "notes TEXT, "
    "created_at TEXT DEFAULT CURRENT_TIMESTAMP, "
    "FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE"
    ")",
)

_MARIADB_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS users ("
    "user_id INTEGER PRIMARY KEY AUTO_INCREMENT, "
    "first_name TEXT NOT NULL, "
    "last_name1 TEXT NOT NULL, "
    "last_name2 TEXT, "
    "gender TEXT NOT NULL, "
    "birth_date TEXT NOT NULL, "
    "activity_level TEXT NOT NULL, "
    "goal TEXT NOT NULL, "
    "created_at DATETIME DEFAULT CURRENT_TIMESTAMP"
    ")",
    "CREATE TABLE IF NOT EXISTS health_metrics ("
    "metric_id INTEGER PRIMARY KEY AUTO_INCREMENT, "
    "user_id INTEGER NOT NULL, "
    "date TEXT NOT NULL, "
    "weight DOUBLE NOT NULL, "
    "height DOUBLE NOT NULL, "
    "bmi DOUBLE, "
    "body_fat_percentage DOUBLE, "
    "muscle_mass_percentage DOUBLE, "
    "notes TEXT, "
    "created_at DATETIME DEFAULT CURRENT_TIMESTAMP, "
    "FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE"
    ")",
)


class DatabaseType(enum.Enum):
    """Supported database back ends."""

    SQLITE = "sqlite"
    MARIADB = "mariadb"


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a statement fails."""


def _dict_row(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {column[0]: value for column, value in zip(cursor.description, row)}


class DatabaseManager:
    """Owns one open connection and the application's schema.

    Statements are written with ``:name`` placeholders for either back
    end; rows come back as dictionaries keyed by column name. Every
    statement is committed as it runs.
    """

    def __init__(self) -> None:
        self.db_type: DatabaseType | None = None
        self.db_name: str = ""
        self.host: str = ""
        self.port: int = 0
        self.user: str = ""
        self._connection: Any = None

    def initialize_sqlite(self, db_file_path: str | Path) -> None:
        """Open (creating if needed) an SQLite file and ensure the tables exist."""
        self.close()
        self.db_type = DatabaseType.SQLITE
        self.db_name = str(db_file_path)

        directory = Path(self.db_name).absolute().parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DatabaseError(f"cannot create directory {directory}: {exc}") from exc

        try:
            connection = sqlite3.connect(self.db_name, isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseError(f"cannot open SQLite database {self.db_name}: {exc}") from exc
        connection.row_factory = _dict_row
        connection.execute("PRAGMA foreign_keys = ON")
        self._connection = connection
        log.info("SQLite database opened at %s", self.db_name)
        self._create_tables(_SQLITE_SCHEMA)

    def initialize_mariadb(
        self, host: str, port: int, db_name: str, user: str, password: str
    ) -> None:
        """Connect to a MariaDB/MySQL server and ensure the tables exist."""
        self.close()
        self.db_type = DatabaseType.MARIADB
        self.host = host
        self.port = port
        self.db_name = db_name
        self.user = user

        try:
            self._connection = pymysql.connect(
                host=host,
                port=port,
                database=db_name,
                user=user,
                password=password,
                autocommit=True,
                cursorclass=pymysql.cursors.DictCursor,
            )
        except pymysql.MySQLError as exc:
            raise DatabaseError(
                f"cannot open MariaDB database {host}:{port}/{db_name}: {exc}"
            ) from exc
        log.info("MariaDB database opened at %s:%s/%s", host, port, db_name)
        self._create_tables(_MARIADB_SCHEMA)

    def _create_tables(self, statements: tuple[str, ...]) -> None:
        for statement in statements:
            try:
                self.execute(statement)
            except DatabaseError:
                self.close()
                raise

    def close(self) -> None:
        """Close the connection if one is open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            log.info("Database closed")

    def is_open(self) -> bool:
        """Whether a connection is currently open."""
        return self._connection is not None

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        """Run one statement with ``:name`` parameters and return its cursor."""
        if self._connection is None:
            raise DatabaseError("database is not open")
        values = dict(params or {})
        if self.db_type is DatabaseType.MARIADB:
            converted = _NAMED_PARAM.sub(r"%(\1)s", sql.replace("%", "%%"))
            cursor = self._connection.cursor()
            try:
                cursor.execute(converted, values)
            except pymysql.MySQLError as exc:
                raise DatabaseError(str(exc)) from exc
            return cursor
        try:
            return self._connection.execute(sql, values)
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def __enter__(self) -> DatabaseManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()