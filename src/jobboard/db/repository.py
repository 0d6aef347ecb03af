"""Database operations for the job board."""

import asyncio
import hashlib
import json
import logging
import os
import secrets
import sqlite3
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import aiosqlite

from ..config import settings
from ..models.application_models import Session

# Set up logging
logger = logging.getLogger(__name__)

# Current schema version
SCHEMA_VERSION = 1

# Password hashing
PBKDF2_ITERATIONS = 200_000

TABLES = (
    "jobs",
    "applications",
    "general_profiles",
    "locations",
    "industries",
    "admin_users",
    "sessions",
)

# Columns stored as JSON text and decoded on read.
JSON_COLUMNS = {
    "jobs": {"location", "experience", "industry", "keyskills", "responsibilities", "salary_range"},
}

# Columns stored as 0/1 and decoded to bool on read.
BOOL_COLUMNS = {
    "applications": {"processed"},
    "general_profiles": {"processed"},
}

# Primary key column per table.
PRIMARY_KEYS = {"sessions": "token"}


class DatabaseError(Exception):
    """Custom exception for database operations."""

    pass


class DuplicateRecordError(DatabaseError):
    """Exception raised when an insert violates a uniqueness constraint."""

    pass


class RecordNotFoundError(DatabaseError):
    """Exception raised when an update or delete matches no row."""

    pass


class InvalidCredentialsError(DatabaseError):
    """Exception raised when sign-in credentials do not match a user."""

    pass


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash a password as ``salt$hexdigest`` with PBKDF2-SHA256."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS
    )
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return secrets.compare_digest(hash_password(password, salt), stored)


class JobBoardDatabase:
    """Handles database operations for job board data.

    One ``aiosqlite`` connection is shared by all callers; statements are
    serialised through an ``asyncio.Lock``.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database handle.

        Args:
            db_path: Path to the database file, ``:memory:`` for a throwaway store
        """
        self.db_path = db_path or settings.database_path
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()
        self._columns: Dict[str, set] = {}

        # Ensure the database directory exists (only if directory part is non-empty)
        if self.db_path != ":memory:":
            db_dirname = os.path.dirname(self.db_path)
            if db_dirname:
                os.makedirs(db_dirname, exist_ok=True)

        logger.info(f"Database handle created for: {self.db_path}")

    async def ainit(self) -> "JobBoardDatabase":
        """
        Async helper so callers can do:

            db = await JobBoardDatabase(path).ainit()

        It opens the connection and runs any pending migrations.
        """
        if self._conn is None:
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            # Enable foreign key constraints
            await self._conn.execute("PRAGMA foreign_keys = ON")
            # Set busy timeout to handle concurrent access
            await self._conn.execute("PRAGMA busy_timeout = 5000")
        await self.init_db()
        return self

    async def check_connection(self) -> bool:
        """Check if the database connection is working."""
        if self._conn is None:
            return False
        try:
            async with self._conn.execute("SELECT 1") as cursor:
                await cursor.fetchone()
            return True
        except aiosqlite.Error:
            return False

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DatabaseError("Database is not initialised; call ainit() first")
        return self._conn

    async def init_db(self) -> None:
        """Initialize the database and create necessary tables."""
        try:
            logger.info("Creating database tables...")
            async with self._lock:
                cursor = await self.conn.cursor()
                await cursor.execute("""
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY,
                        applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                await cursor.execute(
                    "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
                )
                result = await cursor.fetchone()
                current_version = result[0] if result else 0

                if current_version < SCHEMA_VERSION:
                    logger.info(
                        f"Upgrading schema from version {current_version} to {SCHEMA_VERSION}"
                    )
                    await self._create_tables(cursor)
                    await cursor.execute(
                        "INSERT INTO schema_version (version) VALUES (?)",
                        (SCHEMA_VERSION,),
                    )
                    logger.info(f"Schema upgraded to version {SCHEMA_VERSION}")
                else:
                    logger.info(
                        f"Database schema is up to date (version {current_version})"
                    )
                await self.conn.commit()
                await cursor.close()

                for table in TABLES:
                    async with self.conn.execute(f"PRAGMA table_info({table})") as info:
                        self._columns[table] = {row[1] for row in await info.fetchall()}
            logger.info("Database initialization completed successfully")
        except aiosqlite.Error as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise DatabaseError(f"Failed to initialize database: {str(e)}")

    async def _create_tables(self, cursor: aiosqlite.Cursor) -> None:
        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS industries (
                id TEXT PRIMARY KEY,
                name TEXT UNIQUE NOT NULL COLLATE NOCASE,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        logger.info("Created industries table")

        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS locations (
                id TEXT PRIMARY KEY,
                city TEXT NOT NULL COLLATE NOCASE,
                state TEXT NOT NULL COLLATE NOCASE,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (city, state)
            )
        """)
        logger.info("Created locations table")

        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id TEXT PRIMARY KEY,
                job_code TEXT UNIQUE NOT NULL,
                position TEXT NOT NULL,
                location TEXT NOT NULL,
                experience TEXT NOT NULL,
                industry TEXT NOT NULL,
                department TEXT,
                keyskills TEXT NOT NULL DEFAULT '[]',
                description TEXT NOT NULL,
                responsibilities TEXT NOT NULL DEFAULT '[]',
                salary_range TEXT,
                ctc TEXT,
                gender TEXT,
                status TEXT NOT NULL DEFAULT 'Draft'
                    CHECK (status IN ('Published', 'Draft')),
                dateposted DATETIME DEFAULT CURRENT_TIMESTAMP,
                user_id TEXT
            )
        """)
        await cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status)"
        )
        logger.info("Created jobs table")

        applicant_columns = """
                fullname TEXT NOT NULL,
                email TEXT NOT NULL,
                phone TEXT NOT NULL,
                yearsofexperience TEXT NOT NULL,
                currentcompany TEXT NOT NULL,
                currentdesignation TEXT NOT NULL,
                currentctc TEXT NOT NULL,
                currenttakehome TEXT NOT NULL,
                expectedctc TEXT NOT NULL,
                noticeperiod TEXT NOT NULL,
                location TEXT NOT NULL,
                department TEXT NOT NULL,
                otherdepartment TEXT,
                resume_url TEXT NOT NULL,
                processed INTEGER NOT NULL DEFAULT 0,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        """
        await cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS applications (
                id TEXT PRIMARY KEY,
                job_id TEXT REFERENCES jobs(id) ON DELETE SET NULL,
                {applicant_columns}
            )
        """)
        await cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_applications_job ON applications(job_id)"
        )
        logger.info("Created applications table")

        await cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS general_profiles (
                id TEXT PRIMARY KEY,
                {applicant_columns},
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        logger.info("Created general_profiles table")

        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS admin_users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL COLLATE NOCASE,
                password_hash TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        await cursor.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                token TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES admin_users(id) ON DELETE CASCADE,
                expires_at DATETIME NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        logger.info("Created admin_users and sessions tables")

    # ------------------------------------------------------------------
    # Row encoding
    # ------------------------------------------------------------------

    def _check_columns(self, table: str, columns: Iterable[str]) -> None:
        if table not in TABLES:
            raise DatabaseError(f"Unknown table: {table}")
        unknown = set(columns) - self._columns.get(table, set())
        if unknown:
            raise DatabaseError(f"Unknown column(s) for {table}: {sorted(unknown)}")

    @staticmethod
    def _encode(table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        encoded = {}
        for key, value in row.items():
            if key in JSON_COLUMNS.get(table, ()) and value is not None and not isinstance(value, str):
                value = json.dumps(value, default=str)
            elif isinstance(value, bool):
                value = int(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            encoded[key] = value
        return encoded

    @staticmethod
    def _decode(table: str, row: aiosqlite.Row) -> Dict[str, Any]:
        decoded = dict(row)
        for key in JSON_COLUMNS.get(table, ()):
            value = decoded.get(key)
            if isinstance(value, str):
                try:
                    decoded[key] = json.loads(value)
                except json.JSONDecodeError:
                    # Legacy freeform value; the record adapter handles it
                    pass
        for key in BOOL_COLUMNS.get(table, ()):
            if key in decoded and decoded[key] is not None:
                decoded[key] = bool(decoded[key])
        return decoded

    @staticmethod
    def _wrap_error(op: str, table: str, e: Exception) -> DatabaseError:
        if isinstance(e, sqlite3.IntegrityError) and "UNIQUE constraint failed" in str(e):
            return DuplicateRecordError(f"Duplicate record in {table}: {str(e)}")
        return DatabaseError(f"Failed to {op} {table}: {str(e)}")

    # ------------------------------------------------------------------
    # Generic table operations
    # ------------------------------------------------------------------

    async def query(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        in_filters: Optional[Dict[str, Iterable[Any]]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows matching equality and membership filters.

        Args:
            table: Table name
            filters: ``column -> value`` equality predicates (ANDed)
            order_by: Column to order by
            descending: Order direction
            in_filters: ``column -> values`` membership predicates (ANDed)
            limit: Optional maximum number of rows

        Returns:
            List[Dict[str, Any]]: Decoded rows
        """
        filters = filters or {}
        in_filters = {k: list(v) for k, v in (in_filters or {}).items()}
        self._check_columns(
            table, list(filters) + list(in_filters) + ([order_by] if order_by else [])
        )

        clauses, params = [], []
        for column, value in self._encode(table, filters).items():
            if value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(value)
        for column, values in in_filters.items():
            if not values:
                return []
            clauses.append(f"{column} IN ({', '.join('?' for _ in values)})")
            params.extend(values)

        sql = f"SELECT * FROM {table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        if limit:
            sql += " LIMIT ?"
            params.append(limit)

        try:
            async with self._lock:
                async with self.conn.execute(sql, params) as cursor:
                    rows = await cursor.fetchall()
            return [self._decode(table, row) for row in rows]
        except aiosqlite.Error as e:
            logger.error(f"Error querying {table}: {str(e)}")
            raise self._wrap_error("query", table, e)

    async def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one row by primary key."""
        key = PRIMARY_KEYS.get(table, "id")
        rows = await self.query(table, {key: record_id}, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it as stored.

        Raises:
            DuplicateRecordError: If a uniqueness constraint is violated
            DatabaseError: On any other failure
        """
        key = PRIMARY_KEYS.get(table, "id")
        row = dict(row)
        if not row.get(key):
            row[key] = str(uuid.uuid4())
        self._check_columns(table, row)
        encoded = self._encode(table, row)
        columns = ", ".join(encoded)
        placeholders = ", ".join("?" for _ in encoded)
        try:
            async with self._lock:
                await self.conn.execute(
                    f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                    list(encoded.values()),
                )
                await self.conn.commit()
        except aiosqlite.Error as e:
            await self.conn.rollback()
            logger.error(f"Error inserting into {table}: {str(e)}")
            raise self._wrap_error("insert into", table, e)
        return await self.get(table, row[key])

    async def insert_or_ignore(self, table: str, row: Dict[str, Any]) -> bool:
        """Insert a row, treating a uniqueness violation as success.

        Returns:
            bool: True if a new row was written, False if it already existed
        """
        try:
            await self.insert(table, row)
            return True
        except DuplicateRecordError:
            logger.debug(f"Row already present in {table}; ignoring duplicate")
            return False

    async def update(
        self, table: str, record_id: str, partial: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Apply a partial update to one row and return the updated row.

        Raises:
            RecordNotFoundError: If no row has ``record_id``
        """
        key = PRIMARY_KEYS.get(table, "id")
        partial = {k: v for k, v in partial.items() if k != key}
        if not partial:
            raise DatabaseError(f"Nothing to update in {table}")
        self._check_columns(table, partial)
        encoded = self._encode(table, partial)
        assignments = ", ".join(f"{column} = ?" for column in encoded)
        try:
            async with self._lock:
                cursor = await self.conn.execute(
                    f"UPDATE {table} SET {assignments} WHERE {key} = ?",
                    list(encoded.values()) + [record_id],
                )
                rowcount = cursor.rowcount
                await self.conn.commit()
        except aiosqlite.Error as e:
            await self.conn.rollback()
            logger.error(f"Error updating {table}: {str(e)}")
            raise self._wrap_error("update", table, e)
        if rowcount == 0:
            raise RecordNotFoundError(f"No row {record_id} in {table}")
        return await self.get(table, record_id)

    async def upsert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row, or update the existing row with the same primary key."""
        key = PRIMARY_KEYS.get(table, "id")
        if row.get(key) and await self.get(table, row[key]) is not None:
            return await self.update(table, row[key], row)
        return await self.insert(table, row)

    async def delete(self, table: str, record_id: str) -> None:
        """Delete one row by primary key.

        Raises:
            RecordNotFoundError: If no row has ``record_id``
        """
        key = PRIMARY_KEYS.get(table, "id")
        self._check_columns(table, [key])
        try:
            async with self._lock:
                cursor = await self.conn.execute(
                    f"DELETE FROM {table} WHERE {key} = ?", (record_id,)
                )
                rowcount = cursor.rowcount
                await self.conn.commit()
        except aiosqlite.Error as e:
            await self.conn.rollback()
            logger.error(f"Error deleting from {table}: {str(e)}")
            raise self._wrap_error("delete from", table, e)
        if rowcount == 0:
            raise RecordNotFoundError(f"No row {record_id} in {table}")

    # ------------------------------------------------------------------
    # Authentication sessions
    # ------------------------------------------------------------------

    async def create_admin_user(self, email: str, password: str) -> Dict[str, Any]:
        """Create an admin user; raises DuplicateRecordError if the email exists."""
        user = await self.insert(
            "admin_users",
            {"email": email.strip().lower(), "password_hash": hash_password(password)},
        )
        logger.info("Created admin user", extra={"extra": {"user_id": user["id"]}})
        return user

    async def sign_in(self, email: str, password: str) -> Session:
        """Check credentials and open a new session.

        Raises:
            InvalidCredentialsError: If the email/password pair does not match
        """
        users = await self.query("admin_users", {"email": email.strip().lower()}, limit=1)
        if not users or not verify_password(password, users[0]["password_hash"]):
            raise InvalidCredentialsError("Invalid email or password")

        user = users[0]
        expires_at = datetime.utcnow() + timedelta(hours=settings.session_ttl_hours)
        token = secrets.token_urlsafe(32)
        await self.insert(
            "sessions",
            {"token": token, "user_id": user["id"], "expires_at": expires_at},
        )
        return Session(token=token, user_id=user["id"], email=user["email"], expires_at=expires_at)

    async def get_session(self, token: Optional[str]) -> Optional[Session]:
        """Return the live session for ``token``, or None if missing or expired."""
        if not token:
            return None
        row = await self.get("sessions", token)
        if row is None:
            return None
        expires_at = datetime.fromisoformat(str(row["expires_at"]))
        if expires_at <= datetime.utcnow():
            await self.delete("sessions", token)
            return None
        user = await self.get("admin_users", row["user_id"])
        if user is None:
            return None
        return Session(token=token, user_id=user["id"], email=user["email"], expires_at=expires_at)

    async def sign_out(self, token: str) -> None:
        """Revoke a session; signing out an unknown token is not an error."""
        try:
            await self.delete("sessions", token)
        except RecordNotFoundError:
            logger.debug("Sign-out for an unknown session")
