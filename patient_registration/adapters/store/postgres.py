"""
PostgreSQL record store adapter - Implements RecordStore protocol.

This module provides the PostgreSQL implementation of the domain's
record store port using psycopg3 with raw SQL.

Concurrency Design - Optimistic Versioning:
------------------------------------------
Every row carries a `version` column. compare_and_swap() issues a single
conditional UPDATE keyed on (id, version) and bumps the version in the
same statement, so two completion calls that read the same version can
never both write: the second UPDATE matches zero rows and the domain
re-reads the record. No row lock is held between calls.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from patient_registration.domain.exceptions import StoreError
from patient_registration.domain.model import (
    PersonalData,
    PostalAddress,
    RegistrationRecord,
    RegistrationStatus,
)

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, full_name, national_id, email, postal_code, house_number, "
    "status, pincode, failed_attempts, version"
)


class PostgresRecordStore:
    """
    Implements RecordStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def put(self, record: RegistrationRecord) -> None:
        """
        Write a record unconditionally (insert or overwrite by id).

        The stored version is taken from the record as given.
        """
        sql = f"""
            INSERT INTO registrations ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET full_name = EXCLUDED.full_name,
                national_id = EXCLUDED.national_id,
                email = EXCLUDED.email,
                postal_code = EXCLUDED.postal_code,
                house_number = EXCLUDED.house_number,
                status = EXCLUDED.status,
                pincode = EXCLUDED.pincode,
                failed_attempts = EXCLUDED.failed_attempts,
                version = EXCLUDED.version
        """
        data = record.personal_data
        params = (
            record.id,
            data.full_name,
            data.national_id,
            data.email,
            data.address.postal_code,
            data.address.house_number,
            record.status.value,
            record.pincode,
            record.failed_attempts,
            record.version,
        )
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
        except psycopg.Error as e:
            raise StoreError(f"put {record.id}: {e}") from e

    def get(self, record_id: str) -> RegistrationRecord | None:
        """Read a record by id, or None if absent."""
        sql = f"SELECT {_COLUMNS} FROM registrations WHERE id = %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (record_id,))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StoreError(f"get {record_id}: {e}") from e

        if row is None:
            return None
        return _row_to_record(row)

    def compare_and_swap(
        self, record_id: str, expected_version: int, record: RegistrationRecord
    ) -> bool:
        """
        Replace the mutable columns only if the stored version matches.

        Personal data is immutable after creation and is not rewritten.

        Returns:
            True if exactly one row was updated
        """
        sql = """
            UPDATE registrations
            SET status = %s,
                pincode = %s,
                failed_attempts = %s,
                version = version + 1
            WHERE id = %s AND version = %s
        """
        params = (
            record.status.value,
            record.pincode,
            record.failed_attempts,
            record_id,
            expected_version,
        )
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
                return cursor.rowcount == 1
        except psycopg.Error as e:
            raise StoreError(f"compare_and_swap {record_id}: {e}") from e


def _row_to_record(row: tuple) -> RegistrationRecord:
    (
        record_id,
        full_name,
        national_id,
        email,
        postal_code,
        house_number,
        status,
        pincode,
        failed_attempts,
        version,
    ) = row
    return RegistrationRecord(
        id=record_id,
        personal_data=PersonalData(
            full_name=full_name,
            national_id=national_id,
            email=email,
            address=PostalAddress(postal_code=postal_code, house_number=house_number),
        ),
        pincode=pincode,
        status=RegistrationStatus(status),
        failed_attempts=failed_attempts,
        version=version,
    )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: patient_registration/adapters/store/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
