"""SQLite database of license keys for the access gate."""

import argparse
import logging
import sqlite3
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


class LicenseStoreError(Exception):
    """The license database could not be queried or updated."""

    pass


@dataclass(frozen=True)
class LicenseRecord:
    """A stored license key."""

    key: str
    is_active: bool
    expires_at: datetime
    created_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class LicenseStore:
    """Manage license keys using SQLite.

    A key grants access while it is active and its expiry lies in the
    future.  Timestamps are stored as UTC ISO-8601 strings so that string
    comparison in SQL matches chronological order.
    """

    def __init__(self, db_path: Path):
        """Initialize the license database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()
        logger.info(f"Initialized license database at {self.db_path}")

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS license_keys (
                        key TEXT PRIMARY KEY,
                        is_active INTEGER NOT NULL DEFAULT 1,
                        expires_at TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                    """)
                conn.commit()
        except sqlite3.Error as e:
            raise LicenseStoreError(f"Could not initialize license database: {e}") from e

    def add_license(self, key: str, expires_at: datetime, is_active: bool = True) -> bool:
        """Add a license key.

        Args:
            key: License key string
            expires_at: Moment after which the key stops working
            is_active: Whether the key is usable

        Returns:
            True if added, False if the key already exists

        Raises:
            LicenseStoreError: If the database cannot be written
        """
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT OR IGNORE INTO license_keys (key, is_active, expires_at, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        key,
                        int(is_active),
                        _to_utc(expires_at).isoformat(),
                        _utcnow().isoformat(),
                    ),
                )
                conn.commit()
                was_inserted = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise LicenseStoreError(f"Could not add license: {e}") from e

        if was_inserted:
            logger.info(f"Added license expiring {expires_at.isoformat()}")
        else:
            logger.debug("License already exists")
        return was_inserted

    def deactivate(self, key: str) -> bool:
        """Deactivate a license key.

        Returns:
            True if a key was deactivated, False if it does not exist

        Raises:
            LicenseStoreError: If the database cannot be written
        """
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "UPDATE license_keys SET is_active = 0 WHERE key = ?",
                    (key,),
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise LicenseStoreError(f"Could not deactivate license: {e}") from e

    def find_active(self, key: str, now: datetime | None = None) -> LicenseRecord | None:
        """Look up a key that is active and not yet expired.

        Args:
            key: License key as entered by the user
            now: Reference time (defaults to the current UTC time)

        Returns:
            The matching record, or None if the key is unknown, inactive or expired

        Raises:
            LicenseStoreError: If the database cannot be queried
        """
        reference = _to_utc(now) if now is not None else _utcnow()

        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    SELECT key, is_active, expires_at, created_at FROM license_keys
                    WHERE key = ? AND is_active = 1 AND expires_at > ?
                    LIMIT 1
                    """,
                    (key, reference.isoformat()),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error looking up license: {e}")
            raise LicenseStoreError(f"Could not look up license: {e}") from e

        if row is None:
            return None

        return LicenseRecord(
            key=row[0],
            is_active=bool(row[1]),
            expires_at=datetime.fromisoformat(row[2]),
            created_at=datetime.fromisoformat(row[3]),
        )


def main(argv: list[str] | None = None) -> int:
    """Manage license keys from the command line."""
    from smartlister.core.config import config

    parser = argparse.ArgumentParser(description="Manage Smart Lister license keys")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="License database path (default: <data_dir>/licenses.db)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Issue a license key")
    add_parser.add_argument("key")
    add_parser.add_argument("--days", type=int, default=30, help="Validity in days (default: 30)")

    deactivate_parser = subparsers.add_parser("deactivate", help="Revoke a license key")
    deactivate_parser.add_argument("key")

    check_parser = subparsers.add_parser("check", help="Check whether a key is usable")
    check_parser.add_argument("key")

    args = parser.parse_args(argv)
    store = LicenseStore(args.db or config.license_db_path)

    try:
        if args.command == "add":
            expires_at = _utcnow() + timedelta(days=args.days)
            if not store.add_license(args.key, expires_at):
                print(f"License {args.key} already exists", file=sys.stderr)
                return 1
            print(f"Added {args.key}, expires {expires_at.isoformat()}")
        elif args.command == "deactivate":
            if not store.deactivate(args.key):
                print(f"License {args.key} not found", file=sys.stderr)
                return 1
            print(f"Deactivated {args.key}")
        else:
            record = store.find_active(args.key)
            if record is None:
                print(f"License {args.key} is not usable")
                return 1
            print(f"License {args.key} is active until {record.expires_at.isoformat()}")
    except LicenseStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
