#!/usr/bin/env python3
"""
Read-only access to the Voice Memos metadata database.

The Voice Memos app keeps one row per recording in the ZCLOUDRECORDING table
of CloudRecordings.db. The schema is owned by the app and changes between
macOS releases, so title columns are discovered at query time.

Titles fall back through three columns: the user's label (ZCUSTOMLABEL),
then the app-generated title (ZENCRYPTEDTITLE), then the legacy ZTITLE from
older schemas. Only when none of the present columns holds a non-blank value
is the recording shown as "Untitled". A database that has ZTITLE alone uses
it directly.

Every connection is opened through a SQLite URI with mode=ro: the file is
never created, and any write attempt fails inside SQLite itself.
"""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


RECORDINGS_TABLE = "ZCLOUDRECORDING"

TITLE_COLUMNS = ("ZCUSTOMLABEL", "ZENCRYPTEDTITLE", "ZTITLE")
"""Title columns in order of precedence. The first non-blank value wins."""

UNTITLED = "Untitled"


@dataclass
class VoiceMemo:
    """Represents a recording row from the Voice Memos database."""
    title: str
    date: float
    duration: float
    path: str


def resolve_title(*candidates: Optional[str]) -> str:
    """
    Pick the display title from candidate column values.

    Args:
        *candidates: Title column values in order of precedence

    Returns:
        The first non-blank candidate, or "Untitled" if none qualifies.

    Examples:
        >>> resolve_title("Interview", "Recording 12")
        'Interview'
        >>> resolve_title(None, "Recording 12")
        'Recording 12'
        >>> resolve_title(None, "  ")
        'Untitled'
    """
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return UNTITLED


class VoiceMemosDatabase:
    """
    Read-only view of the Voice Memos CloudRecordings.db database.
    """

    def __init__(self, db_path: Path):
        """
        Initialize database reader.

        Args:
            db_path: Path to the CloudRecordings.db SQLite file
        """
        self.db_path = Path(db_path)

    @contextmanager
    def _get_connection(self):
        """
        Context manager for read-only database connections.

        Yields:
            sqlite3.Connection: Connection opened with mode=ro

        Raises:
            sqlite3.OperationalError: If the database file cannot be opened

        Example:
            with db._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM ZCLOUDRECORDING")
        """
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)

        try:
            conn.row_factory = sqlite3.Row
            yield conn
        except Exception as e:
            logger.error(f"Database error: {e}", exc_info=True)
            raise
        finally:
            conn.close()

    def get_available_title_columns(self) -> List[str]:
        """
        Get the title columns present in the recordings table.

        Returns:
            List of column names from TITLE_COLUMNS, in precedence order,
            that exist in this database's schema.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"PRAGMA table_info({RECORDINGS_TABLE})")
            existing = {row["name"].upper() for row in cursor.fetchall()}

        return [column for column in TITLE_COLUMNS if column in existing]

    def get_memos_longer_than(self, min_duration: float) -> List[VoiceMemo]:
        """
        Load every recording whose duration is strictly greater than min_duration.

        Rows with a missing date, duration or path cannot be played and are
        skipped.

        Args:
            min_duration: Duration threshold in seconds (exclusive)

        Returns:
            List[VoiceMemo]: Qualifying recordings in table order

        Raises:
            sqlite3.Error: If the database cannot be opened or queried
        """
        title_columns = self.get_available_title_columns()
        select_titles = "".join(f"{column}, " for column in title_columns)

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                SELECT {select_titles}ZDATE, ZDURATION, ZPATH
                FROM {RECORDINGS_TABLE}
                WHERE ZDURATION > ?
            """, (min_duration,))
            rows = cursor.fetchall()

        memos: List[VoiceMemo] = []
        skipped = 0
        for row in rows:
            if row["ZDATE"] is None or row["ZDURATION"] is None or not row["ZPATH"]:
                skipped += 1
                continue

            memos.append(VoiceMemo(
                title=resolve_title(*(row[column] for column in title_columns)),
                date=float(row["ZDATE"]),
                duration=float(row["ZDURATION"]),
                path=row["ZPATH"],
            ))

        if skipped:
            logger.warning(f"Skipped {skipped} recordings with missing date, duration or path")
        logger.debug(f"Loaded {len(memos)} recordings longer than {min_duration:.1f}s")

        return memos

    def count_memos(self) -> int:
        """
        Count all recordings regardless of duration.

        Returns:
            int: Number of rows in the recordings table
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) FROM {RECORDINGS_TABLE}")
            return cursor.fetchone()[0]
