"""SQLite database for image metadata, AI labels and tags."""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from photofind import config
from photofind.search.filters import build_where_clause
from photofind.search.models import AILabels, CandidateRecord, StructuredQuery, to_local_naive

logger = logging.getLogger(__name__)


class SQLiteStore:
    """Manages SQLite database for images, tags and image/tag links."""

    # Class-level lock for write serialization
    _write_lock = threading.Lock()

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection."""
        self.db_path = str(db_path or config.DB_PATH)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA busy_timeout=30000")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _get_connection(self, readonly: bool = False):
        """Context manager for database connections with WAL mode."""
        conn = self._connect()
        if readonly:
            conn.execute("PRAGMA query_only=ON")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self):
        """Context manager for write transactions with locking."""
        with self._write_lock:
            conn = self._connect()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    def _init_schema(self) -> None:
        """Create database tables if they don't exist."""
        with self._transaction() as conn:
            cursor = conn.cursor()

            # Images table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS images (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    title TEXT,
                    description TEXT,
                    width INTEGER,
                    height INTEGER,
                    file_size INTEGER,
                    mime_type TEXT,
                    is_favorite INTEGER NOT NULL DEFAULT 0,
                    ai_labels TEXT,
                    ai_confidence REAL,
                    taken_at TEXT,
                    city TEXT,
                    state TEXT,
                    country TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    deleted_at TEXT
                )
            """)

            # Tags table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL DEFAULT 'CUSTOM',
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(name, type)
                )
            """)

            # Image <-> tag links
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS image_tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    image_id INTEGER NOT NULL,
                    tag_id INTEGER NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(image_id, tag_id),
                    FOREIGN KEY (image_id) REFERENCES images(id),
                    FOREIGN KEY (tag_id) REFERENCES tags(id)
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_images_taken_at ON images(taken_at)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_images_created_at ON images(created_at)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_image_tags_image ON image_tags(image_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_tags_name ON tags(name)")

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def add_image(
        self,
        name: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        file_size: Optional[int] = None,
        mime_type: Optional[str] = None,
        is_favorite: bool = False,
        ai_labels: Optional[Dict[str, List[str]]] = None,
        ai_confidence: Optional[float] = None,
        taken_at: Optional[datetime] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        country: Optional[str] = None,
    ) -> int:
        """Add an image to the database. Returns image_id."""
        # Stored as naive local time, same as parsed date ranges
        taken_at = to_local_naive(taken_at)

        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO images (
                    name, title, description, width, height, file_size, mime_type,
                    is_favorite, ai_labels, ai_confidence, taken_at, city, state, country
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    name,
                    title,
                    description,
                    width,
                    height,
                    file_size,
                    mime_type,
                    int(is_favorite),
                    json.dumps(ai_labels) if ai_labels is not None else None,
                    ai_confidence,
                    taken_at.isoformat() if taken_at else None,
                    city,
                    state,
                    country,
                ),
            )
            return cursor.lastrowid

    def get_image(self, image_id: int) -> Optional[CandidateRecord]:
        """Get a non-deleted image by ID."""
        with self._get_connection(readonly=True) as conn:
            row = conn.execute(
                "SELECT * FROM images WHERE id = ? AND deleted_at IS NULL",
                (image_id,),
            ).fetchone()
            if not row:
                return None
            tags = self._tag_names_for_images(conn, [row["id"]])
        return self._row_to_record(row, tags.get(row["id"], []))

    def get_all_images(self) -> List[CandidateRecord]:
        """Get all non-deleted images, newest first."""
        with self._get_connection(readonly=True) as conn:
            rows = conn.execute(
                "SELECT * FROM images WHERE deleted_at IS NULL ORDER BY created_at DESC, id DESC"
            ).fetchall()
            tags = self._tag_names_for_images(conn, [row["id"] for row in rows])
        return [self._row_to_record(row, tags.get(row["id"], [])) for row in rows]

    def soft_delete_image(self, image_id: int) -> bool:
        """Move an image to the trash. Returns False if it was not found."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE images SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
                (datetime.now().isoformat(), image_id),
            )
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def add_tag_to_image(self, image_id: int, tag: str, tag_type: str = "CUSTOM") -> int:
        """
        Attach a tag to an image, creating the tag if needed. Returns tag_id.
        Tag names are trimmed; case is preserved since place names are tags too.
        """
        name = (tag or "").strip()
        if not name:
            raise ValueError("Tag cannot be empty")
        if tag_type not in config.TAG_TYPES:
            raise ValueError(f"Unknown tag type: {tag_type}")

        with self._transaction() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO tags (name, type) VALUES (?, ?)",
                (name, tag_type),
            )
            tag_id = conn.execute(
                "SELECT id FROM tags WHERE name = ? AND type = ?",
                (name, tag_type),
            ).fetchone()["id"]
            conn.execute(
                "INSERT OR IGNORE INTO image_tags (image_id, tag_id) VALUES (?, ?)",
                (image_id, tag_id),
            )
            return tag_id

    def get_tags_for_image(self, image_id: int) -> List[Dict]:
        """Get all tags attached to an image."""
        with self._get_connection(readonly=True) as conn:
            rows = conn.execute(
                """
                SELECT t.id, t.name, t.type FROM tags t
                INNER JOIN image_tags it ON t.id = it.tag_id
                WHERE it.image_id = ?
                ORDER BY t.name
                """,
                (image_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def get_all_tags_with_counts(self) -> List[Dict]:
        """Get all tags with the number of non-deleted images using them."""
        with self._get_connection(readonly=True) as conn:
            rows = conn.execute(
                """
                SELECT t.id, t.name, t.type, COUNT(DISTINCT i.id) AS image_count
                FROM tags t
                LEFT JOIN image_tags it ON t.id = it.tag_id
                LEFT JOIN images i ON i.id = it.image_id AND i.deleted_at IS NULL
                GROUP BY t.id
                ORDER BY image_count DESC, t.name ASC
                """
            ).fetchall()
        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_candidates(
        self,
        parsed: StructuredQuery,
        page: int = 1,
        limit: int = config.SEARCH_DEFAULT_LIMIT,
    ) -> Tuple[List[CandidateRecord], int]:
        """
        Fetch one page of images matching the coarse filter for a parsed query.

        Returns:
            Tuple of (candidate records for the page, total matching images)
        """
        where, params = build_where_clause(parsed)
        offset = (page - 1) * limit

        with self._get_connection(readonly=True) as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM images i WHERE {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"""
                SELECT i.* FROM images i
                WHERE {where}
                ORDER BY i.created_at DESC, i.id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ).fetchall()
            tags = self._tag_names_for_images(conn, [row["id"] for row in rows])

        logger.debug(f"Candidate query matched {total} images, page {page} has {len(rows)}")
        return [self._row_to_record(row, tags.get(row["id"], [])) for row in rows], total

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _tag_names_for_images(conn: sqlite3.Connection, image_ids: List[int]) -> Dict[int, List[str]]:
        if not image_ids:
            return {}
        placeholders = ", ".join("?" for _ in image_ids)
        rows = conn.execute(
            f"""
            SELECT it.image_id, t.name FROM image_tags it
            INNER JOIN tags t ON t.id = it.tag_id
            WHERE it.image_id IN ({placeholders})
            ORDER BY t.name
            """,
            image_ids,
        ).fetchall()
        result: Dict[int, List[str]] = {}
        for row in rows:
            result.setdefault(row["image_id"], []).append(row["name"])
        return result

    @staticmethod
    def _row_to_record(row: sqlite3.Row, tag_names: List[str]) -> CandidateRecord:
        ai_labels = json.loads(row["ai_labels"]) if row["ai_labels"] else None
        return CandidateRecord(
            id=row["id"],
            name=row["name"],
            title=row["title"],
            description=row["description"],
            tag_names=tag_names,
            ai_labels=AILabels(**ai_labels) if isinstance(ai_labels, dict) else None,
            ai_confidence=row["ai_confidence"],
            taken_at=datetime.fromisoformat(row["taken_at"]) if row["taken_at"] else None,
            width=row["width"],
            height=row["height"],
            file_size=row["file_size"],
            mime_type=row["mime_type"],
            is_favorite=bool(row["is_favorite"]),
            city=row["city"],
            state=row["state"],
            country=row["country"],
            created_at=row["created_at"],
        )
