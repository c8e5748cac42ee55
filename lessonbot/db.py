"""SQLite storage for the lesson schedule and user registrations."""

from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

DB_FILENAME = "scheduler.db"

_ADMIN_REQUEST = "Получен запрос от админа "

_CREATE_SCHEDULER = """
CREATE TABLE IF NOT EXISTS scheduler(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL DEFAULT "",
    title TEXT NOT NULL DEFAULT "",
    date DATETIME NOT NULL DEFAULT ""
)
"""

_CREATE_SCHEDULER_INDEX = "CREATE INDEX IF NOT EXISTS scheduler_date ON scheduler (date)"

_CREATE_REGISTRATIONS = """
CREATE TABLE IF NOT EXISTS registrations (
    user_id INTEGER,
    lesson_id INTEGER,
    UNIQUE(user_id, lesson_id)
)
"""


@dataclass(frozen=True)
class Lesson:
    """A scheduled lesson."""

    id: int
    name: str
    title: str
    date: str


class Database:
    """Lesson schedule stored in an SQLite file."""

    def __init__(self, path):
        target = str(path)
        install = target == ":memory:" or not os.path.exists(target)
        if install:
            log.info("db не найдена, создаём новую")
        self.path = target
        self._conn = sqlite3.connect(target)
        with self._conn:
            if install:
                self._conn.execute(_CREATE_SCHEDULER)
                self._conn.execute(_CREATE_SCHEDULER_INDEX)
                log.info("База данных успешно создана!")
            self._conn.execute(_CREATE_REGISTRATIONS)

    def close(self):
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _lessons(self, query, params=()):
        return [Lesson(*row) for row in self._conn.execute(query, params)]

    # Administrator requests

    def add_lesson(self, name, title, date):
        """Insert a lesson and return its id."""
        log.info(_ADMIN_REQUEST + "на добавление урока")
        with self._conn:
            cursor = self._conn.execute(
                "INSERT INTO scheduler (name, title, date) VALUES (?, ?, ?)",
                (name, title, date),
            )
        return cursor.lastrowid

    def delete_lesson(self, lesson_id):
        """Delete a lesson by id."""
        log.info(_ADMIN_REQUEST + "на удаление урока")
        with self._conn:
            self._conn.execute("DELETE FROM scheduler WHERE id = ?", (lesson_id,))

    def get_admin_lessons(self):
        """Return every lesson someone is registered for, by date."""
        return self._lessons(
            """
            SELECT s.id, s.name, s.title, s.date
            FROM scheduler s
            INNER JOIN registrations r ON s.id = r.lesson_id
            ORDER BY s.date ASC
            """
        )

    # Student requests

    def get_available_lessons(self):
        """Return lessons nobody is registered for, by date."""
        return self._lessons(
            """
            SELECT s.id, s.name, s.title, s.date
            FROM scheduler s
            LEFT JOIN registrations r ON s.id = r.lesson_id
            WHERE r.lesson_id IS NULL
            ORDER BY s.date ASC
            """
        )

    def get_dates_with_available_lessons(self):
        """Return the distinct days (YYYY-MM-DD) that have a free lesson."""
        rows = self._conn.execute(
            """
            SELECT DISTINCT DATE(date) AS day
            FROM scheduler
            WHERE id IN (
                SELECT id FROM scheduler
                EXCEPT
                SELECT lesson_id FROM registrations
            )
            ORDER BY day ASC
            """
        )
        return [day for (day,) in rows]

    def register_user_to_lesson(self, user_id, lesson_id):
        """Register a user if the lesson is still free; return whether it was."""
        try:
            with self._conn:
                cursor = self._conn.execute(
                    """
                    INSERT INTO registrations (user_id, lesson_id)
                    SELECT ?, ?
                    WHERE NOT EXISTS (
                        SELECT 1 FROM registrations WHERE lesson_id = ?
                    )
                    """,
                    (user_id, lesson_id, lesson_id),
                )
        except sqlite3.Error as err:
            log.error("Ошибка при регистрации пользователя: %s", err)
            raise
        return cursor.rowcount == 1

    def get_user_lessons(self, user_id):
        """Return the lessons a user is registered for, by date."""
        return self._lessons(
            """
            SELECT s.id, s.name, s.title, s.date
            FROM scheduler s
            INNER JOIN registrations r ON r.lesson_id = s.id
            WHERE r.user_id = ?
            ORDER BY s.date ASC
            """,
            (user_id,),
        )

    def get_lessons_by_date(self, date):
        """Return free lessons whose date starts with the given prefix."""
        return self._lessons(
            """
            SELECT s.id, s.name, s.title, s.date
            FROM scheduler s
            LEFT JOIN registrations r ON s.id = r.lesson_id
            WHERE r.lesson_id IS NULL AND s.date LIKE ?
            ORDER BY s.date ASC
            """,
            (date + "%",),
        )

    def cancel_user_registration(self, user_id, lesson_id):
        """Remove a user's registration for a lesson."""
        try:
            with self._conn:
                self._conn.execute(
                    "DELETE FROM registrations WHERE user_id = ? AND lesson_id = ?",
                    (user_id, lesson_id),
                )
        except sqlite3.Error as err:
            log.error("Не удалось удалить запись: %s", err)
            raise


def open_database(directory=None):
    """Open scheduler.db in the given directory, or the working directory."""
    base = Path(directory) if directory else Path.cwd()
    return Database(base / DB_FILENAME)