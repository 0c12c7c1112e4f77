"""SQLite persistence for quiz records."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from .errors import NotFound, ValidationFailure
from .models import FieldError, Quiz

SCHEMA_VERSION = 1

# SQLite INTEGER is a signed 64-bit value; no row can hold an id outside it.
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1

EMPTY_QUESTION = "La pregunta no puede estar vacía"
EMPTY_ANSWER = "La respuesta no puede estar vacía"
DUPLICATE_QUESTION = "Ya existe esta pregunta"


class QuizStore:
    """Database access layer for quizzes."""

    def __init__(self, db_path: Path | str) -> None:
        """Open the database and bring its schema up to date."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )

    def _migrate_to_v1(self) -> None:
        """Create the quizzes table."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS quizzes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    question TEXT NOT NULL UNIQUE,
                    answer TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)

    def count(self) -> int:
        """Return number of stored quizzes."""
        return int(self._conn.execute("SELECT COUNT(*) FROM quizzes").fetchone()[0])

    def ensure_seeded(self, seeds: Iterable[tuple[str, str]]) -> int:
        """Insert seed quizzes when the store is empty; return how many were added."""
        if self.count():
            return 0
        now = datetime.now(UTC).isoformat()
        rows = [(question, answer, now, now) for question, answer in seeds]
        with self._conn:
            self._conn.executemany(
                "INSERT INTO quizzes (question, answer, created_at, updated_at) VALUES (?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def find_all(self) -> list[Quiz]:
        """Return all quizzes ordered by id."""
        rows = self._conn.execute("SELECT id, question, answer FROM quizzes ORDER BY id").fetchall()
        return [_quiz_from_row(row) for row in rows]

    def find_by_id(self, quiz_id: int) -> Quiz | None:
        """Get one quiz by id."""
        if not MIN_ID <= quiz_id <= MAX_ID:
            return None
        row = self._conn.execute("SELECT id, question, answer FROM quizzes WHERE id = ?", (quiz_id,)).fetchone()
        if row is None:
            return None
        return _quiz_from_row(row)

    def create(self, question: str, answer: str) -> Quiz:
        """Validate and insert a new quiz."""
        self._validate(question, answer)
        now = datetime.now(UTC).isoformat()
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO quizzes (question, answer, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (question, answer, now, now),
                )
        except sqlite3.IntegrityError as exc:
            raise ValidationFailure([FieldError("question", DUPLICATE_QUESTION)]) from exc
        row_id = cursor.lastrowid
        if row_id is None:
            raise RuntimeError("Could not create quiz.")
        return Quiz(id=int(row_id), question=question, answer=answer)

    def update(self, quiz: Quiz) -> Quiz:
        """Validate and replace question and answer of an existing quiz.

        Raises NotFound when no quiz has that id, for instance after another
        session deleted it.
        """
        if not MIN_ID <= quiz.id <= MAX_ID:
            raise NotFound(quiz.id)
        self._validate(quiz.question, quiz.answer, exclude_id=quiz.id)
        now = datetime.now(UTC).isoformat()
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "UPDATE quizzes SET question = ?, answer = ?, updated_at = ? WHERE id = ?",
                    (quiz.question, quiz.answer, now, quiz.id),
                )
        except sqlite3.IntegrityError as exc:
            raise ValidationFailure([FieldError("question", DUPLICATE_QUESTION)]) from exc
        if cursor.rowcount == 0:
            raise NotFound(quiz.id)
        return quiz

    def destroy(self, quiz_id: int) -> bool:
        """Delete one quiz; return whether a row was removed."""
        if not MIN_ID <= quiz_id <= MAX_ID:
            return False
        with self._conn:
            cursor = self._conn.execute("DELETE FROM quizzes WHERE id = ?", (quiz_id,))
        return cursor.rowcount > 0

    def _validate(self, question: str, answer: str, exclude_id: int | None = None) -> None:
        """Raise ValidationFailure listing every violated field."""
        errors: list[FieldError] = []
        if not question.strip():
            errors.append(FieldError("question", EMPTY_QUESTION))
        elif self._question_taken(question, exclude_id):
            errors.append(FieldError("question", DUPLICATE_QUESTION))
        if not answer.strip():
            errors.append(FieldError("answer", EMPTY_ANSWER))
        if errors:
            raise ValidationFailure(errors)

    def _question_taken(self, question: str, exclude_id: int | None) -> bool:
        row = self._conn.execute(
            "SELECT id FROM quizzes WHERE question = ? AND id IS NOT ?",
            (question, exclude_id),
        ).fetchone()
        return row is not None

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort connection cleanup."""
        try:
            self.close()
        except Exception:
            pass


def _quiz_from_row(row: sqlite3.Row) -> Quiz:
    return Quiz(id=int(row["id"]), question=str(row["question"]), answer=str(row["answer"]))
