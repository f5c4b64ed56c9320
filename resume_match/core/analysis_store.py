from __future__ import annotations

import json
import os
import sqlite3
import threading
from datetime import datetime, timezone
from functools import lru_cache
from typing import Protocol

from resume_match.core.config import settings
from resume_match.core.errors import StorageError
from resume_match.schemas.analysis import AnalysisResult, StoredAnalysis


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisStore(Protocol):
    def create(self, result: AnalysisResult, *, job_description: str, resume_text: str) -> StoredAnalysis: ...

    def get(self, analysis_id: int) -> StoredAnalysis | None: ...

    def list_all(self) -> list[StoredAnalysis]: ...


class MemoryAnalysisStore:
    def __init__(self) -> None:
        self._analyses: dict[int, StoredAnalysis] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, result: AnalysisResult, *, job_description: str, resume_text: str) -> StoredAnalysis:
        with self._lock:
            stored = StoredAnalysis(
                **result.model_dump(),
                id=self._next_id,
                created_at=_utc_now(),
                job_description=job_description,
                resume_text=resume_text,
            )
            self._analyses[stored.id] = stored
            self._next_id += 1
        return stored

    def get(self, analysis_id: int) -> StoredAnalysis | None:
        with self._lock:
            return self._analyses.get(analysis_id)

    def list_all(self) -> list[StoredAnalysis]:
        with self._lock:
            analyses = list(self._analyses.values())
        return sorted(analyses, key=lambda item: (item.created_at, item.id), reverse=True)


_SELECT_COLUMNS = """
    id, created_at, job_description, resume_text, match_score, skill_match, experience_match,
    education_match, keyword_match, strengths_json, improvements_json, recommendations_json,
    summary, is_ai_generated
"""


class SQLiteAnalysisStore:
    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analyses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                job_description TEXT NOT NULL,
                resume_text TEXT NOT NULL,
                match_score INTEGER NOT NULL,
                skill_match INTEGER NOT NULL,
                experience_match INTEGER NOT NULL,
                education_match INTEGER NOT NULL,
                keyword_match INTEGER NOT NULL,
                strengths_json TEXT NOT NULL,
                improvements_json TEXT NOT NULL,
                recommendations_json TEXT NOT NULL,
                summary TEXT NOT NULL,
                is_ai_generated INTEGER NOT NULL DEFAULT 1
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_analyses_created_at
            ON analyses (created_at);
            """
        )
        self._conn = conn
        return conn

    @staticmethod
    def _row_to_analysis(row: tuple) -> StoredAnalysis:
        return StoredAnalysis(
            id=row[0],
            created_at=datetime.fromisoformat(row[1]),
            job_description=row[2],
            resume_text=row[3],
            match_score=row[4],
            skill_match=row[5],
            experience_match=row[6],
            education_match=row[7],
            keyword_match=row[8],
            strengths=json.loads(row[9]),
            improvements=json.loads(row[10]),
            recommendations=json.loads(row[11]),
            summary=row[12],
            is_ai_generated=bool(row[13]),
        )

    def create(self, result: AnalysisResult, *, job_description: str, resume_text: str) -> StoredAnalysis:
        created_at = _utc_now()
        try:
            with self._lock:
                conn = self._get_connection()
                cur = conn.execute(
                    """
                    INSERT INTO analyses (
                        created_at, job_description, resume_text, match_score, skill_match,
                        experience_match, education_match, keyword_match, strengths_json,
                        improvements_json, recommendations_json, summary, is_ai_generated
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        created_at.isoformat(),
                        job_description,
                        resume_text,
                        result.match_score,
                        result.skill_match,
                        result.experience_match,
                        result.education_match,
                        result.keyword_match,
                        json.dumps(result.strengths, ensure_ascii=False),
                        json.dumps(result.improvements, ensure_ascii=False),
                        json.dumps(result.recommendations, ensure_ascii=False),
                        result.summary,
                        1 if result.is_ai_generated else 0,
                    ),
                )
                analysis_id = int(cur.lastrowid)
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to store analysis: {exc}") from exc

        return StoredAnalysis(
            **result.model_dump(),
            id=analysis_id,
            created_at=created_at,
            job_description=job_description,
            resume_text=resume_text,
        )

    def get(self, analysis_id: int) -> StoredAnalysis | None:
        try:
            with self._lock:
                cur = self._get_connection().execute(
                    f"SELECT {_SELECT_COLUMNS} FROM analyses WHERE id = ?",
                    (analysis_id,),
                )
                row = cur.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to retrieve analysis: {exc}") from exc
        return self._row_to_analysis(row) if row else None

    def list_all(self) -> list[StoredAnalysis]:
        try:
            with self._lock:
                cur = self._get_connection().execute(
                    f"SELECT {_SELECT_COLUMNS} FROM analyses ORDER BY created_at DESC, id DESC"
                )
                rows = cur.fetchall()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to retrieve analysis history: {exc}") from exc
        return [self._row_to_analysis(row) for row in rows]

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


@lru_cache(maxsize=1)
def get_analysis_store() -> AnalysisStore:
    if settings.storage_backend == "memory":
        return MemoryAnalysisStore()
    return SQLiteAnalysisStore(settings.analysis_db_path)
