from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from resume_match.core.config import settings


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_analysis_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                provider TEXT NOT NULL,
                model TEXT NOT NULL,
                status TEXT NOT NULL,
                error_code TEXT,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_ai_analysis_runs_created_at
            ON ai_analysis_runs (created_at)
            """
        )
        conn.commit()


def log_ai_analysis_run(
    *,
    run_id: str,
    provider: str,
    model: str,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO ai_analysis_runs (
                created_at, run_id, provider, model, status, error_code, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now().isoformat(),
                run_id,
                provider,
                model,
                status,
                error_code,
                latency_ms,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"ai_analysis_runs": 0}

    retention_days = max(1, int(settings.analytics_retention_days))
    cutoff = (_utc_now() - timedelta(days=retention_days)).isoformat()
    with sqlite3.connect(_get_db_path()) as conn:
        cur = conn.execute("DELETE FROM ai_analysis_runs WHERE created_at < ?", (cutoff,))
        deleted = int(cur.rowcount or 0)
        conn.commit()
    return {"ai_analysis_runs": deleted}


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_provider_run_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    with sqlite3.connect(_get_db_path()) as conn:
        total = conn.execute("SELECT COUNT(*) FROM ai_analysis_runs").fetchone()[0]
        cur = conn.execute(
            """
            SELECT provider, status, COUNT(*) AS count, CAST(AVG(latency_ms) AS INTEGER) AS avg_latency_ms
            FROM ai_analysis_runs
            GROUP BY provider, status
            ORDER BY provider, status
            """
        )
        rows = [_row_to_dict(cur, row) for row in cur.fetchall()]
    return {"enabled": True, "total": total, "by_provider": rows}
