"""store/results.py — Lightweight sample ledger backed by SQLite."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS samples (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    policy      TEXT    NOT NULL,
    target      INTEGER NOT NULL,
    method      TEXT    NOT NULL,
    tilt        REAL,
    attempts    INTEGER,
    weight      INTEGER NOT NULL,
    parts       TEXT    NOT NULL,
    created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS samples_policy_target ON samples (policy, target);
"""


class SampleDB:
    def __init__(self, db_path: str | Path = "samples.sqlite") -> None:
        self._conn = sqlite3.connect(str(db_path))
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.executescript(_SCHEMA)
        logger.info("Sample DB opened at %s", db_path)

    def __enter__(self) -> "SampleDB":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def insert(
        self,
        policy: str,
        target: int,
        method: str,
        multiplicities: Mapping[int, int],
        tilt: float | None = None,
        attempts: int | None = None,
    ) -> int:
        weight = sum(int(p) * int(c) for p, c in multiplicities.items())
        # JSON object keys must be strings.
        parts = json.dumps({str(p): int(c) for p, c in sorted(multiplicities.items()) if c > 0})
        cur = self._conn.execute(
            "INSERT INTO samples (policy, target, method, tilt, attempts, weight, parts) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (policy, target, method, tilt, attempts, weight, parts),
        )
        self._conn.commit()
        return int(cur.lastrowid)

    def fetch(
        self, policy: str | None = None, target: int | None = None, limit: int = 100
    ) -> list[dict[str, Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        if policy is not None:
            clauses.append("policy = ?")
            params.append(policy)
        if target is not None:
            clauses.append("target = ?")
            params.append(target)
        where = f"WHERE {' AND '.join(clauses)} " if clauses else ""
        cur = self._conn.execute(
            "SELECT id, policy, target, method, tilt, attempts, weight, parts "
            f"FROM samples {where}ORDER BY id LIMIT ?",
            (*params, limit),
        )
        cols = [d[0] for d in cur.description]
        rows = [dict(zip(cols, row)) for row in cur.fetchall()]
        for row in rows:
            row["parts"] = {int(p): c for p, c in json.loads(row["parts"]).items()}
        return rows

    def count(self) -> int:
        return int(self._conn.execute("SELECT COUNT(*) FROM samples").fetchone()[0])

    def close(self) -> None:
        self._conn.close()
