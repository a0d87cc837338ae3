"""Shared fixtures: on-disk beads projects backed by SQLite files."""

from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Callable

import pytest

BEADS_SCHEMA = """
CREATE TABLE issues (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    status TEXT NOT NULL
);
CREATE VIEW ready_issues AS SELECT * FROM issues WHERE status = 'open';
INSERT INTO issues (id, title, status) VALUES ('bb-1', 'First', 'open');
INSERT INTO issues (id, title, status) VALUES ('bb-2', 'Second', 'closed');
"""

MakeProject = Callable[..., Path]


@pytest.fixture
def make_project(tmp_path: Path) -> MakeProject:
    """Create ``.beads/metadata.json`` plus an optional embedded database file."""

    def _make(
        database: str = "beads_bb",
        *,
        with_database: bool = True,
        with_schema: bool = True,
        metadata: dict[str, object] | None = None,
    ) -> Path:
        beads_dir = tmp_path / ".beads"
        beads_dir.mkdir(parents=True, exist_ok=True)
        payload = {"backend": "dolt", "dolt_database": database, **(metadata or {})}
        (beads_dir / "metadata.json").write_text(json.dumps(payload))
        if with_database:
            db_path = beads_dir / "dolt" / f"{database}.db"
            db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(sqlite3.connect(db_path)) as conn:
                if with_schema:
                    conn.executescript(BEADS_SCHEMA)
                else:
                    conn.execute("CREATE TABLE unrelated (id INTEGER)")
                conn.commit()
        return beads_dir

    return _make
