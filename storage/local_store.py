# storage/local_store.py

import sqlite3
import logging
from pathlib import Path

import config

logger = logging.getLogger(__name__)

TRANSCRIPT_SLOT = "transcript"
USER_CONTEXT_SLOT = "user_context"


def get_conn(db_path=None):
    path = Path(db_path or config.DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(path)


def init_db(db_path=None):
    conn = get_conn(db_path)
    cur = conn.cursor()

    cur.execute("""
    CREATE TABLE IF NOT EXISTS slots (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """)

    conn.commit()
    conn.close()


# -------------------------------------------------
# Slot access
# -------------------------------------------------

def read_slot(key, db_path=None):
    """
    Returns the raw string stored under `key`, or None.
    Callers own parsing; this layer never interprets the value.
    """
    conn = get_conn(db_path)
    cur = conn.cursor()

    cur.execute("SELECT value FROM slots WHERE key = ?", (key,))
    row = cur.fetchone()
    conn.close()

    return row[0] if row else None


def write_slot(key, value, db_path=None):
    conn = get_conn(db_path)
    cur = conn.cursor()

    cur.execute("""
    INSERT OR REPLACE INTO slots (key, value)
    VALUES (?, ?)
    """, (key, value))

    conn.commit()
    conn.close()
    logger.debug("Wrote slot %s (%d chars)", key, len(value))
