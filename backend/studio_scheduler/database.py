import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from studio_scheduler.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- ESTIMATES (raw documents from the estimate authoring side)
-- ============================================================
CREATE TABLE IF NOT EXISTS estimates (
    id          TEXT PRIMARY KEY,
    status      TEXT,
    client_name TEXT,
    payload     TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_estimates_status ON estimates(status);

-- ============================================================
-- TEAM MEMBERS
-- ============================================================
CREATE TABLE IF NOT EXISTS team_members (
    id            TEXT PRIMARY KEY,
    name          TEXT NOT NULL,
    role          TEXT NOT NULL
                  CHECK(role IN ('photographer','videographer','editor',
                                 'production','album_designer')),
    email         TEXT NOT NULL DEFAULT '',
    phone         TEXT NOT NULL DEFAULT '',
    whatsapp      TEXT,
    is_freelancer INTEGER NOT NULL DEFAULT 0,
    availability  TEXT NOT NULL DEFAULT '{}',
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_team_members_role ON team_members(role);

-- ============================================================
-- SCHEDULED EVENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS scheduled_events (
    id                  TEXT PRIMARY KEY,
    estimate_id         TEXT NOT NULL,
    name                TEXT NOT NULL,
    date                TEXT NOT NULL,
    start_time          TEXT NOT NULL,
    end_time            TEXT NOT NULL,
    location            TEXT NOT NULL,
    client_name         TEXT NOT NULL DEFAULT '',
    client_phone        TEXT NOT NULL DEFAULT '',
    client_email        TEXT,
    guest_count         TEXT NOT NULL DEFAULT '0',
    photographers_count INTEGER NOT NULL DEFAULT 1 CHECK(photographers_count >= 0),
    videographers_count INTEGER NOT NULL DEFAULT 0 CHECK(videographers_count >= 0),
    stage               TEXT NOT NULL DEFAULT 'pre-production'
                        CHECK(stage IN ('pre-production','production',
                                        'post-production','completed')),
    notes               TEXT,
    client_requirements TEXT,
    estimate_package    TEXT,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    UNIQUE (estimate_id, name)
);

CREATE INDEX IF NOT EXISTS idx_scheduled_events_stage ON scheduled_events(stage);
CREATE INDEX IF NOT EXISTS idx_scheduled_events_date ON scheduled_events(date);

-- ============================================================
-- ASSIGNMENTS (owned by their event)
-- ============================================================
CREATE TABLE IF NOT EXISTS event_assignments (
    id             TEXT PRIMARY KEY,
    event_id       TEXT NOT NULL REFERENCES scheduled_events(id) ON DELETE CASCADE,
    team_member_id TEXT NOT NULL REFERENCES team_members(id),
    role           TEXT NOT NULL
                   CHECK(role IN ('photographer','videographer','editor','production')),
    status         TEXT NOT NULL DEFAULT 'pending'
                   CHECK(status IN ('pending','accepted','declined','reassigned')),
    position       INTEGER NOT NULL,
    notes          TEXT,
    reporting_time TEXT,
    assigned_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_assignments_event ON event_assignments(event_id);
CREATE INDEX IF NOT EXISTS idx_assignments_member ON event_assignments(team_member_id);

-- ============================================================
-- DELIVERABLES (owned by their event)
-- ============================================================
CREATE TABLE IF NOT EXISTS event_deliverables (
    id            TEXT PRIMARY KEY,
    event_id      TEXT NOT NULL REFERENCES scheduled_events(id) ON DELETE CASCADE,
    type          TEXT NOT NULL CHECK(type IN ('photos','videos','album')),
    status        TEXT NOT NULL DEFAULT 'pending'
                  CHECK(status IN ('pending','in-progress','delivered',
                                   'revision-requested','completed')),
    description   TEXT,
    assigned_to   TEXT,
    delivery_date TEXT,
    position      INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_deliverables_event ON event_deliverables(event_id);

-- ============================================================
-- NOTIFICATION OUTBOX
-- ============================================================
CREATE TABLE IF NOT EXISTS notification_outbox (
    id             TEXT PRIMARY KEY,
    kind           TEXT NOT NULL CHECK(kind IN ('assignment','reminder')),
    event_id       TEXT NOT NULL REFERENCES scheduled_events(id) ON DELETE CASCADE,
    team_member_id TEXT NOT NULL REFERENCES team_members(id),
    recipient      TEXT NOT NULL,
    message        TEXT NOT NULL,
    status         TEXT NOT NULL DEFAULT 'pending'
                   CHECK(status IN ('pending','sent','failed')),
    attempts       INTEGER NOT NULL DEFAULT 0,
    last_error     TEXT,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    sent_at        TEXT
);

CREATE INDEX IF NOT EXISTS idx_outbox_status ON notification_outbox(status);
CREATE INDEX IF NOT EXISTS idx_outbox_event_member ON notification_outbox(event_id, team_member_id, kind);
"""


MIGRATIONS: list[str] = [
    # Append ALTER statements here once a released schema changes.
]


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # already applied
    conn.close()
