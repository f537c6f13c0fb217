import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from studio_scheduler.database import get_db, init_db
from studio_scheduler.main import app
from studio_scheduler.config import settings
from studio_scheduler.utils.security import hash_admin_key

ADMIN_KEY = "test-admin-key-123"


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def tmp_data(tmp_path):
    data_dir = tmp_path / "StudioData"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "studio.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def client(tmp_data, test_db):
    original_data_dir = settings.data_dir
    settings.data_dir = tmp_data
    c = TestClient(app)
    yield c
    settings.data_dir = original_data_dir


@pytest.fixture
def admin_key():
    """Configure an admin key for the duration of a test and hand back the plain key."""
    original = settings.admin_key_hash
    settings.admin_key_hash = hash_admin_key(ADMIN_KEY)
    yield ADMIN_KEY
    settings.admin_key_hash = original
