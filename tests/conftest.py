import os
import tempfile

# Settings are read at import time, so the environment must be prepared
# before anything from filevault is imported.
_TEST_DIR = tempfile.mkdtemp(prefix="filevault-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BASE_PATH", os.path.join(_TEST_DIR, "blobs"))

import pytest
from fastapi.testclient import TestClient

from filevault.database import Base, SessionLocal, engine
from filevault.dependencies.storage import get_storage
from filevault.main import app
from filevault.storage.local import LocalStorageBackend


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Run Alembic migrations at the start of the test session."""
    from alembic import command
    from alembic.config import Config

    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    alembic_cfg = Config(os.path.join(root, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(root, "alembic"))

    command.upgrade(alembic_cfg, "head")

    yield

    try:
        command.downgrade(alembic_cfg, "base")
    except Exception:
        # Best-effort teardown
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Session for direct database assertions; all rows are wiped afterwards."""
    session = SessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorageBackend(base_path=str(tmp_path / "storage"), max_size_mb=1)


@pytest.fixture
def client(db, storage):
    """Test client with the storage dependency pointed at a temp directory."""
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
