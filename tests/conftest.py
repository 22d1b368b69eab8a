import os
import tempfile
from pathlib import Path

# Must be set before klenhub_backend.core.config is imported
_RUN_DIR = Path(tempfile.mkdtemp(prefix="klenhub-tests-"))
os.environ["LOGGER"] = "false"
os.environ.setdefault("PID_FILE", str(_RUN_DIR / "server.pid"))
os.environ.setdefault("LOG_FILE", str(_RUN_DIR / "server.log"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_RUN_DIR / 'klenhub.sqlite3'}")

import pytest

from klenhub_backend.core.models import Base, DatabaseHelper


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'klenhub.sqlite3'}"


@pytest.fixture
async def database(db_url):
    helper = DatabaseHelper(db_url)
    async with helper.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield helper
    await helper.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session
