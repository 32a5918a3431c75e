"""
Pytest fixtures for learning path tests.

System tests run the app in-process against a temporary SQLite file, so the
database URL is set before any learnpath module reads settings.
"""

import os
import tempfile
from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"

from learnpath.config import get_settings  # noqa: E402

get_settings.cache_clear()

from learnpath.engines.learning.nodes import RequirementNode, TutorNode  # noqa: E402
from learnpath.kernel.models import Base  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB file after test run."""
    try:
        if os.path.exists(TEST_DB_PATH):
            os.unlink(TEST_DB_PATH)
    except OSError:
        pass


@pytest_asyncio.fixture
async def db_engine():
    """Fresh schema on the temp SQLite file."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(db_engine) -> async_sessionmaker:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_graph():
    """
    Build requirement and tutor maps from adjacency dicts.

    make_graph({"1": ["2"]}, {"2": []}) -> (requirement_map, tutor_map)
    """

    def _make(
        requirements: Dict[str, List[str]],
        tutors: Dict[str, List[str]],
        lens: Dict[str, int] = None,
    ):
        lens = lens or {}
        requirement_map = {
            page_id: RequirementNode(page_id=page_id, tutor_ids=list(tutor_ids), lens_index=lens.get(page_id, 0))
            for page_id, tutor_ids in requirements.items()
        }
        tutor_map = {
            page_id: TutorNode(page_id=page_id, requirement_ids=list(req_ids), lens_index=lens.get(page_id, 0))
            for page_id, req_ids in tutors.items()
        }
        return requirement_map, tutor_map

    return _make
