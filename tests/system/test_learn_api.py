"""
System test: learn and mastery endpoints in-process against SQLite.

Wiki used throughout:
    bayes-rule (10) is taught by bayes-rule-intro (11, lens 0) and
    bayes-rule-guide (12, lens 1). The intro requires probability (20),
    taught by probability-intro (21). The guide requires odds (30), which
    nothing teaches.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.api.deps import get_db
from learnpath.engines.learning.nodes import LENS_COST, PENALTY_COST
from learnpath.kernel.identity.jwt import create_access_token
from learnpath.kernel.models import Lens, Page, PagePair, PagePairType, User, UserMasteryPair
from learnpath.main import app

PAGES = [
    ("10", "bayes-rule", "Bayes' rule"),
    ("11", "bayes-rule-intro", "Bayes' rule: Introduction"),
    ("12", "bayes-rule-guide", "Bayes' rule: Guide"),
    ("20", "probability", "Probability"),
    ("21", "probability-intro", "Probability: Introduction"),
    ("30", "odds", "Odds"),
]
# (parent, child, type)
PAIRS = [
    ("10", "11", PagePairType.SUBJECT),
    ("10", "12", PagePairType.SUBJECT),
    ("20", "21", PagePairType.SUBJECT),
    ("20", "11", PagePairType.REQUIREMENT),
    ("30", "12", PagePairType.REQUIREMENT),
]


@pytest_asyncio.fixture
async def seeded(session_maker) -> User:
    """Seed the wiki and one learner; returns the learner."""
    async with session_maker() as session:
        for page_id, alias, title in PAGES:
            session.add(Page(page_id=page_id, alias=alias, title=title))
        for parent_id, child_id, pair_type in PAIRS:
            session.add(PagePair(parent_id=parent_id, child_id=child_id, type=pair_type.value))
        session.add(Lens(page_id="10", lens_id="11", lens_index=0, lens_name="Intro"))
        session.add(Lens(page_id="10", lens_id="12", lens_index=1, lens_name="Guide"))
        user = User(email="learner@example.com", full_name="Test Learner")
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


def _auth(user: User) -> dict:
    token, _ = create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


async def _set_mastery(session_maker, user: User, mastery_id: str, has=False, wants=False):
    async with session_maker() as session:
        session.add(UserMasteryPair(user_id=user.id, mastery_id=mastery_id, has=has, wants=wants))
        await session.commit()


class TestLearnEndpoint:
    @pytest.mark.asyncio
    async def test_anonymous_path(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={"page_aliases": ["bayes-rule"]})
        assert resp.status_code == 200, resp.text
        data = resp.json()

        assert data["page_ids"] == ["10"]
        assert data["requirements"]["10"]["best_tutor_id"] == "11"
        assert data["requirements"]["10"]["tutor_ids"] == ["11", "12"]
        assert data["requirements"]["10"]["cost"] == 2
        assert data["tutors"]["11"]["cost"] == 2
        assert data["tutors"]["12"]["cost"] == PENALTY_COST + LENS_COST + 1
        # odds was found past the first round and stays untaught
        assert data["requirements"]["30"]["best_tutor_id"] == ""
        assert data["requirements"]["30"]["cost"] == PENALTY_COST

        assert data["learn_map"]["10"] == {
            "page_id": "10",
            "taught_by_id": "11",
            "requirement_ids": ["20"],
        }
        assert data["learn_map"]["20"]["taught_by_id"] == "21"
        assert "30" not in data["learn_map"]
        assert data["study_order"] == ["21", "11"]
        assert data["pages"]["11"]["alias"] == "bayes-rule-intro"
        assert set(data["pages"]) == {"10", "11", "20", "21"}

    @pytest.mark.asyncio
    async def test_internal_fields_not_serialized(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={"page_ids": ["10"]})
        requirement = resp.json()["requirements"]["10"]
        assert "processed" not in requirement
        assert "lens_index" not in requirement

    @pytest.mark.asyncio
    async def test_stored_mastery_skips_requirement(self, client, seeded, session_maker):
        await _set_mastery(session_maker, seeded, "20", has=True)
        resp = await client.post(
            "/api/v1/learn",
            json={"page_ids": ["10"]},
            headers=_auth(seeded),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()

        assert "20" not in data["requirements"]
        assert data["tutors"]["11"]["requirement_ids"] == []
        assert data["requirements"]["10"]["cost"] == 1
        assert data["study_order"] == ["11"]

    @pytest.mark.asyncio
    async def test_request_mastery_map_skips_requirement(self, client, seeded):
        resp = await client.post(
            "/api/v1/learn",
            json={"page_ids": ["10"], "mastery_map": {"20": {"has": True}}},
        )
        data = resp.json()

        assert "20" not in data["requirements"]
        assert data["study_order"] == ["11"]

    @pytest.mark.asyncio
    async def test_mastered_target_dropped(self, client, seeded):
        resp = await client.post(
            "/api/v1/learn",
            json={"page_ids": ["10"], "mastery_map": {"10": {"has": True}}},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["page_ids"] == []
        assert data["requirements"] == {}
        assert data["study_order"] == []

    @pytest.mark.asyncio
    async def test_untaught_target_teaches_itself(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={"page_aliases": ["odds"]})
        data = resp.json()

        assert data["requirements"]["30"]["best_tutor_id"] == "30"
        assert data["requirements"]["30"]["cost"] == 1
        assert data["study_order"] == ["30"]

    @pytest.mark.asyncio
    async def test_only_wanted(self, client, seeded, session_maker):
        await _set_mastery(session_maker, seeded, "20", wants=True)
        resp = await client.post(
            "/api/v1/learn",
            json={"page_ids": ["10", "20"], "only_wanted": True},
            headers=_auth(seeded),
        )
        data = resp.json()

        assert data["page_ids"] == ["20"]
        assert data["study_order"] == ["21"]

    @pytest.mark.asyncio
    async def test_unknown_alias(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={"page_aliases": ["no-such-page"]})
        assert resp.status_code == 400
        assert "no-such-page" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_empty_request(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_body(self, client, seeded):
        resp = await client.post("/api/v1/learn", json={"page_ids": "10"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Validation error"

    @pytest.mark.asyncio
    async def test_bad_token_is_anonymous(self, client, seeded):
        resp = await client.post(
            "/api/v1/learn",
            json={"page_ids": ["10"]},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert resp.status_code == 200
        assert resp.json()["study_order"] == ["21", "11"]


class TestMasteryEndpoints:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client, seeded):
        resp = await client.get("/api/v1/masteries")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_add_then_list(self, client, seeded, session_maker):
        headers = _auth(seeded)
        resp = await client.post(
            "/api/v1/masteries",
            json={
                "add_masteries": ["probability"],
                "wants_masteries": ["bayes-rule", "unknown-alias"],
                "taught_by": "probability-intro",
            },
            headers=headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["masteries"] == {
            "20": {"has": True, "wants": False},
            "10": {"has": False, "wants": True},
        }

        resp = await client.get("/api/v1/masteries", headers=headers)
        assert resp.json()["masteries"]["20"] == {"has": True, "wants": False}

        async with session_maker() as session:
            row = await session.get(UserMasteryPair, (seeded.id, "20"))
            assert row.taught_by == "21"

    @pytest.mark.asyncio
    async def test_taught_by_alias_resolved(self, client, seeded, session_maker):
        resp = await client.post(
            "/api/v1/masteries",
            json={"add_masteries": ["bayes-rule"], "taught_by": "bayes-rule-intro"},
            headers=_auth(seeded),
        )
        assert resp.status_code == 200, resp.text

        async with session_maker() as session:
            row = await session.get(UserMasteryPair, (seeded.id, "10"))
            assert row.has is True
            assert row.taught_by == "11"

    @pytest.mark.asyncio
    async def test_remove(self, client, seeded, session_maker):
        await _set_mastery(session_maker, seeded, "20", has=True)
        resp = await client.post(
            "/api/v1/masteries",
            json={"remove_masteries": ["20"]},
            headers=_auth(seeded),
        )
        assert resp.json()["masteries"]["20"] == {"has": False, "wants": False}

    @pytest.mark.asyncio
    async def test_masteries_change_learn_path(self, client, seeded):
        headers = _auth(seeded)
        await client.post(
            "/api/v1/masteries",
            json={"add_masteries": ["probability"]},
            headers=headers,
        )
        resp = await client.post("/api/v1/learn", json={"page_ids": ["10"]}, headers=headers)
        assert resp.json()["study_order"] == ["11"]


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        resp = await client.get("/", headers={"X-Request-ID": "abc-123"})
        assert resp.status_code == 200
        assert resp.headers["X-Request-ID"] == "abc-123"
