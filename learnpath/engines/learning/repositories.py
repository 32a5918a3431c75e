"""
Page and mastery lookups used around a learning path resolution (DB-backed).
"""

import uuid
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.kernel.models.mastery import UserMasteryPair
from learnpath.kernel.models.page import Page, PagePair, PagePairType


class MasteryState(BaseModel):
    """Whether the learner knows a concept, and whether they want to."""

    has: bool = False
    wants: bool = False


class PageSummary(BaseModel):
    """Title-level page metadata returned alongside a learning path."""

    page_id: str
    alias: str
    title: str
    clickbait: str = ""


class PageRepository:
    """Alias resolution and page metadata."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_alias_map(self, aliases: Sequence[str]) -> Dict[str, str]:
        """
        Map aliases (or page ids) to page ids.

        Unknown aliases are absent from the result.
        """
        if not aliases:
            return {}
        q = select(Page.page_id, Page.alias).where(
            or_(Page.alias.in_(list(aliases)), Page.page_id.in_(list(aliases)))
        )
        result = await self.session.execute(q)
        alias_map: Dict[str, str] = {}
        for page_id, alias in result.all():
            alias_map[alias] = page_id
            alias_map[page_id] = page_id
        return alias_map

    async def load_summaries(self, page_ids: Iterable[str]) -> Dict[str, PageSummary]:
        """Load titles for the given pages; unknown ids are skipped."""
        ids = list(dict.fromkeys(page_ids))
        if not ids:
            return {}
        result = await self.session.execute(select(Page).where(Page.page_id.in_(ids)))
        return {
            page.page_id: PageSummary(
                page_id=page.page_id,
                alias=page.alias,
                title=page.title,
                clickbait=page.clickbait,
            )
            for page in result.scalars().all()
        }


class MasteryRepository:
    """Reads and writes user_mastery_pairs."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_masteries(
        self,
        user_id: uuid.UUID,
        page_ids: Sequence[str] = (),
    ) -> Dict[str, MasteryState]:
        """Load stored masteries, optionally restricted to page_ids."""
        q = select(UserMasteryPair).where(UserMasteryPair.user_id == user_id)
        if page_ids:
            q = q.where(UserMasteryPair.mastery_id.in_(list(page_ids)))
        result = await self.session.execute(q)
        return {
            row.mastery_id: MasteryState(has=row.has, wants=row.wants)
            for row in result.scalars().all()
        }

    async def update_masteries(
        self,
        user_id: uuid.UUID,
        add: Sequence[str] = (),
        remove: Sequence[str] = (),
        wants: Sequence[str] = (),
        taught_by: str = "",
    ) -> Dict[str, MasteryState]:
        """
        Upsert masteries for a user.

        remove clears both flags, wants marks a concept as desired, add marks it
        as known. Applied in that order, so add wins for an id listed twice.
        taught_by is recorded only for concepts that page actually teaches.
        """
        all_ids = list(dict.fromkeys([*remove, *wants, *add]))
        if not all_ids:
            return {}

        subject_ids: set[str] = set()
        if taught_by:
            result = await self.session.execute(
                select(PagePair.parent_id).where(
                    PagePair.child_id == taught_by,
                    PagePair.type == PagePairType.SUBJECT.value,
                )
            )
            subject_ids = set(result.scalars().all())

        result = await self.session.execute(
            select(UserMasteryPair).where(
                UserMasteryPair.user_id == user_id,
                UserMasteryPair.mastery_id.in_(all_ids),
            )
        )
        rows = {row.mastery_id: row for row in result.scalars().all()}

        def _upsert(mastery_id: str, has: bool, wants_flag: bool, tutor_id: str) -> None:
            row = rows.get(mastery_id)
            if row is None:
                row = UserMasteryPair(user_id=user_id, mastery_id=mastery_id)
                self.session.add(row)
                rows[mastery_id] = row
            row.has = has
            row.wants = wants_flag
            row.taught_by = tutor_id

        for mastery_id in remove:
            _upsert(mastery_id, False, False, "")
        for mastery_id in wants:
            _upsert(mastery_id, False, True, "")
        for mastery_id in add:
            _upsert(mastery_id, True, False, taught_by if mastery_id in subject_ids else "")

        await self.session.flush()
        return {
            mastery_id: MasteryState(has=rows[mastery_id].has, wants=rows[mastery_id].wants)
            for mastery_id in all_ids
        }
