"""
Relationship queries feeding the learning graph builder.

Both queries return (parent_id, child_id, lens_index) triples:
- load_tutors: child_id teaches requirement parent_id
- load_requirements: tutor child_id requires parent_id, excluding requirements
  the learner already has
"""

import uuid
from typing import AbstractSet, List, NamedTuple, Optional, Protocol, Sequence

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.kernel.models.mastery import UserMasteryPair
from learnpath.kernel.models.page import Lens, PagePair, PagePairType


class PageRelation(NamedTuple):
    """One edge between a requirement (parent) and a tutor (child)."""

    parent_id: str
    child_id: str
    lens_index: int = 0


class RelationshipSource(Protocol):
    """What the graph builder needs from persistence."""

    async def load_tutors(self, requirement_ids: Sequence[str]) -> List[PageRelation]:
        ...

    async def load_requirements(self, tutor_ids: Sequence[str]) -> List[PageRelation]:
        ...


class PagePairRelationshipSource:
    """
    RelationshipSource backed by the page_pairs table.

    Lens positions come from the lenses table; a page that is not a lens has
    index 0. Requirements are filtered against the user's stored masteries and
    against mastered_ids supplied with the request.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_id: Optional[uuid.UUID] = None,
        mastered_ids: AbstractSet[str] = frozenset(),
    ):
        self.session = session
        self.user_id = user_id
        self.mastered_ids = frozenset(mastered_ids)

    async def load_tutors(self, requirement_ids: Sequence[str]) -> List[PageRelation]:
        if not requirement_ids:
            return []
        q = (
            select(PagePair.parent_id, PagePair.child_id, func.coalesce(Lens.lens_index, 0))
            .join_from(PagePair, Lens, Lens.lens_id == PagePair.child_id, isouter=True)
            .where(
                PagePair.parent_id.in_(list(requirement_ids)),
                PagePair.type == PagePairType.SUBJECT.value,
            )
            .order_by(PagePair.id)
        )
        result = await self.session.execute(q)
        return [PageRelation(parent_id, child_id, lens_index) for parent_id, child_id, lens_index in result.all()]

    async def load_requirements(self, tutor_ids: Sequence[str]) -> List[PageRelation]:
        if not tutor_ids:
            return []
        q = (
            select(PagePair.parent_id, PagePair.child_id, func.coalesce(Lens.lens_index, 0))
            .join_from(PagePair, Lens, Lens.lens_id == PagePair.parent_id, isouter=True)
            .where(
                PagePair.child_id.in_(list(tutor_ids)),
                PagePair.type == PagePairType.REQUIREMENT.value,
            )
            .order_by(PagePair.id)
        )
        if self.user_id is not None:
            q = q.join_from(
                PagePair,
                UserMasteryPair,
                and_(
                    UserMasteryPair.mastery_id == PagePair.parent_id,
                    UserMasteryPair.user_id == self.user_id,
                ),
                isouter=True,
            ).where(UserMasteryPair.has.is_not(True))

        result = await self.session.execute(q)
        return [
            PageRelation(parent_id, child_id, lens_index)
            for parent_id, child_id, lens_index in result.all()
            if parent_id not in self.mastered_ids
        ]
