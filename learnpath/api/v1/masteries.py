"""
Mastery endpoints - what the learner has and wants.
"""

from fastapi import APIRouter

from learnpath.api.deps import CurrentUser, DbSession
from learnpath.engines.learning.repositories import MasteryRepository, PageRepository
from learnpath.schemas.mastery import MasteriesResponse, MasteryItem, MasteryUpdateRequest

router = APIRouter()


@router.get("", response_model=MasteriesResponse)
async def list_masteries(
    user: CurrentUser,
    db: DbSession,
):
    """List the current user's masteries."""
    masteries = await MasteryRepository(db).load_masteries(user.id)
    return MasteriesResponse(
        masteries={
            page_id: MasteryItem(has=state.has, wants=state.wants)
            for page_id, state in masteries.items()
        }
    )


@router.post("", response_model=MasteriesResponse)
async def update_masteries(
    body: MasteryUpdateRequest,
    user: CurrentUser,
    db: DbSession,
):
    """
    Add, remove or want masteries, by page id or alias.

    Aliases that match no page are ignored.
    """
    aliases = [*body.add_masteries, *body.remove_masteries, *body.wants_masteries]
    if body.taught_by:
        aliases.append(body.taught_by)
    alias_map = await PageRepository(db).load_alias_map(aliases)

    def _ids(values: list[str]) -> list[str]:
        return [alias_map[v] for v in values if v in alias_map]

    updated = await MasteryRepository(db).update_masteries(
        user.id,
        add=_ids(body.add_masteries),
        remove=_ids(body.remove_masteries),
        wants=_ids(body.wants_masteries),
        taught_by=alias_map.get(body.taught_by, body.taught_by),
    )
    return MasteriesResponse(
        masteries={
            page_id: MasteryItem(has=state.has, wants=state.wants)
            for page_id, state in updated.items()
        }
    )
