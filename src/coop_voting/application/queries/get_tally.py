"""Query for retrieving the vote tally of an agenda."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from coop_voting.domain.shared.types import EntityIdStr
from coop_voting.domain.shared.validators import IdentifierValidators, validate_model
from coop_voting.domain.voting.entities import Tally

if TYPE_CHECKING:
    from ..services.voting_session_service import VotingSessionService


class GetTallyQuery(BaseModel):
    model_config = ConfigDict(
        frozen=True, strict=True, alias_generator=to_camel, populate_by_name=True
    )

    agenda_id: EntityIdStr

    _validate_ids = IdentifierValidators.non_blank("agenda_id")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GetTallyQuery:
        return validate_model(cls, payload)


def tally_payload(tally: Tally) -> dict[str, Any]:
    """Counters, percentages, derived result and status keyed in camelCase."""
    return tally.model_dump(mode="json", by_alias=True)


class GetTallyHandler:

    def __init__(self, voting_service: VotingSessionService) -> None:
        self._voting_service = voting_service

    async def handle(self, query: GetTallyQuery) -> Tally:
        return await self._voting_service.query_tally(query.agenda_id)
