"""Routes listing and editing a bot's knowledge bases."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from voicedesk.dependencies import get_assignment_service
from voicedesk.schemas.knowledge import AssignmentOut, AssignmentResultOut, BotAssignRequest
from voicedesk.services import AssignmentService

router = APIRouter(prefix="/api/bots", tags=["bots"])


@router.get("/{bot_id}/knowledge-bases", response_model=list[AssignmentOut])
def list_bot_knowledge_bases(
    bot_id: int,
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentOut]:
    return [AssignmentOut.model_validate(row) for row in service.list_bot_assignments(bot_id)]


@router.post(
    "/{bot_id}/knowledge-bases",
    response_model=AssignmentResultOut,
    status_code=status.HTTP_201_CREATED,
)
def add_bot_knowledge_base(
    bot_id: int,
    payload: BotAssignRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResultOut:
    result = service.assign(
        payload.knowledge_base_id,
        bot_id,
        top_k=payload.top_k,
        filter_score=payload.filter_score,
    )
    return AssignmentResultOut.model_validate(asdict(result))


@router.delete("/{bot_id}/knowledge-bases/{assignment_id}", response_model=AssignmentResultOut)
def remove_bot_knowledge_base(
    bot_id: int,
    assignment_id: int,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResultOut:
    result = service.unassign(assignment_id, bot_id=bot_id)
    return AssignmentResultOut.model_validate(asdict(result))
