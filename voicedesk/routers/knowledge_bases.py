"""Routes that move or delete knowledge bases."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from voicedesk.dependencies import get_assignment_service
from voicedesk.schemas.knowledge import AssignmentResultOut, AssignRequest
from voicedesk.services import AssignmentService

router = APIRouter(prefix="/api/knowledge-bases", tags=["knowledge-bases"])


@router.patch("/{knowledge_base_id}/assign", response_model=AssignmentResultOut)
def assign_knowledge_base(
    knowledge_base_id: int,
    payload: AssignRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResultOut:
    """Assign the knowledge base to one bot, or to none when ``bot_id`` is null."""

    result = service.assign(
        knowledge_base_id,
        payload.bot_id,
        top_k=payload.top_k,
        filter_score=payload.filter_score,
    )
    return AssignmentResultOut.model_validate(asdict(result))


@router.delete("/{knowledge_base_id}", response_model=AssignmentResultOut)
def delete_knowledge_base(
    knowledge_base_id: int,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResultOut:
    result = service.delete_knowledge_base(knowledge_base_id)
    return AssignmentResultOut.model_validate(asdict(result))
