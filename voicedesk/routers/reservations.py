"""Reservation status changes made by staff."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from voicedesk.dependencies import get_reservation_service
from voicedesk.schemas.reservations import ReservationOut, StatusChangeOut, StatusUpdate
from voicedesk.services import ReservationService

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


@router.patch("/{reservation_id}", response_model=StatusChangeOut)
def update_reservation_status(
    reservation_id: int,
    payload: StatusUpdate,
    service: ReservationService = Depends(get_reservation_service),
) -> StatusChangeOut:
    """Change status; cancelling frees a room and un-cancelling takes it back."""

    change = service.change_status(reservation_id, payload.status)
    return StatusChangeOut(
        reservation=ReservationOut.model_validate(change.reservation),
        previous_status=change.previous_status,
        inventory_delta=change.inventory_delta,
    )
