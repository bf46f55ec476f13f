"""Keep the per-date ``availableRooms`` counters in knowledge documents near the truth.

The relational tables own room counts and reservation state. The counters in
a hotel's knowledge document are a cache for the conversational agent: they
are patched incrementally after reservation status changes and can be rebuilt
wholesale from relational state.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from voicedesk.core.logger import get_logger, log_context
from voicedesk.db.session import session_scope
from voicedesk.domain import knowledge_document
from voicedesk.models import RoomType
from voicedesk.repositories import KnowledgeDocumentStore, RoomRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ProjectionUpdate:
    documents: int = 0
    dates: int = 0
    skipped: int = 0


class ProjectionService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._documents = KnowledgeDocumentStore(session)
        self._rooms = RoomRepository(session)

    def apply_delta(
        self,
        customer_id: int,
        room_key: str | None,
        check_in: date,
        check_out: date,
        delta: int,
    ) -> ProjectionUpdate:
        """Consume (``delta=+1``) or free (``delta=-1``) one room for every night of a stay."""

        nights = knowledge_document.stay_dates(check_in, check_out)
        documents = touched = skipped = 0
        for document in self._documents.for_customer(customer_id, lodging_only=True):
            record = self._documents.read_record(document)
            if record is None:
                skipped += 1
                continue
            touched += knowledge_document.apply_availability_delta(record, nights, delta, room_key)
            self._documents.write_record(document, record)
            documents += 1
        LOGGER.info(
            "Applied delta %+d for %s night(s) of %s to %s document(s)",
            delta,
            len(nights),
            room_key or "unnamed room",
            documents,
        )
        return ProjectionUpdate(documents=documents, dates=touched, skipped=skipped)

    def _counts(self, room_types: list[RoomType], start: date, end: date) -> dict[date, int]:
        nights = knowledge_document.stay_dates(start, end)
        counts = {night: 0 for night in nights}
        for room_type in room_types:
            occupancy = self._rooms.nightly_occupancy(room_type.id, start, end)
            for night in nights:
                counts[night] += max(0, room_type.total_rooms - occupancy[night])
        return counts

    def rebuild(self, customer_id: int, start: date, end: date) -> ProjectionUpdate:
        """Recompute every tracked counter in ``[start, end)`` from relational state."""

        room_types = self._rooms.active_room_types(customer_id)
        by_name = {room_type.name.lower(): room_type for room_type in room_types}
        documents = touched = skipped = 0
        for document in self._documents.for_customer(customer_id, lodging_only=True):
            record = self._documents.read_record(document)
            if record is None:
                skipped += 1
                continue
            for room_key in knowledge_document.tracked_room_keys(record):
                if room_key is None:
                    selected = room_types
                else:
                    match = by_name.get(room_key.lower())
                    if match is None:
                        LOGGER.debug("Document %s tracks unknown room type %s", document.id, room_key)
                        continue
                    selected = [match]
                touched += knowledge_document.set_available_rooms(
                    record, room_key, self._counts(selected, start, end)
                )
            self._documents.write_record(document, record)
            documents += 1
        return ProjectionUpdate(documents=documents, dates=touched, skipped=skipped)


def update_projection(
    customer_id: int,
    room_key: str | None,
    check_in: date,
    check_out: date,
    delta: int,
    *,
    session_factory: Optional[sessionmaker] = None,
) -> None:
    """Background job wrapper; a failure leaves the counters stale and is only logged."""

    with log_context.scoped(customer_id=customer_id, job="projection"):
        try:
            with session_scope(session_factory) as session:
                ProjectionService(session).apply_delta(customer_id, room_key, check_in, check_out, delta)
        except Exception:
            LOGGER.exception("Availability projection update failed; document counters are stale")
