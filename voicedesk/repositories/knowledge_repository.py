"""Access to tenant knowledge documents and their structured record."""
from __future__ import annotations

from typing import Any

from sqlalchemy import select

from voicedesk.core.errors import NotFoundError
from voicedesk.core.logger import get_logger
from voicedesk.domain import knowledge_document
from voicedesk.models import Customer, CustomerType, KnowledgeBase

from .base import BaseRepository

LOGGER = get_logger(__name__)


class KnowledgeDocumentStore(BaseRepository):
    """Read and write knowledge documents; ``texts[0]`` holds the JSON record."""

    def get(self, knowledge_base_id: int) -> KnowledgeBase:
        document = self._session.get(KnowledgeBase, knowledge_base_id)
        if document is None:
            raise NotFoundError("KnowledgeBase", knowledge_base_id)
        return document

    def get_texts(self, knowledge_base_id: int) -> list[str]:
        return list(self.get(knowledge_base_id).texts or [])

    def put(self, knowledge_base_id: int, texts: list[str]) -> KnowledgeBase:
        document = self.get(knowledge_base_id)
        # assign a new list so the JSON column is flagged dirty
        document.texts = list(texts)
        self._session.flush()
        return document

    def read_record(self, document: KnowledgeBase) -> dict[str, Any] | None:
        return knowledge_document.parse_record(self.get_texts(document.id))

    def write_record(self, document: KnowledgeBase, record: dict[str, Any]) -> None:
        self.put(document.id, knowledge_document.replace_record(self.get_texts(document.id), record))

    def for_customer(self, customer_id: int, *, lodging_only: bool = True) -> list[KnowledgeBase]:
        statement = select(KnowledgeBase).where(KnowledgeBase.customer_id == customer_id)
        if lodging_only:
            statement = statement.join(Customer, Customer.id == KnowledgeBase.customer_id).where(
                Customer.customer_type == CustomerType.HOTEL
            )
        documents = list(self._session.scalars(statement.order_by(KnowledgeBase.id)))
        LOGGER.debug("Found %s knowledge document(s) for customer %s", len(documents), customer_id)
        return documents

    def first_record_for_customer(self, customer_id: int) -> dict[str, Any] | None:
        """First parseable structured record among the customer's documents."""

        for document in self.for_customer(customer_id, lodging_only=False):
            record = self.read_record(document)
            if record is not None:
                return record
        return None

    def delete(self, document: KnowledgeBase) -> None:
        self._session.delete(document)
        self._session.flush()
