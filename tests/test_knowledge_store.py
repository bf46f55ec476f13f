import json

import pytest

from voicedesk.core.errors import NotFoundError
from voicedesk.repositories import KnowledgeDocumentStore


def test_write_record_replaces_first_blob_only(session, make_document, record_factory):
    document = make_document(record_factory(), extra_texts=["Breakfast 7-10"])
    store = KnowledgeDocumentStore(session)

    store.write_record(document, {"pricing": {}})
    session.commit()
    session.expire_all()

    texts = store.get_texts(document.id)
    assert json.loads(texts[0]) == {"pricing": {}}
    assert texts[1:] == ["Breakfast 7-10"]
    assert store.read_record(document) == {"pricing": {}}


def test_put_replaces_every_blob(session, make_document):
    document = make_document()
    store = KnowledgeDocumentStore(session)

    store.put(document.id, ["plain text"])
    session.commit()
    session.expire_all()

    assert store.get_texts(document.id) == ["plain text"]
    assert store.read_record(document) is None


def test_unknown_document(session):
    store = KnowledgeDocumentStore(session)

    with pytest.raises(NotFoundError):
        store.get_texts(404)
    with pytest.raises(NotFoundError):
        store.put(404, [])
