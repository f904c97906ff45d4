from db.models import Manufacturer, Part, Supplier
from db.store import COLLECTION, REFERENCE, ModelStore


def test_relations_metadata():
    relations = ModelStore(Part).relations()

    assert relations["manufacturer"].kind == REFERENCE
    assert relations["manufacturer"].target is Manufacturer
    assert relations["suppliers"].kind == COLLECTION
    assert relations["suppliers"].target is Supplier


def test_find_create_update(session):
    store = ModelStore(Part)
    assert store.find_one(session, {"mpn": "R1"}) is None

    part = store.create(session, {"mpn": "R1", "value": "10k"})
    session.commit()
    assert store.find_one(session, {"mpn": "R1"}) is part

    store.update(session, part, {"value": "22k"})
    session.commit()
    assert store.get(session, store.identity_of(part)).value == "22k"
