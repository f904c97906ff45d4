from db.models import Part
from import_engine.registry import ImportableType
from import_engine.relations import CollectionRelation, ReferenceRelation, build_strategies
from tests.factories import ManufacturerFactory, PartFactory, SupplierFactory


def test_strategies_follow_configuration_order_and_declared_kinds():
    importable = ImportableType(
        name="Part",
        model=Part,
        pk="mpn",
        fields={"mpn": "MPN"},
        relations={
            "suppliers": {"code": "SupplierCode"},
            "owner": {"email": "ownerEmail"},
            "manufacturer": {"name": "Manufacturer"},
        },
    )

    strategies = build_strategies(importable)

    assert [s.name for s in strategies] == ["suppliers", "manufacturer"]
    assert isinstance(strategies[0], CollectionRelation)
    assert isinstance(strategies[1], ReferenceRelation)
    assert strategies[1].lookup == {"name": "Manufacturer"}


def test_strategy_attach_semantics(session):
    part = PartFactory()
    mfr = ManufacturerFactory()
    sup = SupplierFactory()
    reference, collection = (
        build_strategies(ImportableType(
            "Part", Part, "mpn", {"mpn": "MPN"},
            {"manufacturer": {"name": "M"}, "suppliers": {"code": "S"}},
        ))
    )

    assert not reference.is_attached(part, mfr)
    reference.attach(part, mfr)
    assert reference.is_attached(part, mfr)

    assert not collection.is_attached(part, sup)
    collection.attach(part, sup)
    assert collection.is_attached(part, sup)
