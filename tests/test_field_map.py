from import_engine.field_map import PART_FIELDS, lookup_filter, map_row


def test_maps_columns_to_attributes():
    row = {"MPN": "R1", "Value": "10k", "Description": "Resistor", "Other": "x"}
    assert map_row(row, PART_FIELDS, "mpn") == {
        "mpn": "R1", "value": "10k", "description": "Resistor",
    }


def test_empty_and_missing_cells_are_omitted():
    row = {"MPN": "R1", "Value": "   ", "Description": ""}
    assert map_row(row, PART_FIELDS, "mpn") == {"mpn": "R1"}


def test_row_without_primary_key_is_skipped():
    assert map_row({"Value": "10k"}, PART_FIELDS, "mpn") is None
    assert map_row({"MPN": "  ", "Value": "10k"}, PART_FIELDS, "mpn") is None


def test_lookup_filter_reads_row_values():
    row = {"ownerEmail": " a@example.com ", "Other": "x"}
    assert lookup_filter(row, {"email": "ownerEmail"}) == {"email": "a@example.com"}


def test_lookup_filter_blank_and_absent_columns():
    assert lookup_filter({"ownerEmail": " "}, {"email": "ownerEmail"}) == {"email": ""}
    assert lookup_filter({}, {"email": "ownerEmail"}) is None
