"""
import_engine.field_map - Model-attribute ↔ column-name mapping.

Mappings are keyed by target attribute:  {attribute: csv column}.
Relation specs map each relationship to the lookup used to find the
related row:  {relationship: {lookup attribute: csv column}}.
"""

from __future__ import annotations

from typing import Optional

# Part model attribute  →  CSV column name
PART_FIELDS: dict[str, str] = {
    "mpn":         "MPN",
    "value":       "Value",
    "description": "Description",
    "quantity":    "Quantity",
    "location":    "Location",
    "datasheet":   "Datasheet",
}

PART_RELATIONS: dict[str, dict[str, str]] = {
    "manufacturer": {"name": "Manufacturer"},
    "suppliers":    {"code": "SupplierCode"},
}


def map_row(row: dict, field_map: dict[str, str], pk: str) -> Optional[dict]:
    """
    Build the attribute set for one CSV row.

    Empty or missing cells are left out rather than defaulted.  Returns
    None when the primary-key attribute ends up without a value; such
    rows are skipped without a warning.
    """
    mapped: dict[str, str] = {}
    for attr, column in field_map.items():
        val = (row.get(column) or "").strip()
        if val:
            mapped[attr] = val

    if not mapped.get(pk):
        return None
    return mapped


def lookup_filter(row: dict, lookup: dict[str, str]) -> Optional[dict]:
    """
    Filter for a relation lookup, or None if the file has none of the
    lookup columns.  Present but blank cells come back as "".
    """
    if not any(column in row for column in lookup.values()):
        return None
    return {attr: (row.get(column) or "").strip() for attr, column in lookup.items()}
