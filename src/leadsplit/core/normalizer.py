"""Map arbitrary spreadsheet rows onto canonical lead records."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

from .errors import ValidationError


# Header synonyms in priority order (matched case-insensitively)
COLUMN_MAPPINGS = {
    "first_name": ["firstname", "first_name", "name", "first name"],
    "phone": ["phone", "phone_number", "mobile"],
    "notes": ["notes", "note", "remarks"],
}

REQUIRED_FIELDS = ("first_name", "phone")


@dataclass(frozen=True)
class CanonicalRecord:
    """One normalized lead row."""

    first_name: str
    phone: str
    notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"FirstName": self.first_name, "Phone": self.phone, "Notes": self.notes}


def _index_headers(row: Mapping[Any, Any]) -> Dict[str, Any]:
    """Lower-cased header -> original header. Later duplicates win."""
    index = {}
    for key in row.keys():
        if not isinstance(key, str):
            continue
        index[key.strip().lower()] = key
    return index


def map_columns(row: Mapping[Any, Any]) -> Dict[str, Any]:
    """Resolve each canonical field to the row's original header, if any."""
    index = _index_headers(row)
    column_map = {}
    for standard_name, possible_names in COLUMN_MAPPINGS.items():
        for possible in possible_names:
            if possible in index:
                column_map[standard_name] = index[possible]
                break
    return column_map


def to_text(value: Any) -> str:
    """Coerce a cell value to trimmed text."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_row(row: Mapping[Any, Any]) -> Optional[CanonicalRecord]:
    """Normalize a single row, or return None when it must be rejected."""
    column_map = map_columns(row)
    if any(field not in column_map for field in REQUIRED_FIELDS):
        return None

    notes_key = column_map.get("notes")
    return CanonicalRecord(
        first_name=to_text(row.get(column_map["first_name"])),
        phone=to_text(row.get(column_map["phone"])),
        notes=to_text(row.get(notes_key)) if notes_key is not None else "",
    )


def normalize_rows(rows: Iterable[Mapping[Any, Any]], label: str = "File") -> Iterator[CanonicalRecord]:
    """Normalize every row, failing the whole batch on the first reject.

    ``label`` names the file format in the error message (e.g. ``CSV``).
    """
    for row_num, row in enumerate(rows, start=1):
        record = normalize_row(row)
        if record is None:
            raise ValidationError(
                f"{label} format invalid: required columns missing (FirstName, Phone) at row {row_num}"
            )
        yield record
