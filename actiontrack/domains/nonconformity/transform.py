"""Turn mapped spreadsheet rows into normalized nonconformity records."""

import logging
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path

import yaml

from actiontrack.domains.nonconformity.classify import (
    classify_severity,
    classify_source,
    classify_status,
)
from actiontrack.domains.nonconformity.models import NO_DESCRIPTION, NonConformity
from actiontrack.domains.nonconformity.store import new_action_id, new_record_id
from actiontrack.utils.transforms import cell_text, parse_day, parse_timestamp
from actiontrack.utils.types import SheetRow

logger = logging.getLogger(__name__)

UNMAPPED = "none"

# field names as saved by the browser import dialog
CAMEL_FIELD_MAP: dict[str, str] = {
    "createdDate": "created_date",
    "actionTitle": "action_title",
    "teamLeader": "team_leader",
    "targetDate": "target_date",
    "closedDate": "closed_date",
}


@dataclass(frozen=True)
class FieldMapping:
    """Canonical record field -> spreadsheet column, or ``"none"`` if unmapped."""

    description: str = UNMAPPED
    source: str = UNMAPPED
    severity: str = UNMAPPED
    status: str = UNMAPPED
    day: str = UNMAPPED
    created_date: str = UNMAPPED
    action_title: str = UNMAPPED
    team_leader: str = UNMAPPED
    team: str = UNMAPPED
    category: str = UNMAPPED
    target_date: str = UNMAPPED
    closed_date: str = UNMAPPED

    @classmethod
    def from_dict(cls, mapping: dict[str, str | None]) -> "FieldMapping":
        known = {f.name for f in fields(cls)}
        values = {}
        for key, column in mapping.items():
            name = CAMEL_FIELD_MAP.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown mapping field: {key}")
            values[name] = str(column).strip() if column else UNMAPPED
        return cls(**values)

    @property
    def is_ready(self) -> bool:
        """Import stays disabled until a description column is chosen."""
        return self.is_mapped("description")

    def is_mapped(self, field_name: str) -> bool:
        return getattr(self, field_name) != UNMAPPED

    def missing_columns(self, columns: list[str]) -> list[str]:
        """Mapped column names that the sheet does not have."""
        return [
            getattr(self, f.name)
            for f in fields(self)
            if self.is_mapped(f.name) and getattr(self, f.name) not in columns
        ]


def load_field_mapping(path: str | Path) -> FieldMapping:
    """Read a saved mapping from a YAML file of ``field: column`` pairs."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    match data:
        case {"mapping": dict() as mapping}:
            return FieldMapping.from_dict(mapping)
        case dict():
            return FieldMapping.from_dict(data)
        case other:
            raise ValueError(f"Mapping file must hold a mapping, got {type(other).__name__}")


def _mapped_cell(row: SheetRow, mapping: FieldMapping, field_name: str):
    if not mapping.is_mapped(field_name):
        return None
    return row.get(getattr(mapping, field_name))


def _optional_text(row: SheetRow, mapping: FieldMapping, field_name: str) -> str | None:
    return cell_text(_mapped_cell(row, mapping, field_name)) or None


def transform_row(
    row: SheetRow,
    mapping: FieldMapping,
    now: datetime | None = None,
) -> NonConformity | None:
    """Build a record from one data row; ``None`` for rows without a description."""
    description = cell_text(_mapped_cell(row, mapping, "description"))
    if not description or description == NO_DESCRIPTION:
        return None

    created_raw = _mapped_cell(row, mapping, "created_date")
    created_ts = parse_timestamp(created_raw)
    if created_ts is None:
        if cell_text(created_raw):
            logger.warning(f"Unreadable created date {created_raw!r}, using import time")
        created = (now or datetime.now()).isoformat()
    else:
        created = created_ts.isoformat()

    action_title = _optional_text(row, mapping, "action_title")

    return NonConformity(
        id=new_record_id(),
        description=description,
        source=classify_source(cell_text(_mapped_cell(row, mapping, "source"))),
        day=parse_day(_mapped_cell(row, mapping, "day")),
        severity=classify_severity(cell_text(_mapped_cell(row, mapping, "severity"))),
        status=classify_status(cell_text(_mapped_cell(row, mapping, "status"))),
        created_at=created,
        created_date=created,
        closed_date=_optional_text(row, mapping, "closed_date"),
        action_id=new_action_id() if action_title else None,
        action_title=action_title,
        team_leader=_optional_text(row, mapping, "team_leader"),
        team=_optional_text(row, mapping, "team"),
        category=_optional_text(row, mapping, "category"),
        target_date=_optional_text(row, mapping, "target_date"),
    )


def transform_rows(
    rows: list[SheetRow],
    mapping: FieldMapping,
    now: datetime | None = None,
) -> list[NonConformity]:
    """Transform every row, silently dropping the ones without a description."""
    now = now or datetime.now()
    records = [r for r in (transform_row(row, mapping, now) for row in rows) if r]
    dropped = len(rows) - len(records)
    if dropped:
        logger.warning(f"Dropped {dropped} of {len(rows)} rows without a description")
    return records
