"""In-memory nonconformity store: the single writer behind imports and edits."""

import hashlib
import logging
import uuid
from dataclasses import replace
from datetime import datetime

from actiontrack.domains.nonconformity.models import (
    PCDA,
    NonConformity,
    NonConformitySchema,
    Severity,
    Source,
    Status,
    records_to_frame,
)
from actiontrack.utils.transforms import parse_day, to_day
from actiontrack.utils.types import DateLike, RecordID
from actiontrack.utils.validators import validate_dataframe

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "action_title",
    "team_leader",
    "team",
    "category",
    "target_date",
    "status",
    "closed_date",
    "pcda",
})


class RecordNotFoundError(KeyError):
    pass


class RecordEditError(ValueError):
    pass


class SchemaValidationError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"{len(errors)} schema violation(s): {'; '.join(errors[:3])}")


def new_record_id() -> RecordID:
    return f"nc-{uuid.uuid4().hex}"


def new_action_id() -> str:
    return f"action-{uuid.uuid4().hex}"


def content_key(record: NonConformity) -> str:
    """Stable hash of the fields that identify a row across re-imports."""
    raw = "\x1f".join([
        record.description,
        str(record.source),
        str(record.day),
        record.created_date,
    ])
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def _iso_day(value: DateLike) -> str:
    return to_day(value).date().isoformat()


class NonConformityStore:
    """Ordered record collection with snapshot reads and validated writes.

    Records are immutable; edits swap in a new instance, so a snapshot
    taken before an edit never changes underneath its reader.
    """

    def __init__(self, records=(), strict: bool = True):
        self._records: list[NonConformity] = list(records)
        self.strict = strict

    def __len__(self) -> int:
        return len(self._records)

    def get_snapshot(self) -> tuple[NonConformity, ...]:
        return tuple(self._records)

    def get(self, record_id: RecordID) -> NonConformity:
        return self._records[self._index_of(record_id)]

    def filter(
        self,
        status: Status | str | None = None,
        source: Source | str | None = None,
    ) -> tuple[NonConformity, ...]:
        """Records matching the given status and source; ``None`` matches all."""
        return tuple(
            r for r in self._records
            if (status is None or r.status == status)
            and (source is None or r.source == source)
        )

    def content_keys(self) -> set[str]:
        return {content_key(r) for r in self._records}

    def commit_import(self, records) -> int:
        """Append a batch after validating it together with the current records.

        Nothing is appended when validation fails in strict mode.
        """
        batch = list(records)
        if not batch:
            return 0

        outcome = validate_dataframe(
            records_to_frame(self._records + batch), NonConformitySchema
        )
        if not outcome["valid"]:
            if self.strict:
                logger.error(f"Rejected import batch of {len(batch)}: {outcome['errors']}")
                raise SchemaValidationError(outcome["errors"])
            logger.warning(f"Committing batch with schema issues: {outcome['errors']}")

        self._records.extend(batch)
        logger.info(f"Committed {len(batch)} records, store now holds {len(self._records)}")
        return len(batch)

    def apply_edit(
        self,
        record_id: RecordID,
        patch: dict,
        today: DateLike | None = None,
    ) -> NonConformity:
        """Update the action fields of one record and return the new version.

        Closing a record stamps ``closed_date`` (the patch's value or today);
        re-opening keeps it. ``closed_date`` cannot be set on a record that
        stays open.
        """
        index = self._index_of(record_id)
        record = self._records[index]

        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise RecordEditError(f"Fields not editable: {sorted(unknown)}")

        changes = dict(patch)
        if "status" in changes:
            try:
                changes["status"] = Status(changes["status"])
            except ValueError as exc:
                raise RecordEditError(f"Unknown status: {changes['status']!r}") from exc

        if isinstance(changes.get("pcda"), dict):
            try:
                changes["pcda"] = PCDA(**changes["pcda"])
            except TypeError as exc:
                raise RecordEditError(f"Invalid pcda note: {exc}") from exc

        new_status = changes.get("status", record.status)
        if changes.get("closed_date") and new_status != Status.CLOSED:
            raise RecordEditError("closed_date can only be set on a closed record")

        try:
            if new_status == Status.CLOSED and not record.is_closed:
                closed_on = changes.get("closed_date") or today or datetime.now()
                changes["closed_date"] = _iso_day(closed_on)
            elif changes.get("closed_date"):
                changes["closed_date"] = _iso_day(changes["closed_date"])
        except ValueError as exc:
            raise RecordEditError(str(exc)) from exc

        if changes.get("action_title") and not record.action_id:
            changes["action_id"] = new_action_id()

        updated = replace(record, **changes)
        self._records[index] = updated
        logger.info(f"Edited {record_id}: {sorted(patch)}")
        return updated

    def create(
        self,
        description: str,
        source: Source | str = Source.PRODUCTIVITY,
        day: int = 1,
        severity: Severity | str = Severity.MEDIUM,
        status: Status | str = Status.OPEN,
        action_title: str | None = None,
        team_leader: str | None = None,
        team: str | None = None,
        category: str | None = None,
        target_date: str | None = None,
        now: datetime | None = None,
    ) -> NonConformity:
        """Add a manually reported nonconformity at the top of the list."""
        description = (description or "").strip()
        if not description:
            raise ValueError("A nonconformity needs a description")

        created = (now or datetime.now()).isoformat()
        status = Status(status)
        record = NonConformity(
            id=new_record_id(),
            description=description,
            source=Source(source),
            day=parse_day(day),
            severity=Severity(severity),
            status=status,
            created_at=created,
            created_date=created,
            closed_date=_iso_day(created) if status == Status.CLOSED else None,
            action_id=new_action_id() if action_title else None,
            action_title=action_title or None,
            team_leader=team_leader or None,
            team=team or None,
            category=category or None,
            target_date=target_date or None,
        )
        self._records.insert(0, record)
        logger.info(f"Created {record.id} ({record.source_label})")
        return record

    def _index_of(self, record_id: RecordID) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        raise RecordNotFoundError(record_id)
