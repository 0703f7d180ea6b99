"""Nonconformity domain — spreadsheet intake, action tracking, and statistics."""

from datetime import datetime

from actiontrack.domains.nonconformity.models import (
    PCDA,
    SOURCE_LABELS,
    NonConformity,
    NonConformitySchema,
    Severity,
    Source,
    Status,
    Timeliness,
    records_to_frame,
)
from actiontrack.domains.nonconformity.classify import (
    classify_severity,
    classify_source,
    classify_status,
)
from actiontrack.domains.nonconformity.timeliness import (
    TimelinessResult,
    evaluate_timeliness,
    record_timeliness,
)
from actiontrack.domains.nonconformity.store import (
    NonConformityStore,
    RecordEditError,
    RecordNotFoundError,
    SchemaValidationError,
)
from actiontrack.domains.nonconformity.transform import FieldMapping, load_field_mapping
from actiontrack.domains.nonconformity.ingest import (
    ImportResult,
    ImportSession,
    ParseError,
    import_spreadsheet,
    read_spreadsheet,
)
from actiontrack.domains.nonconformity.metrics import summarize
from actiontrack.utils.types import ValidationOutcome
from actiontrack.utils.validators import validate_dataframe, validate_unique


def validate(records) -> ValidationOutcome:
    """Run pandera validation and the id uniqueness check over a snapshot."""
    df = records_to_frame(records)
    outcome = validate_dataframe(df, NonConformitySchema)
    unique = validate_unique(df, ["id"])
    if unique["valid"]:
        return outcome
    return {
        "valid": False,
        "status": "error",
        "errors": [*outcome["errors"], *unique["errors"]],
    }


def run(
    payload: bytes,
    mapping: FieldMapping,
    now: datetime | None = None,
    filename: str | None = None,
    store: NonConformityStore | None = None,
    skip_duplicates: bool = False,
) -> dict:
    """Import one workbook into ``store`` (a fresh one by default) and summarize it."""
    now = now or datetime.now()
    store = store if store is not None else NonConformityStore()
    result = import_spreadsheet(
        payload, mapping, store,
        filename=filename, now=now, skip_duplicates=skip_duplicates,
    )
    return {
        "import_result": result,
        "store": store,
        "statistics": summarize(store.get_snapshot(), now),
    }
