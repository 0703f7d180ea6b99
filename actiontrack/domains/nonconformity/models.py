"""Nonconformity record model, its enumerations and the pandera frame schema."""

from dataclasses import asdict, dataclass
from enum import StrEnum

import pandas as pd
import pandera as pa
from pandera import Check, Column

from actiontrack.utils.transforms import parse_timestamp


class Source(StrEnum):
    SAFETY = "safety"
    CUSTOMER_SATISFACTION = "customer-satisfaction"
    PRODUCTIVITY = "productivity"
    FIRE_SCRAP = "fire-scrap"
    PREMIUM_FREIGHT = "premium-freight"


class Severity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Status(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class Timeliness(StrEnum):
    TIMELY = "Timely"
    OVERDUE = "Overdue"
    ONGOING = "Ongoing"


SOURCE_LABELS: dict[Source, str] = {
    Source.SAFETY: "İş Güvenliği",
    Source.CUSTOMER_SATISFACTION: "Müşteri Memnuniyeti",
    Source.PRODUCTIVITY: "Verimlilik",
    Source.FIRE_SCRAP: "Fire (Scrap)",
    Source.PREMIUM_FREIGHT: "Ekstra Navlun",
}

# written by the import form when a row had no description
NO_DESCRIPTION = "Açıklama yok"


@dataclass(frozen=True)
class PCDA:
    """Plan-do-check-act note attached to a corrective action."""

    plan: str = ""
    do: str = ""
    check: str = ""
    act: str = ""


@dataclass(frozen=True)
class NonConformity:
    """A tracked deviation and the corrective action raised against it.

    ``created_at`` and ``created_date`` always hold the same ISO timestamp;
    both are kept because older exports read one or the other. Date fields
    are ISO strings so imported values survive a round trip untouched.
    """

    id: str
    description: str
    source: Source = Source.PRODUCTIVITY
    day: int = 1
    severity: Severity = Severity.MEDIUM
    status: Status = Status.OPEN
    created_at: str = ""
    created_date: str = ""
    closed_date: str | None = None
    action_id: str | None = None
    action_title: str | None = None
    team_leader: str | None = None
    team: str | None = None
    category: str | None = None
    target_date: str | None = None
    pcda: PCDA | None = None

    @property
    def source_label(self) -> str:
        return SOURCE_LABELS[self.source]

    @property
    def is_closed(self) -> bool:
        return self.status == Status.CLOSED

    def to_dict(self) -> dict:
        row = asdict(self)
        row["source"] = str(self.source)
        row["severity"] = str(self.severity)
        row["status"] = str(self.status)
        row["source_label"] = self.source_label
        pcda = row.pop("pcda")
        for step in ("plan", "do", "check", "act"):
            row[f"pcda_{step}"] = pcda[step] if pcda else None
        return row


RECORD_COLUMNS = [
    "id", "source", "source_label", "day", "description", "severity", "status",
    "created_at", "created_date", "closed_date", "action_id", "action_title",
    "team_leader", "team", "category", "target_date",
    "pcda_plan", "pcda_do", "pcda_check", "pcda_act",
]


def records_to_frame(records) -> pd.DataFrame:
    """Flatten a record snapshot into a DataFrame.

    Adds parsed timestamp columns ``created_ts``, ``target_ts`` and
    ``closed_ts`` (``NaT`` where the source field is absent or unreadable)
    alongside the raw ISO strings.
    """
    df = pd.DataFrame([r.to_dict() for r in records], columns=RECORD_COLUMNS)
    df["day"] = df["day"].astype("int64")
    for raw, parsed in (
        ("created_at", "created_ts"),
        ("target_date", "target_ts"),
        ("closed_date", "closed_ts"),
    ):
        df[parsed] = pd.to_datetime(df[raw].map(parse_timestamp), errors="coerce")
    return df


def _labels_match_sources(df: pd.DataFrame) -> pd.Series:
    expected = df["source"].map({str(k): v for k, v in SOURCE_LABELS.items()})
    return df["source_label"] == expected


NonConformitySchema = pa.DataFrameSchema(
    columns={
        "id": Column(str, Check.str_length(min_value=1), unique=True),
        "source": Column(str, Check.isin([s.value for s in Source])),
        "source_label": Column(str, Check.isin(list(SOURCE_LABELS.values()))),
        "day": Column(int),
        "description": Column(
            str,
            [Check.str_length(min_value=1), Check(lambda s: s.str.strip() != "")],
        ),
        "severity": Column(str, Check.isin([s.value for s in Severity])),
        "status": Column(str, Check.isin([s.value for s in Status])),
        "created_at": Column(str, Check.str_length(min_value=1)),
        "created_date": Column(str, Check.str_length(min_value=1)),
        "closed_date": Column(str, nullable=True),
        "target_date": Column(str, nullable=True),
    },
    checks=[
        Check(_labels_match_sources, error="source_label must match source"),
        Check(
            lambda df: df["created_at"] == df["created_date"],
            error="created_at and created_date must agree",
        ),
    ],
    coerce=True,
    strict=False,
)
