"""Statistics over a record snapshot: status, timeliness, categories, weeks, resolution times.

Every function recomputes from the snapshot it is given and returns plain
lists, empty or zero-valued for an empty snapshot.
"""

import logging
from itertools import cycle

import numpy as np
import pandas as pd

from actiontrack.config import CATEGORY_PALETTE, UNSPECIFIED_CATEGORY, WEEKLY_BUCKET_LIMIT
from actiontrack.domains.nonconformity.models import Status, Timeliness, records_to_frame
from actiontrack.utils.transforms import parse_timestamp
from actiontrack.utils.types import DateLike, LabelCount, ResolutionStats

logger = logging.getLogger(__name__)

ON_TIME = "on-time"
LATE = "late"


def status_distribution(records) -> list[LabelCount]:
    """Open vs closed counts; in-progress records fall in neither bucket."""
    counts = records_to_frame(records)["status"].value_counts()
    return [
        LabelCount(str(Status.OPEN), int(counts.get(Status.OPEN, 0))),
        LabelCount(str(Status.CLOSED), int(counts.get(Status.CLOSED, 0))),
    ]


def status_totals(records) -> list[LabelCount]:
    """Count per status, including in-progress."""
    counts = records_to_frame(records)["status"].value_counts()
    return [LabelCount(str(s), int(counts.get(s, 0))) for s in Status]


def open_timeliness_split(records, now: DateLike) -> list[LabelCount]:
    """Split open records into Ongoing and Overdue by target date.

    The target is compared with the full ``now`` timestamp, so a task due
    today is Overdue once the day has started. A record without a
    (readable) target date counts as Ongoing.
    """
    moment = parse_timestamp(now)
    if moment is None:
        raise ValueError(f"Unreadable reference time: {now!r}")

    df = records_to_frame(records)
    open_tasks = df[df["status"] == Status.OPEN]
    overdue = int((open_tasks["target_ts"] < moment).sum())
    return [
        LabelCount(str(Timeliness.ONGOING), len(open_tasks) - overdue),
        LabelCount(str(Timeliness.OVERDUE), overdue),
    ]


def category_distribution(
    records,
    palette: tuple[str, ...] = CATEGORY_PALETTE,
    unspecified: str = UNSPECIFIED_CATEGORY,
) -> list[LabelCount]:
    """Record count per category in first-seen order, colored from ``palette``."""
    df = records_to_frame(records)
    if df.empty:
        return []

    categories = df["category"].map(lambda c: c if isinstance(c, str) and c else unspecified)
    counts = categories.groupby(categories, sort=False).size()
    colors = cycle(palette or CATEGORY_PALETTE)
    return [
        LabelCount(str(name), int(n), next(colors))
        for name, n in counts.items()
    ]


def weekly_distribution(records, limit: int = WEEKLY_BUCKET_LIMIT) -> list[LabelCount]:
    """Records per Sunday-started week of creation, latest ``limit`` weeks oldest first.

    Labels read ``day/month`` of the week's Sunday.
    """
    created = records_to_frame(records)["created_ts"].dropna()
    if created.empty:
        return []

    days_since_sunday = (created.dt.dayofweek + 1) % 7
    week_starts = created.dt.normalize() - pd.to_timedelta(days_since_sunday, unit="D")
    counts = week_starts.value_counts().sort_index().tail(limit)
    return [
        LabelCount(f"{start.day}/{start.month}", int(n))
        for start, n in counts.items()
    ]


def closed_timeliness_split(records) -> list[LabelCount]:
    """Closed records with both dates, split by closing on or before the target."""
    df = records_to_frame(records)
    closed = df[
        (df["status"] == Status.CLOSED)
        & df["target_ts"].notna()
        & df["closed_ts"].notna()
    ]
    on_time = int((closed["closed_ts"] <= closed["target_ts"]).sum())
    return [
        LabelCount(ON_TIME, on_time),
        LabelCount(LATE, len(closed) - on_time),
    ]


def resolution_stats(records, by: str = "department") -> list[ResolutionStats]:
    """Min, average and max days from creation to closing per group.

    ``by="department"`` groups on the source label, ``by="team_leader"`` on
    the action's team leader (records without one are skipped). Days are
    rounded up; averages are rounded half up.
    """
    df = records_to_frame(records)

    match by:
        case "department":
            key = "source_label"
        case "team_leader":
            key = "team_leader"
        case other:
            raise ValueError(f"Unknown resolution grouping: {other}")

    closed = df[
        (df["status"] == Status.CLOSED)
        & df["closed_ts"].notna()
        & df["created_ts"].notna()
        & df[key].notna()
        & (df[key] != "")
    ]
    if closed.empty:
        return []

    days = np.ceil((closed["closed_ts"] - closed["created_ts"]) / pd.Timedelta(days=1))
    grouped = days.astype("int64").groupby(closed[key], sort=False).agg(["min", "mean", "max"])

    return [
        ResolutionStats(
            group=str(group),
            min=int(row["min"]),
            average=int(np.floor(row["mean"] + 0.5)),
            max=int(row["max"]),
        )
        for group, row in grouped.iterrows()
    ]


def department_resolution_times(records) -> list[ResolutionStats]:
    return resolution_stats(records, by="department")


def team_leader_resolution_times(records) -> list[ResolutionStats]:
    return resolution_stats(records, by="team_leader")


def summarize(
    records,
    now: DateLike,
    palette: tuple[str, ...] = CATEGORY_PALETTE,
    unspecified: str = UNSPECIFIED_CATEGORY,
    weekly_limit: int = WEEKLY_BUCKET_LIMIT,
) -> dict[str, list[LabelCount] | list[ResolutionStats]]:
    """Every statistics view for one snapshot, keyed by view name."""
    snapshot = tuple(records)
    summary = {
        "status_totals": status_totals(snapshot),
        "status_distribution": status_distribution(snapshot),
        "open_timeliness": open_timeliness_split(snapshot, now),
        "category_distribution": category_distribution(snapshot, palette, unspecified),
        "weekly_distribution": weekly_distribution(snapshot, weekly_limit),
        "closed_timeliness": closed_timeliness_split(snapshot),
        "department_resolution": department_resolution_times(snapshot),
        "team_leader_resolution": team_leader_resolution_times(snapshot),
    }
    logger.debug(f"Summarized {len(snapshot)} records")
    return summary
