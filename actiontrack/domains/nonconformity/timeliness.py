"""Target-date status: is a corrective action on time, late, or still running."""

from dataclasses import dataclass

from actiontrack.domains.nonconformity.models import NonConformity, Status, Timeliness
from actiontrack.utils.transforms import parse_timestamp, to_day
from actiontrack.utils.types import DateLike


@dataclass(frozen=True)
class TimelinessResult:
    outcome: Timeliness
    is_closed: bool

    @property
    def is_closed_late(self) -> bool:
        return self.is_closed and self.outcome == Timeliness.OVERDUE

    @property
    def is_open_late(self) -> bool:
        return not self.is_closed and self.outcome == Timeliness.OVERDUE


def evaluate_timeliness(
    target_date: DateLike,
    status: Status | str,
    today: DateLike,
    closed_date: DateLike | None = None,
) -> TimelinessResult:
    """Compare a target date with the closing date, or with today while open.

    All dates are truncated to midnight. A closed record without a closing
    date is judged as if it closed today. Closing on the target day counts
    as on time; an open record only turns overdue the day after its target.

    Raises ``ValueError`` for a missing or unreadable target date; callers
    holding records without one should not ask.
    """
    if target_date is None or target_date == "":
        raise ValueError("evaluate_timeliness needs a target date")

    target = to_day(target_date)
    now = to_day(today)

    if Status(status) == Status.CLOSED:
        closed = to_day(closed_date) if closed_date else now
        outcome = Timeliness.TIMELY if closed <= target else Timeliness.OVERDUE
        return TimelinessResult(outcome=outcome, is_closed=True)

    outcome = Timeliness.OVERDUE if target < now else Timeliness.ONGOING
    return TimelinessResult(outcome=outcome, is_closed=False)


def record_timeliness(record: NonConformity, today: DateLike) -> TimelinessResult | None:
    """Evaluate a stored record; ``None`` when it has no readable target date.

    Imported date cells are kept verbatim, so an unreadable closing date is
    treated like a missing one.
    """
    target = parse_timestamp(record.target_date)
    if target is None:
        return None
    return evaluate_timeliness(
        target, record.status, today, parse_timestamp(record.closed_date)
    )
