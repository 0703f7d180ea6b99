"""Keyword classification of free-text spreadsheet cells into record enums.

Each table is evaluated top to bottom and the first rule whose keywords
occur in the lower-cased text wins, so a cell reading "high / low" is
``high``. Matching is plain substring containment: "kapalı" must carry its
dotless ı to match.
"""

from actiontrack.domains.nonconformity.models import Severity, Source, Status

type Rule[T] = tuple[tuple[str, ...], T]

SOURCE_RULES: list[Rule[Source]] = [
    (("güvenlik", "safety"), Source.SAFETY),
    (("müşteri", "customer"), Source.CUSTOMER_SATISFACTION),
    (("verim", "productivity"), Source.PRODUCTIVITY),
    (("fire", "scrap"), Source.FIRE_SCRAP),
    (("navlun", "freight"), Source.PREMIUM_FREIGHT),
]

SEVERITY_RULES: list[Rule[Severity]] = [
    (("yüksek", "high", "kritik"), Severity.HIGH),
    (("düşük", "low", "az"), Severity.LOW),
]

STATUS_RULES: list[Rule[Status]] = [
    (("kapalı", "closed", "tamamlan"), Status.CLOSED),
    (("devam", "progress", "süren"), Status.IN_PROGRESS),
]


def classify[T](text: str | None, rules: list[Rule[T]], default: T) -> T:
    """Return the result of the first rule matching ``text``, else ``default``."""
    lowered = str(text or "").lower()
    for keywords, result in rules:
        if any(keyword in lowered for keyword in keywords):
            return result
    return default


def classify_source(text: str | None) -> Source:
    return classify(text, SOURCE_RULES, Source.PRODUCTIVITY)


def classify_severity(text: str | None) -> Severity:
    return classify(text, SEVERITY_RULES, Severity.MEDIUM)


def classify_status(text: str | None) -> Status:
    return classify(text, STATUS_RULES, Status.OPEN)
