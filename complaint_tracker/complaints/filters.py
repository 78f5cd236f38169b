from datetime import timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .records import SEVERITY_RANK, Severity, Status, as_text

EXACT_MATCH_FILTERS = ("status", "category", "ward", "zone")


def apply_complaint_filters(complaints, params):
    query = as_text(params.get("q", "")).strip().lower()
    exact = {}
    for name in EXACT_MATCH_FILTERS:
        value = as_text(params.get(name, "")).strip()
        if value:
            exact[name] = value

    results = []
    for complaint in complaints:
        if query:
            haystacks = (as_text(complaint.id).lower(), as_text(complaint.citizen.name).lower())
            if not any(query in haystack for haystack in haystacks):
                continue
        if any(as_text(getattr(complaint, name)) != value for name, value in exact.items()):
            continue
        results.append(complaint)
    return results


def created_timestamp(complaint) -> float:
    try:
        created = parse_datetime(as_text(complaint.created_at))
    except ValueError:
        created = None
    if created is None:
        return float("-inf")
    if timezone.is_naive(created):
        created = created.replace(tzinfo=dt_timezone.utc)
    return created.timestamp()


def severity_rank(complaint) -> int:
    severity = as_text(getattr(complaint, "severity", ""))
    if severity in Severity.values:
        return SEVERITY_RANK[Severity(severity)]
    return SEVERITY_RANK[Severity.MEDIUM]


def sort_complaints(complaints):
    # Escalated first, then severity, then newest; sorted() keeps input order for ties.
    return sorted(
        complaints,
        key=lambda complaint: (
            not complaint.escalated,
            -severity_rank(complaint),
            -created_timestamp(complaint),
        ),
    )


def summarize_by_status(complaints):
    counts = {value: 0 for value in Status.values}
    escalated = 0
    for complaint in complaints:
        status = as_text(complaint.status)
        counts[status] = counts.get(status, 0) + 1
        if complaint.escalated:
            escalated += 1
    return {
        "by_status": [(value, label, counts[value]) for value, label in Status.choices],
        "total": len(complaints),
        "escalated": escalated,
    }
