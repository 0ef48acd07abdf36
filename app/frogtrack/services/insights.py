from collections import Counter
from datetime import date
import math
from frogtrack.schemas.api import FilterCriteria
from frogtrack.services.certifications import STATUSES, days_left, parse_date, status_for_days
from frogtrack.services.normalizer import normalize_record

UNSPECIFIED = "Unspecified"
ALL = "all"
ALL_CATEGORIES = "All categories"

EXPIRY_BEFORE_ISSUE = "Expiry before issue date"
MISSING_EXPIRY = "Missing expiry date"

# (summary key, predicate over a normalized record)
QUALITY_FIELDS = [
    ("missingExpiry", lambda r: r.get("expiryDate")),
    ("missingIssue", lambda r: r.get("issueDate")),
    ("missingProvider", lambda r: r.get("provider")),
    ("missingCategory", lambda r: r.get("category")),
    ("missingUrl", lambda r: r.get("certUrl")),
    ("missingId", lambda r: r.get("certId")),
]


def _js_round(value: float) -> int:
    return math.floor(value + 0.5)


def _is_all(value: str | None) -> bool:
    return not value or value.strip().lower() in {ALL, ALL_CATEGORIES.lower(), "all statuses"}


def derive_record(row: dict, today: date | None = None) -> dict:
    record = normalize_record(row)
    record["daysLeft"] = days_left(record.get("expiryDate"), today)
    record["status"] = status_for_days(record["daysLeft"])
    return record


def derive_records(rows, today: date | None = None) -> list[dict]:
    today = today or date.today()
    return [derive_record(row, today) for row in rows]


def matches(record: dict, criteria: FilterCriteria) -> bool:
    days = record.get("daysLeft")
    if criteria.window is not None and days is not None:
        if days < 0 or days > criteria.window:
            return False

    if not _is_all(criteria.category):
        category = str(record.get("category") or "")
        if category.strip().lower() != criteria.category.strip().lower():
            return False

    if not _is_all(criteria.status) and record.get("status") != criteria.status:
        return False

    query = criteria.search.strip().lower()
    if query:
        haystack = " ".join(
            str(record.get(key) or "") for key in ("name", "provider", "certId")
        ).lower()
        if query not in haystack:
            return False

    return True


def filter_records(records: list[dict], criteria: FilterCriteria) -> list[dict]:
    return [r for r in records if matches(r, criteria)]


def summarize(records: list[dict]) -> dict:
    stats = {"total": len(records), "active": 0, "expiring30": 0, "expiring90": 0, "expired": 0}
    for record in records:
        days = record.get("daysLeft")
        if days is None:
            continue
        if days < 0:
            stats["expired"] += 1
            continue
        stats["active"] += 1
        if days <= 30:
            stats["expiring30"] += 1
        if days <= 90:
            stats["expiring90"] += 1
    return stats


def count_by_status(records: list[dict]) -> dict:
    counts = {status: 0 for status in STATUSES}
    for record in records:
        if record.get("status") in counts:
            counts[record["status"]] += 1
    return counts


def group_by_field(records: list[dict], field: str) -> list[dict]:
    counts: Counter[str] = Counter()
    for record in records:
        raw = record.get(field)
        label = raw.strip() if isinstance(raw, str) else ""
        counts[label or UNSPECIFIED] += 1
    return [{"label": label, "count": count} for label, count in counts.most_common()]


def category_options(records: list[dict]) -> list[str]:
    seen = []
    for record in records:
        category = record.get("category")
        if category and category not in seen:
            seen.append(category)
    return [ALL_CATEGORIES, *seen]


def data_quality(records: list[dict]) -> dict:
    missing = {key: 0 for key, _ in QUALITY_FIELDS}
    if not records:
        return {"completenessScore": 100, **missing}

    for record in records:
        for key, present in QUALITY_FIELDS:
            if not present(record):
                missing[key] += 1

    total_fields = len(records) * len(QUALITY_FIELDS)
    score = max(0, _js_round(100 - (sum(missing.values()) / total_fields) * 100))
    return {"completenessScore": score, **missing}


def completeness_score(records: list[dict]) -> int:
    return data_quality(records)["completenessScore"]


def find_anomalies(records: list[dict], limit: int = 6) -> list[dict]:
    items = []
    for record in records:
        if len(items) >= limit:
            break
        issued = parse_date(record.get("issueDate"))
        expiry = parse_date(record.get("expiryDate"))
        if issued and expiry and expiry < issued:
            items.append({"type": EXPIRY_BEFORE_ISSUE, "record": record})
        elif not record.get("expiryDate"):
            items.append({"type": MISSING_EXPIRY, "record": record})
    return items


def recent_records(records: list[dict], limit: int = 6) -> list[dict]:
    def sort_key(record: dict) -> date:
        return (
            parse_date(record.get("issueDate"))
            or parse_date(record.get("expiryDate"))
            or date.min
        )

    return sorted(records, key=sort_key, reverse=True)[:limit]


def next_renewal(records: list[dict]) -> dict | None:
    upcoming = [r for r in records if r.get("daysLeft") is not None and r["daysLeft"] >= 0]
    if not upcoming:
        return None
    return min(upcoming, key=lambda r: r["daysLeft"])
