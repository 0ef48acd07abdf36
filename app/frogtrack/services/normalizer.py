"""
Field-name adapter between storage rows and view records.

Storage columns are snake_case, the dashboard reads camelCase. Each canonical
view field lists its accepted source keys in priority order; the first
non-empty value wins and is written back under both conventions.
"""

FIELD_MAP: dict[str, tuple[str, ...]] = {
    "issueDate": ("issue_date", "issueDate"),
    "expiryDate": ("expiry_date", "expiryDate"),
    "certId": ("cert_id", "certId", "reference"),
    "certUrl": ("cert_url", "certUrl"),
}

SNAKE_NAMES = {
    "issueDate": "issue_date",
    "expiryDate": "expiry_date",
    "certId": "cert_id",
    "certUrl": "cert_url",
}


def _first_present(row: dict, keys: tuple[str, ...]):
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def normalize_record(row: dict) -> dict:
    record = dict(row)
    for camel, sources in FIELD_MAP.items():
        value = _first_present(row, sources)
        record[camel] = value
        record[SNAKE_NAMES[camel]] = value
    return record


def to_view(record: dict) -> dict:
    """camelCase-only projection used for API responses."""
    view = {
        "id": record.get("id"),
        "name": record.get("name"),
        "provider": record.get("provider"),
        "category": record.get("category"),
        "notes": record.get("notes"),
    }
    for camel in FIELD_MAP:
        view[camel] = record.get(camel)
    if "daysLeft" in record:
        view["daysLeft"] = record["daysLeft"]
        view["status"] = record["status"]
    return view
