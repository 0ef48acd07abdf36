from datetime import datetime, UTC
import csv
import io
import uuid
from frogtrack.services.certifications import parse_date

CSV_HEADER = [
    "Name",
    "Provider",
    "Category",
    "Issue date",
    "Expiry date",
    "Status",
    "Days left",
    "Reference",
]


def format_display_date(value) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return "-"
    return parsed.strftime("%d %b %Y")


def encode_csv(records: list[dict], include_url: bool = True) -> str | None:
    """Render records as a CRLF-terminated CSV table with every field quoted.

    Returns None when there is nothing to export.
    """
    if not records:
        return None

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(CSV_HEADER + (["URL"] if include_url else []))
    for r in records:
        days = r.get("daysLeft")
        row = [
            r.get("name") or "",
            r.get("provider") or "",
            r.get("category") or "",
            format_display_date(r.get("issueDate")),
            format_display_date(r.get("expiryDate")),
            r.get("status") or "",
            "" if days is None else str(days),
            r.get("certId") or "",
        ]
        if include_url:
            row.append(r.get("certUrl") or "")
        writer.writerow(row)
    return output.getvalue()


def escape_ics_text(value) -> str:
    text = "" if value is None else str(value)
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
    )


def fold_ics_line(line: str, limit: int = 75) -> str:
    """Fold a content line into chunks of at most `limit` octets, continuations starting with a space."""
    if len(line.encode("utf-8")) <= limit:
        return line
    chunks = []
    current = ""
    size = 0
    for char in line:
        width = len(char.encode("utf-8"))
        # continuation lines spend one octet on the leading space
        room = limit if not chunks else limit - 1
        if size + width > room:
            chunks.append(current)
            current = ""
            size = 0
        current += char
        size += width
    chunks.append(current)
    return "\r\n ".join(chunks)


def calendar_eligible(records: list[dict]) -> list[dict]:
    return [
        r
        for r in records
        if parse_date(r.get("expiryDate")) and r.get("daysLeft") is not None and r["daysLeft"] >= 0
    ]


def _uid(record: dict, domain: str, seen: set[str]) -> str:
    base = str(record["id"]) if record.get("id") is not None else uuid.uuid4().hex
    uid = f"{base}@{domain}"
    suffix = 2
    while uid in seen:
        uid = f"{base}-{suffix}@{domain}"
        suffix += 1
    seen.add(uid)
    return uid


def encode_ics(
    records: list[dict],
    uid_domain: str = "frogtrack",
    now: datetime | None = None,
) -> str | None:
    """Render one all-day renewal VEVENT per record expiring today or later.

    Records without a usable expiry, or already expired, are skipped.
    Returns None when no record is eligible.
    """
    eligible = calendar_eligible(records)
    if not eligible:
        return None

    now = now or datetime.now(UTC)
    dt_stamp = now.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//FrogTrack//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    seen: set[str] = set()
    for r in eligible:
        expiry = parse_date(r.get("expiryDate"))
        description = "\\n".join(
            escape_ics_text(part)
            for part in [
                f"Provider: {r.get('provider') or 'Unspecified'}",
                f"Category: {r.get('category') or 'Unspecified'}",
                f"Reference: {r['certId']}" if r.get("certId") else "",
                "Generated by FrogTrack",
            ]
            if part
        )
        lines += [
            "BEGIN:VEVENT",
            f"UID:{_uid(r, uid_domain, seen)}",
            f"DTSTAMP:{dt_stamp}",
            f"DTSTART;VALUE=DATE:{expiry.strftime('%Y%m%d')}",
            f"SUMMARY:{escape_ics_text('Renew ' + (r.get('name') or ''))}",
            f"DESCRIPTION:{description}",
            "END:VEVENT",
        ]
    lines.append("END:VCALENDAR")
    return "\r\n".join(fold_ics_line(line) for line in lines) + "\r\n"
