from datetime import date, datetime

ACTIVE = "Active"
EXPIRING_SOON = "Expiring soon"
EXPIRED = "Expired"
UNKNOWN = "Unknown"

STATUSES = [ACTIVE, EXPIRING_SOON, EXPIRED]
EXPIRING_SOON_DAYS = 30


def parse_date(value) -> date | None:
    """Lenient date parsing: ISO strings, dates and datetimes; anything else is None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def days_left(expiry_date, today: date | None = None) -> int | None:
    expiry = parse_date(expiry_date)
    if expiry is None:
        return None
    today = today or date.today()
    return (expiry - today).days


def status_for_days(days: int | None) -> str:
    if days is None:
        return UNKNOWN
    if days < 0:
        return EXPIRED
    if days <= EXPIRING_SOON_DAYS:
        return EXPIRING_SOON
    return ACTIVE
