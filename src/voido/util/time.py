from datetime import date, datetime, timedelta

from pyresults import Err, Ok, Result

DATE_FMT = "%Y-%m-%d"


def today_iso() -> str:
    return date.today().strftime(DATE_FMT)


def parse_date(s: str, *, today: date | None = None) -> Result[str, str]:
    """Normalise a due-date string to ``YYYY-MM-DD``.

    Accepts ISO dates, full ISO datetimes (time part dropped), and the
    shortcuts ``today`` / ``tomorrow``.
    """
    base = today or date.today()
    raw = s.strip().lower()
    if not raw:
        return Err("Empty date")
    if raw == "today":
        return Ok(base.strftime(DATE_FMT))
    if raw == "tomorrow":
        return Ok((base + timedelta(days=1)).strftime(DATE_FMT))
    try:
        return Ok(date.fromisoformat(raw).strftime(DATE_FMT))
    except ValueError:
        pass
    try:
        return Ok(datetime.fromisoformat(raw).date().strftime(DATE_FMT))
    except ValueError:
        return Err(f"Invalid date '{s}' (expected YYYY-MM-DD)")


def days_until(due: str | None, *, today: date | None = None) -> int | None:
    if not due:
        return None
    try:
        d = date.fromisoformat(due)
    except ValueError:
        return None
    return (d - (today or date.today())).days
