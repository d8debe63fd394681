import re
from datetime import datetime, timezone
from typing import Any, Optional

# fromisoformat before 3.11 accepts only 3 or 6 fraction digits.
FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def is_nonempty_str(x: Any) -> bool:
    return isinstance(x, str) and len(x.strip()) > 0


def channel_key(name: str) -> str:
    return name.strip().casefold()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as written by Takeout ("2024-03-01T18:22:05.123Z").
    Returns None for anything unparseable; naive values are taken as UTC.
    """
    if not is_nonempty_str(value):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = FRACTION_RE.sub(lambda m: f"{m.group(1)}.{(m.group(2) + '000000')[:6]}", text)
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
