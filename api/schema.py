import json
from typing import Any, List, Optional, Tuple

from models import Attribution, Category, WatchEvent

REQUIRED_FIELDS = [
    "header",
    "title",
]

CATEGORY_BY_TYPE = {
    "video": Category.LONG_FORM,
    "short": Category.SHORT_FORM,
}


class InputShapeError(ValueError):
    """A document that is neither a list of entries nor an {"entries": [...]} wrapper."""


def _str_or_none(x: Any) -> Optional[str]:
    return x if isinstance(x, str) else None


def _str_or_empty(x: Any) -> str:
    return x if isinstance(x, str) else ""


def _parse_attribution(subtitles: Any) -> Tuple[Attribution, ...]:
    if not isinstance(subtitles, list):
        return ()
    out: List[Attribution] = []
    for item in subtitles:
        if not isinstance(item, dict):
            continue
        out.append(Attribution(
            name=_str_or_empty(item.get("name")),
            url=_str_or_empty(item.get("url")),
            avatar=_str_or_empty(item.get("avatar")),
        ))
    return tuple(out)


def _parse_category(value: Any) -> Optional[Category]:
    if not isinstance(value, str):
        return None
    return CATEGORY_BY_TYPE.get(value)


def validate_entry(entry: Any) -> Tuple[bool, Optional[str]]:
    if not isinstance(entry, dict):
        return False, "entry is not an object"

    for f in REQUIRED_FIELDS:
        if f not in entry:
            return False, f"missing {f}"

    return True, None


def parse_event_dict(entry: Any) -> Tuple[Optional[WatchEvent], Optional[str]]:
    """
    Coerce one Takeout-style entry into a WatchEvent.

    Only structural problems reject the entry. Fields of the wrong type are
    treated as absent and left to the classifier to filter.
    """
    ok, err = validate_entry(entry)
    if not ok:
        return None, err

    return WatchEvent(
        source=_str_or_empty(entry.get("header")),
        action_label=_str_or_empty(entry.get("title")),
        target_url=_str_or_none(entry.get("titleUrl")),
        timestamp=_str_or_none(entry.get("time")),
        attribution=_parse_attribution(entry.get("subtitles")),
        explicit_category=_parse_category(entry.get("type")),
    ), None


def extract_entries(document: Any) -> List[Any]:
    # Precomputed summaries next to "entries" are informational; stats are always recomputed.
    if isinstance(document, list):
        return document
    if isinstance(document, dict) and isinstance(document.get("entries"), list):
        return document["entries"]
    raise InputShapeError("expected a JSON array of entries or an object with an 'entries' array")


def parse_document_text(text: str) -> List[Any]:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise InputShapeError(f"invalid JSON: {e.msg} (line {e.lineno})") from e
    return extract_entries(document)
