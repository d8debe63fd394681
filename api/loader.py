from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from models import WatchEvent
from schema import InputShapeError, extract_entries, parse_event_dict, parse_document_text

MAX_REPORTED_ERRORS = 10


@dataclass
class MergeResult:
    events: List[WatchEvent] = field(default_factory=list)
    rejected: int = 0
    duplicates: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return len(self.events)


def _dedup_key(event: WatchEvent) -> Optional[Tuple[str, str]]:
    # Overlapping exports repeat an entry verbatim; a rewatch has a different time.
    if not event.target_url:
        return None
    return event.target_url, event.timestamp or ""


def merge_documents(documents: Iterable[Any]) -> MergeResult:
    """
    Concatenate the entries of several parsed documents in order, dropping
    non-object entries and repeats of an already seen entry.
    Raises InputShapeError if any document has the wrong top-level shape.
    """
    result = MergeResult()
    seen: Set[Tuple[str, str]] = set()

    for doc_idx, document in enumerate(documents):
        for idx, entry in enumerate(extract_entries(document)):
            event, err = parse_event_dict(entry)
            if event is None:
                result.rejected += 1
                if len(result.errors) < MAX_REPORTED_ERRORS:
                    result.errors.append({"document": doc_idx, "index": idx, "error": err or "invalid entry"})
                continue

            key = _dedup_key(event)
            if key is not None:
                if key in seen:
                    result.duplicates += 1
                    continue
                seen.add(key)

            result.events.append(event)

    return result


def load_json_file(path: str) -> List[Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise InputShapeError(f"{path}: not UTF-8 text") from e
    try:
        return parse_document_text(text)
    except InputShapeError as e:
        raise InputShapeError(f"{path}: {e}") from e


def load_files(paths: Iterable[str]) -> MergeResult:
    documents = []
    for path in paths:
        if not path.endswith(".json"):
            print(f"Skipping {path}: not a .json file")
            continue
        entries = load_json_file(path)
        print(f"Loaded {path}: entries={len(entries)}")
        documents.append(entries)
    return merge_documents(documents)
