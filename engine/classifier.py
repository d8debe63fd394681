from typing import Iterable, Iterator, Tuple

from models import Category, WatchEvent
from policy import DEFAULT_POLICY, Policy
from utils import is_nonempty_str


def is_watch_event(event: WatchEvent, policy: Policy = DEFAULT_POLICY) -> bool:
    if event.source != policy.source_tag:
        return False
    if not isinstance(event.action_label, str) or not event.action_label.startswith(policy.watched_prefix):
        return False
    return is_nonempty_str(event.target_url)


def category_of(event: WatchEvent, policy: Policy = DEFAULT_POLICY) -> Category:
    # An explicit tag is trusted over the URL, even when the URL says shorts.
    if event.explicit_category is not None:
        return event.explicit_category
    if event.target_url and policy.shorts_marker in event.target_url:
        return Category.SHORT_FORM
    return Category.LONG_FORM


def classify_event(event: WatchEvent, policy: Policy = DEFAULT_POLICY) -> Tuple[bool, Category]:
    """
    Decide whether an entry is a watch of a video and which category it falls in.
    The category is only meaningful when the first element is True.
    """
    if not is_watch_event(event, policy):
        return False, Category.LONG_FORM
    return True, category_of(event, policy)


def classify_events(events: Iterable[WatchEvent], policy: Policy = DEFAULT_POLICY) -> Iterator[Tuple[WatchEvent, Category]]:
    for event in events:
        ok, category = classify_event(event, policy)
        if ok:
            yield event, category
