from dataclasses import dataclass, field
from datetime import datetime
from functools import reduce
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from classifier import classify_events
from models import (
    AggregateResult,
    Attribution,
    Category,
    CategoryStats,
    ChannelAccumulator,
    ChannelStats,
    WatchEvent,
)
from policy import DEFAULT_POLICY, Policy
from utils import channel_key, is_nonempty_str, parse_timestamp


@dataclass
class AggregationState:
    """Running state of one aggregation pass. Never shared between runs."""
    event_counts: Dict[Category, int] = field(default_factory=lambda: {c: 0 for c in Category})
    channels_by_category: Dict[Category, Dict[str, ChannelAccumulator]] = field(
        default_factory=lambda: {c: {} for c in Category}
    )
    # Same accumulation across both categories; keyed the same way.
    channels: Dict[str, ChannelAccumulator] = field(default_factory=dict)
    oldest: Optional[datetime] = None
    newest: Optional[datetime] = None


def _primary_attribution(event: WatchEvent) -> Optional[Attribution]:
    if not event.attribution:
        return None
    first = event.attribution[0]
    if not is_nonempty_str(first.name):
        return None
    return first


def _accumulate(channels: Dict[str, ChannelAccumulator], key: str, who: Attribution) -> ChannelAccumulator:
    acc = channels.get(key)
    if acc is None:
        acc = ChannelAccumulator(display_name=who.name.strip())
        channels[key] = acc
    acc.watch_count += 1
    # First non-empty value wins for the rest of the run.
    if not acc.url and is_nonempty_str(who.url):
        acc.url = who.url
    if not acc.avatar_url and is_nonempty_str(who.avatar):
        acc.avatar_url = who.avatar
    return acc


def _track_range(state: AggregationState, ts: Optional[str]) -> None:
    dt = parse_timestamp(ts)
    if dt is None:
        return
    if state.oldest is None or dt < state.oldest:
        state.oldest = dt
    if state.newest is None or dt > state.newest:
        state.newest = dt


def step(state: AggregationState, item: Tuple[WatchEvent, Category]) -> AggregationState:
    """
    Fold one classified event into the state and return it.

    Order matters: ties in the final ranking and the first-non-empty URL and
    avatar both depend on the order events arrive in.
    """
    event, category = item
    state.event_counts[category] += 1
    _track_range(state, event.timestamp)

    who = _primary_attribution(event)
    if who is None:
        return state

    key = channel_key(who.name)
    _accumulate(state.channels_by_category[category], key, who)
    _accumulate(state.channels, key, who)
    return state


def _rank(
    channels: Dict[str, ChannelAccumulator],
    hours_for: Callable[[str, ChannelAccumulator], float],
) -> Tuple[ChannelStats, ...]:
    # sorted() is stable and dicts keep discovery order, so equal counts stay in input order.
    ranked: List[Tuple[str, ChannelAccumulator]] = sorted(
        channels.items(), key=lambda kv: kv[1].watch_count, reverse=True
    )
    return tuple(
        ChannelStats(
            name=acc.display_name,
            url=acc.url,
            avatar_url=acc.avatar_url,
            watch_count=acc.watch_count,
            estimated_hours=hours_for(key, acc),
        )
        for key, acc in ranked
    )


def _category_stats(state: AggregationState, category: Category, policy: Policy) -> CategoryStats:
    count = state.event_counts[category]
    minutes = policy.minutes_for(category)
    return CategoryStats(
        category=category,
        event_count=count,
        estimated_hours=count * minutes / 60,
        channels=_rank(state.channels_by_category[category], lambda _key, acc: acc.watch_count * minutes / 60),
    )


def finalize(state: AggregationState, policy: Policy = DEFAULT_POLICY) -> AggregateResult:
    long_form = _category_stats(state, Category.LONG_FORM, policy)
    short_form = _category_stats(state, Category.SHORT_FORM, policy)

    def combined_hours(key: str, _acc: ChannelAccumulator) -> float:
        hours = 0.0
        for category, channels in state.channels_by_category.items():
            if key in channels:
                hours += channels[key].watch_count * policy.minutes_for(category) / 60
        return hours

    oldest, newest = state.oldest, state.newest
    # A sub-day spread (a scrape stamping every entry with its run time) is no history span.
    if oldest is None or newest is None or newest - oldest <= policy.meaningful_range:
        oldest, newest = None, None

    return AggregateResult(
        long_form=long_form,
        short_form=short_form,
        channels=_rank(state.channels, combined_hours),
        oldest_watch_date=oldest,
        newest_watch_date=newest,
    )


def aggregate_events(events: Iterable[WatchEvent], policy: Policy = DEFAULT_POLICY) -> AggregateResult:
    state = reduce(step, classify_events(events, policy), AggregationState())
    return finalize(state, policy)
