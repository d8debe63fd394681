import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from models import AggregateResult, CategoryStats, ChannelStats

HOURS_PER_DAY = 24
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365

SORT_FIELDS = ("rank", "name", "watch_count", "estimated_hours")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_duration(hours: float) -> str:
    if hours < 1:
        return f"{_round_half_up(hours * 60)} min"
    if hours < HOURS_PER_DAY:
        return f"{hours:.1f} hrs"
    days = hours / HOURS_PER_DAY
    if days < DAYS_PER_MONTH:
        return f"{days:.1f} days"
    return f"{days / DAYS_PER_MONTH:.1f} months"


def share_of_total(watch_count: int, event_count: int) -> str:
    if event_count <= 0:
        return "0.0%"
    return f"{watch_count / event_count * 100:.1f}%"


def format_date(dt: datetime) -> str:
    return f"{dt:%B} {dt.day}, {dt.year}"


def account_age(oldest: datetime, now: Optional[datetime] = None) -> str:
    """
    Human label for the time since the oldest watch, e.g. "17 days",
    "5 months", "3 years" or "2 years, 4 months".
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if oldest.tzinfo is None:
        oldest = oldest.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = (now - oldest).total_seconds() / 86400
    if days < DAYS_PER_MONTH:
        return _plural(_round_half_up(days), "day")
    if days < DAYS_PER_YEAR:
        return _plural(_round_half_up(days / DAYS_PER_MONTH), "month")

    fractional_years = days / DAYS_PER_YEAR
    years = math.floor(fractional_years)
    months = _round_half_up((fractional_years - years) * 12)
    if months == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')}, {_plural(months, 'month')}"


def filter_channels(channels: Sequence[ChannelStats], query: str) -> List[ChannelStats]:
    q = (query or "").strip().casefold()
    if not q:
        return list(channels)
    return [ch for ch in channels if q in ch.name.casefold()]


def sort_channels(channels: Sequence[ChannelStats], field: str = "watch_count", descending: bool = True) -> List[ChannelStats]:
    """Re-sort a ranked list; "rank" means the order the list was given in."""
    if field not in SORT_FIELDS:
        raise ValueError(f"unknown sort field: {field}")
    indexed = list(enumerate(channels))
    if field == "rank":
        key = lambda pair: pair[0]
    elif field == "name":
        key = lambda pair: pair[1].name.casefold()
    else:
        key = lambda pair: getattr(pair[1], field)
    return [ch for _, ch in sorted(indexed, key=key, reverse=descending)]


def top_channel(stats: CategoryStats) -> Optional[ChannelStats]:
    return stats.channels[0] if stats.channels else None


def _channel_row(rank: int, ch: ChannelStats, event_count: int) -> Dict[str, Any]:
    return {
        "rank": rank,
        "name": ch.name,
        "url": ch.url,
        "avatar_url": ch.avatar_url,
        "watch_count": ch.watch_count,
        "estimated_hours": round(ch.estimated_hours, 2),
        "duration": format_duration(ch.estimated_hours),
        "share": share_of_total(ch.watch_count, event_count),
    }


def _category_block(stats: CategoryStats, top: Optional[int]) -> Dict[str, Any]:
    channels = stats.channels if top is None else stats.channels[:top]
    leader = top_channel(stats)
    return {
        "videos": stats.event_count,
        "estimated_hours": round(stats.estimated_hours, 2),
        "duration": format_duration(stats.estimated_hours),
        "channel_count": stats.channel_count,
        "top_channel": _channel_row(1, leader, stats.event_count) if leader else None,
        "channels": [_channel_row(i, ch, stats.event_count) for i, ch in enumerate(channels, start=1)],
    }


def build_summary(result: AggregateResult, now: Optional[datetime] = None, top: Optional[int] = None) -> Dict[str, Any]:
    """
    Presentation-ready view of an aggregation result.

    Dates and the account age only appear when the result carries a
    meaningful range; otherwise they are None.
    """
    total = result.total_events
    channels = result.channels if top is None else result.channels[:top]
    oldest = result.oldest_watch_date
    newest = result.newest_watch_date
    return {
        "total_videos": total,
        "total_estimated_hours": round(result.total_estimated_hours, 2),
        "total_duration": format_duration(result.total_estimated_hours),
        "channel_count": len(result.channels),
        "long_form": _category_block(result.long_form, top),
        "short_form": _category_block(result.short_form, top),
        "channels": [_channel_row(i, ch, total) for i, ch in enumerate(channels, start=1)],
        "oldest_watch_date": oldest.isoformat() if oldest else None,
        "newest_watch_date": newest.isoformat() if newest else None,
        "since": format_date(oldest) if oldest else None,
        "account_age": account_age(oldest, now) if oldest else None,
    }
