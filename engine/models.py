from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Category(Enum):
    LONG_FORM = "video"
    SHORT_FORM = "short"


@dataclass(frozen=True)
class Attribution:
    name: str
    url: str = ""
    avatar: str = ""


@dataclass(frozen=True)
class WatchEvent:
    """One history entry after coercion at the ingestion boundary."""
    source: str
    action_label: str
    target_url: Optional[str] = None
    timestamp: Optional[str] = None
    attribution: Tuple[Attribution, ...] = ()
    explicit_category: Optional[Category] = None


@dataclass
class ChannelAccumulator:
    display_name: str
    url: str = ""
    avatar_url: str = ""
    watch_count: int = 0


@dataclass(frozen=True)
class ChannelStats:
    name: str
    url: str
    avatar_url: str
    watch_count: int
    estimated_hours: float


@dataclass(frozen=True)
class CategoryStats:
    category: Category
    event_count: int = 0
    estimated_hours: float = 0.0
    channels: Tuple[ChannelStats, ...] = ()

    @property
    def channel_count(self) -> int:
        return len(self.channels)


@dataclass(frozen=True)
class AggregateResult:
    long_form: CategoryStats
    short_form: CategoryStats
    channels: Tuple[ChannelStats, ...] = ()
    oldest_watch_date: Optional[datetime] = None
    newest_watch_date: Optional[datetime] = None

    @property
    def total_events(self) -> int:
        return self.long_form.event_count + self.short_form.event_count

    @property
    def total_estimated_hours(self) -> float:
        return self.long_form.estimated_hours + self.short_form.estimated_hours

    @property
    def has_meaningful_range(self) -> bool:
        return self.oldest_watch_date is not None

    @property
    def is_empty(self) -> bool:
        return self.total_events == 0

    def for_category(self, category: Category) -> CategoryStats:
        if category is Category.SHORT_FORM:
            return self.short_form
        return self.long_form
