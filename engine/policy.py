from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict

from models import Category

SOURCE_TAG = "YouTube"
WATCHED_PREFIX = "Watched "
SHORTS_MARKER = "/shorts/"

# Estimates only; nothing in a history export carries real durations.
VIDEO_AVG_MINUTES = 10.0
SHORT_AVG_MINUTES = 0.5

MEANINGFUL_RANGE = timedelta(days=1)


def _default_average_minutes() -> Dict[Category, float]:
    return {
        Category.LONG_FORM: VIDEO_AVG_MINUTES,
        Category.SHORT_FORM: SHORT_AVG_MINUTES,
    }


@dataclass(frozen=True)
class Policy:
    source_tag: str = SOURCE_TAG
    watched_prefix: str = WATCHED_PREFIX
    shorts_marker: str = SHORTS_MARKER
    average_minutes: Dict[Category, float] = field(default_factory=_default_average_minutes)
    meaningful_range: timedelta = MEANINGFUL_RANGE

    def minutes_for(self, category: Category) -> float:
        return self.average_minutes.get(category, 0.0)

    def with_averages(self, video_minutes: float, short_minutes: float) -> "Policy":
        return Policy(
            source_tag=self.source_tag,
            watched_prefix=self.watched_prefix,
            shorts_marker=self.shorts_marker,
            average_minutes={
                Category.LONG_FORM: video_minutes,
                Category.SHORT_FORM: short_minutes,
            },
            meaningful_range=self.meaningful_range,
        )


DEFAULT_POLICY = Policy()
