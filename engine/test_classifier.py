import unittest
import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

from classifier import classify_event, classify_events
from models import Attribution, Category, WatchEvent
from policy import Policy


def entry(source="YouTube", title="Watched A video", url="https://www.youtube.com/watch?v=abc", category=None):
    return WatchEvent(
        source=source,
        action_label=title,
        target_url=url,
        timestamp="2024-01-01T00:00:00Z",
        attribution=(Attribution("Chan"),),
        explicit_category=category,
    )


class TestClassifier(unittest.TestCase):
    def test_long_form_watch(self):
        self.assertEqual(classify_event(entry()), (True, Category.LONG_FORM))

    def test_shorts_url(self):
        ok, category = classify_event(entry(url="https://www.youtube.com/shorts/abc123"))
        self.assertTrue(ok)
        self.assertEqual(category, Category.SHORT_FORM)

    def test_explicit_category_beats_url(self):
        ok, category = classify_event(entry(url="https://www.youtube.com/shorts/abc", category=Category.LONG_FORM))
        self.assertTrue(ok)
        self.assertEqual(category, Category.LONG_FORM)

        _, category = classify_event(entry(category=Category.SHORT_FORM))
        self.assertEqual(category, Category.SHORT_FORM)

    def test_foreign_source_rejected(self):
        ok, _ = classify_event(entry(source="YouTube Music"))
        self.assertFalse(ok)

    def test_non_watch_action_rejected(self):
        for title in ("Searched for cats", "Visited YouTube", "watched lowercase", "Watched"):
            ok, _ = classify_event(entry(title=title))
            self.assertFalse(ok, title)

    def test_missing_url_rejected(self):
        for url in (None, "", "   "):
            ok, _ = classify_event(entry(url=url))
            self.assertFalse(ok)

    def test_custom_policy(self):
        policy = Policy(source_tag="Tube", watched_prefix="Saw ", shorts_marker="/reel/")
        self.assertEqual(
            classify_event(entry(source="Tube", title="Saw x", url="https://t/reel/1"), policy),
            (True, Category.SHORT_FORM),
        )
        self.assertFalse(classify_event(entry(), policy)[0])

    def test_classify_events_keeps_order_and_drops_invalid(self):
        events = [
            entry(title="Watched 1"),
            entry(source="Other"),
            entry(title="Watched 2", url="https://www.youtube.com/shorts/2"),
            entry(url=None),
        ]
        out = list(classify_events(events))
        self.assertEqual([e.action_label for e, _ in out], ["Watched 1", "Watched 2"])
        self.assertEqual([c for _, c in out], [Category.LONG_FORM, Category.SHORT_FORM])


if __name__ == '__main__':
    unittest.main()
