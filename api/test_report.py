import unittest
from unittest.mock import patch
from io import StringIO
import json
import subprocess
import sys
import os
import tempfile

sys.path.insert(0, os.path.dirname(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "engine"))

from report import main


def entry(vid, channel, ts):
    return {
        "header": "YouTube",
        "title": f"Watched {vid}",
        "titleUrl": f"https://www.youtube.com/watch?v={vid}",
        "subtitles": [{"name": channel, "url": ""}],
        "time": ts,
    }


class TestReport(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, obj):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(obj if isinstance(obj, str) else json.dumps(obj))
        return path

    def _run(self, argv):
        with patch('sys.stdout', new_callable=StringIO) as out, patch('sys.stderr', new_callable=StringIO) as err:
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_text_report(self):
        path = self._write("watch-history.json", [
            entry("a", "Alpha", "2022-01-01T00:00:00Z"),
            entry("b", "alpha", "2024-01-01T00:00:00Z"),
            entry("c", "Beta", "2024-01-02T00:00:00Z"),
        ])

        code, out, _ = self._run([path])

        self.assertEqual(code, 0)
        self.assertIn("Total watched:   3", out)
        self.assertIn("Watching since:  January 1, 2022", out)
        self.assertIn("Alpha", out)
        self.assertIn("66.7%", out)

    def test_search_filter(self):
        path = self._write("watch-history.json", [
            entry("a", "Alpha", "2024-01-01T00:00:00Z"),
            entry("b", "Beta", "2024-01-01T00:00:00Z"),
        ])

        _, out, _ = self._run([path, "--search", "bet"])

        self.assertIn("Beta", out)
        self.assertNotIn("Alpha ", out)

    def test_json_output(self):
        path = self._write("watch-history.json", [entry("a", "Alpha", "2024-01-01T00:00:00Z")])

        code, out, _ = self._run([path, "--json"])

        self.assertEqual(code, 0)
        summary = json.loads(out.split("\n", 1)[1])
        self.assertEqual(summary["total_videos"], 1)
        self.assertIsNone(summary["since"])

    def test_no_valid_entries(self):
        path = self._write("watch-history.json", [{"header": "YouTube", "title": "Searched for cats"}])
        code, out, _ = self._run([path])
        self.assertEqual(code, 1)
        self.assertIn("No valid YouTube watch history found", out)

    def test_non_utf8_file_exits_2(self):
        path = os.path.join(self.tmp.name, "watch-history.json")
        with open(path, "wb") as f:
            f.write(b'[{"header": "YouTube", "title": "Watched \xff"}]')

        code, _, err = self._run([path])

        self.assertEqual(code, 2)
        self.assertIn("not UTF-8 text", err)

    def test_negative_top_rejected(self):
        path = self._write("watch-history.json", [entry("a", "Alpha", "2024-01-01T00:00:00Z")])
        with self.assertRaises(SystemExit) as ctx:
            self._run([path, "--top", "-1"])
        self.assertEqual(ctx.exception.code, 2)

    def test_runs_as_script_from_another_directory(self):
        path = self._write("watch-history.json", [entry("a", "Alpha", "2024-01-01T00:00:00Z")])
        script = os.path.join(os.path.dirname(os.path.abspath(__file__)), "report.py")
        env = {k: v for k, v in os.environ.items() if k != "PYTHONPATH"}

        result = subprocess.run([sys.executable, script, path], cwd=self.tmp.name, env=env,
                                capture_output=True, text=True)

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn("Alpha", result.stdout)

    def test_bad_shape(self):
        path = self._write("watch-history.json", {"not": "history"})
        code, _, err = self._run([path])
        self.assertEqual(code, 2)
        self.assertIn("entries", err)


if __name__ == '__main__':
    unittest.main()
