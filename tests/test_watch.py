from __future__ import annotations

import tempfile
import threading
import time
import unittest
from pathlib import Path

from zint.watch import IDLE, STOPPED, WATCHING, StyleWatcher, path_stat_signature

FAST = {"poll_interval": 0.01, "debounce": 0.01, "receive_timeout": 0.05}
WAIT_SECONDS = 5.0


def _wait_until(predicate, timeout: float = WAIT_SECONDS) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class StyleWatcherTests(unittest.TestCase):
    def test_missing_file_does_not_start(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            received: list[str] = []
            watcher = StyleWatcher(Path(tmp) / "style.css", received.append, **FAST)

            self.assertFalse(watcher.start())
            self.assertEqual(watcher.state, IDLE)
            self.assertFalse(watcher.running)

    def test_change_emits_new_content(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            css = Path(tmp) / "style.css"
            css.write_text("body {}\n", encoding="utf-8")
            received: list[str] = []
            changed = threading.Event()

            def on_change(text: str) -> None:
                received.append(text)
                changed.set()

            watcher = StyleWatcher(css, on_change, **FAST)
            try:
                self.assertTrue(watcher.start())
                self.assertEqual(watcher.state, WATCHING)
                css.write_text("body { color: red; }\n", encoding="utf-8")

                self.assertTrue(changed.wait(WAIT_SECONDS))
            finally:
                watcher.stop()
                watcher.join(WAIT_SECONDS)

            self.assertEqual(received[-1], "body { color: red; }\n")
            self.assertEqual(watcher.state, STOPPED)
            self.assertFalse(watcher.running)

    def test_undecodable_content_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            css = Path(tmp) / "style.css"
            css.write_text("a", encoding="utf-8")
            received: list[str] = []

            watcher = StyleWatcher(css, received.append, **FAST)
            try:
                watcher.start()
                css.write_bytes(b"\xff\xfe\xfd")
                time.sleep(0.2)
                self.assertEqual(received, [])

                css.write_text("valid again", encoding="utf-8")
                self.assertTrue(_wait_until(lambda: bool(received)))
            finally:
                watcher.stop()
                watcher.join(WAIT_SECONDS)

            self.assertEqual(received, ["valid again"])

    def test_handler_errors_do_not_stop_watching(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            css = Path(tmp) / "style.css"
            css.write_text("0", encoding="utf-8")
            received: list[str] = []

            def on_change(text: str) -> None:
                received.append(text)
                if len(received) == 1:
                    raise RuntimeError("renderer exploded")

            watcher = StyleWatcher(css, on_change, **FAST)
            try:
                watcher.start()
                css.write_text("11", encoding="utf-8")
                self.assertTrue(_wait_until(lambda: len(received) >= 1))
                css.write_text("222", encoding="utf-8")
                self.assertTrue(_wait_until(lambda: "222" in received))
                self.assertTrue(watcher.running)
            finally:
                watcher.stop()
                watcher.join(WAIT_SECONDS)

    def test_poller_failure_stops_watcher(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            css = Path(tmp) / "style.css"
            css.write_text("x", encoding="utf-8")
            calls = {"count": 0}

            def broken_signature(path: Path) -> tuple[str, int, int, int]:
                calls["count"] += 1
                if calls["count"] > 1:
                    raise RuntimeError("poller gone")
                return path_stat_signature(path)

            watcher = StyleWatcher(css, lambda text: None, stat_signature=broken_signature, **FAST)
            watcher.start()
            watcher.join(WAIT_SECONDS)

            self.assertEqual(watcher.state, STOPPED)
            self.assertFalse(watcher.running)

    def test_stop_before_start_is_terminal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            css = Path(tmp) / "style.css"
            css.write_text("x", encoding="utf-8")
            watcher = StyleWatcher(css, lambda text: None, **FAST)

            watcher.stop()

            self.assertEqual(watcher.state, STOPPED)
            self.assertFalse(watcher.start())


class StatSignatureTests(unittest.TestCase):
    def test_signature_tracks_existence_and_size(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "f.css"

            missing = path_stat_signature(target)
            target.write_text("a", encoding="utf-8")
            first = path_stat_signature(target)
            target.write_text("abc", encoding="utf-8")
            second = path_stat_signature(target)

            self.assertEqual(missing, ("missing", 0, 0, 0))
            self.assertEqual(first[0], "ok")
            self.assertNotEqual(first, second)


if __name__ == "__main__":
    unittest.main()
