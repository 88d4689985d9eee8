from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from zint import launch


class LaunchTests(unittest.TestCase):
    def test_open_with_editor_splits_command_and_appends_path(self) -> None:
        with mock.patch("zint.launch.subprocess.Popen") as popen:
            error = launch.open_with_editor("/tmp/project", command="code --new-window")

        self.assertIsNone(error)
        self.assertEqual(popen.call_args.args[0], ["code", "--new-window", "/tmp/project"])

    def test_open_with_editor_defaults_to_configured_command(self) -> None:
        with mock.patch("zint.launch.load_config") as load_config, mock.patch("zint.launch.subprocess.Popen") as popen:
            load_config.return_value.editor.command = "vim"
            launch.open_with_editor("/tmp/a.txt")

        self.assertEqual(popen.call_args.args[0], ["vim", "/tmp/a.txt"])

    def test_open_with_editor_reports_spawn_failure(self) -> None:
        with mock.patch("zint.launch.subprocess.Popen", side_effect=FileNotFoundError(2, "No such file")):
            error = launch.open_with_editor("/tmp/a.txt", command="nope")

        self.assertIsNotNone(error)
        assert error is not None
        self.assertTrue(error.startswith("Failed to open with nope:"))

    def test_open_with_editor_rejects_empty_command(self) -> None:
        with mock.patch("zint.launch.subprocess.Popen") as popen:
            error = launch.open_with_editor("/tmp/a.txt", command="   ")

        self.assertEqual(error, "Cannot edit: editor command is empty.")
        popen.assert_not_called()

    @mock.patch("zint.launch.sys.platform", "linux")
    def test_open_file_uses_platform_opener(self) -> None:
        with mock.patch("zint.launch.subprocess.Popen") as popen:
            error = launch.open_file("/tmp/report.pdf")

        self.assertIsNone(error)
        self.assertEqual(popen.call_args.args[0], ["xdg-open", "/tmp/report.pdf"])
        self.assertEqual(popen.call_args.kwargs["stdout"], subprocess.DEVNULL)

    @mock.patch("zint.launch.sys.platform", "linux")
    def test_open_file_reports_failure(self) -> None:
        with mock.patch("zint.launch.subprocess.Popen", side_effect=OSError("boom")):
            error = launch.open_file("/tmp/report.pdf")

        self.assertEqual(error, "Failed to open file: boom")


if __name__ == "__main__":
    unittest.main()
