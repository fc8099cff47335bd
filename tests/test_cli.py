import os
import tempfile
import unittest

from click.testing import CliRunner
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from fshcli.cli import FshCompleter, main, open_history
from fshcli.config import CAPTURE_SENTINEL, Config
from shell_case import ShellTestCase


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        config = Config()
        self.assertEqual(config.start_dir, os.path.abspath(os.getcwd()))
        self.assertEqual(config.history_file, os.path.expanduser("~/.fsh_history"))
        self.assertEqual(config.log_level, "WARNING")
        self.assertEqual(config.sentinel, CAPTURE_SENTINEL)

    def test_from_args(self):
        config = Config.from_args(start_dir="/tmp/../tmp", history_file="~/h", log_level="debug")
        self.assertEqual(config.start_dir, os.path.normpath("/tmp"))
        self.assertEqual(config.history_file, os.path.expanduser("~/h"))
        self.assertEqual(config.log_level, "DEBUG")


class TestCompleter(ShellTestCase):
    def complete(self, text):
        completer = FshCompleter(self.session)
        return [c.text for c in completer.get_completions(Document(text), CompleteEvent())]

    def test_command_names(self):
        self.assertEqual(self.complete("c"), ["cd", "cat"])
        self.assertIn("rmdir", self.complete(""))

    def test_paths_in_current_directory(self):
        self.write("alpha.txt", "")
        os.mkdir(self.path("alps"))
        self.write(".alhidden", "")
        self.assertEqual(self.complete("cat al"), ["alpha.txt", "alps/"])
        self.assertEqual(self.complete("cat .al"), [".alhidden"])

    def test_paths_in_subdirectory(self):
        os.mkdir(self.path("alps"))
        self.write(os.path.join("alps", "peak"), "")
        self.assertEqual(self.complete("cd alps/p"), ["alps/peak"])

    def test_unlistable_directory(self):
        self.assertEqual(self.complete("cd missing/x"), [])


class TestHistory(unittest.TestCase):
    def test_falls_back_to_temporary_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = os.path.join(tmpdir, "file")
            with open(blocker, "w"):
                pass
            history = open_history(os.path.join(blocker, "history"))
            self.assertNotEqual(history.filename, os.path.join(blocker, "history"))
            self.assertTrue(os.path.exists(history.filename))
            os.remove(history.filename)

    def test_uses_requested_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "history")
            history = open_history(path)
            self.assertEqual(history.filename, path)


class TestMain(unittest.TestCase):
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("fsh 1.0.0", result.output)

    def test_piped_session(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = os.path.realpath(tmpdir)
            result = CliRunner().invoke(
                main,
                ["-C", root],
                input="mkdir docs\ncd docs\ncat notes.txt\nhello\nEOF\npwd\nexit\n",
            )
            self.assertEqual(result.exit_code, 0, result.output)
            with open(os.path.join(root, "docs", "notes.txt")) as f:
                self.assertEqual(f.read(), "hello\n")
            self.assertIn(os.path.join(root, "docs"), result.output)
            self.assertIn("Exiting the CLI...", result.output)

    def test_long_lines_are_not_wrapped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            deep = os.path.join(os.path.realpath(tmpdir), "a" * 40, "b" * 40)
            os.makedirs(deep)
            name = "c" * 70
            result = CliRunner().invoke(main, ["-C", deep], input=f"pwd\nmkdir {name}\nexit\n")
            self.assertEqual(result.exit_code, 0, result.output)
            lines = result.output.splitlines()
            self.assertIn(deep, lines)
            self.assertIn(f"Directory created: {name}", lines)

    def test_missing_start_directory(self):
        result = CliRunner().invoke(main, ["-C", "/definitely/not/here"])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == '__main__':
    unittest.main()
