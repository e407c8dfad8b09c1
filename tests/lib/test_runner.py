# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import io
import subprocess
import tempfile
import unittest
import unittest.mock
from pathlib import Path

from phpbuild.lib.errors import CommandFailedError
from phpbuild.lib.runner import Runner
from test_utils import completed


class RunnerCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.out = io.StringIO()
        self.runner = Runner(out=self.out)

    def test_run_echoes_and_checks(self) -> None:
        with unittest.mock.patch(
            "phpbuild.lib.runner.subprocess.run", return_value=completed(["true"])
        ) as run_mock:
            self.runner.run(["apt-get", "install", "-y", "git"])

        run_mock.assert_called_once()
        self.assertEqual(run_mock.call_args.args[0], ["apt-get", "install", "-y", "git"])
        self.assertTrue(run_mock.call_args.kwargs["check"])
        self.assertIn("$ apt-get install -y git", self.out.getvalue())

    def test_run_merges_extra_env(self) -> None:
        with unittest.mock.patch(
            "phpbuild.lib.runner.subprocess.run", return_value=completed(["true"])
        ) as run_mock:
            self.runner.run(["apt-get", "update"], env={"DEBIAN_FRONTEND": "noninteractive"})

        env = run_mock.call_args.kwargs["env"]
        self.assertEqual(env["DEBIAN_FRONTEND"], "noninteractive")
        self.assertIn("PATH", env)

    def test_nonzero_exit_raises_command_failed(self) -> None:
        error = subprocess.CalledProcessError(100, ["apt-get", "update"])
        with unittest.mock.patch("phpbuild.lib.runner.subprocess.run", side_effect=error):
            with self.assertRaises(CommandFailedError) as cm:
                self.runner.run(["apt-get", "update"])

        self.assertEqual(cm.exception.returncode, 100)
        self.assertEqual(cm.exception.argv, ["apt-get", "update"])
        self.assertIn("exited with status 100", str(cm.exception))

    def test_missing_binary_raises_command_failed(self) -> None:
        with unittest.mock.patch(
            "phpbuild.lib.runner.subprocess.run", side_effect=FileNotFoundError("pecl")
        ):
            with self.assertRaises(CommandFailedError) as cm:
                self.runner.run(["pecl", "install", "apcu"])

        self.assertIn("pecl not found", str(cm.exception))

    def test_timeout_raises_command_failed(self) -> None:
        error = subprocess.TimeoutExpired(["ssh-keyscan", "github.com"], 120)
        with unittest.mock.patch("phpbuild.lib.runner.subprocess.run", side_effect=error):
            with self.assertRaises(CommandFailedError) as cm:
                self.runner.capture(["ssh-keyscan", "github.com"], timeout=120)

        self.assertIn("timed out after 120 seconds", str(cm.exception))

    def test_capture_returns_stdout(self) -> None:
        with unittest.mock.patch(
            "phpbuild.lib.runner.subprocess.run",
            return_value=completed(["ssh-keyscan"], stdout="github.com ssh-rsa AAA\n"),
        ) as run_mock:
            output = self.runner.capture(["ssh-keyscan", "github.com"], timeout=5)

        self.assertEqual(output, "github.com ssh-rsa AAA\n")
        self.assertTrue(run_mock.call_args.kwargs["capture_output"])
        self.assertEqual(run_mock.call_args.kwargs["timeout"], 5)


class RunnerDryRunTests(unittest.TestCase):
    def test_dry_run_never_executes_or_writes(self) -> None:
        out = io.StringIO()
        runner = Runner(dry_run=True, out=out)
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "conf" / "php.ini"
            with unittest.mock.patch("phpbuild.lib.runner.subprocess.run") as run_mock:
                runner.run(["composer", "install"], cwd=Path(td))
                self.assertEqual(runner.capture(["ssh-keyscan", "github.com"]), "")
                runner.append_lines(target, ["memory_limit=-1"])
                runner.write_file(target, "x")
                runner.make_dirs(Path(td) / "new")
                runner.chown(Path(td), "nobody", "nogroup")
                runner.remove_file(Path(td) / "missing")

            run_mock.assert_not_called()
            self.assertFalse(target.exists())
            self.assertFalse((Path(td) / "new").exists())

        printed = out.getvalue()
        self.assertIn("[dry-run] $ (cd ", printed)
        self.assertIn("composer install", printed)
        self.assertIn("echo memory_limit=-1 >> ", printed)
        self.assertIn("chown -R nobody:nogroup", printed)


class RunnerFileTests(unittest.TestCase):
    def test_append_lines_creates_parent_and_appends_in_order(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "etc" / "php.ini"
            runner.append_lines(target, ["a=1", "b=2"])
            runner.append_lines(target, ["a=3"])
            self.assertEqual(target.read_text(encoding="utf-8"), "a=1\nb=2\na=3\n")

    def test_append_nothing_leaves_file_absent(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "php.ini"
            runner.append_lines(target, [])
            self.assertFalse(target.exists())

    def test_write_file_sets_mode(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "sudoers.d" / "www-data"
            runner.write_file(target, "www-data ALL=(ALL) NOPASSWD: ALL\n", mode=0o440)
            self.assertEqual(target.stat().st_mode & 0o777, 0o440)

    def test_remove_file_tolerates_absence(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            runner.remove_file(Path(td) / "never-created")

    def test_clear_dir_keeps_directory(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            lists = Path(td) / "lists"
            (lists / "partial").mkdir(parents=True)
            (lists / "deb.debian.org_InRelease").write_text("x", encoding="utf-8")
            runner.clear_dir(lists)
            self.assertTrue(lists.is_dir())
            self.assertEqual(list(lists.iterdir()), [])

    def test_remove_tree_removes_directory_and_tolerates_absence(self) -> None:
        runner = Runner(out=io.StringIO())
        with tempfile.TemporaryDirectory() as td:
            pear = Path(td) / "pear"
            (pear / "temp" / "redis").mkdir(parents=True)
            runner.remove_tree(pear)
            self.assertFalse(pear.exists())
            runner.remove_tree(pear)
