# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import subprocess
import unittest
import unittest.mock

from phpbuild.lib.errors import CommandFailedError, EmptyHostKeyError, UsageError
from phpbuild.lib.operations.ssh import add_ssh_keys_for_typical_hosting_services
from test_utils import FAKE_HOST_KEY, build_env, fake_subprocess, run_argvs


class HostKeyTests(unittest.TestCase):
    def test_keys_for_both_hosts_are_appended(self) -> None:
        with (
            build_env() as env,
            unittest.mock.patch(
                "phpbuild.lib.runner.subprocess.run", side_effect=fake_subprocess()
            ) as run_mock,
            unittest.mock.patch("phpbuild.lib.runner.chown_tree") as chown_mock,
        ):
            add_ssh_keys_for_typical_hosting_services(env.ctx)

            known_hosts = env.config.known_hosts_file.read_text(encoding="utf-8")
            ssh_mode = env.config.ssh_dir.stat().st_mode & 0o777
            cfg = env.config

        self.assertEqual(
            known_hosts,
            f"github.com {FAKE_HOST_KEY}\nbitbucket.org {FAKE_HOST_KEY}\n",
        )
        self.assertEqual(ssh_mode, 0o700)
        self.assertEqual(
            run_argvs(run_mock),
            [
                ["ssh-keyscan", "-t", "rsa", "github.com"],
                ["ssh-keyscan", "-t", "rsa", "bitbucket.org"],
            ],
        )
        self.assertEqual(run_mock.call_args.kwargs["timeout"], 120)
        chown_mock.assert_called_once_with(cfg.ssh_dir, cfg.service_user, cfg.service_group)

    def test_empty_lookup_aborts_before_ownership_fixup(self) -> None:
        for empty_host in ("github.com", "bitbucket.org"):
            with self.subTest(host=empty_host):
                with (
                    build_env() as env,
                    unittest.mock.patch(
                        "phpbuild.lib.runner.subprocess.run",
                        side_effect=fake_subprocess({empty_host: "\n"}),
                    ),
                    unittest.mock.patch("phpbuild.lib.runner.chown_tree") as chown_mock,
                ):
                    with self.assertRaises(EmptyHostKeyError) as cm:
                        add_ssh_keys_for_typical_hosting_services(env.ctx)

                    known_hosts = env.config.known_hosts_file
                    text = known_hosts.read_text(encoding="utf-8") if known_hosts.exists() else ""

                self.assertEqual(cm.exception.host, empty_host)
                self.assertIn(empty_host, str(cm.exception))
                chown_mock.assert_not_called()
                self.assertNotIn(empty_host, text)

    def test_earlier_keys_stay_when_second_lookup_is_empty(self) -> None:
        with (
            build_env() as env,
            unittest.mock.patch(
                "phpbuild.lib.runner.subprocess.run",
                side_effect=fake_subprocess({"bitbucket.org": ""}),
            ),
            unittest.mock.patch("phpbuild.lib.runner.chown_tree"),
        ):
            with self.assertRaises(EmptyHostKeyError):
                add_ssh_keys_for_typical_hosting_services(env.ctx)
            text = env.config.known_hosts_file.read_text(encoding="utf-8")

        self.assertEqual(text, f"github.com {FAKE_HOST_KEY}\n")

    def test_timeout_is_a_command_failure(self) -> None:
        error = subprocess.TimeoutExpired(["ssh-keyscan"], 120)
        with (
            build_env() as env,
            unittest.mock.patch("phpbuild.lib.runner.subprocess.run", side_effect=error),
            unittest.mock.patch("phpbuild.lib.runner.chown_tree") as chown_mock,
        ):
            with self.assertRaises(CommandFailedError):
                add_ssh_keys_for_typical_hosting_services(env.ctx)

        chown_mock.assert_not_called()

    def test_dry_run_skips_emptiness_check(self) -> None:
        with (
            build_env(dry_run=True) as env,
            unittest.mock.patch("phpbuild.lib.runner.subprocess.run") as run_mock,
        ):
            add_ssh_keys_for_typical_hosting_services(env.ctx)
            self.assertFalse(env.config.ssh_dir.exists())

        run_mock.assert_not_called()
        self.assertIn("ssh-keyscan -t rsa bitbucket.org", env.out.getvalue())

    def test_rejects_arguments(self) -> None:
        with build_env() as env:
            with self.assertRaises(UsageError):
                add_ssh_keys_for_typical_hosting_services(env.ctx, "gitlab.com")
