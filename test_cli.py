# test_cli.py
import os
import shutil
import tempfile
import unittest
from unittest import mock

import cli
import config_manager
from config import GlobalConfig


class TestBuildContext(unittest.TestCase):

    def setUp(self):
        self.config = GlobalConfig()
        self.config.DEFAULT_BASE_BRANCH = "origin/master"
        self.config.DEFAULT_SCOPE = "remote"
        self.config.OUTPUT_ENCODING = "utf-8"
        self.parser = cli.setup_parser()

    def _build(self, argv, project_config=None):
        args = self.parser.parse_args(argv)
        return cli.build_context(
            args, self.config, "/repo", "/data/repo", project_config or {}
        )

    def test_defaults(self):
        ctx = self._build([])
        self.assertEqual(ctx.base_branch, "origin/master")
        self.assertEqual(ctx.scope, "remote")
        self.assertTrue(ctx.remote_only)
        self.assertIsNone(ctx.output_path)
        self.assertEqual(ctx.encoding, "utf-8")
        self.assertFalse(ctx.html_report)

    def test_project_config_overrides_defaults(self):
        ctx = self._build(
            [],
            {
                "default_base_branch": "origin/main",
                "default_scope": "all",
                "default_output": "diff.csv",
            },
        )
        self.assertEqual(ctx.base_branch, "origin/main")
        self.assertFalse(ctx.remote_only)
        self.assertEqual(ctx.output_path, "diff.csv")

    def test_flags_override_project_config(self):
        ctx = self._build(
            ["-b", "origin/dev", "--scope", "remote", "-o", "x.csv", "--html"],
            {"default_base_branch": "origin/main", "default_scope": "all"},
        )
        self.assertEqual(ctx.base_branch, "origin/dev")
        self.assertEqual(ctx.scope, "remote")
        self.assertEqual(ctx.output_path, "x.csv")
        self.assertTrue(ctx.html_report)

    def test_project_and_repo_are_exclusive(self):
        with mock.patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                self.parser.parse_args(["-p", "alias", "-r", "/repo"])


class TestRunCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        patcher = mock.patch.object(GlobalConfig, "SCRIPT_BASE_PATH", self.tmp)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def test_exit_code_comes_from_orchestrator(self):
        with mock.patch.object(cli, "BranchDiffOrchestrator") as orch_cls:
            orch_cls.return_value.run.return_value = 1
            exit_code = cli.run_cli(["-r", self.tmp, "-b", "origin/nope"])

        self.assertEqual(exit_code, 1)
        context = orch_cls.call_args.args[0]
        self.assertEqual(context.repo_path, os.path.abspath(self.tmp))
        self.assertEqual(context.base_branch, "origin/nope")

    def test_unknown_alias_is_config_error(self):
        with mock.patch.object(cli, "BranchDiffOrchestrator") as orch_cls:
            with self.assertLogs("cli", level="ERROR"):
                exit_code = cli.run_cli(["-p", "missing"])
        self.assertEqual(exit_code, 1)
        orch_cls.assert_not_called()

    def test_alias_resolves_repo_and_project_config(self):
        data_root = os.path.join(self.tmp, "data")
        repo = os.path.join(self.tmp, "myrepo")
        os.makedirs(repo)
        config_manager.save_project_aliases(data_root, {"mine": repo})
        config_manager.save_project_config(
            config_manager.get_project_data_path(data_root, repo),
            {"default_base_branch": "origin/trunk"},
        )

        with mock.patch.object(cli, "BranchDiffOrchestrator") as orch_cls:
            orch_cls.return_value.run.return_value = 0
            exit_code = cli.run_cli(["-p", "mine"])

        self.assertEqual(exit_code, 0)
        context = orch_cls.call_args.args[0]
        self.assertEqual(context.repo_path, repo)
        self.assertEqual(context.base_branch, "origin/trunk")

    def test_configure_requires_repo_path(self):
        with self.assertLogs("cli", level="ERROR"):
            self.assertEqual(cli.run_cli(["--configure"]), 1)


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_missing_files_load_as_empty(self):
        self.assertEqual(config_manager.load_project_aliases(self.tmp), {})
        self.assertEqual(config_manager.load_project_config(self.tmp), {})

    def test_corrupt_config_is_ignored(self):
        with open(os.path.join(self.tmp, "config.json"), "w") as f:
            f.write("{broken")
        with self.assertLogs("config_manager", level="ERROR"):
            self.assertEqual(config_manager.load_project_config(self.tmp), {})

    def test_wizard_writes_alias_and_defaults(self):
        repo = os.path.join(self.tmp, "repo")
        os.makedirs(repo)
        data_root = os.path.join(self.tmp, "data")
        answers = iter(["r1", "origin/main", "ALL", "-"])
        with mock.patch("builtins.input", lambda prompt: next(answers)), mock.patch(
            "sys.stderr"
        ):
            config_manager.run_interactive_config_wizard(
                data_root, repo, {"base_branch": "origin/master", "scope": "remote"}
            )

        self.assertEqual(config_manager.get_path_from_alias(data_root, "r1"), repo)
        saved = config_manager.load_project_config(
            config_manager.get_project_data_path(data_root, repo)
        )
        self.assertEqual(saved["default_base_branch"], "origin/main")
        self.assertEqual(saved["default_scope"], "all")
        self.assertIsNone(saved["default_output"])


if __name__ == "__main__":
    unittest.main()
