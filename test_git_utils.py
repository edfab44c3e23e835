# test_git_utils.py
import unittest
from unittest import mock

import git_utils
from config import GlobalConfig
from models import ProcessResult


def _fake_git(outputs):
    """
    outputs: {(format 关键字, 命名空间): stdout 或 ProcessResult}
    """

    def run(program, args, cwd=None, timeout=None):
        kind = "name" if "refname:short" in args else "rev"
        namespace = args.split()[-1]
        value = outputs.get((kind, namespace), "")
        if isinstance(value, ProcessResult) or value is None:
            return value
        return ProcessResult(stdout=value, stderr="", returncode=0)

    return run


class TestSplitRefLines(unittest.TestCase):

    def test_strips_quotes_whitespace_and_blank_lines(self):
        output = "'master'\n  'feature/x'  \n\n\"develop\"\r\n   \n"
        self.assertEqual(
            git_utils.split_ref_lines(output), ["master", "feature/x", "develop"]
        )


class TestListBranches(unittest.TestCase):

    def setUp(self):
        self.config = GlobalConfig()

    def _list(self, outputs):
        with mock.patch.object(git_utils, "run_process", side_effect=_fake_git(outputs)):
            return git_utils.list_branches("/repo", self.config)

    def test_local_and_remote_branches_are_merged(self):
        listing = self._list(
            {
                ("name", "refs/heads/"): "'master'\n'topic'\n",
                ("rev", "refs/heads/"): "'aaa111'\n'ccc333'\n",
                ("name", "refs/remotes/"): "'origin'\n'origin/master'\n'origin/feature'\n",
                ("rev", "refs/remotes/"): "'aaa111'\n'aaa111'\n'bbb222'\n",
            }
        )
        self.assertTrue(listing.ok)
        self.assertEqual(
            listing.branches,
            {
                "master": "aaa111",
                "topic": "ccc333",
                "origin/master": "aaa111",
                "origin/feature": "bbb222",
            },
        )

    def test_remote_head_alias_is_skipped(self):
        listing = self._list(
            {
                ("name", "refs/remotes/"): "origin\norigin/master\n",
                ("rev", "refs/remotes/"): "aaa111\naaa111\n",
            }
        )
        self.assertNotIn("origin", listing.branches)
        self.assertEqual(listing.branches, {"origin/master": "aaa111"})

    def test_remote_head_symref_is_skipped(self):
        """较新的 git 把 refs/remotes/origin/HEAD 显示为 origin/HEAD"""
        listing = self._list(
            {
                ("name", "refs/heads/"): "master\n",
                ("rev", "refs/heads/"): "aaa111\n",
                ("name", "refs/remotes/"): "origin/HEAD\norigin/feature\norigin/master\n",
                ("rev", "refs/remotes/"): "aaa111\nbbb222\naaa111\n",
            }
        )
        self.assertTrue(listing.ok)
        self.assertNotIn("origin/HEAD", listing.branches)
        self.assertEqual(
            listing.branches,
            {"master": "aaa111", "origin/feature": "bbb222", "origin/master": "aaa111"},
        )

    def test_configured_remote_head_symref_is_skipped(self):
        self.config.REMOTE_NAME = "upstream"
        listing = self._list(
            {
                ("name", "refs/remotes/"): "upstream/HEAD\nupstream/main\norigin/HEAD\n",
                ("rev", "refs/remotes/"): "aaa\naaa\nccc\n",
            }
        )
        self.assertEqual(listing.branches, {"upstream/main": "aaa", "origin/HEAD": "ccc"})

    def test_configured_remote_name_is_skipped(self):
        self.config.REMOTE_NAME = "upstream"
        listing = self._list(
            {
                ("name", "refs/remotes/"): "upstream\nupstream/main\norigin\n",
                ("rev", "refs/remotes/"): "aaa\nbbb\nccc\n",
            }
        )
        self.assertEqual(listing.branches, {"upstream/main": "bbb", "origin": "ccc"})

    def test_later_namespace_overwrites_same_name(self):
        listing = self._list(
            {
                ("name", "refs/heads/"): "dup\n",
                ("rev", "refs/heads/"): "111\n",
                ("name", "refs/remotes/"): "dup\n",
                ("rev", "refs/remotes/"): "222\n",
            }
        )
        self.assertEqual(listing.branches, {"dup": "222"})

    def test_line_count_mismatch_returns_empty_mapping(self):
        with self.assertLogs("git_utils", level="ERROR"):
            listing = self._list(
                {
                    ("name", "refs/heads/"): "master\nfeature\n",
                    ("rev", "refs/heads/"): "aaa111\n",
                }
            )
        self.assertFalse(listing.ok)
        self.assertEqual(listing.branches, {})
        self.assertIn("refs/heads/", listing.error)

    def test_mismatch_in_second_namespace_discards_first(self):
        with self.assertLogs("git_utils", level="ERROR"):
            listing = self._list(
                {
                    ("name", "refs/heads/"): "master\n",
                    ("rev", "refs/heads/"): "aaa111\n",
                    ("name", "refs/remotes/"): "origin/master\n",
                    ("rev", "refs/remotes/"): "",
                }
            )
        self.assertEqual(listing.branches, {})

    def test_nonzero_exit_returns_empty_mapping(self):
        failed = ProcessResult(stdout="", stderr="fatal: bad", returncode=128)
        with self.assertLogs("git_utils", level="ERROR"):
            listing = self._list({("name", "refs/heads/"): failed})
        self.assertFalse(listing.ok)
        self.assertEqual(listing.branches, {})

    def test_launch_failure_returns_empty_mapping(self):
        with self.assertLogs("git_utils", level="ERROR"):
            listing = self._list({("rev", "refs/heads/"): None})
        self.assertFalse(listing.ok)
        self.assertEqual(listing.branches, {})

    def test_commands_run_inside_repository(self):
        with mock.patch.object(
            git_utils, "run_process", side_effect=_fake_git({})
        ) as run:
            git_utils.list_branches("/repo", self.config)

        self.assertEqual(run.call_count, 4)
        for call in run.call_args_list:
            self.assertEqual(call.args[0], "git")
            self.assertEqual(call.kwargs["cwd"], "/repo")
        self.assertEqual(
            run.call_args_list[0].args[1],
            "for-each-ref --format='%(refname:short)' refs/heads/",
        )
        self.assertEqual(
            run.call_args_list[3].args[1],
            "for-each-ref --format='%(objectname)' refs/remotes/",
        )


if __name__ == "__main__":
    unittest.main()
