# orchestrator.py
"""
[V1.0] 业务逻辑编排器
- 列举分支 -> 校验基准分支 -> 逐个分支调用 cloc 对比 -> 输出 CSV 行
- 集成 Hook 系统 (Lifecycle & Plugins)
"""
import logging
import sys
from typing import List, Optional, TextIO

from context import RunContext
from models import BranchResult, ReportRow

import git_utils
import cloc_utils
import csv_writer
import report_builder

from hooks.manager import PluginManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1


class BranchDiffOrchestrator:
    """
    负责执行分支对比的核心业务逻辑。
    """

    def __init__(self, context: RunContext, stream: Optional[TextIO] = None):
        self.context = context
        self.global_config = context.global_config
        # 默认写到 sys.stdout；在运行时再取，便于测试替换
        self.stream = stream

        self.plugin_manager = PluginManager(context)
        self.plugin_manager.load_plugins()

        self.results: List[BranchResult] = []
        self._csv_ready = False

    def run(self) -> int:
        """
        执行核心业务流程，返回进程退出码。
        """
        self.plugin_manager.trigger("on_start")

        # --- 1. 列举分支 ---
        listing = git_utils.list_branches(self.context.repo_path, self.global_config)
        branches = listing.branches
        self.plugin_manager.trigger("on_branches_listed", dict(branches))

        # --- 2. 校验基准分支 ---
        base_branch = self.context.base_branch
        if base_branch not in branches:
            if not listing.ok:
                logger.error(f"❌ 分支列举失败: {listing.error}")
            logger.error(f"❌ 基准分支不存在: {base_branch}")
            return EXIT_CONFIG_ERROR

        remote_prefix = self.global_config.remote_prefix
        if self.context.remote_only and not base_branch.startswith(remote_prefix):
            logger.error(
                f"❌ 范围为 remote 时基准分支必须以 '{remote_prefix}' 开头: {base_branch}"
            )
            return EXIT_CONFIG_ERROR

        # --- 3. 基准分支不和自己对比 ---
        base_revision = branches.pop(base_branch)
        logger.info(f"ℹ️ 基准分支 {base_branch} @ {base_revision}")

        # --- 4. 逐个分支对比 ---
        for name, revision in branches.items():
            if self.context.remote_only and not name.startswith(remote_prefix):
                logger.info(f"⏭️ 跳过非远程分支: {name}")
                self.plugin_manager.trigger("on_branch_skipped", name, "not_remote")
                continue

            if revision == base_revision:
                logger.info(f"⏭️ 跳过与基准相同的分支: {name}")
                self.plugin_manager.trigger("on_branch_skipped", name, "same_revision")
                continue

            logger.info(f"🔍 正在对比 {name} @ {revision}")
            report = cloc_utils.get_diff_report(
                base_revision, revision, self.context.repo_path, self.global_config
            )
            if report is None:
                self.plugin_manager.trigger("on_branch_skipped", name, "diff_failed")
                continue

            rows = cloc_utils.flatten_report(
                report, self.global_config.RESERVED_REPORT_KEYS
            )
            rows = self.plugin_manager.filter("on_rows_generated", rows, name)
            self._emit_rows(name, rows)
            self.results.append(BranchResult(name=name, revision=revision, rows=rows))

        # --- 5. 可选的 HTML 汇总 ---
        if self.context.html_report:
            self._write_html_report()

        self.plugin_manager.trigger("on_finish")
        return EXIT_OK

    def _emit_rows(self, branch: str, rows: List[ReportRow]):
        stream = self.stream or sys.stdout
        for row in rows:
            stream.write(csv_writer.format_csv_line(row.as_fields()) + "\n")
        stream.flush()

        if self.context.output_path:
            self._write_csv_rows(branch, rows)

    def _write_csv_rows(self, branch: str, rows: List[ReportRow]):
        path = self.context.output_path
        encoding = self.context.encoding
        if not self._csv_ready:
            # 第一次写入时覆盖旧文件并写表头
            self._csv_ready = csv_writer.write_csv_line(
                self.global_config.CSV_HEADER, path, new_file=True, encoding=encoding
            )
            if not self._csv_ready:
                return
        for row in rows:
            csv_writer.write_csv_line(
                [branch] + row.as_fields(), path, new_file=False, encoding=encoding
            )

    def _write_html_report(self):
        html_content = report_builder.generate_html_report(self.results, self.context)
        if html_content is None:
            logger.error("❌ HTML 报告生成失败")
            return
        report_builder.save_html_report(html_content, self.context)
