from abc import ABC
from typing import List
from context import RunContext
from models import BranchMap, ReportRow


class BasePlugin(ABC):
    """
    [V1.0] 插件基类
    定义所有生命周期钩子。用户自定义插件应继承此类。
    """

    # 插件名称 (建议子类覆盖)
    name: str = "BasePlugin"

    def on_start(self, context: RunContext):
        """
        [钩子] 流程开始时调用。
        """
        pass

    def on_branches_listed(self, context: RunContext, branches: BranchMap):
        """
        [钩子] 分支列举完成后调用 (此时基准分支尚未移除)。
        只读，不要修改 branches。
        """
        pass

    def on_branch_skipped(self, context: RunContext, branch: str, reason: str):
        """
        [钩子] 某个分支被跳过时调用。
        reason 取值: "not_remote" / "same_revision" / "diff_failed"
        """
        pass

    def on_rows_generated(
        self, context: RunContext, rows: List[ReportRow], branch: str
    ) -> List[ReportRow]:
        """
        [Filter 钩子] 单个分支的 cloc 结果展开后、输出前调用。
        **必须返回行列表**。可用于过滤语言或调整内容。

        :param rows: 当前分支的 ReportRow 列表
        :param branch: 分支名
        :return: 修改后的行列表 (若不修改请直接返回 rows)
        """
        return rows

    def on_finish(self, context: RunContext):
        """
        [钩子] 流程结束时调用（只要未崩溃）。
        """
        pass
