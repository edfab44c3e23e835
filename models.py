from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# 分支名 -> 修订号 (commit hash)
BranchMap = Dict[str, str]

# 类别 -> 语言 -> {nFiles, blank, comment, code}，保持 cloc 输出的键顺序
DiffReport = Dict[str, Dict[str, Dict[str, Any]]]


@dataclass(frozen=True)
class ProcessResult:
    """外部进程执行结果"""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class BranchListing:
    """
    分支列举结果。
    失败时 branches 为空，error 记录原因。
    """

    branches: BranchMap = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ReportRow:
    """扁平化后的一行 cloc 差异统计"""

    category: str
    language: str
    file_count: int
    blank_lines: int
    comment_lines: int
    code_lines: int

    def as_fields(self) -> List[Any]:
        return [
            self.category,
            self.language,
            self.file_count,
            self.blank_lines,
            self.comment_lines,
            self.code_lines,
        ]


@dataclass
class BranchResult:
    """单个分支的对比结果 (用于 HTML 汇总)"""

    name: str
    revision: str
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def code_by_category(self) -> Dict[str, int]:
        totals: Dict[str, int] = {}
        for row in self.rows:
            totals[row.category] = totals.get(row.category, 0) + row.code_lines
        return totals
