# cloc_utils.py
"""
[V1.0] cloc 差异统计
- get_diff_report: 调用 cloc --diff --json 并解析结果
- flatten_report: 把嵌套的报告展开成 ReportRow 列表
"""
import json
import logging
from typing import Iterable, List, Optional

from config import GlobalConfig
from models import DiffReport, ReportRow
from process_runner import run_process

logger = logging.getLogger(__name__)


def get_diff_report(
    base_revision: str, revision: str, repo_path: str, global_config: GlobalConfig
) -> Optional[DiffReport]:
    """
    对比两个修订版本的代码行数变化。
    失败时返回 None (而不是空字典)。
    """
    args = global_config.CLOC_DIFF_FORMAT.format(
        base_revision=base_revision, revision=revision
    )
    result = run_process(
        global_config.CLOC_EXECUTABLE,
        args,
        cwd=repo_path,
        timeout=global_config.PROCESS_TIMEOUT,
    )
    if result is None:
        logger.error(f"❌ cloc 启动失败 ({base_revision}..{revision})")
        return None
    if not result.ok:
        logger.error(
            f"❌ cloc 执行失败 ({base_revision}..{revision})，退出码 {result.returncode}"
        )
        return None
    if not result.stdout.strip():
        logger.error(f"❌ cloc 没有输出 ({base_revision}..{revision})")
        return None

    try:
        report = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        logger.error(f"❌ 解析 cloc JSON 输出失败: {e}")
        return None

    if not isinstance(report, dict):
        logger.error(f"❌ cloc 输出格式异常: 顶层不是对象 ({type(report).__name__})")
        return None
    return report


def _metric(metrics: dict, key: str) -> int:
    try:
        return int(metrics.get(key, 0))
    except (TypeError, ValueError):
        logger.warning(f"⚠️ 指标 {key} 不是整数: {metrics.get(key)!r}")
        return 0


def flatten_report(
    report: DiffReport, reserved_keys: Iterable[str] = ("header", "SUM")
) -> List[ReportRow]:
    """按报告原有顺序展开，跳过 header / SUM"""
    reserved = set(reserved_keys)
    rows: List[ReportRow] = []
    for category, languages in report.items():
        if category in reserved:
            continue
        if not isinstance(languages, dict):
            logger.warning(f"⚠️ 类别 {category} 格式异常，已跳过")
            continue
        for language, metrics in languages.items():
            if not isinstance(metrics, dict):
                logger.warning(f"⚠️ {category}/{language} 格式异常，已跳过")
                continue
            rows.append(
                ReportRow(
                    category=category,
                    language=language,
                    file_count=_metric(metrics, "nFiles"),
                    blank_lines=_metric(metrics, "blank"),
                    comment_lines=_metric(metrics, "comment"),
                    code_lines=_metric(metrics, "code"),
                )
            )
    return rows
