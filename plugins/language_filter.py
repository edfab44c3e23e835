import logging
from typing import List

from hooks.base import BasePlugin
from context import RunContext
from models import ReportRow

logger = logging.getLogger(__name__)


class LanguageFilterPlugin(BasePlugin):
    """
    [插件] 语言过滤
    丢弃 BRANCH_DIFF_EXCLUDE_LANGUAGES 中列出的语言 (例如 JSON, Markdown)。
    未配置时不做任何处理。
    """

    name = "LanguageFilter"

    def on_rows_generated(
        self, context: RunContext, rows: List[ReportRow], branch: str
    ) -> List[ReportRow]:
        excluded = {lang.lower() for lang in context.global_config.EXCLUDE_LANGUAGES}
        if not excluded:
            return rows

        kept = [row for row in rows if row.language.lower() not in excluded]
        dropped = len(rows) - len(kept)
        if dropped:
            logger.info(f"🧹 [LanguageFilter] {branch}: 已过滤 {dropped} 行")
        return kept
