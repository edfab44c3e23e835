# report_builder.py
"""
[V1.0] HTML 汇总报告 - Jinja2 模板引擎
仅在 --html 时使用；默认运行只输出 CSV 行。
"""
import logging
import os
from datetime import datetime
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from config import GlobalConfig
from context import RunContext
from models import BranchResult

logger = logging.getLogger(__name__)


def _get_css_styles(global_config: GlobalConfig) -> str:
    """读取 CSS 文件内容"""
    css_path = os.path.join(global_config.SCRIPT_BASE_PATH, "templates", "styles.css")
    try:
        with open(css_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        logger.error(f"❌ 加载 CSS 模板失败 ({css_path}): {e}")
        return "/* CSS 模板文件未找到 */"


def generate_html_report(
    results: List[BranchResult], context: RunContext
) -> Optional[str]:
    """
    使用 Jinja2 模板生成分支对比汇总。
    渲染失败返回 None。
    """
    global_config = context.global_config
    templates_dir = os.path.join(global_config.SCRIPT_BASE_PATH, "templates")
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )

    template_context = {
        "title": f"分支代码差异 - {context.base_branch}",
        "generation_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "css_content": _get_css_styles(global_config),
        "repo_path": context.repo_path,
        "base_branch": context.base_branch,
        "scope": context.scope,
        "results": results,
    }

    try:
        template = env.get_template(global_config.HTML_TEMPLATE_NAME)
        logger.info(f"🎨 正在渲染 Jinja2 模板: {global_config.HTML_TEMPLATE_NAME}")
        return template.render(**template_context)
    except TemplateError as e:
        logger.error(f"❌ Jinja2 模板渲染失败: {e}", exc_info=True)
        return None


def save_html_report(html_content: str, context: RunContext) -> Optional[str]:
    """保存 HTML 报告；有 CSV 输出路径时放在同一目录，否则放在项目数据目录"""
    filename = f"{context.global_config.OUTPUT_FILENAME_PREFIX}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.html"
    if context.output_path:
        target_dir = os.path.dirname(os.path.abspath(context.output_path))
    else:
        target_dir = context.project_data_path
    full_path = os.path.join(target_dir, filename)

    try:
        os.makedirs(target_dir, exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(html_content)
        logger.info(f"✅ HTML报告已保存: {full_path}")
        return full_path
    except OSError as e:
        logger.error(f"❌ 保存HTML报告失败 ({full_path}): {e}")
        return None
