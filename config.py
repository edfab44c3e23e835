# config.py
"""
[V1.0] 全局配置
- 所有外部命令格式、常量与默认值集中在 GlobalConfig 中
- 环境变量 / .env 覆盖默认值
"""
import logging
import os
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
else:
    load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    """读取可选的浮点型环境变量，空值或非法值返回 None (非法值会记 warning)"""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ 环境变量 {name}={raw!r} 不是数字，已忽略 (不设超时)")
        return None


class GlobalConfig:
    """
    分支 cloc 对比工具的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    DATA_ROOT_DIR_NAME: str = "data"

    # --- 外部工具 ---
    GIT_EXECUTABLE: str = os.getenv("BRANCH_DIFF_GIT", "git")
    CLOC_EXECUTABLE: str = os.getenv("BRANCH_DIFF_CLOC", "cloc")
    # 默认不设超时：外部进程卡住时整个运行也会卡住
    PROCESS_TIMEOUT: Optional[float] = _optional_float("BRANCH_DIFF_TIMEOUT")

    # --- Git 命令格式 ---
    GIT_REF_NAMES_FORMAT = "for-each-ref --format='%(refname:short)' {namespace}"
    GIT_REF_REVISIONS_FORMAT = "for-each-ref --format='%(objectname)' {namespace}"
    # 顺序有意义：后面的命名空间覆盖前面的同名分支
    REF_NAMESPACES: list[str] = ["refs/heads/", "refs/remotes/"]

    # 远程名。决定远程前缀和需要跳过的 <remote>/HEAD 别名
    REMOTE_NAME: str = os.getenv("BRANCH_DIFF_REMOTE", "origin")

    # --- cloc 命令格式 ---
    CLOC_DIFF_FORMAT = "--diff --json {base_revision} {revision}"
    RESERVED_REPORT_KEYS: tuple = ("header", "SUM")

    # --- 运行默认值 ---
    DEFAULT_REPO_PATH: str = os.getenv("BRANCH_DIFF_REPO_PATH", ".")
    DEFAULT_BASE_BRANCH: str = os.getenv("BRANCH_DIFF_BASE_BRANCH", "origin/master")
    DEFAULT_SCOPE: str = os.getenv("BRANCH_DIFF_SCOPE", "remote").lower()
    SCOPE_REMOTE: str = "remote"

    # --- 输出 ---
    OUTPUT_ENCODING: str = os.getenv("BRANCH_DIFF_ENCODING", "utf-8")
    CSV_HEADER: list[str] = [
        "branch",
        "category",
        "language",
        "files",
        "blank",
        "comment",
        "code",
    ]
    OUTPUT_FILENAME_PREFIX = "BranchDiff"
    HTML_TEMPLATE_NAME: str = "report.html.j2"

    # --- 插件 ---
    PLUGINS_DIR_NAME: str = "plugins"
    # 按插件 name 禁用，逗号分隔
    DISABLED_PLUGINS: list[str] = [
        name.strip()
        for name in os.getenv("BRANCH_DIFF_DISABLED_PLUGINS", "").split(",")
        if name.strip()
    ]
    # plugins/language_filter.py 使用，逗号分隔
    EXCLUDE_LANGUAGES: list[str] = [
        lang.strip()
        for lang in os.getenv("BRANCH_DIFF_EXCLUDE_LANGUAGES", "").split(",")
        if lang.strip()
    ]

    @property
    def remote_prefix(self) -> str:
        """远程跟踪分支的名称前缀，例如 'origin/'"""
        return f"{self.REMOTE_NAME}/"

    @property
    def remote_head_aliases(self) -> set:
        """
        远程默认分支的符号引用 refs/remotes/<remote>/HEAD。
        git 版本不同，短名可能是 '<remote>' 或 '<remote>/HEAD'，两种都跳过。
        """
        return {self.REMOTE_NAME, f"{self.REMOTE_NAME}/HEAD"}
