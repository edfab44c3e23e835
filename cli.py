# cli.py
"""
[V1.0] 命令行界面 (Interface) 层
负责参数解析、配置合并与 RunContext 组装，然后移交给 Orchestrator。
优先级：命令行参数 > 项目 config.json > 环境变量 / .env > 内置默认值
"""
import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import config_manager
import utils
from config import GlobalConfig
from context import RunContext
from orchestrator import BranchDiffOrchestrator, EXIT_CONFIG_ERROR

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        description="分支代码差异统计 (git + cloc)",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--configure",
        action="store_true",
        help="运行交互式配置向导。\n   (需要 -r 指定要配置的仓库路径)",
    )

    # --- 仓库选择 (互斥) ---
    repo_group = parser.add_mutually_exclusive_group()
    repo_group.add_argument(
        "-p",
        "--project",
        type=str,
        help="使用已配置的项目别名运行。\n   (与 -r 互斥)",
    )
    repo_group.add_argument(
        "-r",
        "--repo-path",
        type=str,
        default=None,
        help="指定 Git 仓库的根目录路径。\n(默认: BRANCH_DIFF_REPO_PATH 或当前目录)",
    )

    # --- 覆盖参数 ---
    parser.add_argument(
        "-b",
        "--base-branch",
        type=str,
        default=None,
        help="基准分支，例如 'origin/master'。\n(默认: 项目 config.json 或 BRANCH_DIFF_BASE_BRANCH)",
    )
    parser.add_argument(
        "--scope",
        type=str,
        choices=["remote", "all"],
        default=None,
        help="'remote': 只对比远程跟踪分支\n'all': 对比所有分支\n(默认: remote)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="同时把结果写入 CSV 文件 (带 branch 列和表头)。",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="CSV 文件编码 (默认: utf-8)",
    )

    # --- 标志 (Flags) ---
    parser.add_argument(
        "--html", action="store_true", help="运行结束后生成 HTML 汇总报告"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    return parser


def _resolve_repo(
    args: argparse.Namespace, global_config: GlobalConfig, data_root_path: str
) -> Optional[str]:
    """根据 -p / -r / 默认值确定仓库路径，别名不存在时返回 None"""
    if args.project:
        repo_path = config_manager.get_path_from_alias(data_root_path, args.project)
        if not repo_path:
            logger.error(f"❌ 别名 '{args.project}' 未在 projects.json 中找到。")
            logger.error("   请先使用 --configure -r ... 来配置它。")
            return None
        logger.info(f"ℹ️ 使用别名 '{args.project}' (路径: {repo_path})")
        return repo_path

    return os.path.abspath(args.repo_path or global_config.DEFAULT_REPO_PATH)


def build_context(
    args: argparse.Namespace,
    global_config: GlobalConfig,
    repo_path: str,
    project_data_path: str,
    project_config: Dict[str, Any],
) -> RunContext:
    """合并命令行参数、项目配置与全局默认值"""
    base_branch = (
        args.base_branch
        or project_config.get("default_base_branch")
        or global_config.DEFAULT_BASE_BRANCH
    )
    scope = (
        args.scope or project_config.get("default_scope") or global_config.DEFAULT_SCOPE
    ).lower()
    output_path = args.output or project_config.get("default_output") or None
    encoding = (
        args.encoding
        or project_config.get("default_encoding")
        or global_config.OUTPUT_ENCODING
    )

    return RunContext(
        repo_path=repo_path,
        project_data_path=project_data_path,
        base_branch=base_branch,
        scope=scope,
        output_path=output_path,
        encoding=encoding,
        html_report=bool(args.html),
        global_config=global_config,
    )


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    主入口点，返回进程退出码。
    """

    # 1. 解析 Args
    parser = setup_parser()
    args = parser.parse_args(argv)
    utils.setup_logging(verbose=args.verbose)

    # 2. 加载 GlobalConfig 和 Data Root
    global_config = GlobalConfig()
    data_root_path = os.path.join(
        global_config.SCRIPT_BASE_PATH, global_config.DATA_ROOT_DIR_NAME
    )

    # 3. 特殊模式：--configure
    if args.configure:
        if not args.repo_path:
            logger.error("❌ --configure 标志需要 -r / --repo-path 指定目标仓库路径。")
            return EXIT_CONFIG_ERROR
        config_manager.run_interactive_config_wizard(
            data_root_path,
            args.repo_path,
            {
                "base_branch": global_config.DEFAULT_BASE_BRANCH,
                "scope": global_config.DEFAULT_SCOPE,
            },
        )
        return 0

    # 4. 确定路径并加载项目配置
    repo_path = _resolve_repo(args, global_config, data_root_path)
    if repo_path is None:
        return EXIT_CONFIG_ERROR
    project_data_path = config_manager.get_project_data_path(data_root_path, repo_path)
    project_config = config_manager.load_project_config(project_data_path)

    # 5. 组装 RunContext
    run_context = build_context(
        args, global_config, repo_path, project_data_path, project_config
    )

    logger.info("=" * 50)
    logger.info("🚀 BranchDiff 启动...")
    logger.info(f"   [目标仓库]: {run_context.repo_path}")
    logger.info(f"   [基准分支]: {run_context.base_branch}")
    logger.info(f"   [对比范围]: {run_context.scope}")
    logger.info(f"   [CSV 文件]: {run_context.output_path or '未设置'}")
    logger.info("=" * 50)

    # 6. 运行 Orchestrator
    orchestrator = BranchDiffOrchestrator(run_context)
    exit_code = orchestrator.run()
    if exit_code == 0:
        logger.info("✅ 运行完毕。")
    return exit_code
