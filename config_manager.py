# config_manager.py
"""
[V1.0] 配置管理器
- 负责处理全局项目别名 (data/projects.json)
- 负责处理项目级默认配置 (data/<Project>/config.json)
- 包含一个交互式向导 (run_interactive_config_wizard)
"""

import os
import json
import sys
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

PROJECTS_JSON_FILE = "projects.json"
CONFIG_JSON_FILE = "config.json"


def _load_json(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ 加载 {path} 失败: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"❌ {path} 内容不是 JSON 对象，已忽略")
        return {}
    return data


def _save_json(path: str, data: Dict[str, Any]) -> bool:
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
        return True
    except OSError as e:
        logger.error(f"❌ 保存 {path} 失败: {e}")
        return False


def load_project_aliases(data_root_path: str) -> Dict[str, str]:
    """加载全局别名文件 (data/projects.json)"""
    return _load_json(os.path.join(data_root_path, PROJECTS_JSON_FILE))


def save_project_aliases(data_root_path: str, aliases: Dict[str, str]) -> bool:
    """保存全局别名文件 (data/projects.json)"""
    return _save_json(os.path.join(data_root_path, PROJECTS_JSON_FILE), aliases)


def get_path_from_alias(data_root_path: str, alias: str) -> Optional[str]:
    """通过别名获取仓库的绝对路径"""
    return load_project_aliases(data_root_path).get(alias)


def load_project_config(project_data_path: str) -> Dict[str, Any]:
    """加载特定项目的配置文件 (data/<Project>/config.json)"""
    return _load_json(os.path.join(project_data_path, CONFIG_JSON_FILE))


def save_project_config(project_data_path: str, config_data: Dict[str, Any]) -> bool:
    """保存特定项目的配置文件 (data/<Project>/config.json)"""
    return _save_json(os.path.join(project_data_path, CONFIG_JSON_FILE), config_data)


def get_project_data_path(data_root_path: str, repo_path: str) -> str:
    """根据仓库路径获取其数据存储路径"""
    repo_path_abs = os.path.abspath(repo_path)
    project_name = os.path.basename(repo_path_abs) or "root_project"
    return os.path.join(data_root_path, project_name)


def _input_with_default(prompt: str, default: str) -> str:
    """获取带默认值的用户输入"""
    return input(f"{prompt} [{default}]: ").strip() or default


def run_interactive_config_wizard(
    data_root_path: str, repo_path: str, defaults: Dict[str, Any]
):
    """
    运行交互式配置向导。
    defaults: 当前生效的默认值 (base_branch / scope / output)，作为提示值
    """
    logger.info("--- 🚀 BranchDiff 配置向导 ---")
    repo_path_abs = os.path.abspath(repo_path)
    if not os.path.isdir(repo_path_abs):
        logger.error(f"路径 {repo_path_abs} 不是一个有效的目录。")
        return

    project_data_path = get_project_data_path(data_root_path, repo_path_abs)
    logger.info(f"  [目标仓库]: {repo_path_abs}")
    logger.info(f"  [数据目录]: {project_data_path}")

    aliases = load_project_aliases(data_root_path)
    current_config = load_project_config(project_data_path)

    # 1. 别名
    print("\n--- 1. 项目别名配置 ---", file=sys.stderr)
    current_alias = next(
        (alias for alias, path in aliases.items() if path == repo_path_abs),
        os.path.basename(project_data_path),
    )
    alias = _input_with_default("  设置一个简短的别名 (用于 -p ...)", current_alias)
    aliases[alias] = repo_path_abs
    if save_project_aliases(data_root_path, aliases):
        logger.info(f"✅ 别名 '{alias}' 已保存至 {PROJECTS_JSON_FILE}")

    # 2. 项目默认值
    print("\n--- 2. 项目默认值配置 ---", file=sys.stderr)
    print("  (提示：直接按 Enter 保留默认值)", file=sys.stderr)
    config_data = dict(current_config)
    config_data["default_base_branch"] = _input_with_default(
        "  基准分支",
        current_config.get("default_base_branch", defaults.get("base_branch", "")),
    )
    config_data["default_scope"] = _input_with_default(
        "  对比范围 (remote, all)",
        current_config.get("default_scope", defaults.get("scope", "remote")),
    ).lower()
    output = _input_with_default(
        "  CSV 输出文件 (输入 - 表示不写文件)",
        current_config.get("default_output") or "-",
    )
    config_data["default_output"] = None if output == "-" else output

    if save_project_config(project_data_path, config_data):
        logger.info(f"✅ 项目配置已保存至 {project_data_path}/{CONFIG_JSON_FILE}")
        logger.info(f"   现在可以使用 'python BranchReport.py -p {alias}' 运行对比。")
