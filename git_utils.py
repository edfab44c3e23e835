# git_utils.py
"""
[V1.0] 分支列举
- 分别查询本地分支 (refs/heads/) 与远程跟踪分支 (refs/remotes/)
- 每个命名空间查询两次：短名一次、修订号一次，按行号配对
"""
import logging
from typing import List

from config import GlobalConfig
from models import BranchListing, BranchMap
from process_runner import run_process

logger = logging.getLogger(__name__)

# for-each-ref 在部分平台上会把 --format 的引号原样输出
_STRIP_CHARS = " \t\r\n'\""


def split_ref_lines(output: str) -> List[str]:
    """按行切分，去掉首尾空白和引号，丢弃空行"""
    lines = []
    for line in output.splitlines():
        cleaned = line.strip(_STRIP_CHARS)
        if cleaned:
            lines.append(cleaned)
    return lines


def _query_refs(
    fmt: str, namespace: str, repo_path: str, global_config: GlobalConfig
) -> List[str]:
    """执行一次 for-each-ref，失败时抛出 RuntimeError"""
    args = fmt.format(namespace=namespace)
    result = run_process(
        global_config.GIT_EXECUTABLE,
        args,
        cwd=repo_path,
        timeout=global_config.PROCESS_TIMEOUT,
    )
    if result is None:
        raise RuntimeError(f"无法执行 git {args}")
    if not result.ok:
        raise RuntimeError(
            f"git {args} 退出码 {result.returncode}: {result.stderr.strip()}"
        )
    return split_ref_lines(result.stdout)


def list_branches(repo_path: str, global_config: GlobalConfig) -> BranchListing:
    """
    列出仓库中所有本地与远程分支及其修订号。
    任何一次查询失败或行数不一致，整体返回空映射并附带错误信息。
    """
    branches: BranchMap = {}
    try:
        for namespace in global_config.REF_NAMESPACES:
            names = _query_refs(
                global_config.GIT_REF_NAMES_FORMAT, namespace, repo_path, global_config
            )
            revisions = _query_refs(
                global_config.GIT_REF_REVISIONS_FORMAT,
                namespace,
                repo_path,
                global_config,
            )
            if len(names) != len(revisions):
                raise RuntimeError(
                    f"{namespace} 分支名 ({len(names)} 行) 与修订号 ({len(revisions)} 行) 数量不一致"
                )

            head_aliases = global_config.remote_head_aliases
            for name, revision in zip(names, revisions):
                # refs/remotes/origin/HEAD 显示为 'origin' 或 'origin/HEAD'
                if name in head_aliases:
                    logger.debug(f"跳过远程别名: {name}")
                    continue
                branches[name] = revision
    except RuntimeError as e:
        logger.error(f"❌ 列举分支失败: {e}")
        return BranchListing(branches={}, error=str(e))

    logger.info(f"✅ 共找到 {len(branches)} 个分支")
    return BranchListing(branches=branches)
