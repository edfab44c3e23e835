# process_runner.py
"""
[V1.0] 统一的外部进程执行函数
- git 和 cloc 都通过这里调用
- 非零退出码只记 warning，结果照常返回
- 启动失败 (找不到程序、权限不足、工作目录不存在) 返回 None
"""
import logging
import os
import shlex
import subprocess
from typing import Optional

from models import ProcessResult

logger = logging.getLogger(__name__)


def run_process(
    program: str,
    args: str,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[ProcessResult]:
    """
    同步执行外部程序并捕获 stdout / stderr。

    :param program: 可执行程序名或路径
    :param args: 参数字符串，按 POSIX shell 规则切分 (不经过 shell)
    :param cwd: 工作目录；为空时使用当前目录
    :param timeout: 可选超时 (秒)，默认不限时
    :return: ProcessResult；启动失败时返回 None
    """
    try:
        argv = [program] + shlex.split(args)
    except ValueError as e:
        logger.error(f"❌ 参数解析失败 '{args}': {e}")
        return None

    work_dir = cwd if cwd and cwd.strip() else None
    if work_dir is not None and not os.path.isdir(work_dir):
        logger.error(f"❌ 工作目录不存在: {work_dir}")
        return None

    command_str = " ".join(shlex.quote(a) for a in argv)
    logger.debug(f"在 {work_dir or os.getcwd()} 中执行命令: {command_str}")

    try:
        completed = subprocess.run(
            argv,
            cwd=work_dir,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.error(f"❌ 命令超时 ({timeout}s): {command_str}")
        return None
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"❌ 无法启动命令 {command_str}: {e}")
        return None

    result = ProcessResult(
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )
    if not result.ok:
        logger.warning(
            f"⚠️ 命令退出码 {result.returncode}: {command_str}\n{result.stderr.strip()}"
        )
    return result
