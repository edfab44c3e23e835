"""
[V1.0] 运行时配置的数据模型
"""
from dataclasses import dataclass
from typing import Optional
from config import GlobalConfig


@dataclass
class RunContext:
    """
    封装一次运行所需的所有配置。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    # --- 核心路径 ---
    repo_path: str
    project_data_path: str

    # --- 对比参数 ---
    base_branch: str
    # "remote": 只对比远程跟踪分支；其它值: 全部分支
    scope: str

    # --- 输出参数 ---
    output_path: Optional[str]
    encoding: str
    html_report: bool

    # --- 全局配置 ---
    global_config: GlobalConfig

    @property
    def remote_only(self) -> bool:
        return self.scope == self.global_config.SCOPE_REMOTE
