import logging
import os
import importlib.util
import inspect
from typing import Any, List, Tuple, Type
from context import RunContext
from .base import BasePlugin

logger = logging.getLogger(__name__)


def _plugin_classes(module) -> List[Type[BasePlugin]]:
    """模块中定义的 BasePlugin 子类 (不含从别处导入的)"""
    return [
        obj
        for _, obj in inspect.getmembers(module, inspect.isclass)
        if issubclass(obj, BasePlugin)
        and obj is not BasePlugin
        and obj.__module__ == module.__name__
    ]


class PluginManager:
    """
    [V1.0] 分支对比插件管理器
    - 从 <脚本目录>/plugins 加载插件，BRANCH_DIFF_DISABLED_PLUGINS 中的插件不启用
    - trigger: 通知型钩子 (on_start / on_branch_skipped / on_finish ...)
    - filter: 链式钩子 (on_rows_generated)，行列表依次经过每个插件
    插件出错只记日志，不影响本次对比。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.plugins: List[BasePlugin] = []

    @property
    def plugins_dir(self) -> str:
        global_config = self.context.global_config
        return os.path.join(
            global_config.SCRIPT_BASE_PATH, global_config.PLUGINS_DIR_NAME
        )

    def load_plugins(self) -> int:
        """扫描插件目录，返回本次启用的插件数量"""
        if not os.path.isdir(self.plugins_dir):
            logger.debug(f"[Hooks] 未找到插件目录 {self.plugins_dir}，不加载插件")
            return 0

        before = len(self.plugins)
        for filename in sorted(os.listdir(self.plugins_dir)):
            if filename.endswith(".py") and not filename.startswith("__"):
                self._load_plugin_file(os.path.join(self.plugins_dir, filename))

        loaded = len(self.plugins) - before
        if loaded:
            names = ", ".join(p.name for p in self.plugins[before:])
            logger.info(f"🔌 [Hooks] 已启用 {loaded} 个插件: {names}")
        return loaded

    def _load_plugin_file(self, filepath: str):
        module_name = f"branch_diff_plugin_{os.path.splitext(os.path.basename(filepath))[0]}"
        spec = importlib.util.spec_from_file_location(module_name, filepath)
        if not spec or not spec.loader:
            logger.warning(f"⚠️ [Hooks] 无法加载 {filepath}")
            return

        try:
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            classes = _plugin_classes(module)
        except Exception as e:
            logger.error(f"❌ [Hooks] 加载插件文件失败 {filepath}: {e}")
            return

        if not classes:
            logger.warning(f"⚠️ [Hooks] {filepath} 中没有 BasePlugin 子类")
            return

        disabled = {n.lower() for n in self.context.global_config.DISABLED_PLUGINS}
        for plugin_cls in classes:
            if plugin_cls.name.lower() in disabled:
                logger.info(f"⏭️ [Hooks] 插件 {plugin_cls.name} 已被禁用")
                continue
            try:
                self.register(plugin_cls())
            except Exception as e:
                logger.error(f"❌ [Hooks] 实例化插件 {plugin_cls.name} 失败: {e}")

    def register(self, plugin: BasePlugin):
        """手动注册插件实例"""
        self.plugins.append(plugin)

    def _call(
        self, plugin: BasePlugin, event_name: str, *args, **kwargs
    ) -> Tuple[bool, Any]:
        method = getattr(plugin, event_name, None)
        if method is None:
            return False, None
        try:
            return True, method(self.context, *args, **kwargs)
        except Exception as e:
            logger.error(f"❌ [Hooks] 插件 {plugin.name} 处理 {event_name} 失败: {e}")
            return False, None

    def trigger(self, event_name: str, *args, **kwargs):
        """触发通知型钩子，忽略返回值"""
        for plugin in self.plugins:
            self._call(plugin, event_name, *args, **kwargs)

    def filter(self, event_name: str, initial_value: Any, *args, **kwargs) -> Any:
        """
        触发链式钩子。
        插件返回 None 或抛出异常时，沿用上一个插件的结果。
        """
        value = initial_value
        for plugin in self.plugins:
            called, new_value = self._call(plugin, event_name, value, *args, **kwargs)
            if called and new_value is not None:
                value = new_value
        return value
