# csv_writer.py
"""
[V1.0] CSV 行输出
字段包含逗号、双引号或换行时用双引号包裹，内部双引号加倍。
"""
import logging
from typing import Any, Sequence

logger = logging.getLogger(__name__)

_SPECIAL_CHARS = (",", '"', "\n", "\r")


def quote_csv_field(value: Any) -> str:
    """按需给单个字段加引号"""
    text = str(value)
    if any(ch in text for ch in _SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_csv_line(fields: Sequence[Any]) -> str:
    """拼接成一行 (不含换行符)"""
    return ",".join(quote_csv_field(f) for f in fields)


def write_csv_line(
    fields: Sequence[Any], path: str, new_file: bool, encoding: str = "utf-8"
) -> bool:
    """
    写入一行 CSV。
    new_file=True 时覆盖目标文件，否则追加。
    失败时记录错误并返回 False，文件内容此时不保证完整。
    """
    line = format_csv_line(fields) + "\n"
    mode = "w" if new_file else "a"
    try:
        with open(path, mode, encoding=encoding, newline="") as f:
            f.write(line)
        return True
    except (OSError, LookupError, UnicodeError) as e:
        logger.error(f"❌ 写入 CSV 失败 ({path}): {e}")
        return False
