# utils.py
import logging
import sys


def setup_logging(verbose: bool = False):
    """
    配置全局日志。
    日志写到 stderr，stdout 只留给 CSV 行。
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
