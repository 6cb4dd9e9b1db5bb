"""日志配置。"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Pillow 在 DEBUG 级别会逐块输出 PNG 解析日志。
NOISY_LOGGERS = ("PIL",)


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置，日志经 ``RichHandler`` 输出到标准错误，标准输出只留给命令结果。"""

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("[%(threadName)s] %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
