"""
日志模块

使用 loguru 提供统一的日志记录功能。
各阶段日志以 [会话] [元数据] [版本] [下载] [进度] [完成] 等标签开头。
"""

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
# 调试模式附带模块位置，便于区分会话、元数据、下载各阶段
DEBUG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {message}"
)


def setup_logger(
    level: Optional[str] = None,
    sink=None,
    colorize: bool = True,
) -> None:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)，默认读取 WOTMODFETCH_DEBUG
        sink: 输出目标，默认当前的 sys.stdout
        colorize: 是否启用颜色
    """
    if level is None:
        level = "DEBUG" if os.environ.get("WOTMODFETCH_DEBUG", "0") == "1" else "INFO"
    debug = level == "DEBUG"

    logger.remove()

    logger.add(
        sink=sink if sink is not None else sys.stdout,
        format=DEBUG_FORMAT if debug else LOG_FORMAT,
        # 调试输出只保留本项目的记录
        filter="wotmodfetch" if debug else None,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG 模式已启用")


__all__ = ["logger", "setup_logger"]
