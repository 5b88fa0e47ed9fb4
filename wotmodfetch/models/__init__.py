"""
wotmodfetch 数据模型包

包含配置模型和 API 模型定义。
"""

from wotmodfetch.models.config import WotModFetchConfig, DEFAULT_BASE_URL
from wotmodfetch.models.api import (
    SessionContext,
    GameVersion,
    ModVersion,
    ModOwner,
    ChangeLogEntry,
    ModDescriptor,
)

__all__ = [
    # 配置模型
    "WotModFetchConfig",
    "DEFAULT_BASE_URL",
    # API 模型
    "SessionContext",
    "GameVersion",
    "ModVersion",
    "ModOwner",
    "ChangeLogEntry",
    "ModDescriptor",
]
