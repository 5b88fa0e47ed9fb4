"""
wotmodfetch 服务层

包含业务逻辑服务：API 客户端、会话获取、token 提取、版本选择。
"""

from wotmodfetch.services.api_client import WGModsClient, create_session
from wotmodfetch.services.session import acquire_session, combine_cookies
from wotmodfetch.services.token_extractor import extract_csrf_token
from wotmodfetch.services.version_selector import VersionSelector

__all__ = [
    "WGModsClient",
    "create_session",
    "acquire_session",
    "combine_cookies",
    "extract_csrf_token",
    "VersionSelector",
]
