"""
CSRF token 提取

从模组页面内联脚本 ``window.__SETTINGS__ = JSON.parse("...");`` 中解析出 csrfToken。
"""

import json
import re

from wotmodfetch.exceptions import ParseError

SETTINGS_PATTERN = re.compile(r"window\.__SETTINGS__\s*=\s*JSON\.parse\((.*?)\);", re.S)


def extract_csrf_token(html: str) -> str:
    """
    从页面 HTML 中提取 csrfToken

    Args:
        html: 模组页面的 HTML 文本

    Returns:
        csrfToken 字符串

    Raises:
        ParseError: 找不到设置块，或设置中没有 csrfToken
    """
    match = SETTINGS_PATTERN.search(html)
    if not match:
        raise ParseError("could not find window settings: 页面中没有 window.__SETTINGS__")

    # 参数是包含 JSON 文本的 JS 字符串字面量，需要解码两次
    try:
        settings = json.loads(match.group(1))
        if isinstance(settings, str):
            settings = json.loads(settings)
    except ValueError as e:
        raise ParseError(
            f"could not find window settings: 设置块无法解析 ({e})",
            context={"snippet": match.group(1)[:200]},
        ) from e

    if not isinstance(settings, dict):
        raise ParseError(
            "could not find window settings: 设置块不是 JSON 对象",
            context={"type": type(settings).__name__},
        )

    token = settings.get("csrfToken")
    if not token or not isinstance(token, str):
        raise ParseError("no csrfToken was found: 设置中没有 csrfToken")

    return token
