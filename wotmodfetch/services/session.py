"""
会话获取

请求模组页面，取得会话 cookie 与 csrfToken，组装 API 请求所需的上下文。
"""

from typing import List

from loguru import logger

from wotmodfetch.models import SessionContext
from wotmodfetch.exceptions import ProtocolError
from wotmodfetch.services.api_client import WGModsClient
from wotmodfetch.services.token_extractor import extract_csrf_token


def combine_cookies(set_cookie_headers: List[str]) -> str:
    """
    将多个 Set-Cookie 头合并为一个 Cookie 请求头

    只保留 name=value，丢弃 Path、Expires 等属性。
    """
    pairs = []
    for header in set_cookie_headers:
        pair = header.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)
    return "; ".join(pairs)


async def acquire_session(client: WGModsClient, mod_id: int) -> SessionContext:
    """
    获取会话上下文

    Raises:
        NetworkError: 页面请求失败
        ProtocolError: 响应中没有 Set-Cookie
        ParseError: 页面中没有 csrfToken
    """
    logger.info(f"[会话] 正在获取模组 {mod_id} 的页面...")
    set_cookies, body = await client.fetch_page(mod_id)

    cookie = combine_cookies(set_cookies)
    if not cookie:
        raise ProtocolError(
            "no cookie was returned: 页面响应中没有 Set-Cookie",
            context={"url": client.mod_page_url(mod_id)},
        )

    csrf_token = extract_csrf_token(body)
    logger.debug(f"[会话] 已获取 {len(set_cookies)} 个 cookie 和 csrfToken")

    return SessionContext(
        cookie=cookie,
        csrf_token=csrf_token,
        referer=client.mod_page_url(mod_id),
    )
