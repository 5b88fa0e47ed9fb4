"""
API 客户端

访问 wgmods 的模组页面与 JSON 元数据接口。
"""

import asyncio
import json
from typing import Dict, List, Optional, Tuple

import aiohttp
from loguru import logger

from wotmodfetch.models import DEFAULT_BASE_URL, ModDescriptor, SessionContext
from wotmodfetch.exceptions import DecodeError, NetworkError


def create_session(timeout: float = 60.0) -> aiohttp.ClientSession:
    """
    创建 aiohttp session

    使用 DummyCookieJar，会话 cookie 只通过显式的 Cookie 请求头发送。
    不设置总超时，以便下载大文件。
    """
    return aiohttp.ClientSession(
        cookie_jar=aiohttp.DummyCookieJar(),
        timeout=aiohttp.ClientTimeout(
            total=None, sock_connect=timeout, sock_read=timeout
        ),
    )


class WGModsClient:
    """wgmods 客户端"""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = create_session(self.timeout)
        return self._session

    def mod_page_url(self, mod_id: int) -> str:
        """模组页面地址，同时作为 API 请求的 Referer"""
        return f"{self.base_url}/{mod_id}/"

    def mod_api_url(self, mod_id: int) -> str:
        return f"{self.base_url}/api/mods/{mod_id}/"

    async def _request(
        self, url: str, headers: Optional[Dict[str, str]] = None
    ) -> Tuple[List[str], bytes]:
        """
        发送 GET 请求

        Returns:
            tuple: (Set-Cookie 头列表, 原始响应体)
        """
        logger.debug(f"[请求] GET {url}")
        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status >= 400:
                    raise NetworkError(
                        f"请求失败 (状态码: {response.status})", response=response
                    )
                cookies = response.headers.getall("Set-Cookie", [])
                return list(cookies), await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"请求失败: {str(e) or type(e).__name__}", context={"url": url}
            ) from e

    async def fetch_page(self, mod_id: int) -> Tuple[List[str], str]:
        """
        获取模组页面（未认证）

        Returns:
            tuple: (Set-Cookie 头列表, HTML 文本)
        """
        cookies, body = await self._request(self.mod_page_url(mod_id))
        # 非 UTF-8 字节替换掉，设置块缺失时由 token 提取报错
        return cookies, body.decode("utf-8", errors="replace")

    async def get_mod(self, mod_id: int, context: SessionContext) -> ModDescriptor:
        """
        获取模组描述信息

        Raises:
            NetworkError: 请求失败
            DecodeError: 响应不是 JSON 或结构不符
        """
        url = self.mod_api_url(mod_id)
        _, body = await self._request(url, headers=context.as_headers())

        # 非 UTF-8 字节引发的 UnicodeDecodeError 也是 ValueError
        try:
            data = json.loads(body)
        except ValueError as e:
            raise DecodeError(
                f"元数据响应不是有效的 JSON: {e}", context={"url": url}
            ) from e

        descriptor = ModDescriptor.from_wgmods(data)
        logger.debug(
            f"[元数据] 模组 {descriptor.id}: {len(descriptor.versions)} 个版本, "
            f"{descriptor.downloads} 次下载"
        )
        return descriptor

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
