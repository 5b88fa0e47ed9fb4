"""
wotmodfetch 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
所有异常对当前调用都是终止性的，不做重试也不在本地恢复。
"""

from typing import Any, Dict, Optional
import aiohttp


class WotModFetchError(Exception):
    """wotmodfetch 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(WotModFetchError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class NetworkError(WotModFetchError):
    """网络错误（传输失败、DNS、超时或 HTTP 错误状态）"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class ProtocolError(WotModFetchError):
    """响应缺少预期字段（例如没有返回 cookie）"""

    def _get_default_code(self) -> str:
        return "E210"


class ParseError(WotModFetchError):
    """HTML 页面中的设置块缺失或格式错误"""

    def _get_default_code(self) -> str:
        return "E220"


class DecodeError(WotModFetchError):
    """JSON 响应与预期的元数据结构不符"""

    def _get_default_code(self) -> str:
        return "E230"


class NotFoundError(WotModFetchError):
    """请求的版本不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class DownloadError(WotModFetchError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadFileError(DownloadError):
    """下载文件操作错误"""

    def _get_default_code(self) -> str:
        return "E303"


__all__ = [
    # 基础异常
    "WotModFetchError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 流程异常
    "NetworkError",
    "ProtocolError",
    "ParseError",
    "DecodeError",
    "NotFoundError",
    # 下载异常
    "DownloadError",
    "DownloadFileError",
]
