"""
API 数据模型

定义 wgmods 接口相关的数据类：会话上下文、模组描述、版本信息等。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wotmodfetch.exceptions import DecodeError


def _require(data: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    """读取必需字段并检查类型"""
    if not isinstance(data, dict):
        raise DecodeError(
            f"{where} 不是 JSON 对象",
            context={"where": where, "type": type(data).__name__},
        )
    if key not in data:
        raise DecodeError(
            f"{where} 缺少字段 '{key}'", context={"where": where, "field": key}
        )
    value = data[key]
    # bool 是 int 的子类，这里不接受
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(
            f"{where}.{key} 类型错误: 期望 {kind.__name__}，实际 {type(value).__name__}",
            context={"where": where, "field": key},
        )
    return value


def _path_component(data: Dict[str, Any], key: str, where: str) -> str:
    """读取用作目标路径一部分的字段，拒绝分隔符和 . / .."""
    value = _require(data, key, str, where)
    if (
        not value.strip()
        or value in (".", "..")
        or any(ch in value for ch in ("/", "\\", "\0"))
    ):
        raise DecodeError(
            f"{where}.{key} 不能用作路径: {value!r}",
            context={"where": where, "field": key, "value": value},
        )
    return value


def _optional_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _optional_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


@dataclass(frozen=True)
class SessionContext:
    """
    访问 API 所需的会话上下文。

    每次调用重新获取，不做持久化。
    """

    cookie: str
    csrf_token: str
    referer: str

    def as_headers(self) -> Dict[str, str]:
        """生成 API 请求头"""
        return {
            "Cookie": self.cookie,
            "Referer": self.referer,
            "X-CSRFToken": self.csrf_token,
            # 服务器依赖此标记识别 AJAX 请求
            "x-requested-with": "XMLHttpRequest",
        }


@dataclass(frozen=True)
class GameVersion:
    """游戏版本"""

    id: int
    version: str

    @classmethod
    def from_wgmods(cls, data: dict) -> "GameVersion":
        return cls(
            id=_require(data, "id", int, "game_version"),
            version=_path_component(data, "version", "game_version"),
        )


@dataclass(frozen=True)
class ModVersion:
    """
    模组版本信息。
    """

    id: int
    version: str
    game_version: GameVersion
    download_url: str
    file_size: int = 0
    comment: str = ""
    change_log: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_wgmods(cls, data: dict) -> "ModVersion":
        """
        将 wgmods API 返回的版本信息转换为 ModVersion 对象。
        """
        return cls(
            id=_require(data, "id", int, "version"),
            version=_path_component(data, "version", "version"),
            game_version=GameVersion.from_wgmods(
                _require(data, "game_version", dict, "version")
            ),
            download_url=_require(data, "download_url", str, "version"),
            file_size=_optional_int(data, "version_file_size"),
            comment=_optional_str(data, "comment"),
            change_log=_optional_str(data, "change_log"),
            created_at=_optional_str(data, "created_at"),
            updated_at=_optional_str(data, "updated_at"),
        )


@dataclass(frozen=True)
class ModOwner:
    """模组作者（仅用于描述）"""

    pk: int
    spa_id: int
    spa_username: str
    username: str
    realm: str

    @classmethod
    def from_wgmods(cls, data: dict) -> "ModOwner":
        return cls(
            pk=_optional_int(data, "pk"),
            spa_id=_optional_int(data, "spa_id"),
            spa_username=_optional_str(data, "spa_username"),
            username=_optional_str(data, "username"),
            realm=_optional_str(data, "realm"),
        )


@dataclass(frozen=True)
class ChangeLogEntry:
    """更新日志条目"""

    body: str
    version: str


@dataclass(frozen=True)
class ModDescriptor:
    """
    模组描述信息。

    versions 的顺序由服务器决定（观察到的是最新版本在前）。
    """

    id: int
    downloads: int = 0
    change_log: List[ChangeLogEntry] = field(default_factory=list)
    mark: str = ""
    owner: Optional[ModOwner] = None
    versions: List[ModVersion] = field(default_factory=list)

    @classmethod
    def from_wgmods(cls, data: Any) -> "ModDescriptor":
        """
        将 wgmods API 返回的模组信息转换为 ModDescriptor 对象。

        Raises:
            DecodeError: 数据结构与预期不符
        """
        raw_versions = _require(data, "versions", list, "mod")
        raw_owner = data.get("owner")
        raw_change_log = data.get("change_log")

        change_log = []
        if isinstance(raw_change_log, list):
            change_log = [
                ChangeLogEntry(
                    body=_optional_str(entry, "body"),
                    version=_optional_str(entry, "version"),
                )
                for entry in raw_change_log
                if isinstance(entry, dict)
            ]

        return cls(
            id=_require(data, "id", int, "mod"),
            downloads=_optional_int(data, "downloads"),
            change_log=change_log,
            mark=str(data["mark"]) if data.get("mark") is not None else "",
            owner=(
                ModOwner.from_wgmods(raw_owner)
                if isinstance(raw_owner, dict)
                else None
            ),
            versions=[ModVersion.from_wgmods(version) for version in raw_versions],
        )
