"""
配置模型

进程启动时构建一次，之后以参数形式传入流程，流程内部不读取环境变量。
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from wotmodfetch.exceptions import ConfigValidationError

DEFAULT_BASE_URL = "https://wgmods.net"


@dataclass(frozen=True)
class WotModFetchConfig:
    """wotmodfetch 运行配置"""

    mods_folder: str
    mod_id: int
    mod_version: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0
    chunk_size: int = 8192

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WotModFetchConfig":
        """从字典创建配置并校验"""
        mods_folder = data.get("mods_folder")
        if not mods_folder or not isinstance(mods_folder, str):
            raise ConfigValidationError(
                "未设置 MODS_FOLDER (mods_folder)", context={"field": "mods_folder"}
            )

        raw_mod_id = data.get("mod_id")
        if raw_mod_id is None or raw_mod_id == "":
            raise ConfigValidationError(
                "未设置 MOD_ID (mod_id)", context={"field": "mod_id"}
            )
        try:
            if isinstance(raw_mod_id, bool):
                raise ValueError(raw_mod_id)
            mod_id = int(str(raw_mod_id).strip())
        except ValueError:
            raise ConfigValidationError(
                f"MOD_ID 必须为整数: {raw_mod_id!r}",
                context={"field": "mod_id", "value": str(raw_mod_id)},
            )
        if mod_id <= 0:
            raise ConfigValidationError(
                f"MOD_ID 必须为正整数: {mod_id}",
                context={"field": "mod_id", "value": mod_id},
            )

        mod_version = data.get("mod_version") or None
        if mod_version is not None:
            mod_version = str(mod_version)

        base_url = str(data.get("base_url") or DEFAULT_BASE_URL).rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise ConfigValidationError(
                f"base_url 必须以 http:// 或 https:// 开头: {base_url}",
                context={"field": "base_url"},
            )

        try:
            timeout = float(data.get("timeout", 60.0))
            chunk_size = int(data.get("chunk_size", 8192))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"数值配置无效: {e}")
        if timeout <= 0:
            raise ConfigValidationError(
                "timeout 必须大于 0", context={"field": "timeout"}
            )
        if chunk_size <= 0:
            raise ConfigValidationError(
                "chunk_size 必须大于 0", context={"field": "chunk_size"}
            )

        return cls(
            mods_folder=mods_folder,
            mod_id=mod_id,
            mod_version=mod_version,
            base_url=base_url,
            timeout=timeout,
            chunk_size=chunk_size,
        )
