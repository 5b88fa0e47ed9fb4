"""
主协调器

按顺序执行：获取会话 → 获取元数据 → 选择版本 → 下载文件。
任一步骤失败都会终止整个流程，不做重试。
"""

from pathlib import Path
from typing import Optional, Tuple

from loguru import logger

from wotmodfetch.models import ModDescriptor, ModVersion, WotModFetchConfig
from wotmodfetch.services import (
    VersionSelector,
    WGModsClient,
    acquire_session,
)
from wotmodfetch.download import ArtifactDownloader


class ModUpdater:
    """wotmodfetch 主协调器"""

    def __init__(self, config: WotModFetchConfig):
        self.config = config
        self.client = WGModsClient(base_url=config.base_url, timeout=config.timeout)
        self.selector = VersionSelector()
        self.downloader = ArtifactDownloader(
            chunk_size=config.chunk_size,
            timeout=config.timeout,
        )

    async def resolve(
        self, requested_version: Optional[str] = None
    ) -> Tuple[ModDescriptor, ModVersion, Path]:
        """获取元数据并选出版本，返回 (模组描述, 版本, 目标路径)"""
        mod_id = self.config.mod_id
        context = await acquire_session(self.client, mod_id)

        logger.info(f"[元数据] 正在获取模组 {mod_id} 的信息...")
        descriptor = await self.client.get_mod(mod_id, context)

        version = self.selector.select(descriptor, requested_version)
        destination = self.downloader.get_download_path(
            self.config.mods_folder, descriptor.id, version
        )
        return descriptor, version, destination

    async def run(self, requested_version: Optional[str] = None) -> Path:
        """
        运行完整的下载流程

        Args:
            requested_version: 指定版本，默认使用配置中的 mod_version，都为空时下载最新版本

        Returns:
            下载文件的路径
        """
        if requested_version is None:
            requested_version = self.config.mod_version

        logger.info(f"开始更新模组 {self.config.mod_id}...")
        descriptor, version, _ = await self.resolve(requested_version)

        path = await self.downloader.download(
            self.config.mods_folder, descriptor.id, version
        )
        logger.success(
            f"模组 {self.config.mod_id} 版本 {version.version} "
            f"(游戏版本 {version.game_version.version}) 下载完成"
        )
        return path

    async def close(self):
        """关闭客户端与下载器"""
        await self.client.close()
        await self.downloader.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
