"""
下载管理器

解析目标路径，流式下载模组文件并原子地写入磁盘。
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

import aiohttp
import aiofiles
from loguru import logger

from wotmodfetch.models import ModVersion
from wotmodfetch.services.api_client import create_session
from wotmodfetch.exceptions import DownloadFileError, NetworkError

WOTMOD_EXTENSION = "wotmod"
PART_SUFFIX = ".part"


class ArtifactDownloader:
    """模组文件下载器"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        chunk_size: int = 8192,
        timeout: float = 60.0,
    ):
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.bytes_downloaded = 0
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = create_session(self.timeout)
        return self._session

    @staticmethod
    def get_download_path(
        mods_folder: str, mod_descriptor_id: int, version: ModVersion
    ) -> Path:
        """<mods_folder>/<游戏版本>/<模组ID>-<版本>.wotmod"""
        filename = f"{mod_descriptor_id}-{version.version}.{WOTMOD_EXTENSION}"
        return Path(mods_folder) / version.game_version.version / filename

    async def download(
        self, mods_folder: str, mod_descriptor_id: int, version: ModVersion
    ) -> Path:
        """
        下载指定版本

        先写入 .part 临时文件，完成后替换目标文件；失败时删除临时文件。
        不会创建游戏版本目录。

        Returns:
            目标文件路径

        Raises:
            DownloadFileError: 目标路径越界、目标目录不存在或写入失败
            NetworkError: 下载请求失败
        """
        destination = self.get_download_path(mods_folder, mod_descriptor_id, version)
        root = Path(os.path.normpath(mods_folder))
        # 游戏版本或模组版本里的 ".." 或分隔符会让路径离开 mods_folder/<游戏版本>
        if Path(os.path.normpath(destination)).parent.parent != root:
            raise DownloadFileError(
                f"目标路径不在模组目录内: {destination}",
                context={"path": str(destination), "mods_folder": str(root)},
            )
        if not destination.parent.is_dir():
            raise DownloadFileError(
                f"目标目录不存在: {destination.parent}",
                context={"path": str(destination.parent)},
            )

        part_path = destination.with_name(destination.name + PART_SUFFIX)
        logger.info(f"[开始] 下载: {destination.name}")

        try:
            await self._stream_to_file(version.download_url, part_path)
            try:
                os.replace(part_path, destination)
            except OSError as e:
                raise DownloadFileError(
                    f"无法写入目标文件: {e}", context={"path": str(destination)}
                ) from e
        except BaseException:
            # 清理不完整的文件
            if part_path.exists():
                try:
                    part_path.unlink()
                except OSError as e:
                    logger.warning(f"[清理] 无法删除临时文件 {part_path}: {e}")
            raise

        logger.success(f"[完成] '{destination.name}' 已保存到 {destination.parent}")
        return destination

    async def _stream_to_file(self, url: str, file_path: Path) -> None:
        """流式下载到文件，内存占用与文件大小无关"""
        try:
            async with self.session.get(url) as response:
                if response.status >= 400:
                    raise NetworkError(
                        f"下载失败 (状态码: {response.status})", response=response
                    )
                if response.status == 204:
                    raise NetworkError("下载响应没有内容", response=response)

                total_size = int(response.headers.get("Content-Length", 0) or 0)
                logger.info(f"[信息] 文件大小: {total_size / (1024 * 1024):.2f} MB")

                try:
                    async with aiofiles.open(file_path, "wb") as f:
                        downloaded = 0
                        last_percent = 0.0

                        async for chunk in response.content.iter_chunked(
                            self.chunk_size
                        ):
                            await f.write(chunk)
                            downloaded += len(chunk)
                            self.bytes_downloaded += len(chunk)

                            if total_size > 0:
                                percent = (downloaded / total_size) * 100
                                if percent - last_percent >= 5:
                                    logger.info(
                                        f"[进度] {file_path.name}: {percent:.1f}%"
                                    )
                                    last_percent = percent
                except OSError as e:
                    raise DownloadFileError(
                        f"写入文件失败: {e}", context={"path": str(file_path)}
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"下载失败: {str(e) or type(e).__name__}", context={"url": url}
            ) from e

    async def close(self):
        """关闭 session"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
