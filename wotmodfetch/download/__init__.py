"""
wotmodfetch 下载层

包含目标路径解析与流式下载。
"""

from wotmodfetch.download.manager import ArtifactDownloader, WOTMOD_EXTENSION

__all__ = [
    "ArtifactDownloader",
    "WOTMOD_EXTENSION",
]
