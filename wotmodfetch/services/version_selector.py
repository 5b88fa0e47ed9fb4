"""
版本选择服务

从模组描述中选出要下载的版本：指定版本精确匹配，未指定时取列表第一个。
"""

from datetime import datetime
from typing import List, Optional

from loguru import logger

from wotmodfetch.models import ModDescriptor, ModVersion
from wotmodfetch.exceptions import NotFoundError


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


class VersionSelector:
    """版本选择器"""

    @staticmethod
    def is_latest_first(versions: List[ModVersion]) -> bool:
        """
        检查第一个版本是否是最新创建的

        时间戳缺失或无法解析（含不带时区的时间）时无法判断，按 True 处理。
        """
        if not versions:
            return True

        first = _parse_timestamp(versions[0].created_at)
        if first is None:
            return True

        for version in versions[1:]:
            created = _parse_timestamp(version.created_at)
            if created is None:
                return True
            if created > first:
                return False
        return True

    def select(
        self,
        descriptor: ModDescriptor,
        requested_version: Optional[str] = None,
    ) -> ModVersion:
        """
        选择要下载的版本

        Args:
            descriptor: 模组描述
            requested_version: 指定版本（区分大小写，不做规范化），None 表示最新

        Returns:
            选中的版本

        Raises:
            NotFoundError: 找不到指定版本，或版本列表为空
        """
        if requested_version is not None:
            for version in descriptor.versions:
                if version.version == requested_version:
                    logger.info(f"[版本] 使用指定版本 {version.version}")
                    return version
            raise NotFoundError(
                f"could not find version {requested_version}: 模组 {descriptor.id} 没有该版本",
                context={
                    "mod_id": descriptor.id,
                    "requested": requested_version,
                    "available": [v.version for v in descriptor.versions],
                },
            )

        if not descriptor.versions:
            raise NotFoundError(
                f"could not find version latest: 模组 {descriptor.id} 没有任何版本",
                context={"mod_id": descriptor.id},
            )

        # 依赖服务器按创建时间倒序排列
        if not self.is_latest_first(descriptor.versions):
            logger.warning(
                f"[版本] 模组 {descriptor.id} 的版本列表似乎不是最新在前，"
                f"仍使用第一个版本 {descriptor.versions[0].version}"
            )

        version = descriptor.versions[0]
        logger.info(f"[版本] 使用最新版本 {version.version}")
        return version
