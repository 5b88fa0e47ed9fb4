"""
CLI 模块

命令行接口实现。MODS_FOLDER / MOD_ID 等环境变量通过 click 的 envvar 读取。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from wotmodfetch import __version__
from wotmodfetch.models import WotModFetchConfig
from wotmodfetch.orchestrator import ModUpdater
from wotmodfetch.exceptions import ConfigParseError, WotModFetchError
from wotmodfetch.logger import setup_logger


def load_config(config_path: str) -> dict:
    """加载配置文件"""
    path = Path(config_path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            data = toml.load(config_path)
        elif suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            raise ConfigParseError(
                f"不支持的配置文件格式: {suffix}", context={"path": config_path}
            )
    except (OSError, ValueError, toml.TomlDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"配置文件解析失败: {e}", context={"path": config_path}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            "配置文件顶层必须是表/对象", context={"path": config_path}
        )
    return data


def build_config(config_path: Optional[str], **overrides) -> WotModFetchConfig:
    """合并配置文件与命令行/环境变量参数，命令行优先"""
    data = load_config(config_path) if config_path else {}
    for key, value in overrides.items():
        if value is not None:
            data[key] = value
    return WotModFetchConfig.from_dict(data)


async def run_async(config: WotModFetchConfig, dry_run: bool = False):
    """异步运行"""
    async with ModUpdater(config) as updater:
        if dry_run:
            descriptor, version, destination = await updater.resolve(
                config.mod_version
            )
            logger.info("[干运行模式] 版本解析完成")
            logger.info(f"  模组: {descriptor.id} ({descriptor.downloads} 次下载)")
            logger.info(f"  版本: {version.version} (共 {len(descriptor.versions)} 个)")
            logger.info(f"  游戏版本: {version.game_version.version}")
            logger.info(f"  下载地址: {version.download_url}")
            logger.info(f"  目标路径: {destination}")
            return destination

        return await updater.run()


@click.command()
@click.option(
    "--mods-folder",
    envvar="MODS_FOLDER",
    type=click.Path(file_okay=False),
    help="模组根目录（环境变量 MODS_FOLDER）",
)
@click.option("--mod-id", envvar="MOD_ID", help="模组 ID（环境变量 MOD_ID）")
@click.option(
    "--mod-version", envvar="MOD_VERSION", help="指定版本，默认下载最新版本"
)
@click.option("--base-url", envvar="WGMODS_BASE_URL", help="站点地址")
@click.option("--timeout", type=float, help="网络超时（秒）")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="配置文件 (.toml/.json/.yaml)",
)
@click.option("--dry-run", is_flag=True, help="干运行模式（只解析版本，不下载）")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(
    mods_folder: Optional[str],
    mod_id: Optional[str],
    mod_version: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float],
    config_path: Optional[str],
    dry_run: bool,
    debug: bool,
):
    """wotmodfetch - 从 wgmods.net 下载 World of Tanks 模组"""
    setup_logger(level="DEBUG" if debug else None)

    try:
        config = build_config(
            config_path,
            mods_folder=mods_folder,
            mod_id=mod_id,
            mod_version=mod_version,
            base_url=base_url,
            timeout=timeout,
        )
        asyncio.run(run_async(config, dry_run))
    except WotModFetchError as e:
        logger.error(f"运行失败: {e}")
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
