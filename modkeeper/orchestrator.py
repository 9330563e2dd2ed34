"""
主协调器

组合解析、下载和清单存储，实现下载、更新和移除流程。
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from modkeeper.download import DownloadManager
from modkeeper.exceptions import ConfigError, NotFoundError
from modkeeper.manifest import ManifestStore
from modkeeper.models import (
    CompatibilityQuery,
    ModKeeperConfig,
    ModVersion,
    ResolveResult,
)
from modkeeper.services import ModResolver, ModrinthClient


@dataclass
class UpdateOutcome:
    """一次更新的结果"""

    mod_name: str
    old_version: str
    new_version: str
    path: Path


class ModKeeper:
    """
    ModKeeper 主入口

    所有网络与文件操作依次执行，任一步失败都会中止整个操作，不做回滚。
    """

    def __init__(
        self,
        manifest_path: Optional[Union[str, Path]] = None,
        config: Optional[ModKeeperConfig] = None,
        client: Optional[ModrinthClient] = None,
    ):
        self.config = config or ModKeeperConfig()
        self.manifest = ManifestStore(manifest_path or self.config.manifest)
        self.client = client or ModrinthClient(
            base_url=self.config.api_url,
            user_agent=self.config.user_agent,
            timeout=self.config.timeout,
        )
        self.resolver = ModResolver(self.client)
        self.downloader = DownloadManager(self.client, self.config.staging_dir)

    def set_manifest_path(self, manifest_path: Union[str, Path]) -> None:
        self.manifest.set_path(manifest_path)

    @staticmethod
    async def get_info_by_name(
        mod_name: str, client: Optional[ModrinthClient] = None
    ) -> dict:
        """返回搜索结果第一项的原始信息，不需要实例"""
        if client is not None:
            return await client.get_info_by_name(mod_name)
        async with ModrinthClient() as owned:
            return await owned.get_info_by_name(mod_name)

    async def get_compatible_versions(
        self, mod_name: str, target: str, loader: Optional[str] = None
    ) -> List[ModVersion]:
        query = CompatibilityQuery(mod_name, target, loader or self.config.loader.value)
        return await self.resolver.get_compatible_versions(query)

    async def try_resolve(
        self, mod_name: str, target: str, loader: Optional[str] = None
    ) -> ResolveResult:
        query = CompatibilityQuery(mod_name, target, loader or self.config.loader.value)
        return await self.resolver.try_resolve(query)

    @staticmethod
    def _installed_loader(query: CompatibilityQuery, version: ModVersion) -> Optional[str]:
        """
        记录到清单的加载器

        精确版本号查询不按加载器过滤，需取该版本实际支持的加载器。
        """
        if not query.is_specific_version or query.loader in version.loaders:
            return query.loader
        return version.loaders[0] if version.loaders else None

    async def _install(
        self, query: CompatibilityQuery, version: ModVersion, mods_dir: Union[str, Path]
    ) -> Path:
        async with self.downloader.stage(version) as artifact:
            path = self.downloader.install_artifact(artifact, mods_dir)

        self.manifest.save(
            query.mod_name,
            version.version_number,
            loader=self._installed_loader(query, version),
            game_version=query.game_version,
            filename=artifact.filename,
        )
        return path

    async def download(
        self,
        mod_name: str,
        target: str,
        loader: Optional[str] = None,
        mods_dir: Optional[Union[str, Path]] = None,
    ) -> ModVersion:
        """
        下载并安装模组

        Args:
            mod_name: 模组名称（取搜索结果第一项）
            target: 游戏版本，或含连字符的精确模组版本号
            loader: 模组加载器，默认使用配置中的加载器
            mods_dir: 模组目录

        Returns:
            安装的版本
        """
        mods_dir = mods_dir or self.config.mods_dir
        query = CompatibilityQuery(mod_name, target, loader or self.config.loader.value)

        version = await self.resolver.resolve(query)
        await self._install(query, version, mods_dir)

        logger.success(f"模组 '{mod_name}' {version.version_number} 已安装到 {mods_dir}")
        return version

    async def update_all(
        self,
        mods_dir: Optional[Union[str, Path]] = None,
        game_version: Optional[str] = None,
        loader: Optional[str] = None,
    ) -> List[UpdateOutcome]:
        """
        按清单顺序检查并更新所有模组

        每个条目优先使用安装时记录的加载器，其次是参数 loader，最后是配置默认值。
        版本号只做字符串比较。任一模组失败都会中止整个循环。
        """
        mods_dir = mods_dir or self.config.mods_dir
        game_version = game_version or self.config.game_version
        if not game_version:
            raise ConfigError("update_all 需要 game_version")

        entries = self.manifest.load_entries()
        if not entries:
            logger.info("清单为空，无需更新")
            return []

        outcomes = []
        for mod_name, entry in entries.items():
            entry_loader = entry.loader or loader or self.config.loader.value
            query = CompatibilityQuery(mod_name, game_version, entry_loader)
            latest = await self.resolver.resolve(query)

            if latest.version_number == entry.version:
                logger.info(f"'{mod_name}' 已是最新 ({entry.version})")
                continue

            logger.info(
                f"更新 '{mod_name}': {entry.version} -> {latest.version_number}"
            )
            self.manifest.remove_installed_file(mod_name, mods_dir)
            path = await self._install(query, latest, mods_dir)
            outcomes.append(
                UpdateOutcome(mod_name, entry.version, latest.version_number, path)
            )

        logger.success(f"更新完成: {len(outcomes)} 个模组已更新")
        return outcomes

    async def remove(
        self, mod_name: str, mods_dir: Optional[Union[str, Path]] = None
    ) -> bool:
        """删除已安装的模组文件和清单条目，返回是否删除了文件"""
        mods_dir = mods_dir or self.config.mods_dir
        if self.manifest.get(mod_name) is None:
            raise NotFoundError(f"清单中没有模组 {mod_name}", context={"mod": mod_name})

        deleted = self.manifest.remove_installed_file(mod_name, mods_dir)
        self.manifest.remove(mod_name)
        logger.success(f"模组 '{mod_name}' 已移除")
        return deleted

    def installed(self):
        return self.manifest.load_entries()

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
