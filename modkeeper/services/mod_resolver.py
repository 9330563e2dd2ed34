"""
模组解析服务

按名称搜索模组，获取版本列表并按兼容性过滤。
"""

from typing import List, Optional

from loguru import logger

from modkeeper.exceptions import NoCompatibleVersionError, NotFoundError
from modkeeper.models import (
    CompatibilityQuery,
    FailureKind,
    ModSummary,
    ModVersion,
    ResolveResult,
)
from modkeeper.services.api_client import ModrinthClient
from modkeeper.services.version_matcher import VersionMatcher


class ModResolver:
    """模组解析器"""

    def __init__(
        self,
        client: ModrinthClient,
        matcher: Optional[VersionMatcher] = None,
    ):
        self.client = client
        self.matcher = matcher or VersionMatcher()

    async def search_by_name(self, query: str) -> List[ModSummary]:
        """搜索模组，没有结果时抛出 NotFoundError"""
        hits = await self.client.search(query)
        if not hits:
            raise NotFoundError(f"模组 {query} 未找到", context={"query": query})
        return hits

    async def list_versions(self, project_id: str) -> List[ModVersion]:
        return await self.client.get_project_versions(project_id)

    def filter_compatible(
        self, versions: List[ModVersion], query: CompatibilityQuery
    ) -> List[ModVersion]:
        return self.matcher.filter_compatible(versions, query)

    async def get_compatible_versions(self, query: CompatibilityQuery) -> List[ModVersion]:
        """
        解析模组的兼容版本

        直接采用搜索结果的第一项，不做二次确认。
        """
        hits = await self.search_by_name(query.mod_name)
        project = hits[0]
        logger.debug(f"'{query.mod_name}' 解析为项目 '{project.name}' (ID: {project.project_id})")

        versions = await self.list_versions(project.project_id)
        return self.filter_compatible(versions, query)

    async def resolve(self, query: CompatibilityQuery) -> ModVersion:
        """返回第一个兼容版本（视为最新）"""
        versions = await self.get_compatible_versions(query)
        latest = versions[0]
        logger.info(f"'{query.mod_name}' 最新兼容版本: {latest.version_number}")
        return latest

    async def try_resolve(self, query: CompatibilityQuery) -> ResolveResult:
        """
        与 resolve 相同，但以结果值返回“未找到”和“无兼容版本”

        UpstreamError 仍然会被抛出。
        """
        try:
            version = await self.resolve(query)
        except NotFoundError as e:
            return ResolveResult.failed(query, FailureKind.NOT_FOUND, e.message)
        except NoCompatibleVersionError as e:
            return ResolveResult.failed(
                query, FailureKind.NO_COMPATIBLE_VERSION, e.message
            )
        return ResolveResult.success(query, version)
