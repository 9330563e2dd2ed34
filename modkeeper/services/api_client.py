"""
API 客户端

封装 Modrinth 注册表的搜索、版本列表和单版本查询接口。
"""

import asyncio
from typing import Any, List, Optional

import aiohttp
from loguru import logger

from modkeeper.exceptions import NotFoundError, UpstreamError
from modkeeper.models import ModSummary, ModVersion
from modkeeper.models.config import DEFAULT_USER_AGENT, MODRINTH_BASE_URL

SEARCH_LIMIT = 10


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            kwargs: dict = {"headers": {"User-Agent": self.user_agent}}
            if self.timeout is not None:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def _request(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """发送 API 请求，任何非 200 响应或传输错误都抛出 UpstreamError"""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"[API] GET {url} {params or ''}")
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.json()
                raise UpstreamError(
                    f"API 请求失败 (状态码: {response.status})",
                    response=response,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise UpstreamError(
                f"API 请求失败: {e}", context={"url": url, "error": str(e)}
            ) from e

    async def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[ModSummary]:
        """按名称搜索模组，保持注册表的相关度排序"""
        response = await self._request(
            "/search", params={"query": query, "limit": limit}
        )
        hits = (response or {}).get("hits", [])
        return [ModSummary.from_modrinth(hit) for hit in hits]

    async def get_info_by_name(self, name: str) -> dict:
        """返回搜索结果中排名第一的原始项目信息"""
        hits = await self.search(name)
        if not hits:
            raise NotFoundError(f"模组 {name} 未找到", context={"query": name})
        info = hits[0].raw
        logger.info(f"模组信息: {info.get('title', name)} (ID: {info.get('project_id')})")
        return info

    async def get_project_versions(self, project_id: str) -> List[ModVersion]:
        """获取项目的完整版本列表，保持注册表顺序"""
        response = await self._request(f"/project/{project_id}/version")
        return [ModVersion.from_modrinth(version) for version in response or []]

    async def get_version(self, version_id: str) -> ModVersion:
        """获取单个版本信息"""
        response = await self._request(f"/version/{version_id}")
        return ModVersion.from_modrinth(response or {})

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
