"""
版本匹配服务

根据兼容性查询过滤版本列表。
"""

from typing import List

from modkeeper.exceptions import NoCompatibleVersionError
from modkeeper.models import CompatibilityQuery, ModVersion


class VersionMatcher:
    """版本匹配器"""

    @staticmethod
    def is_specific_version(target: str) -> bool:
        """含连字符的目标被视为精确的模组版本号"""
        return "-" in target

    def matches(self, version: str, target_versions: List[str]) -> bool:
        """检查版本是否在目标版本列表中"""
        return version in target_versions

    def is_compatible(self, version: ModVersion, query: CompatibilityQuery) -> bool:
        if self.is_specific_version(query.target):
            return version.version_number == query.target
        return self.matches(query.target, version.game_versions) and self.matches(
            query.loader or "", version.loaders
        )

    def filter_compatible(
        self,
        versions: List[ModVersion],
        query: CompatibilityQuery,
    ) -> List[ModVersion]:
        """
        过滤出兼容的版本，保持注册表顺序

        Args:
            versions: 注册表返回的版本列表
            query: 兼容性查询

        Returns:
            兼容版本列表，第一个元素视为最新版本

        Raises:
            NoCompatibleVersionError: 没有任何兼容版本
        """
        compatible = [v for v in versions if self.is_compatible(v, query)]

        if not compatible:
            raise NoCompatibleVersionError(
                f"没有 {query.mod_name} 与 {query.target} 和加载器 {query.loader} 兼容的版本",
                context={
                    "mod": query.mod_name,
                    "target": query.target,
                    "loader": query.loader,
                },
            )

        return compatible
