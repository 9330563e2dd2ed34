"""
ModKeeper 服务层

包含业务逻辑服务：API 客户端、模组解析、版本匹配。
"""

from modkeeper.services.api_client import ModrinthClient
from modkeeper.services.mod_resolver import ModResolver
from modkeeper.services.version_matcher import VersionMatcher

__all__ = [
    "ModrinthClient",
    "ModResolver",
    "VersionMatcher",
]
