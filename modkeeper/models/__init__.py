"""
ModKeeper 数据模型包

包含 API 模型、查询模型、清单模型和配置模型定义。
"""

from modkeeper.models.api import (
    ModLoader,
    ModSummary,
    FileInfo,
    ModVersion,
)
from modkeeper.models.query import (
    CompatibilityQuery,
    FailureKind,
    ResolveResult,
)
from modkeeper.models.manifest import ManifestEntry
from modkeeper.models.config import ModKeeperConfig

__all__ = [
    # API 模型
    "ModLoader",
    "ModSummary",
    "FileInfo",
    "ModVersion",
    # 查询模型
    "CompatibilityQuery",
    "FailureKind",
    "ResolveResult",
    # 清单模型
    "ManifestEntry",
    # 配置模型
    "ModKeeperConfig",
]
