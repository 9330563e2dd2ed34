"""
ModKeeper - Minecraft 模组下载与更新工具
"""

__version__ = "0.1.0"

from modkeeper.exceptions import (
    ModKeeperError,
    ConfigError,
    UpstreamError,
    NotFoundError,
    NoCompatibleVersionError,
    TransferError,
    InstallError,
    ManifestError,
    CorruptManifestError,
)
from modkeeper.manifest import ManifestStore
from modkeeper.orchestrator import ModKeeper, UpdateOutcome

__all__ = [
    "__version__",
    "ModKeeper",
    "UpdateOutcome",
    "ManifestStore",
    "ModKeeperError",
    "ConfigError",
    "UpstreamError",
    "NotFoundError",
    "NoCompatibleVersionError",
    "TransferError",
    "InstallError",
    "ManifestError",
    "CorruptManifestError",
]
