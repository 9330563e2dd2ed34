"""
ModKeeper 下载层

包含制品下载、暂存和安装功能。
"""

from modkeeper.download.artifact import StagedArtifact
from modkeeper.download.manager import DownloadManager

__all__ = [
    "DownloadManager",
    "StagedArtifact",
]
