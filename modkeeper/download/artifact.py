"""
暂存制品句柄
"""

from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Optional

from modkeeper.models import ModVersion


def safe_filename(name: str) -> Optional[str]:
    """
    只保留文件名的最后一级，去掉目录部分

    结果为空、``.`` 或 ``..`` 时返回 None。
    """
    base = PureWindowsPath(name.replace("/", "\\")).name
    if base in ("", ".", ".."):
        return None
    return base


@dataclass
class StagedArtifact:
    """已下载到暂存目录、等待安装的制品"""

    path: Path
    filename: str
    version: ModVersion

    @property
    def staging_dir(self) -> Path:
        return self.path.parent
