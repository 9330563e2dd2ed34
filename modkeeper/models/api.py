"""
API 数据模型

定义注册表返回数据对应的数据类，包括搜索结果、版本信息等。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ModLoader(Enum):
    """常见的模组加载器"""

    FORGE = "forge"
    NEOFORGE = "neoforge"
    FABRIC = "fabric"
    QUILT = "quilt"


@dataclass
class ModSummary:
    """
    搜索结果中的单个模组项目。
    """

    project_id: str
    slug: str
    title: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def name(self) -> str:
        return self.title or self.slug

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModSummary":
        return cls(
            project_id=data.get("project_id", ""),
            slug=data.get("slug", ""),
            title=data.get("title", ""),
            raw=data,
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int = 0
    hashes: Optional[Dict[str, str]] = None
    primary: bool = False


@dataclass
class ModVersion:
    """
    模组版本信息。

    loaders 保留注册表给出的原始字符串，未知加载器不会导致解析失败。
    """

    id: str
    name: str
    version_number: str
    game_versions: List[str]
    loaders: List[str]
    files: List[FileInfo]

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModVersion":
        """
        将 Modrinth API 返回的版本信息转换为 ModVersion 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                size=file.get("size", 0),
                hashes=file.get("hashes"),
                primary=file.get("primary", False),
            )
            for file in data.get("files", [])
        ]

        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            version_number=data.get("version_number", ""),
            game_versions=list(data.get("game_versions", [])),
            loaders=list(data.get("loaders", [])),
            files=files,
        )
