"""
兼容性查询与解析结果
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modkeeper.models.api import ModVersion


@dataclass
class CompatibilityQuery:
    """
    兼容性查询。

    target 含有连字符时视为精确的模组版本号，否则视为游戏版本，
    并与 loader 一起参与过滤。
    """

    mod_name: str
    target: str
    loader: Optional[str] = None

    @property
    def is_specific_version(self) -> bool:
        return "-" in self.target

    @property
    def game_version(self) -> Optional[str]:
        """target 表示游戏版本时返回它，否则返回 None"""
        return None if self.is_specific_version else self.target


class FailureKind(Enum):
    """解析失败的类型"""

    NOT_FOUND = "not_found"
    NO_COMPATIBLE_VERSION = "no_compatible_version"


@dataclass
class ResolveResult:
    """解析结果：成功时携带版本，失败时携带失败类型"""

    query: CompatibilityQuery
    version: Optional[ModVersion] = None
    failure: Optional[FailureKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.version is not None

    @classmethod
    def success(cls, query: CompatibilityQuery, version: ModVersion) -> "ResolveResult":
        return cls(query=query, version=version)

    @classmethod
    def failed(
        cls, query: CompatibilityQuery, failure: FailureKind, message: str = ""
    ) -> "ResolveResult":
        return cls(query=query, failure=failure, message=message)
