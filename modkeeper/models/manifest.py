"""
清单数据模型
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass
class ManifestEntry:
    """
    清单中单个已安装模组的记录。

    旧格式只保存版本号字符串，读取时 loader、game_version、filename 为空。
    """

    version: str
    loader: Optional[str] = None
    game_version: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Union[str, Dict[str, Any]]) -> "ManifestEntry":
        if isinstance(raw, str):
            return cls(version=raw)
        if isinstance(raw, dict) and isinstance(raw.get("version"), str):
            return cls(
                version=raw["version"],
                loader=raw.get("loader"),
                game_version=raw.get("game_version"),
                filename=raw.get("filename"),
            )
        raise ValueError(f"无法识别的清单条目: {raw!r}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version}
        if self.loader:
            data["loader"] = self.loader
        if self.game_version:
            data["game_version"] = self.game_version
        if self.filename:
            data["filename"] = self.filename
        return data
