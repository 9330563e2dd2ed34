"""
清单存储

以 JSON 文件记录已安装模组，供更新检查使用。
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger

from modkeeper.download.artifact import safe_filename
from modkeeper.exceptions import CorruptManifestError, InstallError, ManifestError
from modkeeper.models import ManifestEntry
from modkeeper.models.config import DEFAULT_MANIFEST


class ManifestStore:
    """
    清单文件读写

    文件是一个以模组名为键的 JSON 对象。新写入的条目形如
    ``{"version": ..., "loader": ..., "game_version": ..., "filename": ...}``，
    旧格式中直接以版本号字符串作为值的条目同样可以读取。

    save 是不加锁的读-改-写，多个进程同时写同一文件时后写者覆盖先写者。
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_MANIFEST):
        self.path = Path(path)

    def set_path(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read_raw(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptManifestError(
                f"清单文件无法解析: {self.path}",
                context={"path": str(self.path), "error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise CorruptManifestError(
                f"清单文件必须是 JSON 对象: {self.path}",
                context={"path": str(self.path)},
            )
        return data

    def load_entries(self) -> Dict[str, ManifestEntry]:
        """读取完整的清单条目，保持文件中的键顺序"""
        entries = {}
        for name, raw in self._read_raw().items():
            try:
                entries[name] = ManifestEntry.from_raw(raw)
            except ValueError as e:
                raise CorruptManifestError(
                    str(e), context={"path": str(self.path), "mod": name}
                ) from e
        return entries

    def load(self) -> Dict[str, str]:
        """读取模组名到版本号的映射，文件不存在时返回空映射"""
        return {name: entry.version for name, entry in self.load_entries().items()}

    def get(self, mod_name: str) -> Optional[ManifestEntry]:
        return self.load_entries().get(mod_name)

    def save(
        self,
        mod_name: str,
        version: str,
        loader: Optional[str] = None,
        game_version: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> None:
        """写入或覆盖一个条目，保留其他条目"""
        entries = self.load_entries()
        entries[mod_name] = ManifestEntry(
            version=version,
            loader=loader,
            game_version=game_version,
            filename=filename,
        )
        self._write(entries)
        logger.debug(f"[清单] {mod_name} -> {version}")

    def remove(self, mod_name: str) -> bool:
        """删除一个条目，返回条目是否存在"""
        entries = self.load_entries()
        if mod_name not in entries:
            return False
        del entries[mod_name]
        self._write(entries)
        logger.debug(f"[清单] 已移除 {mod_name}")
        return True

    def installed_path(self, mod_name: str, mods_dir: Union[str, Path]) -> Optional[Path]:
        """
        已安装文件的路径

        优先使用记录的文件名；旧条目没有文件名时退回到以模组名作为文件名。
        只取最后一级名称，路径始终位于 mods_dir 之内。
        """
        entry = self.get(mod_name)
        if entry is None:
            return None
        name = safe_filename(entry.filename or mod_name)
        if name is None:
            return None
        return Path(mods_dir) / name

    def remove_installed_file(self, mod_name: str, mods_dir: Union[str, Path]) -> bool:
        """删除已安装的模组文件，文件不存在时不报错，返回是否删除了文件"""
        path = self.installed_path(mod_name, mods_dir)
        if path is None or not path.is_file():
            logger.debug(f"[清单] 未找到 {mod_name} 的已安装文件")
            return False
        try:
            path.unlink()
        except OSError as e:
            raise InstallError(
                f"无法删除旧文件: {path}",
                context={"path": str(path), "error": str(e)},
            ) from e
        logger.info(f"[删除] 旧文件 {path.name}")
        return True

    def _write(self, entries: Dict[str, ManifestEntry]) -> None:
        data = {name: entry.to_dict() for name, entry in entries.items()}
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.write("\n")
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise ManifestError(
                f"无法写入清单文件: {self.path}",
                context={"path": str(self.path), "error": str(e)},
            ) from e
