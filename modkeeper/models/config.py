"""
配置模型
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from modkeeper.exceptions import ConfigError
from modkeeper.models.api import ModLoader

MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_MANIFEST = "./mods.json"
DEFAULT_MODS_DIR = "./mods"
DEFAULT_STAGING_DIR = str(Path(__file__).resolve().parent.parent / "downloads")
DEFAULT_USER_AGENT = "modkeeper/0.1.0"


@dataclass
class ModKeeperConfig:
    """ModKeeper 配置"""

    manifest: str = DEFAULT_MANIFEST
    mods_dir: str = DEFAULT_MODS_DIR
    staging_dir: str = DEFAULT_STAGING_DIR
    loader: ModLoader = ModLoader.FORGE
    game_version: Optional[str] = None
    api_url: str = MODRINTH_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ModKeeperConfig":
        """从字典创建配置"""
        if not isinstance(data, dict):
            raise ConfigError("配置必须是一个对象")

        # 兼容 [modkeeper] 段
        section = data.get("modkeeper", data)

        loader_value = section.get("loader", ModLoader.FORGE.value)
        try:
            loader = ModLoader(str(loader_value).lower())
        except ValueError:
            raise ConfigError(
                f"不支持的模组加载器: {loader_value}",
                context={"loader": loader_value},
            )

        timeout = section.get("timeout")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise ConfigError(f"timeout 配置无效: {timeout}")
            if timeout <= 0:
                raise ConfigError(f"timeout 必须大于 0: {timeout}")

        return cls(
            manifest=section.get("manifest", DEFAULT_MANIFEST),
            mods_dir=section.get("mods_dir", DEFAULT_MODS_DIR),
            staging_dir=section.get("staging_dir", DEFAULT_STAGING_DIR),
            loader=loader,
            game_version=section.get("game_version"),
            api_url=section.get("api_url", MODRINTH_BASE_URL).rstrip("/"),
            user_agent=section.get("user_agent", DEFAULT_USER_AGENT),
            timeout=timeout,
        )
