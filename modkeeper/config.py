"""
配置文件加载
"""

import json
from pathlib import Path
from typing import Optional

import toml
import yaml

from modkeeper.exceptions import ConfigError
from modkeeper.models import ModKeeperConfig


def load_config_dict(config_path: str) -> dict:
    """按扩展名读取 toml/json/yaml 配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(
            f"配置文件解析失败: {config_path}", context={"error": str(e)}
        ) from e

    raise ConfigError(f"不支持的配置文件格式: {suffix}")


def load_config(config_path: Optional[str] = None) -> ModKeeperConfig:
    """加载配置，未指定路径时使用默认配置"""
    if config_path is None:
        return ModKeeperConfig()
    return ModKeeperConfig.from_dict(load_config_dict(config_path))
