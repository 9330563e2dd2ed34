"""
ModKeeper 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional

import aiohttp


class ModKeeperError(Exception):
    """ModKeeper 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(ModKeeperError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class UpstreamError(ModKeeperError):
    """注册表 API 传输或 HTTP 错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class NotFoundError(ModKeeperError):
    """搜索没有结果，或清单中不存在该模组"""

    def _get_default_code(self) -> str:
        return "E404"


class NoCompatibleVersionError(ModKeeperError):
    """过滤后没有兼容版本"""

    def _get_default_code(self) -> str:
        return "E409"


class TransferError(ModKeeperError):
    """下载制品失败"""

    def _get_default_code(self) -> str:
        return "E300"


class InstallError(ModKeeperError):
    """将制品移动到模组目录失败"""

    def _get_default_code(self) -> str:
        return "E310"


class ManifestError(ModKeeperError):
    """清单文件相关错误"""

    def _get_default_code(self) -> str:
        return "E600"


class CorruptManifestError(ManifestError):
    """清单文件存在但无法解析"""

    def _get_default_code(self) -> str:
        return "E601"


__all__ = [
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
