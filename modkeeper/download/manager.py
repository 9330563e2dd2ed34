"""
下载管理器

负责将版本制品流式下载到暂存目录，并安装到模组目录。
"""

import asyncio
import os
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, Union

import aiofiles
import aiohttp
from loguru import logger

from modkeeper.download.artifact import StagedArtifact, safe_filename
from modkeeper.exceptions import InstallError, TransferError
from modkeeper.models import ModVersion
from modkeeper.models.config import DEFAULT_STAGING_DIR
from modkeeper.services.api_client import ModrinthClient

CHUNK_SIZE = 8192


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        client: ModrinthClient,
        staging_dir: Union[str, Path] = DEFAULT_STAGING_DIR,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.client = client
        self.staging_dir = Path(staging_dir)
        self._progress_callback = progress_callback

    def _make_scratch_dir(self) -> Path:
        """在暂存目录下创建本次下载专用的子目录"""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix="fetch-", dir=self.staging_dir))
        except OSError as e:
            raise TransferError(
                f"无法创建暂存目录: {self.staging_dir}",
                context={"staging_dir": str(self.staging_dir), "error": str(e)},
            ) from e

    async def fetch_artifact(self, version: ModVersion) -> StagedArtifact:
        """
        下载版本的第一个文件到暂存目录

        下载前会重新获取版本信息以取得最新的文件描述。失败时删除本次的暂存子目录，
        不会留下不完整的文件。

        Raises:
            TransferError: 版本没有文件、文件名无效、HTTP 非 200 或写入失败
        """
        fresh = await self.client.get_version(version.id)
        if not fresh.files:
            raise TransferError(
                f"版本 {version.version_number} 没有可下载的文件",
                context={"version_id": version.id},
            )

        file_info = fresh.files[0]
        filename = safe_filename(file_info.filename)
        if filename is None:
            raise TransferError(
                f"无效的文件名: {file_info.filename!r}",
                context={"version_id": version.id, "filename": file_info.filename},
            )

        scratch_dir = self._make_scratch_dir()
        file_path = scratch_dir / filename

        logger.info(f"[开始] 下载: {filename}")

        try:
            await self._stream_to_file(file_info.url, file_path, filename)
        except TransferError:
            self._discard(scratch_dir)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self._discard(scratch_dir)
            raise TransferError(
                f"下载失败: {filename}",
                context={"url": file_info.url, "error": str(e)},
            ) from e

        logger.success(f"[完成] '{filename}' 下载完成")
        return StagedArtifact(path=file_path, filename=filename, version=fresh)

    async def _stream_to_file(self, url: str, file_path: Path, filename: str) -> None:
        async with self.client.session.get(url) as response:
            if response.status != 200:
                raise TransferError(
                    f"HTTP {response.status}",
                    context={"url": url, "status": response.status},
                )

            total_size = int(response.headers.get("Content-Length", 0))
            logger.info(f"[信息] 文件大小: {total_size / (1024 * 1024):.2f} MB")

            async with aiofiles.open(file_path, "wb") as f:
                downloaded = 0
                last_percent = 0.0

                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    await f.write(chunk)
                    downloaded += len(chunk)

                    # 每 5% 报告一次进度
                    if total_size > 0:
                        percent = (downloaded / total_size) * 100
                        if percent - last_percent >= 5:
                            if self._progress_callback:
                                self._progress_callback(filename, percent)
                            logger.debug(f"[进度] {filename}: {percent:.1f}%")
                            last_percent = percent

    @staticmethod
    def _discard(scratch_dir: Path) -> None:
        """清理暂存子目录及其中不完整的文件"""
        shutil.rmtree(scratch_dir, ignore_errors=True)
        if scratch_dir.exists():
            logger.warning(f"[警告] 无法清理暂存目录: {scratch_dir}")

    def install_artifact(
        self, artifact: StagedArtifact, target_dir: Union[str, Path]
    ) -> Path:
        """
        将暂存的制品移动到目标目录，覆盖同名文件

        Raises:
            InstallError: 目标目录无法创建或不可写，或移动失败
        """
        target = Path(target_dir)
        destination = target / artifact.filename

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(
                f"无法创建模组目录: {target}",
                context={"target_dir": str(target), "error": str(e)},
            ) from e

        if not os.access(target, os.W_OK):
            raise InstallError(
                f"模组目录不可写: {target}", context={"target_dir": str(target)}
            )

        try:
            shutil.move(str(artifact.path), str(destination))
        except OSError as e:
            raise InstallError(
                f"安装 {artifact.filename} 失败",
                context={"destination": str(destination), "error": str(e)},
            ) from e

        logger.success(f"[安装] '{artifact.filename}' -> {target}")
        return destination

    @asynccontextmanager
    async def stage(self, version: ModVersion) -> AsyncIterator[StagedArtifact]:
        """
        下载制品并在退出时清理本次的暂存子目录

        用法::

            async with manager.stage(version) as artifact:
                manager.install_artifact(artifact, mods_dir)
        """
        artifact = await self.fetch_artifact(version)
        try:
            yield artifact
        finally:
            self._discard(artifact.staging_dir)
