"""文件上传模块"""

import asyncssh
import logging
import posixpath
from pathlib import Path

from pyfanssh.core.models import EstablishedConnection, UploadResult, UploadStage

CHUNK_SIZE = 64 * 1024


class UploadError(Exception):
    """上传失败，记录失败所在阶段"""

    def __init__(self, stage: UploadStage, cause: Exception):
        super().__init__(f"{stage.value}: {cause}")
        self.stage = stage
        self.cause = cause


def resolve_local_path(path: str) -> str:
    """~/ 开头的本地路径按当前用户的家目录展开"""
    if path.startswith("~/"):
        return str(Path.home() / path[2:])
    return path


def resolve_remote_path(path: str, user: str) -> str:
    """~/ 开头的远程路径按 /home/<user> 展开"""
    if path.startswith("~/"):
        return posixpath.join("/home", user, path[2:])
    return path


class FileUploader:
    """通过 SFTP 把本地文件上传到已建立的连接"""

    def __init__(
        self,
        local_path: str,
        remote_path: str,
        chunk_size: int = CHUNK_SIZE,
        logger: logging.Logger = None,
    ):
        self.local_path = local_path
        self.remote_path = remote_path
        self.chunk_size = chunk_size
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, conn: EstablishedConnection) -> UploadResult:
        remote_path = resolve_remote_path(self.remote_path, conn.user)
        result = UploadResult(address=conn.address, ok=False, remote_path=remote_path)

        try:
            result.transferred_bytes = await self._upload(conn, remote_path)
            result.ok = True
            self.logger.info(
                f"Uploaded {result.transferred_bytes} bytes to {conn.address}:{remote_path}"
            )
        except UploadError as e:
            result.error = str(e.cause)
            result.stage = e.stage
            self.logger.error(f"failed to upload file to {conn.address}: {e}")

        return result

    async def _upload(self, conn: EstablishedConnection, remote_path: str) -> int:
        # _copy 内部的错误已是 UploadError，这里只会捕获 SFTP 会话本身的错误
        try:
            async with conn.conn.start_sftp_client() as sftp:
                return await self._copy(sftp, remote_path)
        except (asyncssh.Error, OSError) as e:
            raise UploadError(UploadStage.SESSION, e) from e

    async def _copy(self, sftp, remote_path: str) -> int:
        local_path = resolve_local_path(self.local_path)
        try:
            src = open(local_path, "rb")
        except OSError as e:
            raise UploadError(UploadStage.LOCAL_OPEN, e) from e

        with src:
            parent = posixpath.dirname(remote_path)
            if parent:
                try:
                    await sftp.makedirs(parent, exist_ok=True)
                except (asyncssh.Error, OSError) as e:
                    raise UploadError(UploadStage.REMOTE_MKDIR, e) from e

            try:
                dst = await sftp.open(remote_path, "wb")
            except (asyncssh.Error, OSError) as e:
                raise UploadError(UploadStage.REMOTE_CREATE, e) from e

            # 中途失败不回滚，远程文件可能只写入了一部分
            transferred = 0
            try:
                while True:
                    chunk = src.read(self.chunk_size)
                    if not chunk:
                        break
                    await dst.write(chunk)
                    transferred += len(chunk)
            except (asyncssh.Error, OSError) as e:
                await self._close_after_failure(dst, remote_path)
                raise UploadError(UploadStage.COPY, e) from e

            try:
                await dst.close()
            except (asyncssh.Error, OSError) as e:
                raise UploadError(UploadStage.COPY, e) from e

        return transferred

    async def _close_after_failure(self, dst, remote_path: str):
        # 写入已经失败，关闭时的错误不覆盖原始错误
        try:
            await dst.close()
        except (asyncssh.Error, OSError) as e:
            self.logger.debug(f"Error closing remote file {remote_path}: {e}")
