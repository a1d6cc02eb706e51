import logging
import os

import asyncssh
import pytest

from pyfanssh.core.models import UploadStage
from pyfanssh.core.transfer import FileUploader, resolve_local_path, resolve_remote_path


class TestPathResolution:
    """测试 ~/ 路径展开"""

    def test_remote_home(self):
        assert resolve_remote_path("~/app/conf.yml", "ops") == "/home/ops/app/conf.yml"

    def test_remote_absolute_untouched(self):
        assert resolve_remote_path("/etc/app.conf", "ops") == "/etc/app.conf"

    def test_remote_tilde_user_untouched(self):
        assert resolve_remote_path("~root/x", "ops") == "~root/x"

    def test_local_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))

        assert resolve_local_path("~/data/file.bin") == os.path.join(
            str(tmp_path), "data", "file.bin"
        )

    def test_local_relative_untouched(self):
        assert resolve_local_path("data/file.bin") == "data/file.bin"


class TestFileUploader:
    """测试文件上传"""

    @pytest.fixture
    def source(self, tmp_path):
        path = tmp_path / "payload.bin"
        path.write_bytes(bytes(range(256)) * 1000)
        return path

    @pytest.mark.asyncio
    async def test_upload_copies_all_bytes(
        self, source, fake_connection, fake_sftp, make_established
    ):
        """目标文件内容与源文件逐字节一致，缺失的父目录被递归创建"""
        sftp = fake_sftp()
        conn = fake_connection(sftp=sftp)
        uploader = FileUploader(str(source), "/opt/app/data/payload.bin", chunk_size=4096)

        result = await uploader.dispatch(make_established(conn))

        assert result.ok
        assert result.error is None
        assert result.transferred_bytes == source.stat().st_size
        assert sftp.files["/opt/app/data/payload.bin"] == source.read_bytes()
        assert sftp.created_dirs == ["/opt", "/opt/app", "/opt/app/data"]

    @pytest.mark.asyncio
    async def test_upload_to_remote_home(
        self, source, fake_connection, fake_sftp, make_established
    ):
        sftp = fake_sftp()
        conn = fake_connection(sftp=sftp)

        result = await FileUploader(str(source), "~/payload.bin").dispatch(
            make_established(conn, user="deploy")
        )

        assert result.remote_path == "/home/deploy/payload.bin"
        assert "/home/deploy/payload.bin" in sftp.files

    @pytest.mark.asyncio
    async def test_upload_empty_file(self, tmp_path, fake_connection, fake_sftp, make_established):
        source = tmp_path / "empty"
        source.write_bytes(b"")
        sftp = fake_sftp()

        result = await FileUploader(str(source), "/tmp/empty").dispatch(
            make_established(fake_connection(sftp=sftp))
        )

        assert result.ok
        assert result.transferred_bytes == 0
        assert sftp.files["/tmp/empty"] == b""

    @pytest.mark.asyncio
    async def test_local_open_failure(self, tmp_path, fake_connection, make_established, caplog):
        with caplog.at_level(logging.ERROR):
            result = await FileUploader(str(tmp_path / "missing"), "/tmp/x").dispatch(
                make_established(fake_connection())
            )

        assert not result.ok
        assert result.stage == UploadStage.LOCAL_OPEN
        assert "failed to upload file" in caplog.text

    @pytest.mark.parametrize(
        "kwargs, stage",
        [
            ({"fail_mkdir": asyncssh.SFTPPermissionDenied("denied")}, UploadStage.REMOTE_MKDIR),
            ({"fail_open": asyncssh.SFTPFailure("disk full")}, UploadStage.REMOTE_CREATE),
            ({"fail_write": asyncssh.SFTPFailure("disk full")}, UploadStage.COPY),
        ],
    )
    @pytest.mark.asyncio
    async def test_remote_failures_keep_stage(
        self, source, fake_connection, fake_sftp, make_established, kwargs, stage
    ):
        """远程失败时保留失败阶段"""
        conn = fake_connection(sftp=fake_sftp(**kwargs))

        result = await FileUploader(str(source), "/opt/app/payload.bin").dispatch(
            make_established(conn)
        )

        assert not result.ok
        assert result.stage == stage
        assert result.error

    @pytest.mark.asyncio
    async def test_sftp_session_failure(self, source, fake_connection, make_established):
        conn = fake_connection(sftp_error=asyncssh.ChannelOpenError(2, "sftp refused"))

        result = await FileUploader(str(source), "/tmp/x").dispatch(make_established(conn))

        assert not result.ok
        assert result.stage == UploadStage.SESSION
        assert "sftp refused" in result.error

    @pytest.mark.asyncio
    async def test_close_error_does_not_mask_copy_error(
        self, source, fake_connection, fake_sftp, make_established
    ):
        """写入失败后关闭也失败时，保留写入阶段的原始错误"""
        sftp = fake_sftp(
            fail_write=asyncssh.SFTPFailure("disk full"),
            fail_close=asyncssh.SFTPConnectionLost("connection lost"),
        )

        result = await FileUploader(str(source), "/tmp/payload.bin").dispatch(
            make_established(fake_connection(sftp=sftp))
        )

        assert not result.ok
        assert result.stage == UploadStage.COPY
        assert "disk full" in result.error
        assert sftp.opened[0].closed

    @pytest.mark.asyncio
    async def test_close_failure_reported_as_copy(
        self, source, fake_connection, fake_sftp, make_established
    ):
        sftp = fake_sftp(fail_close=asyncssh.SFTPFailure("flush failed"))

        result = await FileUploader(str(source), "/tmp/payload.bin").dispatch(
            make_established(fake_connection(sftp=sftp))
        )

        assert not result.ok
        assert result.stage == UploadStage.COPY
        assert "flush failed" in result.error
