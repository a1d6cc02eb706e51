import asyncio
import posixpath
from types import SimpleNamespace

import pytest

from pyfanssh.core.models import ConnectionSpec, EstablishedConnection, PasswordCredential


class FakeRemoteFile:
    def __init__(self, sftp, path):
        self.sftp = sftp
        self.path = path
        self.closed = False

    async def write(self, data):
        if self.sftp.fail_write:
            raise self.sftp.fail_write
        self.sftp.files[self.path] += data
        return len(data)

    async def close(self):
        self.closed = True
        if self.sftp.fail_close:
            raise self.sftp.fail_close


class FakeSFTPClient:
    """内存中的 SFTP 客户端"""

    def __init__(self, fail_mkdir=None, fail_open=None, fail_write=None, fail_close=None):
        self.fail_mkdir = fail_mkdir
        self.fail_open = fail_open
        self.fail_write = fail_write
        self.fail_close = fail_close
        self.opened = []
        self.dirs = {"/"}
        self.created_dirs = []
        self.files = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def makedirs(self, path, exist_ok=False):
        if self.fail_mkdir:
            raise self.fail_mkdir
        missing = []
        while path not in self.dirs and path not in ("", "/"):
            missing.append(path)
            path = posixpath.dirname(path)
        for directory in reversed(missing):
            self.dirs.add(directory)
            self.created_dirs.append(directory)

    async def open(self, path, mode="r"):
        if self.fail_open:
            raise self.fail_open
        if posixpath.dirname(path) not in self.dirs:
            raise FileNotFoundError(path)
        self.files[path] = b""
        remote_file = FakeRemoteFile(self, path)
        self.opened.append(remote_file)
        return remote_file


class FakeSSHConnection:
    """模拟 asyncssh.SSHClientConnection"""

    def __init__(
        self,
        peer=("10.0.0.1", 22),
        stdout="",
        stderr="",
        exit_status=0,
        run_error=None,
        run_delay=0,
        sftp=None,
        sftp_error=None,
    ):
        self.peer = peer
        self.stdout = stdout
        self.stderr = stderr
        self.exit_status = exit_status
        self.run_error = run_error
        self.run_delay = run_delay
        self.sftp = sftp or FakeSFTPClient()
        self.sftp_error = sftp_error
        self.commands = []
        self.closed = False

    def get_extra_info(self, name, default=None):
        if name == "peername":
            return self.peer
        return default

    async def run(self, command, check=False):
        self.commands.append(command)
        if self.run_delay:
            await asyncio.sleep(self.run_delay)
        if self.run_error:
            raise self.run_error
        return SimpleNamespace(
            stdout=self.stdout, stderr=self.stderr, exit_status=self.exit_status
        )

    def start_sftp_client(self):
        if self.sftp_error:
            raise self.sftp_error
        return self.sftp

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connection():
    return FakeSSHConnection


@pytest.fixture
def fake_sftp():
    return FakeSFTPClient


@pytest.fixture
def make_spec():
    def _make_spec(host="10.0.0.1", user="ops", password="x", port=22, service="web"):
        return ConnectionSpec(
            host=host,
            user=user,
            credential=PasswordCredential(password),
            port=port,
            service=service,
        )

    return _make_spec


@pytest.fixture
def make_established(make_spec):
    def _make_established(conn, host="10.0.0.1", user="ops"):
        spec = make_spec(host=host, user=user)
        return EstablishedConnection(spec=spec, conn=conn, address=spec.target)

    return _make_established
