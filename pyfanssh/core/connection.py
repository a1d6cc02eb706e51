"""SSH 连接建立模块"""

import asyncio
import asyncssh
import logging
from typing import Optional

from pyfanssh.core.models import (
    ConnectionSpec,
    EstablishedConnection,
    HostKeyPolicy,
    format_address,
)


class ConnectionEstablisher:
    """为单台主机建立已认证的 SSH 连接，失败时返回 None"""

    def __init__(
        self,
        host_key_policy: HostKeyPolicy = HostKeyPolicy.ACCEPT_ALL,
        known_hosts: Optional[str] = None,
        connect_timeout: float = 10.0,
        logger: logging.Logger = None,
    ):
        self.host_key_policy = host_key_policy
        self.known_hosts = known_hosts
        self.connect_timeout = connect_timeout
        self.logger = logger or logging.getLogger(__name__)

        if host_key_policy == HostKeyPolicy.ACCEPT_ALL:
            self.logger.warning(
                "Host key verification is disabled, any remote host identity is accepted"
            )

    def connect_kwargs(self, spec: ConnectionSpec) -> dict:
        connect_kwargs = {
            "host": spec.host,
            "port": spec.port,
            "username": spec.user,
            "connect_timeout": self.connect_timeout,
        }

        if self.host_key_policy == HostKeyPolicy.ACCEPT_ALL:
            connect_kwargs["known_hosts"] = None
        elif self.known_hosts:
            connect_kwargs["known_hosts"] = self.known_hosts
        # 否则使用 asyncssh 默认的 ~/.ssh/known_hosts

        connect_kwargs.update(spec.credential.connect_kwargs())
        return connect_kwargs

    async def establish(self, spec: ConnectionSpec) -> Optional[EstablishedConnection]:
        self.logger.debug(f"Connecting to {spec.target} as {spec.user}")

        try:
            conn = await asyncssh.connect(**self.connect_kwargs(spec))
        # 密钥导入失败 (KeyImportError) 和非法主机名 (UnicodeError) 都是 ValueError
        except (asyncssh.Error, OSError, asyncio.TimeoutError, ValueError) as e:
            self.logger.error(f"Failed to connect to {spec.target}: {e}")
            return None

        peer = conn.get_extra_info("peername")
        if peer:
            address = format_address(peer[0], peer[1])
        else:
            address = spec.target

        self.logger.debug(f"Connected to {address}")
        return EstablishedConnection(spec=spec, conn=conn, address=address)
