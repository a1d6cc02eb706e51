import asyncssh
import logging

from pyfanssh.core.models import EstablishedConnection, ExecResult


class CommandExecutor:
    """在已建立的连接上执行一条命令"""

    def __init__(self, command: str, logger: logging.Logger = None):
        self.command = command
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, conn: EstablishedConnection) -> ExecResult:
        result = ExecResult(address=conn.address)

        try:
            ssh_result = await conn.conn.run(self.command, check=False)
        except (asyncssh.Error, OSError) as e:
            # 会话失败时输出为空，但保留错误信息
            result.error = f"Failed to create session: {e}"
            self.logger.error(f"{result.error} on {conn.address}")
            return result

        result.stdout = ssh_result.stdout or ""
        result.stderr = ssh_result.stderr or ""
        result.exit_status = ssh_result.exit_status
        self.logger.debug(
            f"Command finished on {conn.address} with exit status {result.exit_status}"
        )
        return result
