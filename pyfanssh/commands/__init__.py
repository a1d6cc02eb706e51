"""命令行命令模块"""

from .execute import execute_command
from .hosts import hosts_command
from .upload import upload_command
from .version import version_command

__all__ = ["execute_command", "hosts_command", "upload_command", "version_command"]
