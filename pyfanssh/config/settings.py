"""运行参数"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pyfanssh.core.models import HostKeyPolicy

DEFAULT_INVENTORY = "hosts.yml"
DEFAULT_TIMEOUT = 10.0
# 命令行选项对应的环境变量前缀，例如 PYFANSSH_TIMEOUT
ENV_PREFIX = "PYFANSSH"


@dataclass
class RunSettings:
    """一次调用的全局参数，由命令行解析得到"""

    inventory: str = DEFAULT_INVENTORY
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: Optional[float] = None
    max_concurrent: int = 0
    host_key_policy: HostKeyPolicy = HostKeyPolicy.ACCEPT_ALL
    known_hosts: Optional[str] = None
    services: Tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"

    def __post_init__(self):
        # 未指定连接超时时复用操作超时
        if self.connect_timeout is None:
            self.connect_timeout = self.timeout
