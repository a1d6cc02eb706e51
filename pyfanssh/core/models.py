from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class HostKeyPolicy(Enum):
    ACCEPT_ALL = "accept-all"
    KNOWN_HOSTS = "known-hosts"


class UploadStage(Enum):
    SESSION = "session"
    LOCAL_OPEN = "local-open"
    REMOTE_MKDIR = "remote-mkdir"
    REMOTE_CREATE = "remote-create"
    COPY = "copy"


def format_address(host: str, port: int) -> str:
    """拼接 host:port，IPv6 地址加方括号"""
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


@dataclass(frozen=True)
class PasswordCredential:
    """密码认证"""

    password: str = field(repr=False)

    kind = "password"

    def connect_kwargs(self) -> Dict[str, Any]:
        return {"password": self.password}


@dataclass(frozen=True)
class KeyCredential:
    """私钥认证"""

    path: str
    passphrase: Optional[str] = field(default=None, repr=False)

    kind = "key"

    def connect_kwargs(self) -> Dict[str, Any]:
        kwargs = {"client_keys": [self.path]}
        if self.passphrase:
            kwargs["passphrase"] = self.passphrase
        return kwargs


@dataclass(frozen=True)
class AgentCredential:
    """ssh-agent 认证"""

    agent_path: Optional[str] = None

    kind = "agent"

    def connect_kwargs(self) -> Dict[str, Any]:
        if self.agent_path:
            return {"agent_path": self.agent_path}
        return {}


Credential = Union[PasswordCredential, KeyCredential, AgentCredential]


@dataclass(frozen=True)
class ConnectionSpec:
    """单台主机的连接参数，由 inventory 解析得到，不可变"""

    host: str
    user: str
    credential: Credential
    port: int = 22
    service: str = ""

    @property
    def target(self) -> str:
        return format_address(self.host, self.port)


@dataclass
class ServiceGroup:
    """同一服务名下的主机列表"""

    name: str
    specs: List[ConnectionSpec] = field(default_factory=list)


@dataclass
class EstablishedConnection:
    """已认证的 SSH 连接，只用于一次操作"""

    spec: ConnectionSpec
    conn: Any
    address: str

    @property
    def user(self) -> str:
        return self.spec.user

    def close(self):
        self.conn.close()


@dataclass
class ExecResult:
    address: str
    stdout: str = ""
    stderr: str = ""
    exit_status: Optional[int] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class UploadResult:
    address: str
    ok: bool
    remote_path: str = ""
    transferred_bytes: int = 0
    error: Optional[str] = None
    stage: Optional[UploadStage] = None

    @property
    def failed(self) -> bool:
        return not self.ok


OperationOutcome = Union[ExecResult, UploadResult]


@dataclass
class ReportEntry:
    address: str
    text: str

    def render(self) -> str:
        return f"{self.address}\t{self.text}"


@dataclass
class AggregatedReport:
    """汇总报告，各列表按到达顺序排列"""

    stdout: List[ReportEntry] = field(default_factory=list)
    stderr: List[ReportEntry] = field(default_factory=list)
    errors: List[ReportEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            "stdout": [asdict(entry) for entry in self.stdout],
            "stderr": [asdict(entry) for entry in self.stderr],
            "errors": [asdict(entry) for entry in self.errors],
        }
