"""主机清单解析"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml
import marshmallow
import marshmallow_dataclass

from pyfanssh.core.models import (
    AgentCredential,
    ConnectionSpec,
    Credential,
    KeyCredential,
    PasswordCredential,
    ServiceGroup,
)

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """清单无法读取或格式错误"""


@dataclass
class InventoryEntry:
    """清单中的一条记录：一组主机共用一套认证信息"""

    hosts: List[str]
    user: str
    password: Optional[str] = field(default=None, metadata={"data_key": "pass"})
    key: Optional[str] = None
    passphrase: Optional[str] = None
    agent: bool = False
    port: int = 22

    def credential(self) -> Optional[Credential]:
        if self.password:
            return PasswordCredential(self.password)
        elif self.key:
            return KeyCredential(os.path.expanduser(self.key), self.passphrase)
        elif self.agent:
            return AgentCredential()
        return None


InventoryEntrySchema = marshmallow_dataclass.class_schema(InventoryEntry)


class Inventory:
    """服务名 -> 清单记录列表"""

    def __init__(self, services: Dict[str, List[InventoryEntry]]):
        self.services = services

    @classmethod
    def from_file(cls, path) -> "Inventory":
        filename = Path(path).expanduser().resolve()
        try:
            with open(filename, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise InventoryError(f"cannot read inventory {filename}: {e}") from e
        except yaml.YAMLError as e:
            raise InventoryError(f"cannot parse inventory {filename}: {e}") from e

        logger.debug(f"Loaded inventory from {filename}")
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data) -> "Inventory":
        if not isinstance(data, dict):
            raise InventoryError("inventory must be a mapping of service name to entries")

        schema = InventoryEntrySchema()
        services = {}
        for name, entries in data.items():
            if not isinstance(entries, list):
                raise InventoryError(f"service '{name}' must be a list of entries")
            try:
                loaded = schema.load(entries, many=True)
            except marshmallow.ValidationError as e:
                raise InventoryError(
                    f"invalid entry for service '{name}': {e.messages}"
                ) from e

            for index, entry in enumerate(loaded):
                if entry.credential() is None:
                    raise InventoryError(
                        f"entry {index} of service '{name}' has no pass, key or agent"
                    )
            services[str(name)] = loaded

        return cls(services)

    def groups(self, services: Iterable[str] = None) -> List[ServiceGroup]:
        """按服务生成 ServiceGroup，重复主机不去重"""
        names = list(services) if services else list(self.services)
        unknown = [name for name in names if name not in self.services]
        if unknown:
            raise InventoryError(f"unknown service: {', '.join(unknown)}")

        groups = []
        for name in names:
            group = ServiceGroup(name=name)
            for entry in self.services[name]:
                credential = entry.credential()
                for host in entry.hosts:
                    group.specs.append(
                        ConnectionSpec(
                            host=host,
                            user=entry.user,
                            credential=credential,
                            port=entry.port,
                            service=name,
                        )
                    )
            groups.append(group)
        return groups

    def specs(self, services: Iterable[str] = None) -> List[ConnectionSpec]:
        return [spec for group in self.groups(services) for spec in group.specs]

    def host_count(self, services: Iterable[str] = None) -> int:
        return len(self.specs(services))
