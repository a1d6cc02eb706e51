"""pyfanssh - Parallel SSH fan-out executor"""

__version__ = "0.1.0"

from .core.aggregator import ResultAggregator
from .core.connection import ConnectionEstablisher
from .core.executor import CommandExecutor
from .core.orchestrator import Orchestrator
from .core.transfer import FileUploader
from .config.inventory import Inventory, InventoryError
from .core.models import (
    AggregatedReport,
    ConnectionSpec,
    ExecResult,
    HostKeyPolicy,
    ReportEntry,
    UploadResult,
)

__all__ = [
    "ResultAggregator",
    "ConnectionEstablisher",
    "CommandExecutor",
    "Orchestrator",
    "FileUploader",
    "Inventory",
    "InventoryError",
    "AggregatedReport",
    "ConnectionSpec",
    "ExecResult",
    "HostKeyPolicy",
    "ReportEntry",
    "UploadResult",
]
