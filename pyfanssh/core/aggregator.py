"""结果汇总模块"""

import asyncio
import logging

from pyfanssh.core.models import (
    AggregatedReport,
    OperationOutcome,
    ReportEntry,
    UploadResult,
)


async def get_before(queue: asyncio.Queue, deadline: float):
    """在 deadline (loop.time()) 之前从队列取一个元素，超时抛出 asyncio.TimeoutError"""
    try:
        return queue.get_nowait()
    except asyncio.QueueEmpty:
        pass

    remaining = deadline - asyncio.get_running_loop().time()
    if remaining <= 0:
        raise asyncio.TimeoutError()
    return await asyncio.wait_for(queue.get(), timeout=remaining)


class ResultAggregator:
    """收集各主机的操作结果，队列容量等于主机数"""

    def __init__(self, host_count: int, logger: logging.Logger = None):
        self.host_count = host_count
        self.logger = logger or logging.getLogger(__name__)
        capacity = max(host_count, 1)
        self._stdout = asyncio.Queue(maxsize=capacity)
        self._stderr = asyncio.Queue(maxsize=capacity)
        self._errors = asyncio.Queue(maxsize=capacity)
        self._done = asyncio.Queue(maxsize=capacity)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def record(self, outcome: OperationOutcome):
        """记录一个主机的结果，只转发非空输出"""
        if self._closed:
            self.logger.debug(f"Discarding late result from {outcome.address}")
            return

        if isinstance(outcome, UploadResult):
            if outcome.failed:
                stage = outcome.stage.value if outcome.stage else "unknown"
                self._errors.put_nowait(
                    ReportEntry(outcome.address, f"upload failed ({stage}): {outcome.error}")
                )
            return

        if outcome.stdout:
            self._stdout.put_nowait(ReportEntry(outcome.address, outcome.stdout))
        if outcome.stderr:
            self._stderr.put_nowait(ReportEntry(outcome.address, outcome.stderr))
        if outcome.failed:
            self._errors.put_nowait(ReportEntry(outcome.address, outcome.error))

    def complete(self):
        """一个分发任务结束（无论成功与否）"""
        if not self._closed:
            self._done.put_nowait(True)

    async def collect(self, slots: int, timeout: float) -> AggregatedReport:
        """等待 slots 个完成信号，整体不超过 timeout 秒，然后关闭并导出报告"""
        deadline = asyncio.get_running_loop().time() + timeout

        completed = 0
        for _ in range(slots):
            try:
                await get_before(self._done, deadline)
                completed += 1
            except asyncio.TimeoutError:
                self.logger.warning("Operation timeout")

        self.logger.debug(f"{completed} of {slots} operations completed")
        return self.close()

    def close(self) -> AggregatedReport:
        self._closed = True
        return AggregatedReport(
            stdout=self._drain(self._stdout),
            stderr=self._drain(self._stderr),
            errors=self._drain(self._errors),
        )

    @staticmethod
    def _drain(queue: asyncio.Queue):
        entries = []
        while not queue.empty():
            entries.append(queue.get_nowait())
        return entries
