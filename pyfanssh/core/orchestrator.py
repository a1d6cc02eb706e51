"""并发调度：建立连接 -> 分发操作 -> 汇总结果"""

import asyncio
import contextlib
import logging
from typing import List, Union

from pyfanssh.core.aggregator import ResultAggregator, get_before
from pyfanssh.core.connection import ConnectionEstablisher
from pyfanssh.core.executor import CommandExecutor
from pyfanssh.core.models import AggregatedReport, ConnectionSpec, EstablishedConnection
from pyfanssh.core.transfer import FileUploader

Dispatcher = Union[CommandExecutor, FileUploader]


class Orchestrator:
    """对一组主机执行同一个操作

    每台主机一个连接任务，每个成功的连接一个分发任务。两个阶段各有一个
    截止时间，超时的槽位只记录警告，不重试。max_concurrent 大于 0 时
    连接和分发共用一个信号量限制并发。
    """

    def __init__(
        self,
        establisher: ConnectionEstablisher,
        dispatcher: Dispatcher,
        connect_timeout: float = 10.0,
        operation_timeout: float = 10.0,
        max_concurrent: int = 0,
        logger: logging.Logger = None,
    ):
        self.establisher = establisher
        self.dispatcher = dispatcher
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout
        self.max_concurrent = max_concurrent
        self.logger = logger or logging.getLogger(__name__)
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None

    def _limit(self):
        if self._semaphore is None:
            return contextlib.nullcontext()
        return self._semaphore

    async def run(self, specs: List[ConnectionSpec]) -> AggregatedReport:
        host_count = len(specs)
        self.logger.debug(f"Host count: {host_count}")

        aggregator = ResultAggregator(host_count, logger=self.logger)
        if host_count == 0:
            return aggregator.close()

        # 每个连接任务恰好放入一个元素：(spec, 连接对象或失败时的 None)
        connections = asyncio.Queue(maxsize=host_count)
        attempts = [
            asyncio.create_task(self._attempt(spec, connections)) for spec in specs
        ]

        dispatches = []
        deadline = asyncio.get_running_loop().time() + self.connect_timeout
        for _ in range(host_count):
            try:
                spec, conn = await get_before(connections, deadline)
            except asyncio.TimeoutError:
                self.logger.warning("Timeout creating connection")
                continue

            if conn is None:
                self.logger.warning(f"Host {spec.target} excluded: connection failed")
                continue
            dispatches.append(asyncio.create_task(self._dispatch(conn, aggregator)))

        self.logger.debug(f"{len(dispatches)} of {host_count} hosts connected")

        report = await aggregator.collect(len(dispatches), self.operation_timeout)
        await self._shutdown(attempts + dispatches, connections)
        return report

    async def _attempt(self, spec: ConnectionSpec, connections: asyncio.Queue):
        established = None
        try:
            async with self._limit():
                established = await self.establisher.establish(spec)
        except Exception as e:
            self.logger.error(f"Failed to connect to {spec.target}: {e}")
        finally:
            connections.put_nowait((spec, established))

    async def _dispatch(self, conn: EstablishedConnection, aggregator: ResultAggregator):
        try:
            async with self._limit():
                outcome = await self.dispatcher.dispatch(conn)
            aggregator.record(outcome)
        except Exception as e:
            self.logger.error(f"Unexpected error for {conn.address}: {e}")
        finally:
            conn.close()
            aggregator.complete()

    async def _shutdown(self, tasks: List[asyncio.Task], connections: asyncio.Queue):
        """取消超时后仍在运行的任务，并关闭迟到的连接"""
        pending = [task for task in tasks if not task.done()]
        if pending:
            self.logger.debug(f"Cancelling {len(pending)} unfinished tasks")
            for task in pending:
                task.cancel()

        # 所有任务都要取回结果，已结束任务上的异常也不能遗留
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                self.logger.error(f"Unexpected task error: {result}")

        while not connections.empty():
            _, conn = connections.get_nowait()
            if conn is not None:
                self.logger.debug(f"Closing unused connection to {conn.address}")
                conn.close()
