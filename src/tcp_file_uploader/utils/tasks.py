"""
并发任务模块
============

每个子目录遍历和每次监控触发的上传都作为独立任务运行。
TaskGroup 负责派发任务、可选地限制同时运行的任务数，
并记录第一个致命错误，供等待方重新抛出。

- 不限制并发时，每个任务一个线程；
- 限制并发时，任务提交到固定大小的线程池，线程数不超过上限。
"""

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)


class TaskGroup:
    """
    线程任务组

    派发任务不会阻塞调用方，父任务也从不等待子任务，
    因此线程池大小为1时父任务派发子任务也不会死锁。
    """

    _ids = itertools.count(1)

    def __init__(self, max_concurrency: Optional[int] = None, name: str = "upload"):
        """
        初始化任务组

        Args:
            max_concurrency: 同时运行的任务上限，None表示不限制
            name: 线程名前缀
        """
        self.name = name
        self.max_concurrency = max_concurrency
        self._executor: Optional[ThreadPoolExecutor] = (
            ThreadPoolExecutor(max_workers=max_concurrency, thread_name_prefix=name)
            if max_concurrency else None
        )

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending = 0
        self._error: Optional[BaseException] = None
        self._failed = threading.Event()

        # 统计信息
        self.tasks_started = 0
        self.tasks_failed = 0
        self.tasks_skipped = 0

    @property
    def failed(self) -> bool:
        """是否已有任务以错误结束"""
        return self._failed.is_set()

    @property
    def error(self) -> Optional[BaseException]:
        """第一个致命错误"""
        return self._error

    @property
    def pending(self) -> int:
        """尚未结束的任务数"""
        with self._lock:
            return self._pending

    def spawn(self, func: Callable[..., Any], *args: Any) -> None:
        """
        派发一个独立任务，不等待其完成

        任务的结束和错误通过 wait()/raise_if_failed() 获取。

        Args:
            func: 任务函数
            *args: 任务参数
        """
        with self._lock:
            self._pending += 1
            self.tasks_started += 1

        try:
            if self._executor is not None:
                self._executor.submit(self._run, func, args, True)
            else:
                threading.Thread(
                    target=self._run,
                    args=(func, args, False),
                    name=f"{self.name}-{next(self._ids)}",
                    daemon=True,
                ).start()
        except BaseException as e:
            self._finish(e)
            raise

    def _run(self, func: Callable[..., Any], args: tuple, queued: bool) -> None:
        """任务主体"""
        # 排队中的任务在任务组失败后不再执行
        if queued and self.failed:
            with self._lock:
                self.tasks_skipped += 1
            self._finish(None)
            return

        error: Optional[BaseException] = None
        try:
            func(*args)
        except BaseException as e:
            error = e
        finally:
            self._finish(error)

    def _finish(self, error: Optional[BaseException]) -> None:
        """记录任务结束，第一个错误会被保留"""
        with self._lock:
            self._pending -= 1
            if error is not None:
                self.tasks_failed += 1
                if self._error is None:
                    self._error = error
                    self._failed.set()
                    logger.debug(f"任务失败: {error}")
            self._idle.notify_all()

    def record_error(self, error: BaseException) -> None:
        """
        记录在调用方线程中发生的错误，使其余任务尽快停止派发

        Args:
            error: 错误对象
        """
        with self._lock:
            if self._error is None:
                self._error = error
                self._failed.set()
            self._idle.notify_all()

    def wait(self, timeout: Optional[float] = None, stop_on_error: bool = False) -> bool:
        """
        等待所有任务结束

        Args:
            timeout: 超时时间(秒)，None表示一直等待
            stop_on_error: 出现错误后立即返回，不等待其余任务

        Returns:
            所有任务已结束返回True，超时返回False
        """
        with self._lock:
            return self._idle.wait_for(
                lambda: self._pending == 0 or (stop_on_error and self._error is not None),
                timeout,
            )

    def wait_for_failure(self, timeout: Optional[float] = None) -> bool:
        """
        等待任意任务失败

        Returns:
            超时前出现失败返回True
        """
        return self._failed.wait(timeout)

    def raise_if_failed(self) -> None:
        """若已有任务失败，则在当前线程重新抛出该错误"""
        if self._error is not None:
            raise self._error
