"""
目录监控模块
============

监控目录中新建的文件或子目录，并为每个新建条目派发一次上传任务。

- 只监控目录的直接子项（非递归）；
- 事件源投递的错误只记录日志，监控继续；
- 事件源关闭时监控结束；
- 派发出的上传任务失败时，监控以该错误结束。
"""

import os
import queue
from typing import Any, Callable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..config.constants import WATCH_POLL_INTERVAL
from ..config.settings import ServerConfig, TransferConfig
from ..exceptions import WatchError
from ..transfer.dispatcher import UploadDispatcher
from ..utils.logger import get_logger

logger = get_logger(__name__)

# 事件源关闭标记
_CLOSED = object()


class CreatedEventHandler(FileSystemEventHandler):
    """把新建事件和事件处理异常投递到队列"""

    def __init__(self, enqueue: Callable[[Any], None]):
        super().__init__()
        self._enqueue = enqueue

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            super().dispatch(event)
        except Exception as e:
            self._enqueue(e)

    def on_created(self, event: FileSystemEvent) -> None:
        self._enqueue(os.fsdecode(event.src_path))


class WatchBridge:
    """目录监控桥接器"""

    def __init__(
        self,
        dispatcher: UploadDispatcher,
        root_path: str,
        poll_interval: float = WATCH_POLL_INTERVAL,
        observer_factory: Callable[[], Any] = Observer,
    ):
        """
        初始化目录监控

        Args:
            dispatcher: 上传调度器，新建条目通过它派发上传任务
            root_path: 监控的目录
            poll_interval: 检查事件源状态的间隔(秒)
            observer_factory: 创建事件源的工厂函数
        """
        self.dispatcher = dispatcher
        self.root_path = root_path
        self.poll_interval = poll_interval
        self._observer_factory = observer_factory

        self._events: "queue.Queue[Union[str, BaseException, object]]" = queue.Queue()
        self.handler = CreatedEventHandler(self._events.put)
        self._observer: Optional[Any] = None

        # 统计信息
        self.events_handled = 0
        self.errors_logged = 0

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """
        开始订阅新建事件

        Raises:
            WatchError: 无法监控该路径
        """
        if self._observer is not None:
            return

        observer = self._observer_factory()
        try:
            observer.schedule(self.handler, self.root_path, recursive=False)
            observer.start()
        except Exception as e:
            raise WatchError(f"监控目录失败: {e}", path=self.root_path) from e

        self._observer = observer
        logger.info(f"开始监控目录: {self.root_path}")

    def stop(self) -> None:
        """关闭事件源，run() 会在处理完已排队的事件后返回"""
        self._events.put(_CLOSED)
        if self._observer is not None:
            self._observer.stop()

    def run(self) -> int:
        """
        处理事件直到事件源关闭

        Returns:
            派发的上传任务数

        Raises:
            WatchError: 无法监控该路径
            UploadError: 某个上传任务失败
        """
        self.start()
        try:
            while True:
                self.dispatcher.tasks.raise_if_failed()

                try:
                    item = self._events.get(timeout=self.poll_interval)
                except queue.Empty:
                    if not self._observer.is_alive():  # type: ignore[union-attr]
                        logger.info("事件源已关闭，停止监控")
                        break
                    continue

                if item is _CLOSED:
                    logger.info("停止监控目录")
                    break

                if isinstance(item, BaseException):
                    self.errors_logged += 1
                    logger.error(f"error: {item}")
                    continue

                logger.info(f"检测到新建条目: {item}")
                self.dispatcher.spawn_upload(item)  # type: ignore[arg-type]
                self.events_handled += 1
        finally:
            self._shutdown()

        return self.events_handled

    def _shutdown(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=5)


def watch(
    root_path: str,
    server_addr: str,
    config: Optional[TransferConfig] = None,
) -> int:
    """
    监控目录并上传新建的条目，直到事件源关闭

    Args:
        root_path: 监控的目录
        server_addr: 服务器地址 host:port
        config: 传输配置（可选）

    Returns:
        派发的上传任务数
    """
    dispatcher = UploadDispatcher(ServerConfig(server_addr), config)
    return WatchBridge(dispatcher, root_path).run()
