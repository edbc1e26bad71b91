"""
上传调度模块
============

根据路径类型选择处理方式：目录交给目录遍历器，文件直接发送。
"""

import os
import stat
from typing import Optional

from ..config.settings import ServerConfig, TransferConfig
from ..exceptions import PathStatError
from ..utils.logger import get_logger
from ..utils.path_utils import split_target
from ..utils.tasks import TaskGroup
from .file_transfer import FileUploader
from .tree_walker import TreeWalker

logger = get_logger(__name__)


class UploadDispatcher:
    """上传调度器"""

    def __init__(
        self,
        server_config: ServerConfig,
        config: Optional[TransferConfig] = None,
        uploader: Optional[FileUploader] = None,
    ):
        """
        初始化上传调度器

        Args:
            server_config: 服务器连接配置
            config: 传输配置（可选）
            uploader: 文件发送器（可选）
        """
        self.server_config = server_config
        self.config = config or TransferConfig()
        self.uploader = uploader or FileUploader(server_config, self.config)
        self.tasks = TaskGroup(self.config.max_concurrency)
        self.walker = TreeWalker(self.uploader, self.tasks)

    def dispatch(self, path: str) -> None:
        """
        在当前线程中处理一个路径，子目录任务不等待

        Args:
            path: 文件或目录路径

        Raises:
            PathStatError: 路径不存在或无法访问
        """
        try:
            mode = os.stat(path).st_mode
        except OSError as e:
            raise PathStatError(f"无法访问路径: {e}", path=path) from e

        if stat.S_ISDIR(mode):
            self.walker.walk(path, "")
        else:
            folder, name = split_target(path)
            self.uploader.transfer(folder, name)

    def upload(self, path: str) -> None:
        """
        上传文件或目录，等待本次上传派生的全部任务结束

        任一任务失败时立即返回并抛出第一个错误，其余任务不再派发新的传输。

        Args:
            path: 文件或目录路径
        """
        logger.info(f"开始上传: {path} -> {self.server_config.address}")
        try:
            self.dispatch(path)
        except Exception as e:
            self.tasks.record_error(e)
            raise

        self.tasks.wait(stop_on_error=True)
        self.tasks.raise_if_failed()
        logger.info(
            f"上传完成: 共 {self.uploader.files_sent} 个文件, "
            f"{self.uploader.bytes_sent / 1024:.2f} KB"
        )

    def spawn_upload(self, path: str) -> None:
        """
        以独立任务上传一个路径，不等待完成

        Args:
            path: 文件或目录路径
        """
        logger.debug(f"派发上传任务: {path}")
        self.tasks.spawn(self.dispatch, path)


def upload(
    path: str,
    server_addr: str,
    config: Optional[TransferConfig] = None,
) -> UploadDispatcher:
    """
    上传文件或目录到服务器

    Args:
        path: 文件或目录路径
        server_addr: 服务器地址 host:port
        config: 传输配置（可选）

    Returns:
        完成上传的调度器，可用于读取统计信息
    """
    dispatcher = UploadDispatcher(ServerConfig(server_addr), config)
    dispatcher.upload(path)
    return dispatcher
