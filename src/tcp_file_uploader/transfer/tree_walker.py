"""
目录遍历模块
============

递归遍历目录并逐个发送文件：
- 同一层目录中的文件按名称顺序依次同步发送；
- 子目录作为独立任务并发遍历，遍历方不等待其完成。
"""

import os
from typing import List

from ..exceptions import DirectoryListError
from ..utils.logger import get_logger
from ..utils.path_utils import join_folder, join_relative
from ..utils.tasks import TaskGroup
from .file_transfer import FileUploader

logger = get_logger(__name__)


class TreeWalker:
    """目录遍历器"""

    def __init__(self, uploader: FileUploader, tasks: TaskGroup):
        """
        初始化目录遍历器

        Args:
            uploader: 文件发送器
            tasks: 子目录任务所在的任务组
        """
        self.uploader = uploader
        self.tasks = tasks

    def walk(self, root_dir: str, prefix: str = "") -> int:
        """
        遍历 root_dir/prefix 并发送其中的文件

        Args:
            root_dir: 遍历的根目录
            prefix: 相对于根目录的子目录前缀，为空表示根目录本身

        Returns:
            本层同步发送的文件数（不含子目录任务）

        Raises:
            DirectoryListError: 读取目录失败
        """
        scan_dir = join_folder(root_dir, prefix)
        entries = self._list_entries(scan_dir)

        if not entries:
            logger.info(f"[client] 目录中没有文件: {scan_dir}")
            return 0

        sent = 0
        for entry in entries:
            if self.tasks.failed:
                logger.warning(f"已有任务失败，停止遍历: {scan_dir}")
                break

            item_name = join_relative(prefix, entry.name)

            if self._is_dir(entry, scan_dir):
                self.tasks.spawn(self.walk, root_dir, item_name)
                continue

            if not self._is_file(entry, scan_dir):
                logger.warning(f"跳过非普通文件: {entry.path}")
                continue

            self.uploader.transfer(root_dir, item_name)
            sent += 1

        return sent

    @staticmethod
    def _list_entries(scan_dir: str) -> List[os.DirEntry]:
        """读取目录条目并按名称排序"""
        try:
            with os.scandir(scan_dir) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise DirectoryListError(f"读取目录失败: {e}", path=scan_dir) from e

    @staticmethod
    def _is_dir(entry: os.DirEntry, scan_dir: str) -> bool:
        # 不跟随符号链接，避免链接成环
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise DirectoryListError(f"读取目录条目失败: {e}", path=scan_dir) from e

    @staticmethod
    def _is_file(entry: os.DirEntry, scan_dir: str) -> bool:
        try:
            return entry.is_file()
        except OSError as e:
            raise DirectoryListError(f"读取目录条目失败: {e}", path=scan_dir) from e
