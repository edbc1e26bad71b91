"""
文件发送模块
============

负责单个文件的发送逻辑：建立连接、发送帧头、发送文件内容、关闭连接。
任何一步失败都抛出对应的异常，不做重试。
"""

import os
import threading
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ..config.constants import FRAME_MODE_LENGTH_PREFIXED
from ..config.settings import ServerConfig, TransferConfig
from ..core.connection_manager import ConnectionManager
from ..core.frame_encoder import FrameEncoder, get_encoder
from ..exceptions import FileOpenError, TransferWriteError
from ..utils.logger import get_logger
from ..utils.path_utils import join_folder, wire_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransferTarget:
    """待发送的文件：所在根目录 + 相对名称"""

    folder: str
    name: str

    @property
    def full_path(self) -> str:
        """本地完整路径"""
        return join_folder(self.folder, self.name)

    @property
    def wire_name(self) -> str:
        """
        发送给服务器的文件名

        只包含最后一段文件名，遍历时累积的目录前缀不会发送。
        """
        return wire_name(self.name)


class FileUploader:
    """文件发送器"""

    def __init__(
        self,
        server_config: ServerConfig,
        config: Optional[TransferConfig] = None,
        encoder: Optional[FrameEncoder] = None,
    ):
        """
        初始化文件发送器

        Args:
            server_config: 服务器连接配置
            config: 传输配置（可选）
            encoder: 帧编码器（可选，默认按 config.frame_mode 选择）
        """
        self.server_config = server_config
        self.config = config or TransferConfig()
        self.encoder = encoder or get_encoder(self.config.frame_mode)

        # 统计信息，多个任务线程共用
        self.files_sent = 0
        self.bytes_sent = 0
        self._stats_lock = threading.Lock()

    def transfer(self, folder: str, name: str) -> int:
        """
        发送一个文件

        Args:
            folder: 根目录
            name: 相对于根目录的文件名，可以包含子目录

        Returns:
            发送的文件内容字节数

        Raises:
            ConnectError: 连接服务器失败
            FileOpenError: 打开文件失败
            TransferWriteError: 发送失败
        """
        target = TransferTarget(folder, name)

        with ConnectionManager(self.server_config) as conn:
            logger.info(f"[client] {target.full_path}")

            try:
                source = open(target.full_path, "rb")
            except OSError as e:
                raise FileOpenError(f"打开文件失败: {e}", path=target.full_path) from e

            with source:
                content_length = None
                if self.encoder.mode == FRAME_MODE_LENGTH_PREFIXED:
                    content_length = os.fstat(source.fileno()).st_size

                self.encoder.encode(conn, target.wire_name, content_length)
                sent = self._copy(source, conn, target, limit=content_length)

        with self._stats_lock:
            self.files_sent += 1
            self.bytes_sent += sent
        logger.debug(f"文件 [{target.wire_name}] 发送完成, 大小: {sent / 1024:.2f} KB")
        return sent

    def _copy(
        self,
        source: BinaryIO,
        conn: ConnectionManager,
        target: TransferTarget,
        limit: Optional[int] = None,
    ) -> int:
        """
        把文件内容按块写入连接，直到文件结束

        Args:
            source: 已打开的文件
            conn: 已打开的连接
            target: 当前文件
            limit: 最多发送的字节数，None表示发送到文件结束

        Returns:
            发送的字节数
        """
        sent = 0
        chunk_size = self.config.chunk_size
        while limit is None or sent < limit:
            size = chunk_size if limit is None else min(chunk_size, limit - sent)
            try:
                chunk = source.read(size)
            except OSError as e:
                raise TransferWriteError(f"读取文件失败: {e}", path=target.full_path) from e
            if not chunk:
                break
            conn.write(chunk)
            sent += len(chunk)

        if limit is not None and sent != limit:
            raise TransferWriteError(
                f"文件内容长度变化: 声明={limit}, 实际={sent}", path=target.full_path
            )
        return sent
