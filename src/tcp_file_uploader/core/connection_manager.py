"""
连接管理模块
============

每个文件传输使用一条独立的TCP连接。连接通过 pyserial 的
socket:// URL 处理器打开，与串口对象共用同一套读写接口。
"""

from contextlib import contextmanager
from typing import Optional

import serial

from ..config.settings import ServerConfig
from ..exceptions import ConnectError, TransferWriteError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """单次使用的服务器连接管理器"""

    def __init__(self, config: ServerConfig):
        """
        初始化连接管理器

        Args:
            config: 服务器连接配置
        """
        self.config = config
        self._port: Optional[serial.SerialBase] = None
        self.bytes_written = 0

    @property
    def port(self) -> Optional[serial.SerialBase]:
        """获取底层连接对象"""
        return self._port

    @property
    def is_open(self) -> bool:
        """检查连接是否已打开"""
        return self._port is not None and self._port.is_open

    def open(self) -> None:
        """
        打开到服务器的连接

        Raises:
            ConnectError: 连接失败
        """
        if self.is_open:
            logger.warning(f"连接 {self.config.address} 已经打开")
            return

        url = self.config.to_url()
        try:
            self._port = serial.serial_for_url(
                url, write_timeout=self.config.write_timeout
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self._port = None
            raise ConnectError(f"连接服务器失败 {self.config.address}: {e}") from e

        logger.debug(f"已连接服务器 {self.config.address}")

    def close(self) -> None:
        """关闭连接，重复调用无副作用"""
        port, self._port = self._port, None
        if port is None:
            return
        try:
            if port.is_open:
                port.close()
                logger.debug(f"已关闭连接 {self.config.address}")
        except (serial.SerialException, OSError) as e:
            raise TransferWriteError(f"关闭连接失败: {e}") from e

    def write(self, data: bytes) -> int:
        """
        向连接写入全部数据

        Args:
            data: 要写入的字节数据

        Returns:
            写入的字节数

        Raises:
            TransferWriteError: 连接未打开或写入失败
        """
        if not self.is_open:
            raise TransferWriteError("连接未打开，无法写入数据")

        try:
            written = self._port.write(data)  # type: ignore[union-attr]
        except (serial.SerialException, OSError) as e:
            raise TransferWriteError(f"写入数据失败: {e}") from e

        if written is not None and written != len(data):
            raise TransferWriteError(f"写入数据不完整: {written}/{len(data)}")

        self.bytes_written += len(data)
        return len(data)

    @contextmanager
    def connection(self):
        """
        上下文管理器，自动管理连接

        Examples:
            >>> manager = ConnectionManager(ServerConfig("localhost:4040"))
            >>> with manager.connection():
            ...     manager.write(b"...")
        """
        self.open()
        try:
            yield self
        except BaseException:
            self._close_after_error()
            raise
        self.close()

    def __enter__(self):
        """支持with语句"""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        if exc_type is not None:
            self._close_after_error()
        else:
            self.close()

    def _close_after_error(self) -> None:
        """已有错误在传播时关闭连接，关闭失败只记录日志"""
        try:
            self.close()
        except TransferWriteError as e:
            logger.error(str(e))
