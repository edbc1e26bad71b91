"""
配置管理
========

提供服务器连接和传输相关的配置类。
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    DEFAULT_SERVER,
    DEFAULT_CHUNK_SIZE,
    MIN_CHUNK_SIZE,
    FRAME_MODES,
    FRAME_MODE_STREAM,
    SOCKET_URL_SCHEME,
)


def parse_address(address: str) -> Tuple[str, int]:
    """
    解析 host:port 形式的服务器地址

    Args:
        address: 服务器地址，如 localhost:4040 或 [::1]:4040

    Returns:
        元组(主机, 端口)

    Raises:
        ValueError: 地址格式错误
    """
    host, sep, port_text = address.rpartition(":")
    if not sep or not port_text:
        raise ValueError(f"服务器地址缺少端口: {address!r}")

    host = host.strip("[]")
    if not host:
        raise ValueError(f"服务器地址缺少主机名: {address!r}")

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"端口号无效: {port_text!r}") from None

    if not 0 < port <= 0xFFFF:
        raise ValueError(f"端口号超出范围: {port}")

    return host, port


@dataclass
class ServerConfig:
    """服务器连接配置类"""

    address: str = DEFAULT_SERVER  # 服务器地址 host:port
    write_timeout: Optional[float] = None  # 写入超时时间(秒)，None表示一直阻塞

    def __post_init__(self):
        """参数验证"""
        # 提前解析，地址错误时立即报错
        parse_address(self.address)
        if self.write_timeout is not None and self.write_timeout <= 0:
            raise ValueError("write_timeout必须大于0")

    @property
    def host(self) -> str:
        return parse_address(self.address)[0]

    @property
    def port(self) -> int:
        return parse_address(self.address)[1]

    def to_url(self) -> str:
        """转换为 serial.serial_for_url 可用的 socket:// URL"""
        host = self.host
        if ":" in host:
            host = f"[{host}]"
        return f"{SOCKET_URL_SCHEME}{host}:{self.port}"


@dataclass
class TransferConfig:
    """传输配置类"""

    chunk_size: int = DEFAULT_CHUNK_SIZE  # 文件内容单次读取的块大小
    max_concurrency: Optional[int] = None  # 同时运行的任务上限，None表示不限制
    frame_mode: str = FRAME_MODE_STREAM  # 帧格式

    def __post_init__(self):
        """参数验证"""
        if self.chunk_size < MIN_CHUNK_SIZE:
            raise ValueError(f"chunk_size不能小于{MIN_CHUNK_SIZE}")
        if self.max_concurrency is not None and self.max_concurrency <= 0:
            raise ValueError("max_concurrency必须大于0")
        if self.frame_mode not in FRAME_MODES:
            raise ValueError(f"不支持的帧格式: {self.frame_mode}")
