"""
帧编码模块
==========

负责把文件名写成帧头，文件内容紧随其后。

默认帧格式：| 文件名长度(2B, 小端) | 文件名(NB) | 文件内容(直到连接关闭) |

文件内容没有长度字段，接收端以连接关闭作为文件结束，
因此一条连接只能承载一个文件。
"""

import struct
from typing import Optional, Protocol, Tuple

from ..config.constants import (
    NAME_LENGTH_FORMAT,
    NAME_LENGTH_SIZE,
    MAX_NAME_LENGTH,
    CONTENT_LENGTH_FORMAT,
    NAME_ENCODING,
    NAME_ERRORS,
    FRAME_MODE_STREAM,
    FRAME_MODE_LENGTH_PREFIXED,
)
from ..exceptions import FrameEncodeError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FrameWriter(Protocol):
    """可写入字节的连接"""

    def write(self, data: bytes) -> int: ...


def pack_name(name: str) -> bytes:
    """
    将文件名打包为 长度 + 名称 的字节串

    Args:
        name: 已清理的文件名，无法解码的字节以 surrogateescape 形式保存

    Returns:
        打包后的帧头

    Raises:
        FrameEncodeError: 文件名超出长度字段的表示范围

    Examples:
        >>> pack_name("single.txt")
        b'\\n\\x00single.txt'
    """
    encoded_name = name.encode(NAME_ENCODING, NAME_ERRORS)
    if len(encoded_name) > MAX_NAME_LENGTH:
        raise FrameEncodeError(
            f"文件名过长({len(encoded_name)} > {MAX_NAME_LENGTH}): {name[:64]!r}..."
        )
    return struct.pack(NAME_LENGTH_FORMAT, len(encoded_name)) + encoded_name


def unpack_name(data: bytes) -> Tuple[str, int]:
    """
    从帧数据开头解析文件名

    Args:
        data: 帧数据

    Returns:
        元组(文件名, 文件名之后的偏移量)

    Raises:
        ValueError: 数据长度不足
    """
    if len(data) < NAME_LENGTH_SIZE:
        raise ValueError(f"数据长度不足帧头: {len(data)}")

    (name_len,) = struct.unpack(NAME_LENGTH_FORMAT, data[:NAME_LENGTH_SIZE])
    end = NAME_LENGTH_SIZE + name_len
    if len(data) < end:
        raise ValueError(f"文件名长度不匹配: 声明长度={name_len}, 实际长度={len(data) - NAME_LENGTH_SIZE}")

    return data[NAME_LENGTH_SIZE:end].decode(NAME_ENCODING, NAME_ERRORS), end


def decode_frame(data: bytes) -> Tuple[str, bytes]:
    """
    解析一条连接上收到的完整数据

    Args:
        data: 连接关闭前收到的全部字节

    Returns:
        元组(文件名, 文件内容)
    """
    name, offset = unpack_name(data)
    return name, data[offset:]


class FrameEncoder:
    """帧编码器基类"""

    mode: str = ""

    def encode(self, conn: FrameWriter, name: str, content_length: Optional[int] = None) -> int:
        """
        向连接写入帧头

        Args:
            conn: 已打开的连接
            name: 已清理的文件名
            content_length: 文件内容长度（部分帧格式需要）

        Returns:
            写入的字节数
        """
        header = self.pack_header(name, content_length)
        conn.write(header)
        logger.debug(f"已发送帧头: {name} ({len(header)} 字节)")
        return len(header)

    def pack_header(self, name: str, content_length: Optional[int] = None) -> bytes:
        raise NotImplementedError


class StreamFrameEncoder(FrameEncoder):
    """以连接关闭作为内容结束的帧格式"""

    mode = FRAME_MODE_STREAM

    def pack_header(self, name: str, content_length: Optional[int] = None) -> bytes:
        return pack_name(name)


class LengthPrefixedFrameEncoder(FrameEncoder):
    """
    文件名之后附带8字节内容长度的帧格式

    | 文件名长度(2B) | 文件名(NB) | 内容长度(8B) | 文件内容 |
    """

    mode = FRAME_MODE_LENGTH_PREFIXED

    def pack_header(self, name: str, content_length: Optional[int] = None) -> bytes:
        if content_length is None or content_length < 0:
            raise FrameEncodeError(f"缺少文件内容长度: {name}")
        return pack_name(name) + struct.pack(CONTENT_LENGTH_FORMAT, content_length)


_ENCODERS = {
    FRAME_MODE_STREAM: StreamFrameEncoder,
    FRAME_MODE_LENGTH_PREFIXED: LengthPrefixedFrameEncoder,
}


def get_encoder(mode: str = FRAME_MODE_STREAM) -> FrameEncoder:
    """
    根据帧格式名称获取编码器

    Args:
        mode: 帧格式名称

    Returns:
        编码器实例
    """
    try:
        return _ENCODERS[mode]()
    except KeyError:
        raise ValueError(f"不支持的帧格式: {mode}") from None
