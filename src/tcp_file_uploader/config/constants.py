"""
系统常量定义
============

定义上传协议中使用的各种常量。
"""

import struct
from typing import Final


# 帧格式定义：| 文件名长度(2B, 小端) | 文件名(NB) | 文件内容(直到连接关闭) |
NAME_LENGTH_FORMAT: Final[str] = "<H"
NAME_LENGTH_SIZE: Final[int] = struct.calcsize(NAME_LENGTH_FORMAT)
MAX_NAME_LENGTH: Final[int] = 0xFFFF  # 长度字段可表示的最大文件名字节数

# 备选帧格式：文件名之后追加内容长度(8B, 小端)
CONTENT_LENGTH_FORMAT: Final[str] = "<Q"
CONTENT_LENGTH_SIZE: Final[int] = struct.calcsize(CONTENT_LENGTH_FORMAT)

FRAME_MODE_STREAM: Final[str] = "stream"
FRAME_MODE_LENGTH_PREFIXED: Final[str] = "length-prefixed"
FRAME_MODES: Final[tuple] = (FRAME_MODE_STREAM, FRAME_MODE_LENGTH_PREFIXED)

# 文件名编码
NAME_ENCODING: Final[str] = "utf-8"
# 非UTF-8的文件名以原始字节发送（与 os.fsencode 一致）
NAME_ERRORS: Final[str] = "surrogateescape"

# 连接配置默认值
DEFAULT_SERVER: Final[str] = "localhost:4040"
SOCKET_URL_SCHEME: Final[str] = "socket://"  # pyserial 的原始TCP连接URL

# 传输配置默认值
DEFAULT_CHUNK_SIZE: Final[int] = 64 * 1024  # 单次读取/写入的块大小
MIN_CHUNK_SIZE: Final[int] = 512

# 监控模式下事件队列的轮询间隔(秒)
WATCH_POLL_INTERVAL: Final[float] = 0.5
