"""
核心模块
========

包含帧编码和服务器连接管理等核心功能。
"""

from .frame_encoder import (
    FrameEncoder,
    StreamFrameEncoder,
    LengthPrefixedFrameEncoder,
    get_encoder,
    decode_frame,
)
from .connection_manager import ConnectionManager

__all__ = [
    "FrameEncoder",
    "StreamFrameEncoder",
    "LengthPrefixedFrameEncoder",
    "get_encoder",
    "decode_frame",
    "ConnectionManager",
]
