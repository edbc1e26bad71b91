"""
配置模块
=======

包含协议常量定义和配置管理功能。
"""

from .constants import *
from .settings import *

__all__ = [
    # 常量
    "DEFAULT_SERVER",
    "DEFAULT_CHUNK_SIZE",
    "NAME_LENGTH_FORMAT",
    "NAME_LENGTH_SIZE",
    "MAX_NAME_LENGTH",
    "FRAME_MODE_STREAM",
    "FRAME_MODE_LENGTH_PREFIXED",
    # 配置
    "ServerConfig",
    "TransferConfig",
    "parse_address",
]
