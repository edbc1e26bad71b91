"""
TCP文件上传工具
==============

通过原始TCP连接把单个文件或整个目录上传到远程监听端。

主要功能：
- 单文件上传
- 目录递归上传（子目录并发）
- 目录监控，新建文件自动上传

每个文件使用一条独立连接，帧格式：
| 文件名长度(2B, 小端) | 文件名 | 文件内容(直到连接关闭) |
"""

__version__ = "1.0.0"
__description__ = "基于TCP连接的文件/目录上传工具"

# 导出主要类
from .config.settings import ServerConfig, TransferConfig
from .transfer.file_transfer import FileUploader, TransferTarget
from .transfer.tree_walker import TreeWalker
from .transfer.dispatcher import UploadDispatcher, upload
from .watch.watch_bridge import WatchBridge, watch

__all__ = [
    "ServerConfig",
    "TransferConfig",
    "FileUploader",
    "TransferTarget",
    "TreeWalker",
    "UploadDispatcher",
    "upload",
    "WatchBridge",
    "watch",
]
