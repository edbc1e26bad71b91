"""
监控模块
========

可选的目录监控功能，新建条目触发上传。
"""

from .watch_bridge import WatchBridge, CreatedEventHandler, watch

__all__ = [
    "WatchBridge",
    "CreatedEventHandler",
    "watch",
]
