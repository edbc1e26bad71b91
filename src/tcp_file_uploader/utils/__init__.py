"""
工具模块
========

包含日志记录、路径处理和并发任务管理等工具功能。
"""

from .logger import get_logger, setup_logger
from .path_utils import clean_name, wire_name
from .tasks import TaskGroup

__all__ = [
    "get_logger",
    "setup_logger",
    "clean_name",
    "wire_name",
    "TaskGroup",
]
