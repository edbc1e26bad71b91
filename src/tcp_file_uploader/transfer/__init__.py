"""
传输模块
========

包含单文件发送、目录遍历和上传调度功能。
"""

from .file_transfer import FileUploader, TransferTarget
from .tree_walker import TreeWalker
from .dispatcher import UploadDispatcher, upload

__all__ = [
    "FileUploader",
    "TransferTarget",
    "TreeWalker",
    "UploadDispatcher",
    "upload",
]
