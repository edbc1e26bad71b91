"""
异常定义
========

上传过程中的所有致命错误都以异常形式向上传播，
由命令行入口统一处理（打印错误并以非零状态退出）。
"""

from typing import Optional


class UploadError(Exception):
    """上传错误基类"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class PathStatError(UploadError):
    """路径不存在或无法获取状态"""


class DirectoryListError(UploadError):
    """读取目录内容失败"""


class ConnectError(UploadError):
    """连接服务器失败"""


class FileOpenError(UploadError):
    """打开本地文件失败"""


class TransferWriteError(UploadError):
    """发送帧头或文件内容失败"""


class FrameEncodeError(TransferWriteError):
    """文件名无法编码进帧头"""


class WatchError(UploadError):
    """建立目录监控失败"""


class ConfigError(UploadError):
    """命令行参数或配置无效"""
