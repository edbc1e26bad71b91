"""
日志记录模块
============

提供统一的日志记录功能，支持彩色输出和函数调用追踪。
"""

import datetime
import inspect
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, TextIO

ROOT_LOGGER_NAME = "tcp_file_uploader"


class ColoredFormatter(logging.Formatter):
    """彩色日志格式化器"""

    # ANSI颜色代码
    COLORS = {
        'DEBUG': '\033[36m',    # 青色
        'INFO': '\033[0m',      # 默认色
        'WARNING': '\033[33m',  # 黄色
        'ERROR': '\033[31m',    # 红色
        'CRITICAL': '\033[35m', # 紫色
        'RESET': '\033[0m'      # 重置
    }

    def format(self, record):
        """格式化日志记录"""
        # 获取调用信息，跳过logging模块自身的栈帧
        frame = inspect.currentframe()
        caller_filename, caller_function, caller_line = "unknown", "unknown", 0
        try:
            while frame:
                filename = frame.f_code.co_filename
                if filename != __file__ and filename != logging.__file__:
                    caller_filename = Path(filename).name
                    caller_function = frame.f_code.co_name
                    caller_line = frame.f_lineno
                    break
                frame = frame.f_back
        finally:
            del frame

        # 添加毫秒精度的时间戳
        now = datetime.datetime.fromtimestamp(record.created)
        milliseconds = now.microsecond // 1000
        timestamp = now.strftime(f"%Y-%m-%d %H:%M:%S.{milliseconds:03d}")

        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        # 并发任务较多，附带线程名方便区分
        return (
            f"{color}[{timestamp}] [{record.threadName}] {record.getMessage()} "
            f"[{caller_filename}.{caller_function}():{caller_line}]{reset}"
        )


def printable(text: str) -> str:
    """把非UTF-8文件名留下的代理字符转为 \\udcxx 形式，保证可以输出"""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


class SurrogateEscapeFilter(logging.Filter):
    """日志消息中含有无法编码的文件名时，预先转义"""

    def filter(self, record):
        message = record.getMessage()
        escaped = printable(message)
        if escaped != message:
            record.msg = escaped
            record.args = None
        return True


_surrogate_filter = SurrogateEscapeFilter()


# 全局日志器字典
_loggers: Dict[str, logging.Logger] = {}


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console_output: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    设置日志器

    Args:
        name: 日志器名称
        level: 日志级别
        log_file: 日志文件路径，None表示不写入文件
        console_output: 是否输出到控制台
        stream: 控制台输出流，默认sys.stdout

    Returns:
        配置好的日志器
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 清除已有的处理器
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(ColoredFormatter())
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(file_handler)

    logger.addFilter(_surrogate_filter)

    # 防止重复输出
    logger.propagate = False

    _loggers[name] = logger
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    获取日志器实例

    Args:
        name: 日志器名称

    Returns:
        日志器实例
    """
    if name not in _loggers:
        setup_logger(name)
    return _loggers[name]


def configure_all(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    重新配置所有已创建的日志器（命令行 --verbose/--log-file 使用）

    Args:
        level: 日志级别
        log_file: 追加的日志文件路径
    """
    for name in list(_loggers):
        setup_logger(name, level=level, log_file=log_file)
