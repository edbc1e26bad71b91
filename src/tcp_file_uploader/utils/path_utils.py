"""
路径处理工具模块
================

提供文件名清理和相对路径拼接功能。
"""

import os
from typing import Tuple


def clean_name(filename: str) -> str:
    """
    清理文件名，将空格替换为下划线

    Args:
        filename: 原始文件名

    Returns:
        清理后的文件名
    """
    return filename.replace(" ", "_")


def base_name(relative_name: str) -> str:
    """
    取相对路径的最后一段

    Args:
        relative_name: 以 / 分隔的相对路径，如 sub/dir/file.txt

    Returns:
        最后一段文件名
    """
    # 反斜杠在POSIX文件名中是普通字符，不作为分隔符
    return relative_name.rstrip("/").rsplit("/", 1)[-1]


def wire_name(relative_name: str) -> str:
    """
    计算实际发送到服务器的文件名

    只发送最后一段文件名，目录前缀不会出现在帧中。

    Args:
        relative_name: 相对路径

    Returns:
        清理后的文件名
    """
    return clean_name(base_name(relative_name))


def join_relative(prefix: str, name: str) -> str:
    """
    拼接相对路径，前缀为空时直接返回名称

    Args:
        prefix: 相对路径前缀
        name: 条目名称

    Returns:
        prefix/name 或 name
    """
    if prefix:
        return f"{prefix}/{name}"
    return name


def join_folder(folder: str, relative_name: str) -> str:
    """
    拼接本地目录与相对路径

    Args:
        folder: 本地目录
        relative_name: 相对路径，为空时返回目录本身

    Returns:
        完整路径
    """
    if not relative_name:
        return folder
    # 根目录 "/" 去掉结尾斜杠后为空串，拼接结果仍是 /name
    return f"{folder.rstrip('/')}/{relative_name}"


def split_target(path: str) -> Tuple[str, str]:
    """
    拆分文件路径为(所在目录, 文件名)

    Args:
        path: 文件路径

    Returns:
        元组(目录, 文件名)，目录为空时返回 "."
    """
    folder, name = os.path.split(os.path.normpath(path))
    return folder or ".", name
